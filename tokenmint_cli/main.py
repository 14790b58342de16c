"""
``tokenmint`` command: mint, buy and resolve referral codes.

Configuration comes from TOKENMINT_* environment variables
(see tokenmint_sdk.config).
"""
import logging
from decimal import Decimal
from typing import Optional, Tuple

import typer

from tokenmint_sdk.config import MintConfig
from tokenmint_sdk.contract import ContractProxy
from tokenmint_sdk.exceptions import TokenMintError
from tokenmint_sdk.flows import FlowVariant, MintFlow, ReferralResolver
from tokenmint_sdk.metadata import MetadataClient
from tokenmint_sdk.models import ProductDescriptor, TransactionRequest
from tokenmint_sdk.provider import ChainConnection
from tokenmint_sdk.utils import tx_url

app = typer.Typer(help="Mint, buy and resolve marketplace tokens", no_args_is_help=True)

logger = logging.getLogger("tokenmint")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def load_config() -> MintConfig:
    try:
        return MintConfig.from_env()
    except TokenMintError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def build_contract(config: MintConfig) -> Tuple[ChainConnection, ContractProxy]:
    """
    Raises:
        ValueError: If TOKENMINT_CHAIN_ID is set and the node serves another chain
        NetworkError: If the chain id cannot be read
    """
    connection = ChainConnection.from_config(config)
    if config.chain_id is not None:
        connection.assert_chain_id()
    return connection, ContractProxy.from_config(connection, config)


def _run_flow(variant: FlowVariant, request: TransactionRequest, with_metadata: bool) -> None:
    config = load_config()
    try:
        metadata_client = MetadataClient.from_config(config) if with_metadata else None
        connection, contract = build_contract(config)
    except (TokenMintError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    flow = MintFlow(
        contract,
        metadata_client=metadata_client,
        token_decimals=config.token_decimals,
        confirmation_timeout=config.confirmation_timeout
    )
    receipt = flow.send_transaction(variant, request)
    if receipt is None:
        raise typer.Exit(code=1)
    typer.echo(tx_url(receipt.tx_hash, config.chain_id))


@app.command()
def mint(
    amount: int = typer.Argument(..., help="Amount passed to createNft"),
    recipient: str = typer.Argument(..., help="Recipient address"),
    model: str = typer.Option(..., "--model", help="Product model"),
    color: str = typer.Option(..., "--color", help="Product color"),
    wheels: str = typer.Option(..., "--wheels", help="Product wheels"),
    price: str = typer.Option(..., "--price", help="Product price"),
    total_price: str = typer.Option(..., "--total-price", help="Total product price"),
    prompt: str = typer.Option("", "--prompt", help="Free-text prompt"),
    referral_code: Optional[str] = typer.Option(None, "--referral-code", help="Referral code, if any"),
):
    """Create metadata and mint an NFT."""
    try:
        request = TransactionRequest(
            amount=amount,
            recipient=recipient,
            has_referral=bool(referral_code),
            referral_code=referral_code or "",
            descriptor=ProductDescriptor(
                model_product=model,
                color_product=color,
                wheels_product=wheels,
                product_price=price,
                total_price_product=total_price,
                prompt=prompt
            )
        )
    except ValueError as e:
        typer.echo(f"Error: invalid request: {e}", err=True)
        raise typer.Exit(code=1)
    _run_flow(FlowVariant.NFT, request, with_metadata=True)


@app.command()
def buy(
    amount: str = typer.Argument(..., help="Amount in whole tokens"),
    recipient: str = typer.Argument(..., help="Recipient address"),
):
    """Purchase tokens for a recipient."""
    try:
        request = TransactionRequest(amount=Decimal(amount), recipient=recipient)
    except (ArithmeticError, ValueError):
        typer.echo(f"Error: invalid amount {amount!r}", err=True)
        raise typer.Exit(code=1)
    _run_flow(FlowVariant.PURCHASE, request, with_metadata=False)


@app.command()
def resolve(ref_code: str = typer.Argument(..., help="Referral code, e.g. GIE-7879")):
    """Print the image URL of the token a referral code points at."""
    config = load_config()
    try:
        metadata_client = MetadataClient(timeout=config.request_timeout)
        _, contract = build_contract(config)
    except (TokenMintError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    image = ReferralResolver(contract, metadata_client).get_image_uri(ref_code)
    if image is None:
        raise typer.Exit(code=1)
    typer.echo(image)


if __name__ == "__main__":
    app()
