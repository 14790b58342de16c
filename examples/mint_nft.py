#!/usr/bin/env python3
"""
Mint an NFT: create metadata, call createNft and wait for the receipt.
"""
import logging

from tokenmint_sdk import (
    ChainConnection, ContractProxy, MetadataClient, MintConfig, MintFlow,
    ProductDescriptor, TransactionRequest, TokenMintError
)


def main():
    """
    Configuration is read from TOKENMINT_* environment variables:
    RPC URL, private key, contract address, metadata service URL and token.
    """
    logging.basicConfig(level=logging.INFO)

    try:
        config = MintConfig.from_env()
        connection = ChainConnection.from_config(config)
        if config.chain_id is not None:
            connection.assert_chain_id()
        contract = ContractProxy.from_config(connection, config)
        metadata_client = MetadataClient.from_config(config)
    except (TokenMintError, ValueError) as e:
        print(f"ERROR: {e}")
        return

    flow = MintFlow(
        contract,
        metadata_client=metadata_client,
        token_decimals=config.token_decimals,
        confirmation_timeout=config.confirmation_timeout
    )
    request = TransactionRequest(
        amount=1,
        recipient="0x81878429C68350DdB41Aaaf05cF2f03bf37e72D5",
        has_referral=True,
        referral_code="GIE-7879",
        descriptor=ProductDescriptor(
            model_product="Model S",
            color_product="Red",
            wheels_product="Sport 21",
            product_price=80000,
            total_price_product=85000,
            prompt="A red sports car on a coastal road at sunset"
        )
    )
    receipt = flow.mint(request)
    if receipt:
        print(f"Minted in block {receipt.block_number}: {receipt.tx_hash}")


if __name__ == "__main__":
    main()
