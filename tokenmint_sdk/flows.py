"""
Mint/purchase and referral resolution flows.

Each flow has a raising form (``execute``, ``resolve_image_url``) and a
boundary form (``send_transaction``, ``get_image_uri``) that catches the
error, logs it and returns None.
"""
import logging
from enum import Enum
from typing import Optional

from .contract import ContractProxy, PendingTransaction
from .exceptions import ConfigError, NotFoundError, TokenMintError
from .metadata import MetadataClient
from .models import TransactionRequest, TxReceipt
from .utils import to_base_units, validate_address

UINT256_MAX = 2**256 - 1


class FlowVariant(str, Enum):
    NFT = "nft"
    PURCHASE = "purchase"


class MintFlow:
    """
    Mint an NFT (metadata + ``createNft``) or purchase tokens (``buy``),
    then wait for confirmation.

    If ``createNft`` fails after the metadata service created a record, the
    record is left in place; its URI is logged at WARNING.
    """

    def __init__(
        self,
        contract: ContractProxy,
        metadata_client: Optional[MetadataClient] = None,
        token_decimals: int = 18,
        confirmation_timeout: float = 120,
        poll_latency: float = 0.5,
        logger: Optional[logging.Logger] = None
    ):
        self.contract = contract
        self.metadata_client = metadata_client
        self.token_decimals = token_decimals
        self.confirmation_timeout = confirmation_timeout
        self.poll_latency = poll_latency
        self.logger = logger or logging.getLogger(__name__)

    def execute(self, variant: FlowVariant, request: TransactionRequest) -> TxReceipt:
        """
        Run the flow and return the confirmed receipt

        Raises:
            InvalidAddressError: If the recipient is malformed (nothing is sent)
            ConfigError: If the NFT variant has no metadata client
            ValueError: If the request lacks a descriptor or has a bad amount
            RemoteServiceError: If metadata creation fails (no contract call)
            ContractCallError: If submission fails or the transaction reverts
            NetworkError: If the RPC provider is unreachable
            ConfirmationTimeoutError: If confirmation exceeds the deadline
        """
        variant = FlowVariant(variant)
        recipient = validate_address(request.recipient, "recipient")

        if variant is FlowVariant.PURCHASE:
            amount = to_base_units(request.amount, self.token_decimals)
            self.logger.debug(f"Purchasing {request.amount} ({amount} base units) for {recipient}")
            return self._confirm(self.contract.buy(recipient, amount))

        self._check_nft_request(request)
        token_uri = self.metadata_client.create_metadata(request.descriptor)
        try:
            pending = self.contract.create_nft(
                int(request.amount),
                recipient,
                request.has_referral,
                request.referral_code,
                token_uri
            )
            return self._confirm(pending)
        except (TokenMintError, TimeoutError):
            self.logger.warning(f"createNft failed; metadata record left orphaned at {token_uri}")
            raise

    def _check_nft_request(self, request: TransactionRequest) -> None:
        if self.metadata_client is None:
            raise ConfigError("NFT variant requires a metadata client")
        if request.descriptor is None:
            raise ValueError("NFT variant requires a product descriptor")
        if request.amount != request.amount.to_integral_value():
            raise ValueError(f"createNft amount must be a whole number, got {request.amount}")
        if not 0 <= request.amount <= UINT256_MAX:
            raise ValueError(f"createNft amount must fit in uint256, got {request.amount}")

    def _confirm(self, pending: PendingTransaction) -> TxReceipt:
        receipt = pending.wait(timeout=self.confirmation_timeout, poll_latency=self.poll_latency)
        self.logger.info(f"Transaction mined: {receipt.model_dump()}")
        return receipt

    def send_transaction(self, variant: FlowVariant, request: TransactionRequest) -> Optional[TxReceipt]:
        """
        Run the flow, logging any failure instead of raising

        Returns:
            The receipt, or None if any step failed
        """
        try:
            return self.execute(variant, request)
        except (TokenMintError, TimeoutError, ValueError) as e:
            self.logger.error(f"Error sending transaction: {e}")
            return None

    def mint(self, request: TransactionRequest) -> Optional[TxReceipt]:
        return self.send_transaction(FlowVariant.NFT, request)

    def purchase(self, request: TransactionRequest) -> Optional[TxReceipt]:
        return self.send_transaction(FlowVariant.PURCHASE, request)


class ReferralResolver:
    """Resolve a referral code to the image of the token it points at"""

    def __init__(
        self,
        contract: ContractProxy,
        metadata_client: MetadataClient,
        logger: Optional[logging.Logger] = None
    ):
        self.contract = contract
        self.metadata_client = metadata_client
        self.logger = logger or logging.getLogger(__name__)

    def resolve_image_url(self, ref_code: str) -> str:
        """
        Raises:
            NotFoundError: If the code, token or image field is unknown
            ContractCallError: If a contract read fails
            RemoteServiceError: If the metadata cannot be fetched
            NetworkError: If the RPC provider is unreachable
        """
        token_id = self.contract.referral_to_token_id(ref_code)
        # Unset mapping entries read back as zero
        if token_id == 0:
            raise NotFoundError(f"No token for referral code {ref_code!r}")

        token = self.contract.id_to_listed_token(token_id)
        if not token.token_uri:
            raise NotFoundError(f"Token {token_id} has no token URI")

        metadata = self.metadata_client.fetch_metadata(token.token_uri)
        self.logger.debug(f"Referral {ref_code} -> token {token_id} -> {token.token_uri}")
        return metadata.image

    def get_image_uri(self, ref_code: str) -> Optional[str]:
        """
        Returns:
            The image URL, or None after logging the failure
        """
        try:
            return self.resolve_image_url(ref_code)
        except TokenMintError as e:
            self.logger.error(f"Error Getting Image URL: {e}")
            return None
