"""
TokenMint SDK - mint, purchase and resolve marketplace tokens.
"""
from .version import __version__
from .config import MintConfig
from .contract import ContractProxy, PendingTransaction, load_abi
from .exceptions import (
    TokenMintError, ConfigError, NetworkError, ContractCallError,
    InvalidAddressError, RemoteServiceError, NotFoundError,
    ConfirmationTimeoutError
)
from .flows import FlowVariant, MintFlow, ReferralResolver
from .metadata import MetadataClient
from .models import ProductDescriptor, TransactionRequest, ListedToken, TokenMetadata, TxReceipt
from .provider import ChainConnection
from .signer import Signer, LocalSigner
from .utils import to_base_units, tx_url

__all__ = [
    "__version__",
    "MintConfig",
    "ChainConnection",
    "ContractProxy",
    "PendingTransaction",
    "load_abi",
    "MetadataClient",
    "FlowVariant",
    "MintFlow",
    "ReferralResolver",
    "ProductDescriptor",
    "TransactionRequest",
    "ListedToken",
    "TokenMetadata",
    "TxReceipt",
    "Signer",
    "LocalSigner",
    "TokenMintError",
    "ConfigError",
    "NetworkError",
    "ContractCallError",
    "InvalidAddressError",
    "RemoteServiceError",
    "NotFoundError",
    "ConfirmationTimeoutError",
    "to_base_units",
    "tx_url",
]
