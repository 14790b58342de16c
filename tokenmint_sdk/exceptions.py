"""
Exceptions for the TokenMint SDK.
"""
from typing import Any, Optional


class TokenMintError(Exception):
    """Base exception for all TokenMint SDK errors"""
    pass


class ConfigError(TokenMintError, ValueError):
    """Raised when required configuration is missing or invalid"""
    pass


class NetworkError(TokenMintError):
    """Raised when the RPC provider cannot be reached"""
    pass


class ContractCallError(TokenMintError):
    """
    Raised when a contract call fails.

    Covers reverts, out-of-gas, ABI mismatches and signing or broadcast
    failures. The underlying reason is kept on ``reason``.
    """

    def __init__(self, message: str, reason: Optional[str] = None, receipt: Optional[Any] = None):
        self.reason = reason
        self.receipt = receipt
        super().__init__(message)


class InvalidAddressError(ContractCallError):
    """Raised when an address argument is malformed"""
    pass


class RemoteServiceError(TokenMintError):
    """Raised when the metadata service fails or returns a malformed body"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(TokenMintError):
    """Raised when a referral code, token id or metadata field has no match"""
    pass


class ConfirmationTimeoutError(TokenMintError, TimeoutError):
    """Raised when a transaction is not confirmed before the deadline"""

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        self.tx_hash = tx_hash
        super().__init__(message)
