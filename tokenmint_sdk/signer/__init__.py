"""
Signer interfaces for the TokenMint SDK.
"""
from typing import Any, Dict, Protocol, runtime_checkable

__all__ = ["Signer", "LocalSigner"]


@runtime_checkable
class Signer(Protocol):
    """Protocol for transaction signers"""
    address: str

    def sign_transaction(self, transaction_dict: Dict[str, Any]) -> Any:
        """Sign transaction and return signed tx object"""
        ...


from .local import LocalSigner  # noqa: E402
