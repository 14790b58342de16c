"""
Utility functions for the TokenMint SDK.
"""
import urllib.parse
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Union

from web3 import Web3

from .exceptions import InvalidAddressError

# Block explorers keyed by chain id
EXPLORERS = {
    1: "https://etherscan.io",
    11155111: "https://sepolia.etherscan.io",
    42161: "https://arbiscan.io",
    421614: "https://sepolia.arbiscan.io",
}
DEFAULT_EXPLORER = "https://blockscan.com"


def to_base_units(amount: Union[int, str, Decimal, float], decimals: int = 18) -> int:
    """
    Scale a human-readable amount to the chain's smallest unit.

    Args:
        amount: Amount in whole tokens (e.g. 1000 or "0.5")
        decimals: Decimal precision of the token

    Returns:
        Integer amount in base units

    Raises:
        ValueError: If the amount is negative, not a number, or has more
            fractional digits than ``decimals`` allows
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {amount!r}")
    if not value.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")
    if value < 0:
        raise ValueError(f"Amount must be non-negative, got {amount}")

    numerator, denominator = value.as_integer_ratio()
    scaled = numerator * 10 ** decimals
    if scaled % denominator:
        raise ValueError(f"Amount {amount} has more than {decimals} decimal places")
    return scaled // denominator


def validate_address(address: Any, name: str = "address") -> str:
    """
    Validate an Ethereum address and return its checksummed form.

    Raises:
        InvalidAddressError: If the address is not a valid 20-byte hex address
    """
    if not isinstance(address, str) or not Web3.is_address(address):
        raise InvalidAddressError(f"Invalid {name}: {address!r}", reason="invalid address format")
    return Web3.to_checksum_address(address)


def ensure_secure_url(name: str, url: str) -> None:
    """
    Require https:// unless the host is localhost/127.0.0.1

    Raises:
        ValueError: If the URL uses another scheme for a remote host
    """
    parsed = urllib.parse.urlparse(url)
    host = parsed.netloc.split(':')[0] if parsed.netloc else ''
    is_local = host in ('localhost', '127.0.0.1')
    if parsed.scheme != 'https' and not is_local:
        raise ValueError(f"{name} must use https:// for security (got: {parsed.scheme}://)")


def to_hex_hash(tx_hash: Union[str, bytes]) -> str:
    """Normalise a transaction hash to a 0x-prefixed hex string"""
    if isinstance(tx_hash, (bytes, bytearray)):
        return '0x' + bytes(tx_hash).hex()
    if not tx_hash.startswith('0x'):
        return '0x' + tx_hash
    return tx_hash


def tx_url(tx_hash: Union[str, bytes], chain_id: Optional[int] = None) -> str:
    """Block explorer URL for a transaction"""
    base = EXPLORERS.get(chain_id, DEFAULT_EXPLORER)
    return f"{base}/tx/{to_hex_hash(tx_hash)}"


def sanitize_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Remove sensitive data from a payload for logging
    """
    if not isinstance(payload, dict):
        return {"type": str(type(payload))}

    result = payload.copy()
    if "prompt" in result:
        result["prompt"] = f"[REDACTED - {len(str(result['prompt']))} chars]"
    return result
