"""
ContractProxy - typed binding to the deployed marketplace contract.
"""
import json
import logging
import importlib.resources
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import requests
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception

from .config import MintConfig
from .exceptions import ConfirmationTimeoutError, ContractCallError, NetworkError
from .models import ListedToken, TxReceipt
from .provider import ChainConnection
from .utils import to_hex_hash, validate_address


def load_abi(path: Optional[Union[str, Path]] = None) -> List[Dict[str, Any]]:
    """
    Load a contract ABI from a JSON file.

    Accepts either a bare ABI list or a build artifact with an ``abi`` key.
    Without a path the bundled marketplace ABI is returned.
    """
    if path is None:
        text = importlib.resources.files("tokenmint_sdk").joinpath("abi/marketplace.json").read_text()
    else:
        text = Path(path).read_text()
    data = json.loads(text)
    if isinstance(data, dict):
        data = data.get("abi")
    if not isinstance(data, list):
        raise ValueError(f"ABI file must contain a list or an 'abi' key: {path}")
    return data


def _plain(value: Any) -> Any:
    """Convert AttributeDict/HexBytes trees into JSON-friendly values"""
    if isinstance(value, (bytes, bytearray)):
        return '0x' + bytes(value).hex()
    if isinstance(value, dict) or hasattr(value, "items"):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def convert_receipt(web3_receipt: Any) -> TxReceipt:
    """
    Convert a Web3 receipt to our TxReceipt model
    """
    receipt_dict = {k: _plain(v) for k, v in dict(web3_receipt).items()}
    return TxReceipt.model_validate(receipt_dict)


class PendingTransaction:
    """Handle for a submitted, not yet confirmed transaction"""

    def __init__(self, connection: ChainConnection, tx_hash: str):
        self.connection = connection
        self.tx_hash = tx_hash

    def wait(self, timeout: float = 120, poll_latency: float = 0.5) -> TxReceipt:
        """
        Block until the transaction is mined or the deadline passes

        Args:
            timeout: Seconds to wait for inclusion
            poll_latency: Seconds between receipt polls

        Returns:
            Transaction receipt

        Raises:
            ConfirmationTimeoutError: If not mined within ``timeout``
            ContractCallError: If the transaction was mined but reverted
            NetworkError: If the RPC provider becomes unreachable
        """
        try:
            raw = self.connection.w3.eth.wait_for_transaction_receipt(
                self.tx_hash,
                timeout=timeout,
                poll_latency=poll_latency
            )
        except TimeExhausted as e:
            raise ConfirmationTimeoutError(
                f"Transaction {self.tx_hash} not confirmed after {timeout}s",
                tx_hash=self.tx_hash
            ) from e
        except requests.RequestException as e:
            raise NetworkError(f"RPC provider unreachable: {e}") from e

        receipt = convert_receipt(raw)
        if not receipt.succeeded:
            raise ContractCallError(
                f"Transaction reverted: {self.tx_hash}",
                reason="execution reverted",
                receipt=receipt
            )
        return receipt

    def __repr__(self) -> str:
        return f"PendingTransaction({self.tx_hash})"


class ContractProxy:
    """
    One method per marketplace contract function.

    State-changing calls return a :class:`PendingTransaction`; read calls
    return decoded values. Failures surface as ContractCallError (with the
    underlying reason) or NetworkError. Nothing is retried.
    """

    def __init__(
        self,
        connection: ChainConnection,
        address: str,
        abi: Sequence[Dict[str, Any]],
        logger: Optional[logging.Logger] = None
    ):
        self.connection = connection
        self.address = validate_address(address, "contract address")
        self.abi = list(abi)
        self.logger = logger or logging.getLogger(__name__)
        self.contract = connection.w3.eth.contract(address=self.address, abi=self.abi)

    @classmethod
    def from_config(cls, connection: ChainConnection, config: MintConfig) -> "ContractProxy":
        return cls(connection, config.contract_address, load_abi(config.contract_abi_path))

    def _function(self, name: str, args: Sequence[Any]) -> Any:
        try:
            return getattr(self.contract.functions, name)(*args)
        except (AttributeError, Web3Exception, TypeError, ValueError) as e:
            raise ContractCallError(f"Cannot encode call to {name}: {e}", reason=str(e)) from e

    def transact(self, name: str, *args: Any, value: int = 0) -> PendingTransaction:
        """Submit a state-changing call"""
        fn = self._function(name, args)
        tx_hash = self.connection.send(fn, value=value)
        self.logger.info(f"Transaction sent, hash: {tx_hash}")
        return PendingTransaction(self.connection, tx_hash)

    def call(self, name: str, *args: Any) -> Any:
        """Execute a read-only call"""
        fn = self._function(name, args)
        try:
            return fn.call()
        except requests.RequestException as e:
            raise NetworkError(f"RPC provider unreachable: {e}") from e
        except ContractLogicError as e:
            raise ContractCallError(f"{name} reverted: {e}", reason=str(e)) from e
        except (Web3Exception, ValueError) as e:
            raise ContractCallError(f"{name} failed: {e}", reason=str(e)) from e

    def create_nft(
        self,
        amount: int,
        user: str,
        has_referral: bool,
        referral_code: str,
        token_uri: str
    ) -> PendingTransaction:
        user = validate_address(user, "user address")
        return self.transact("createNft", amount, user, has_referral, referral_code, token_uri)

    def buy(self, user: str, amount: int) -> PendingTransaction:
        """Purchase call; ``amount`` must already be in base units"""
        user = validate_address(user, "user address")
        return self.transact("buy", user, amount)

    def referral_to_token_id(self, ref_code: str) -> int:
        return int(self.call("referralToTokenId", ref_code))

    def id_to_listed_token(self, token_id: int) -> ListedToken:
        result = self.call("idToListedToken", token_id)
        fields = self._named_outputs("idToListedToken", result)
        return ListedToken(
            token_id=token_id,
            token_uri=fields.get("tokenURI") or "",
            fields=fields
        )

    def _named_outputs(self, name: str, result: Any) -> Dict[str, Any]:
        """Map a decoded result onto the output names declared in the ABI"""
        if hasattr(result, "_asdict"):
            return dict(result._asdict())
        if isinstance(result, dict):
            return dict(result)

        entry = next(
            (e for e in self.abi if e.get("type") == "function" and e.get("name") == name),
            None
        )
        if entry is None:
            raise ContractCallError(f"{name} missing from ABI", reason="ABI mismatch")
        outputs = entry.get("outputs", [])
        # A single struct output decodes to one tuple holding its components
        if len(outputs) == 1 and outputs[0].get("type") == "tuple":
            outputs = outputs[0].get("components", [])
        elif len(outputs) == 1:
            result = (result,)

        if not isinstance(result, (list, tuple)) or len(result) != len(outputs):
            raise ContractCallError(
                f"Unexpected result shape from {name}: {result!r}", reason="ABI mismatch"
            )
        return {out.get("name") or f"_{i}": value for i, (out, value) in enumerate(zip(outputs, result))}
