"""
ChainConnection - binds an RPC connection to a signer.
"""
import logging
import threading
from typing import Any, Dict, Optional

import requests
from web3 import Web3
from web3.exceptions import ContractLogicError, Web3Exception

from .config import MintConfig
from .exceptions import ContractCallError, NetworkError
from .signer import Signer, LocalSigner
from .utils import ensure_secure_url, to_hex_hash

# Added on top of the node's gas estimate
GAS_BUFFER = 1.1


class ChainConnection:
    """
    A Web3 connection plus the signer that pays for and authorises
    state-changing calls.

    Submissions through one connection are serialised: the nonce is read
    with the ``pending`` tag and the transaction broadcast while holding
    ``_submit_lock``, so callers sharing a signer never reuse a nonce.
    """

    def __init__(
        self,
        rpc_url: str,
        signer: Signer,
        request_timeout: float = 30,
        expected_chain_id: Optional[int] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the connection

        Args:
            rpc_url: Ethereum RPC endpoint URL
            signer: Object implementing the Signer protocol
            request_timeout: Timeout for RPC requests in seconds
            expected_chain_id: Chain id checked by assert_chain_id
            logger: Optional logger instance

        Raises:
            ValueError: If signer is missing or rpc_url is not https
        """
        if signer is None:
            raise ValueError("signer must be provided")
        ensure_secure_url("rpc_url", rpc_url)

        self.rpc_url = rpc_url
        self.signer = signer
        self.expected_chain_id = expected_chain_id
        self.logger = logger or logging.getLogger(__name__)
        self.w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": request_timeout}))
        self._submit_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: MintConfig, logger: Optional[logging.Logger] = None) -> "ChainConnection":
        """Build a connection with a LocalSigner from configuration"""
        signer = LocalSigner(config.signing_key.get_secret_value())
        return cls(
            rpc_url=config.endpoint,
            signer=signer,
            request_timeout=config.request_timeout,
            expected_chain_id=config.chain_id,
            logger=logger
        )

    @property
    def address(self) -> str:
        return self.signer.address

    @property
    def chain_id(self) -> int:
        try:
            return self.w3.eth.chain_id
        except requests.RequestException as e:
            raise NetworkError(f"RPC provider unreachable: {e}") from e

    def assert_chain_id(self) -> None:
        """
        Verify that the node serves the expected chain

        Raises:
            NetworkError: If the node cannot be reached
            ValueError: If the chain id differs from expected_chain_id
        """
        actual = self.chain_id
        if self.expected_chain_id is not None and actual != self.expected_chain_id:
            raise ValueError(f"Chain ID mismatch: expected {self.expected_chain_id}, got {actual}")

    def send(self, fn: Any, value: int = 0, gas: Optional[int] = None) -> str:
        """
        Build, sign and broadcast a contract function call

        Args:
            fn: Bound contract function, e.g. ``contract.functions.buy(user, amount)``
            value: Wei to attach
            gas: Gas limit (estimated when None)

        Returns:
            Transaction hash as 0x-prefixed hex string

        Raises:
            NetworkError: If the RPC provider is unreachable
            ContractCallError: If estimation, signing or broadcast fails
        """
        from_address = self.signer.address
        with self._submit_lock:
            try:
                tx_params: Dict[str, Any] = {
                    'from': from_address,
                    'nonce': self.w3.eth.get_transaction_count(from_address, 'pending'),
                    'value': value,
                    'gasPrice': self.w3.eth.gas_price,
                }
                if gas is None:
                    estimate = fn.estimate_gas({'from': from_address, 'value': value})
                    gas = int(estimate * GAS_BUFFER)
                    self.logger.debug(f"Estimated gas: {gas}")
                tx_params['gas'] = gas
                tx = fn.build_transaction(tx_params)
            except requests.RequestException as e:
                raise NetworkError(f"RPC provider unreachable: {e}") from e
            except ContractLogicError as e:
                raise ContractCallError(f"Contract call would revert: {e}", reason=str(e)) from e
            except (Web3Exception, ValueError) as e:
                raise ContractCallError(f"Failed to build transaction: {e}", reason=str(e)) from e

            try:
                signed_tx = self.signer.sign_transaction(tx)
            except Exception as e:
                self.logger.error(f"Transaction signing failed: {e}")
                raise ContractCallError(f"Failed to sign transaction: {e}", reason=str(e)) from e

            raw = getattr(signed_tx, "raw_transaction", None) or signed_tx.rawTransaction
            try:
                tx_hash = self.w3.eth.send_raw_transaction(raw)
            except requests.RequestException as e:
                raise NetworkError(f"RPC provider unreachable: {e}") from e
            except (Web3Exception, ValueError) as e:
                self.logger.error(f"Failed to send transaction: {e}")
                raise ContractCallError(f"Failed to send transaction: {e}", reason=str(e)) from e

        return to_hex_hash(tx_hash)
