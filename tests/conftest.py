"""
Pytest fixtures for the TokenMint SDK tests.
"""
import pytest
from unittest.mock import MagicMock
from web3.providers.rpc import HTTPProvider

from tokenmint_sdk.metadata import MetadataClient
from tokenmint_sdk.models import TransactionRequest
from tests.test_helpers import (
    create_test_proxy, make_receipt,
    TEST_SERVICE_URL, TEST_SERVICE_TOKEN, TEST_USER, TEST_TX_HASH
)


@pytest.fixture(autouse=True)
def _patch_http_provider(monkeypatch):
    """
    Stub every Web3 HTTP call so no DNS / network traffic is triggered.
    """
    def _dummy(self, method, params=None, *_args, **_kwargs):
        if method == "eth_chainId":
            return {"jsonrpc": "2.0", "id": 1, "result": "0x66eee"}  # arbitrum sepolia
        if method == "eth_gasPrice":
            return {"jsonrpc": "2.0", "id": 1, "result": "0x3b9aca00"}  # 1 gwei
        return {"jsonrpc": "2.0", "id": 1, "result": "0x0"}

    monkeypatch.setattr(HTTPProvider, "make_request", _dummy, raising=True)


@pytest.fixture
def mock_contract():
    """
    Contract mock whose bound functions estimate gas, echo build params
    and answer read calls for referral GIE-7879 -> token 42.
    """
    contract = MagicMock()

    def bound_function(*args):
        fn = MagicMock()
        fn.args = args
        fn.estimate_gas = MagicMock(return_value=100000)
        fn.build_transaction = MagicMock(side_effect=lambda params: {
            **params,
            'to': '0x1234567890123456789012345678901234567890',
            'data': '0x1234',
            'chainId': 421614,
        })
        return fn

    contract.functions.createNft = MagicMock(side_effect=bound_function)
    contract.functions.buy = MagicMock(side_effect=bound_function)
    contract.functions.referralToTokenId.return_value.call.return_value = 42
    contract.functions.idToListedToken.return_value.call.return_value = [
        42,
        "0x1234567890123456789012345678901234567890",
        0,
        "GIE-7879",
        "https://example/42.json",
    ]
    return contract


@pytest.fixture
def mock_w3(mock_contract):
    """Web3 mock that accepts any transaction and mines it immediately"""
    w3 = MagicMock()
    w3.eth.chain_id = 421614
    w3.eth.gas_price = 1000000000
    w3.eth.get_transaction_count = MagicMock(return_value=12)
    w3.eth.send_raw_transaction = MagicMock(return_value=bytes.fromhex(TEST_TX_HASH[2:]))
    w3.eth.wait_for_transaction_receipt = MagicMock(return_value=make_receipt())
    w3.eth.contract = MagicMock(return_value=mock_contract)
    return w3


@pytest.fixture
def mock_signer():
    signer = MagicMock()
    signer.address = "0x1234567890123456789012345678901234567890"
    signer.sign_transaction.return_value = MagicMock(raw_transaction=b"signed_raw_tx")
    return signer


@pytest.fixture
def proxy(mock_w3, mock_signer):
    return create_test_proxy(mock_w3, signer=mock_signer)


@pytest.fixture
def metadata_client():
    return MetadataClient(service_url=TEST_SERVICE_URL, auth_token=TEST_SERVICE_TOKEN)


@pytest.fixture
def descriptor():
    return {
        "modelProduct": "Model S",
        "colorProduct": "Red",
        "wheelsProduct": "Sport 21",
        "ProductPrice": 80000,
        "totalPriceProduct": 85000,
        "prompt": "A red car on a mountain road",
    }


@pytest.fixture
def nft_request(descriptor):
    return TransactionRequest(
        amount=1,
        recipient=TEST_USER,
        has_referral=True,
        referral_code="GIE-7879",
        descriptor=descriptor
    )
