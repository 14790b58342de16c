"""
Tests for MintConfig.
"""
import pytest

from tokenmint_sdk.config import MintConfig
from tokenmint_sdk.exceptions import ConfigError
from tests.test_helpers import TEST_RPC_URL, TEST_PRIV_KEY, TEST_CONTRACT, TEST_SERVICE_URL, TEST_SERVICE_TOKEN

BASE_ENV = {
    "TOKENMINT_RPC_URL": TEST_RPC_URL,
    "TOKENMINT_PRIVATE_KEY": TEST_PRIV_KEY,
    "TOKENMINT_CONTRACT_ADDRESS": TEST_CONTRACT,
}


class TestMintConfig:
    """Test loading configuration from the environment."""

    def test_from_env_minimal(self):
        config = MintConfig.from_env(BASE_ENV)

        assert config.endpoint == TEST_RPC_URL
        assert config.signing_key.get_secret_value() == TEST_PRIV_KEY
        assert config.contract_address == TEST_CONTRACT
        assert config.contract_abi_path is None
        assert config.token_decimals == 18
        assert config.confirmation_timeout == 120
        assert config.chain_id is None

    def test_from_env_full(self):
        env = dict(BASE_ENV)
        env.update({
            "TOKENMINT_CONTRACT_ABI_PATH": "/tmp/abi.json",
            "TOKENMINT_SERVICE_URL": TEST_SERVICE_URL,
            "TOKENMINT_SERVICE_TOKEN": TEST_SERVICE_TOKEN,
            "TOKENMINT_TOKEN_DECIMALS": "6",
            "TOKENMINT_CONFIRMATION_TIMEOUT": "30",
            "TOKENMINT_REQUEST_TIMEOUT": "5",
            "TOKENMINT_CHAIN_ID": "421614",
        })
        config = MintConfig.from_env(env)

        assert config.contract_abi_path == "/tmp/abi.json"
        assert config.service_url == TEST_SERVICE_URL
        assert config.service_auth_token.get_secret_value() == TEST_SERVICE_TOKEN
        assert config.token_decimals == 6
        assert config.confirmation_timeout == 30.0
        assert config.request_timeout == 5.0
        assert config.chain_id == 421614
        config.require_service()

    def test_missing_required_lists_variables(self):
        with pytest.raises(ConfigError) as exc_info:
            MintConfig.from_env({"TOKENMINT_RPC_URL": TEST_RPC_URL})

        message = str(exc_info.value)
        assert "TOKENMINT_PRIVATE_KEY" in message
        assert "TOKENMINT_CONTRACT_ADDRESS" in message

    def test_blank_values_count_as_missing(self):
        env = dict(BASE_ENV, TOKENMINT_CONTRACT_ADDRESS="  ")
        with pytest.raises(ConfigError, match="TOKENMINT_CONTRACT_ADDRESS"):
            MintConfig.from_env(env)

    def test_insecure_endpoint_rejected(self):
        env = dict(BASE_ENV, TOKENMINT_RPC_URL="http://rpc.example.com")
        with pytest.raises(ConfigError, match="TOKENMINT_RPC_URL"):
            MintConfig.from_env(env)

    def test_invalid_number_rejected(self):
        env = dict(BASE_ENV, TOKENMINT_TOKEN_DECIMALS="eighteen")
        with pytest.raises(ConfigError, match="TOKENMINT_TOKEN_DECIMALS"):
            MintConfig.from_env(env)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            MintConfig.from_env({})

    def test_secrets_hidden_from_repr(self):
        env = dict(BASE_ENV, TOKENMINT_SERVICE_TOKEN=TEST_SERVICE_TOKEN)
        config = MintConfig.from_env(env)

        assert TEST_PRIV_KEY not in repr(config)
        assert TEST_SERVICE_TOKEN not in repr(config)
        assert TEST_PRIV_KEY not in str(config.model_dump())

    def test_require_service_missing(self):
        config = MintConfig.from_env(BASE_ENV)
        with pytest.raises(ConfigError) as exc_info:
            config.require_service()
        assert "TOKENMINT_SERVICE_URL" in str(exc_info.value)
        assert "TOKENMINT_SERVICE_TOKEN" in str(exc_info.value)
