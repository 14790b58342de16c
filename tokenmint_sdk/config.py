"""
Configuration for the TokenMint SDK.

All endpoints, keys and addresses are read from the environment at startup;
nothing secret is embedded in source.
"""
import os
import logging
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from .exceptions import ConfigError
from .utils import ensure_secure_url

logger = logging.getLogger(__name__)

# Field name -> environment variable
ENV_VARS = {
    "endpoint": "TOKENMINT_RPC_URL",
    "signing_key": "TOKENMINT_PRIVATE_KEY",
    "contract_address": "TOKENMINT_CONTRACT_ADDRESS",
    "contract_abi_path": "TOKENMINT_CONTRACT_ABI_PATH",
    "service_url": "TOKENMINT_SERVICE_URL",
    "service_auth_token": "TOKENMINT_SERVICE_TOKEN",
    "token_decimals": "TOKENMINT_TOKEN_DECIMALS",
    "confirmation_timeout": "TOKENMINT_CONFIRMATION_TIMEOUT",
    "request_timeout": "TOKENMINT_REQUEST_TIMEOUT",
    "chain_id": "TOKENMINT_CHAIN_ID",
}


class MintConfig(BaseModel):
    """Runtime configuration, usually built with :meth:`from_env`"""
    model_config = ConfigDict(frozen=True)

    endpoint: str
    signing_key: SecretStr
    contract_address: str
    contract_abi_path: Optional[str] = None
    service_url: Optional[str] = None
    service_auth_token: Optional[SecretStr] = None
    token_decimals: int = Field(18, ge=0, le=77)
    confirmation_timeout: float = Field(120.0, gt=0)
    request_timeout: float = Field(30.0, gt=0)
    chain_id: Optional[int] = None

    @field_validator("endpoint", "service_url")
    @classmethod
    def _secure_url(cls, value: Optional[str], info) -> Optional[str]:
        if value is not None:
            ensure_secure_url(info.field_name, value)
        return value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "MintConfig":
        """
        Load configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            MintConfig instance

        Raises:
            ConfigError: If a required variable is missing or a value is invalid
        """
        environ = os.environ if environ is None else environ
        values = {}
        for field, var in ENV_VARS.items():
            raw = environ.get(var)
            if raw is not None and raw.strip() != "":
                values[field] = raw.strip()

        try:
            config = cls(**values)
        except ValidationError as e:
            problems = []
            for err in e.errors():
                field = err["loc"][0] if err["loc"] else "?"
                problems.append(f"{ENV_VARS.get(field, field)}: {err['msg']}")
            raise ConfigError("Invalid configuration: " + "; ".join(problems)) from None

        logger.debug(
            "Loaded config for contract %s on %s",
            config.contract_address, config.endpoint.split("//")[-1].split("/")[0]
        )
        return config

    def require_service(self) -> None:
        """
        Check that the metadata service is configured.

        Raises:
            ConfigError: If service_url or service_auth_token is missing
        """
        missing = [
            ENV_VARS[name] for name in ("service_url", "service_auth_token")
            if getattr(self, name) is None
        ]
        if missing:
            raise ConfigError(f"Metadata service not configured, set: {', '.join(missing)}")
