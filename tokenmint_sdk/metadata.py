"""
MetadataClient - talks to the off-chain metadata service.
"""
import logging
from typing import Any, Dict, Optional, Union

import requests

from .config import MintConfig
from .exceptions import ConfigError, NotFoundError, RemoteServiceError
from .models import ProductDescriptor, TokenMetadata
from .utils import ensure_secure_url, sanitize_payload

CREATE_PATH = "/api/v1/create-nft"


class MetadataClient:
    """
    Client for the metadata/NFT-creation HTTP service.

    Requests are made once; failures raise RemoteServiceError and are
    never retried.
    """

    def __init__(
        self,
        service_url: Optional[str] = None,
        auth_token: Optional[str] = None,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the client

        Args:
            service_url: Base URL of the metadata service (needed for create_metadata)
            auth_token: Bearer token for the create endpoint
            timeout: Timeout for HTTP requests in seconds
            session: Optional pre-configured requests session
            logger: Optional logger instance

        Raises:
            ValueError: If service_url is not https (unless localhost)
        """
        if service_url is not None:
            ensure_secure_url("service_url", service_url)
            service_url = service_url.rstrip("/")
        self.service_url = service_url
        self._auth_token = auth_token
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: MintConfig) -> "MetadataClient":
        """
        Raises:
            ConfigError: If the service is not configured
        """
        config.require_service()
        return cls(
            service_url=config.service_url,
            auth_token=config.service_auth_token.get_secret_value(),
            timeout=config.request_timeout
        )

    def create_metadata(self, descriptor: Union[ProductDescriptor, Dict[str, Any]]) -> str:
        """
        Create a metadata record and return its token URI

        Args:
            descriptor: Product attributes and prompt

        Returns:
            Token URI from the response body's ``data`` field

        Raises:
            RemoteServiceError: On network failure, non-2xx status or malformed body
            ConfigError: If the client has no service_url or auth_token
        """
        if not self.service_url or not self._auth_token:
            raise ConfigError("Metadata service URL and auth token are required to create metadata")
        if isinstance(descriptor, ProductDescriptor):
            payload = descriptor.to_payload()
        else:
            payload = ProductDescriptor.model_validate(descriptor).to_payload()
        self.logger.debug(f"Creating metadata: {sanitize_payload(payload)}")

        try:
            response = self.session.post(
                f"{self.service_url}{CREATE_PATH}",
                json=payload,
                headers={"Authorization": f"Bearer {self._auth_token}"},
                timeout=self.timeout
            )
        except requests.RequestException as e:
            self.logger.error(f"Metadata service request failed: {e}")
            raise RemoteServiceError(f"Metadata service unreachable: {e}") from e

        body = self._json_body(response, "Metadata service")
        uri = body.get("data") if isinstance(body, dict) else None
        if not isinstance(uri, str) or not uri:
            raise RemoteServiceError(
                f"Missing 'data' in metadata service response: {body}",
                status_code=response.status_code
            )
        self.logger.debug(f"Metadata created at {uri}")
        return uri

    def fetch_metadata(self, uri: str) -> TokenMetadata:
        """
        Fetch and parse the JSON metadata stored at ``uri``

        Raises:
            RemoteServiceError: On network failure, non-2xx status or non-JSON body
            NotFoundError: If the document has no ``image`` field
        """
        try:
            response = self.session.get(uri, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteServiceError(f"Failed to fetch metadata from {uri}: {e}") from e

        body = self._json_body(response, f"Metadata at {uri}")
        if not isinstance(body, dict) or not isinstance(body.get("image"), str):
            raise NotFoundError(f"No image field in metadata at {uri}")
        return TokenMetadata.model_validate(body)

    def _json_body(self, response: requests.Response, source: str) -> Any:
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise RemoteServiceError(
                f"{source} returned HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code
            ) from e

        content_type = response.headers.get('Content-Type', '')
        if 'json' not in content_type:
            self.logger.warning(f"Unexpected Content-Type: {content_type} (expected application/json)")
        try:
            return response.json()
        except ValueError as e:
            raise RemoteServiceError(
                f"{source} returned invalid JSON: {e}", status_code=response.status_code
            ) from e
