"""
Tests for MetadataClient.
"""
import pytest
import requests

from tokenmint_sdk.config import MintConfig
from tokenmint_sdk.exceptions import ConfigError, NotFoundError, RemoteServiceError
from tokenmint_sdk.metadata import MetadataClient, CREATE_PATH
from tokenmint_sdk.models import ProductDescriptor
from tests.test_helpers import (
    TEST_SERVICE_URL, TEST_SERVICE_TOKEN, TEST_RPC_URL, TEST_PRIV_KEY, TEST_CONTRACT
)

CREATE_URL = TEST_SERVICE_URL + CREATE_PATH


def test_create_metadata_returns_data_field(metadata_client, descriptor, requests_mock):
    requests_mock.post(CREATE_URL, json={"data": "https://example/42.json", "status": "ok"})

    uri = metadata_client.create_metadata(descriptor)

    assert uri == "https://example/42.json"
    assert requests_mock.last_request.headers["Authorization"] == f"Bearer {TEST_SERVICE_TOKEN}"
    assert requests_mock.last_request.json() == descriptor


def test_create_metadata_accepts_model(metadata_client, descriptor, requests_mock):
    requests_mock.post(CREATE_URL, json={"data": "ipfs://abc"})

    uri = metadata_client.create_metadata(ProductDescriptor.model_validate(descriptor))

    assert uri == "ipfs://abc"
    body = requests_mock.last_request.json()
    assert body["modelProduct"] == "Model S"
    assert body["ProductPrice"] == 80000


def test_create_metadata_missing_data(metadata_client, descriptor, requests_mock):
    requests_mock.post(CREATE_URL, json={"message": "created"})

    with pytest.raises(RemoteServiceError, match="Missing 'data'") as exc_info:
        metadata_client.create_metadata(descriptor)
    assert exc_info.value.status_code == 200


@pytest.mark.parametrize("status_code", [400, 401, 500, 503])
def test_create_metadata_non_2xx(metadata_client, descriptor, requests_mock, status_code):
    requests_mock.post(CREATE_URL, json={"error": "nope"}, status_code=status_code)

    with pytest.raises(RemoteServiceError) as exc_info:
        metadata_client.create_metadata(descriptor)
    assert exc_info.value.status_code == status_code
    # Not retried
    assert requests_mock.call_count == 1


def test_create_metadata_invalid_json(metadata_client, descriptor, requests_mock):
    requests_mock.post(CREATE_URL, text="<html>oops</html>", headers={"Content-Type": "text/html"})

    with pytest.raises(RemoteServiceError, match="invalid JSON"):
        metadata_client.create_metadata(descriptor)


def test_create_metadata_connection_error(metadata_client, descriptor, requests_mock):
    requests_mock.post(CREATE_URL, exc=requests.ConnectionError("down"))

    with pytest.raises(RemoteServiceError, match="unreachable"):
        metadata_client.create_metadata(descriptor)


def test_create_metadata_requires_credentials(descriptor, requests_mock):
    client = MetadataClient()
    with pytest.raises(ConfigError):
        client.create_metadata(descriptor)
    assert not requests_mock.called


def test_create_metadata_prompt_not_logged(metadata_client, descriptor, requests_mock, caplog):
    requests_mock.post(CREATE_URL, json={"data": "ipfs://abc"})
    caplog.set_level("DEBUG")

    metadata_client.create_metadata(descriptor)

    assert all(descriptor["prompt"] not in msg for msg in caplog.messages)
    assert all(TEST_SERVICE_TOKEN not in msg for msg in caplog.messages)


def test_fetch_metadata(metadata_client, requests_mock):
    requests_mock.get("https://example/42.json", json={"image": "https://img/42.png", "name": "Car #42"})

    metadata = metadata_client.fetch_metadata("https://example/42.json")

    assert metadata.image == "https://img/42.png"
    assert metadata.model_extra["name"] == "Car #42"


def test_fetch_metadata_missing_image(metadata_client, requests_mock):
    requests_mock.get("https://example/42.json", json={"name": "Car #42"})

    with pytest.raises(NotFoundError, match="No image field"):
        metadata_client.fetch_metadata("https://example/42.json")


def test_fetch_metadata_non_json(metadata_client, requests_mock):
    requests_mock.get("https://example/42.json", text="not json")

    with pytest.raises(RemoteServiceError):
        metadata_client.fetch_metadata("https://example/42.json")


def test_fetch_metadata_not_found(metadata_client, requests_mock):
    requests_mock.get("https://example/42.json", status_code=404)

    with pytest.raises(RemoteServiceError) as exc_info:
        metadata_client.fetch_metadata("https://example/42.json")
    assert exc_info.value.status_code == 404


def test_from_config():
    config = MintConfig(
        endpoint=TEST_RPC_URL,
        signing_key=TEST_PRIV_KEY,
        contract_address=TEST_CONTRACT,
        service_url=TEST_SERVICE_URL + "/",
        service_auth_token=TEST_SERVICE_TOKEN,
        request_timeout=5
    )
    client = MetadataClient.from_config(config)

    assert client.service_url == TEST_SERVICE_URL
    assert client.timeout == 5


def test_from_config_requires_service():
    config = MintConfig(endpoint=TEST_RPC_URL, signing_key=TEST_PRIV_KEY, contract_address=TEST_CONTRACT)
    with pytest.raises(ConfigError):
        MetadataClient.from_config(config)


def test_insecure_service_url_rejected():
    with pytest.raises(ValueError, match="service_url must use https://"):
        MetadataClient(service_url="http://api.example.com", auth_token="t")
