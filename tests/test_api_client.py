"""Test suite for the Mint API client.

Covers:
- Client config validation
- Request shaping (scheme, host, headers)
- Secret and variable operations against a mocked Mint API
- Error mapping (not found, API errors, transport and decode failures)
"""
import json

import httpx
import pytest

from mint_provider.vaults.domains.api_client import ClientConfig, MintClient
from mint_provider.vaults.domains.errors import (
    APIError,
    DecodeError,
    InvariantError,
    MintError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from mint_provider.vaults.domains.models import Secret, Variable


@pytest.fixture
def config():
    return ClientConfig(access_token="test-token", host="cloud.rwx.com", version="1.2.3")


@pytest.fixture
def make_client(config):
    """Build a client whose requests are answered by `handler` and recorded."""
    clients = []

    def _make(handler):
        requests = []

        def _record(request):
            requests.append(request)
            return handler(request)

        client = MintClient(config, transport=httpx.MockTransport(_record))
        clients.append(client)
        return client, requests

    yield _make

    for client in clients:
        client.close()


class TestClientConfig:
    """Test suite for client configuration validation."""

    def test_valid_config_builds_client(self, config):
        """Test that a fully populated config builds a client."""
        with MintClient(config) as client:
            assert client.config is config

    @pytest.mark.parametrize("field_name,expected", [
        ("access_token", "missing access token"),
        ("host", "missing host"),
        ("version", "missing version"),
    ])
    def test_empty_field_fails_validation(self, config, field_name, expected):
        """Test that each empty field is reported by name."""
        setattr(config, field_name, "")

        with pytest.raises(ValidationError) as exc_info:
            MintClient(config)

        assert str(exc_info.value) == f"validation failed: {expected}"


class TestRequestShaping:
    """Test that every request is completed and authenticated."""

    def test_relative_request_uses_https_and_configured_host(self, make_client):
        """Test that request paths are sent to https://<configured host>."""
        client, requests = make_client(lambda request: httpx.Response(200, json={"name": "REGION", "value": "x"}))

        client.get_variable("default", "REGION")

        url = requests[0].url
        assert url.scheme == "https"
        assert url.host == "cloud.rwx.com"
        assert url.path == "/mint/api/vaults/vars/REGION"
        assert url.params["vault_name"] == "default"

    def test_headers_carry_token_and_user_agent(self, make_client):
        """Test that the bearer token and versioned User-Agent are always sent."""
        client, requests = make_client(lambda request: httpx.Response(200))

        client.delete_secret("default", "s1")

        headers = requests[0].headers
        assert headers["Authorization"] == "Bearer test-token"
        assert headers["User-Agent"] == "terraform-provider-mint/1.2.3"

    def test_post_sends_json_content_type(self, make_client):
        """Test that write requests declare a JSON body."""
        client, requests = make_client(lambda request: httpx.Response(200))

        client.set_variable("default", Variable(name="REGION", value="us-east-1"))

        assert requests[0].headers["Content-Type"] == "application/json"


class TestSecrets:
    """Test suite for secret operations."""

    def test_get_secret_metadata_decodes_secret(self, make_client):
        """Test that a 200 response is decoded into a Secret."""
        client, requests = make_client(lambda request: httpx.Response(
            200, json={"name": "s1", "description": "d", "version": 7}
        ))

        secret = client.get_secret_metadata("default", "s1")

        assert secret == Secret(name="s1", secret_value="", description="d", version=7)
        assert requests[0].method == "GET"
        assert requests[0].url.path == "/mint/api/vaults/secrets/s1"

    def test_get_secret_metadata_not_found(self, make_client):
        """Test that a 404 raises NotFoundError."""
        client, _ = make_client(lambda request: httpx.Response(404))

        with pytest.raises(NotFoundError):
            client.get_secret_metadata("default", "missing")

    def test_set_secret_assigns_version(self, make_client):
        """Test that the version from the response is set on the returned secret."""
        client, requests = make_client(lambda request: httpx.Response(200, json={"versions": {"s1": 3}}))

        result = client.set_secret("default", Secret(name="s1", secret_value="v", description="d"))

        assert result.version == 3
        assert result.name == "s1"
        assert result.secret_value == "v"
        assert result.description == "d"

        body = json.loads(requests[0].content)
        assert requests[0].method == "POST"
        assert requests[0].url.path == "/mint/api/vaults/secrets"
        assert body["vault_name"] == "default"
        assert body["secrets"] == [{"description": "d", "name": "s1", "secret": "v", "version": 0}]

    def test_set_secret_missing_version_is_an_error(self, make_client):
        """Test that a response without the secret's version fails instead of defaulting to 0."""
        client, _ = make_client(lambda request: httpx.Response(200, json={"versions": {"other": 1}}))

        with pytest.raises(InvariantError) as exc_info:
            client.set_secret("default", Secret(name="s1", secret_value="v"))

        assert "unable to infer secret version" in str(exc_info.value)

    def test_set_secret_not_found(self, make_client):
        """Test that a 404 on write raises NotFoundError."""
        client, _ = make_client(lambda request: httpx.Response(404))

        with pytest.raises(NotFoundError):
            client.set_secret("no-such-vault", Secret(name="s1", secret_value="v"))

    @pytest.mark.parametrize("status", [200, 404])
    def test_delete_secret_is_idempotent(self, make_client, status):
        """Test that delete succeeds whether or not the secret existed."""
        client, requests = make_client(lambda request: httpx.Response(status))

        assert client.delete_secret("default", "s1") is None
        assert requests[0].method == "DELETE"
        assert requests[0].url.path == "/mint/api/vaults/secrets/s1"

    def test_delete_secret_other_status_fails(self, make_client):
        """Test that delete reports statuses other than 200 and 404."""
        client, _ = make_client(lambda request: httpx.Response(403, json={"error": "forbidden"}))

        with pytest.raises(APIError) as exc_info:
            client.delete_secret("default", "s1")

        assert str(exc_info.value) == "forbidden"
        assert exc_info.value.status_code == 403


class TestVariables:
    """Test suite for variable operations."""

    def test_get_variable(self, make_client):
        """Test that a 200 response is decoded into a Variable."""
        client, _ = make_client(lambda request: httpx.Response(200, json={"name": "REGION", "value": "us-east-1"}))

        assert client.get_variable("default", "REGION") == Variable(name="REGION", value="us-east-1")

    def test_get_variable_not_found(self, make_client):
        """Test that a 404 raises NotFoundError."""
        client, _ = make_client(lambda request: httpx.Response(404))

        with pytest.raises(NotFoundError):
            client.get_variable("default", "REGION")

    def test_set_variable_returns_variable_unchanged(self, make_client):
        """Test that set_variable posts the variable and returns it as sent."""
        client, requests = make_client(lambda request: httpx.Response(200, json={}))
        variable = Variable(name="REGION", value="us-east-1")

        assert client.set_variable("default", variable) == variable

        body = json.loads(requests[0].content)
        assert requests[0].url.path == "/mint/api/vaults/vars"
        assert body == {"var": {"name": "REGION", "value": "us-east-1"}, "vault_name": "default"}

    def test_set_variable_not_found(self, make_client):
        """Test that a 404 on write raises NotFoundError."""
        client, _ = make_client(lambda request: httpx.Response(404))

        with pytest.raises(NotFoundError):
            client.set_variable("no-such-vault", Variable(name="REGION", value="us-east-1"))

    @pytest.mark.parametrize("status", [200, 404])
    def test_delete_variable_is_idempotent(self, make_client, status):
        """Test that delete succeeds whether or not the variable existed."""
        client, requests = make_client(lambda request: httpx.Response(status))

        client.delete_variable("default", "REGION")

        assert requests[0].method == "DELETE"
        assert requests[0].url.path == "/mint/api/vaults/vars/REGION"

    def test_delete_variable_other_status_fails(self, make_client):
        """Test that delete reports statuses other than 200 and 404."""
        client, _ = make_client(lambda request: httpx.Response(500, json={"error": "database unavailable"}))

        with pytest.raises(APIError) as exc_info:
            client.delete_variable("default", "REGION")

        assert str(exc_info.value) == "database unavailable"
        assert exc_info.value.status_code == 500


class TestErrors:
    """Test error mapping for failed requests."""

    def test_error_messages_body_becomes_api_error(self, make_client):
        """Test that structured error messages become the APIError text."""
        client, _ = make_client(lambda request: httpx.Response(422, json={
            "error_messages": [{"message": "bad input", "frame": "", "advice": "fix it", "stack_trace": []}]
        }))

        with pytest.raises(APIError) as exc_info:
            client.get_variable("default", "REGION")

        assert str(exc_info.value) == "bad input\nfix it"

    def test_unparsable_body_falls_back_to_status_line(self, make_client):
        """Test that a non-JSON error body falls back to the HTTP status line."""
        client, _ = make_client(lambda request: httpx.Response(500, content=b"<html>oops</html>"))

        with pytest.raises(APIError) as exc_info:
            client.get_secret_metadata("default", "s1")

        assert str(exc_info.value) == "Unable to call Mint API - 500 Internal Server Error"

    def test_wrongly_typed_error_body_falls_back_to_status_line(self, make_client):
        """Test that an error body with fields of the wrong type still yields an APIError."""
        client, _ = make_client(lambda request: httpx.Response(500, json={"error_messages": [{"message": 5}]}))

        with pytest.raises(APIError) as exc_info:
            client.get_variable("default", "REGION")

        assert str(exc_info.value) == "Unable to call Mint API - 500 Internal Server Error"

    def test_not_found_is_distinct_from_api_error(self, make_client):
        """Test that NotFoundError is not an APIError, so callers can tell them apart."""
        client, _ = make_client(lambda request: httpx.Response(404))

        with pytest.raises(NotFoundError) as exc_info:
            client.get_variable("default", "REGION")

        assert not isinstance(exc_info.value, APIError)

    def test_transport_failure_is_wrapped(self, make_client):
        """Test that connection failures surface as TransportError."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = make_client(handler)

        with pytest.raises(TransportError) as exc_info:
            client.get_variable("default", "REGION")

        assert "HTTP request failed" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_invalid_success_body_is_decode_error(self, make_client):
        """Test that a non-JSON success body raises DecodeError."""
        client, _ = make_client(lambda request: httpx.Response(200, content=b"not json"))

        with pytest.raises(DecodeError) as exc_info:
            client.get_secret_metadata("default", "s1")

        assert "unable to decode JSON response" in str(exc_info.value)

    @pytest.mark.parametrize("payload", [
        {"name": "REGION", "value": 5},
        {"name": ["REGION"], "value": "us-east-1"},
    ])
    def test_wrongly_typed_variable_is_decode_error(self, make_client, payload):
        """Test that variable fields of the wrong type raise DecodeError."""
        client, _ = make_client(lambda request: httpx.Response(200, json=payload))

        with pytest.raises(DecodeError) as exc_info:
            client.get_variable("default", "REGION")

        assert "unable to decode JSON response" in str(exc_info.value)
        assert isinstance(exc_info.value, MintError)

    @pytest.mark.parametrize("payload", [
        {"name": "s1", "description": 7, "version": 1},
        {"name": "s1", "description": "d", "version": "1"},
        {"name": "s1", "description": "d", "version": True},
    ])
    def test_wrongly_typed_secret_is_decode_error(self, make_client, payload):
        """Test that secret fields of the wrong type raise DecodeError."""
        client, _ = make_client(lambda request: httpx.Response(200, json=payload))

        with pytest.raises(DecodeError):
            client.get_secret_metadata("default", "s1")

    def test_wrongly_typed_version_on_write_is_decode_error(self, make_client):
        """Test that a non-integer version in the write response raises DecodeError."""
        client, _ = make_client(lambda request: httpx.Response(200, json={"versions": {"s1": "3"}}))

        with pytest.raises(DecodeError):
            client.set_secret("default", Secret(name="s1", secret_value="v"))
