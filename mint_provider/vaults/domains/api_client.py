"""HTTP client for the Mint vaults API."""
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from .error_message import extract_error_message
from .errors import (
    APIError,
    DecodeError,
    InvariantError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from .models import Secret, Variable

logger = logging.getLogger(__name__)

SECRETS_ENDPOINT = "/mint/api/vaults/secrets"
VARIABLES_ENDPOINT = "/mint/api/vaults/vars"


@dataclass
class ClientConfig:
    """Settings required to talk to Mint."""
    access_token: str
    host: str
    version: str

    def validate(self) -> None:
        """
        Check that every field is set.

        Raises:
            ValidationError: Naming the first missing field
        """
        if not self.access_token:
            raise ValidationError("missing access token")

        if not self.host:
            raise ValidationError("missing host")

        if not self.version:
            raise ValidationError("missing version")


class MintClient:
    """
    Synchronous client for Mint vault secrets and variables.

    Each method performs exactly one HTTP request. Relative request URLs are
    completed to https://<host>, and every request carries the bearer token
    and a versioned User-Agent.

    Example:
        >>> client = MintClient(ClientConfig(access_token="...", host="cloud.rwx.com", version="0.1.0"))
        >>> client.get_variable("default", "REGION")
        Variable(name='REGION', value='us-east-1')
    """

    def __init__(self, config: ClientConfig, transport: Optional[httpx.BaseTransport] = None):
        """
        Initialize the client.

        Args:
            config: Access token, host and client version
            transport: Optional httpx transport (tests pass httpx.MockTransport)

        Raises:
            ValidationError: If any config field is empty
        """
        try:
            config.validate()
        except ValidationError as e:
            raise ValidationError(f"validation failed: {e}") from e

        self.config = config
        self._http = httpx.Client(
            base_url=f"https://{config.host}",
            headers={
                "User-Agent": f"terraform-provider-mint/{config.version}",
                "Authorization": f"Bearer {config.access_token}",
            },
            transport=transport,
        )

    def close(self) -> None:
        """Release pooled connections."""
        self._http.close()

    def __enter__(self) -> "MintClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, str]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """Send one request, wrapping transport failures."""
        headers = {}
        content = None
        if body is not None:
            try:
                content = json.dumps(body)
            except (TypeError, ValueError) as e:
                raise DecodeError(f"unable to encode as JSON: {e}") from e
            headers["Content-Type"] = "application/json"

        try:
            response = self._http.request(method, path, params=params, content=content, headers=headers)
        except httpx.RequestError as e:
            raise TransportError(f"HTTP request failed: {e}") from e

        logger.debug(f"{method} {path} -> {response.status_code}")
        return response

    def _raise_for_status(self, response: httpx.Response) -> None:
        msg = extract_error_message(response.content)
        if not msg:
            msg = f"Unable to call Mint API - {response.status_code} {response.reason_phrase}"
        raise APIError(msg, status_code=response.status_code)

    @staticmethod
    def _decode(response: httpx.Response) -> Dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as e:
            raise DecodeError(f"unable to decode JSON response: {e}") from e

        if not isinstance(payload, dict):
            raise DecodeError(
                f"unable to decode JSON response: expected an object, got {type(payload).__name__}"
            )
        return payload

    def _get(self, endpoint: str, vault: str, name: str) -> Dict[str, Any]:
        response = self._request("GET", f"{endpoint}/{quote(name, safe='')}", params={"vault_name": vault})

        if response.status_code != 200:
            if response.status_code == 404:
                raise NotFoundError(f"{name!r} not found in vault {vault!r}")
            self._raise_for_status(response)

        return self._decode(response)

    def _post(self, endpoint: str, body: Dict[str, Any]) -> httpx.Response:
        response = self._request("POST", endpoint, body=body)

        if response.status_code != 200:
            if response.status_code == 404:
                raise NotFoundError(f"vault {body.get('vault_name')!r} not found")
            self._raise_for_status(response)

        return response

    def _delete(self, endpoint: str, vault: str, name: str) -> None:
        response = self._request("DELETE", f"{endpoint}/{quote(name, safe='')}", params={"vault_name": vault})

        # Deleting something that is already gone counts as success.
        if response.status_code not in (200, 404):
            self._raise_for_status(response)

    def get_secret_metadata(self, vault: str, name: str) -> Secret:
        """
        Fetch a secret's description and version. The value is never returned.

        Raises:
            NotFoundError: If the vault has no secret with that name
        """
        return Secret.from_dict(self._get(SECRETS_ENDPOINT, vault, name), name=name)

    def set_secret(self, vault: str, secret: Secret) -> Secret:
        """
        Create or overwrite a secret.

        Returns:
            A copy of the secret carrying the version Mint assigned

        Raises:
            InvariantError: If the response does not report the secret's version
        """
        response = self._post(SECRETS_ENDPOINT, {
            "secrets": [secret.to_dict()],
            "vault_name": vault,
        })

        versions = self._decode(response).get("versions")
        if not isinstance(versions, dict) or secret.name not in versions:
            raise InvariantError("unable to infer secret version from response")

        version = versions[secret.name]
        if not isinstance(version, int) or isinstance(version, bool):
            raise DecodeError(
                f"unable to decode JSON response: version must be int, got {type(version).__name__}"
            )

        return Secret(
            name=secret.name,
            secret_value=secret.secret_value,
            description=secret.description,
            version=version,
        )

    def delete_secret(self, vault: str, name: str) -> None:
        """Delete a secret. Missing secrets are not an error."""
        self._delete(SECRETS_ENDPOINT, vault, name)

    def get_variable(self, vault: str, name: str) -> Variable:
        """
        Fetch a variable and its value.

        Raises:
            NotFoundError: If the vault has no variable with that name
        """
        return Variable.from_dict(self._get(VARIABLES_ENDPOINT, vault, name), name=name)

    def set_variable(self, vault: str, variable: Variable) -> Variable:
        """Create or overwrite a variable."""
        self._post(VARIABLES_ENDPOINT, {
            "var": variable.to_dict(),
            "vault_name": vault,
        })
        return variable

    def delete_variable(self, vault: str, name: str) -> None:
        """Delete a variable. Missing variables are not an error."""
        self._delete(VARIABLES_ENDPOINT, vault, name)
