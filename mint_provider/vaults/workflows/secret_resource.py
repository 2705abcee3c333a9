"""Lifecycle workflow for Mint vault secrets."""
import logging
from dataclasses import replace
from typing import Optional

from ..domains.api_client import MintClient
from ..domains.errors import MintError, NotFoundError, ResourceAlreadyExistsError, ResourceError
from ..domains.models import Secret
from .resource_models import SecretModel, SecretState, validate_identifier, validate_value

logger = logging.getLogger(__name__)


def _validate(plan: SecretModel) -> None:
    validate_identifier("vault", plan.vault)
    validate_identifier("name", plan.name)
    validate_value("secret_value", plan.secret_value)


def _to_secret(plan: SecretModel) -> Secret:
    return Secret(
        name=plan.name,
        secret_value=plan.secret_value,
        description=plan.description or "",
    )


class SecretResource:
    """Create, read, update and delete secrets held in a Mint vault."""

    def __init__(self, client: MintClient):
        self.client = client

    def create(self, plan: SecretModel) -> SecretState:
        """
        Create a secret, refusing to overwrite an existing one.

        Mint only supports upserts, so existence is checked first.

        Raises:
            ResourceAlreadyExistsError: If the vault already has a secret with this name
            ResourceError: If any Mint call fails
        """
        _validate(plan)

        try:
            self.client.get_secret_metadata(plan.vault, plan.name)
        except NotFoundError:
            pass
        except MintError as e:
            raise ResourceError("Error creating secret in Mint", f"Unexpected error: {e}") from e
        else:
            raise ResourceAlreadyExistsError(
                "Secret already exists in Vault - please choose a different name or vault",
                f'Vault "{plan.vault}" already contains a secret with name "{plan.name}"',
            )

        try:
            secret = self.client.set_secret(plan.vault, _to_secret(plan))
        except MintError as e:
            raise ResourceError("Error creating secret in Mint", f"Unexpected error: {e}") from e

        logger.info(f"Created secret '{plan.name}' in vault '{plan.vault}' (version {secret.version})")
        return SecretState(model=plan, version=secret.version)

    def read(self, state: SecretState) -> Optional[SecretState]:
        """
        Refresh a secret's stored state from Mint.

        Returns:
            The refreshed state, or None if the secret no longer exists and
            should be dropped. When Mint reports a different version than the
            one last seen, the stored secret value is cleared.
        """
        model = state.model

        try:
            secret = self.client.get_secret_metadata(model.vault, model.name)
        except NotFoundError:
            logger.info(f"Secret '{model.name}' no longer exists in vault '{model.vault}'")
            return None
        except MintError as e:
            raise ResourceError("Error reading secret metadata from Mint", f"Unexpected error: {e}") from e

        refreshed = replace(model)
        if secret.description:
            refreshed.description = secret.description

        if state.version != secret.version:
            logger.info(
                f"Secret '{model.name}' changed outside this provider "
                f"(version {state.version} -> {secret.version}), value is now unknown"
            )
            refreshed.secret_value = ""

        return SecretState(model=refreshed, version=secret.version)

    def update(self, plan: SecretModel) -> SecretState:
        """Overwrite a secret with the planned value and description."""
        _validate(plan)

        try:
            secret = self.client.set_secret(plan.vault, _to_secret(plan))
        except MintError as e:
            raise ResourceError("Error updating secret in Mint", f"Unexpected error: {e}") from e

        logger.info(f"Updated secret '{plan.name}' in vault '{plan.vault}' (version {secret.version})")
        return SecretState(model=plan, version=secret.version)

    def delete(self, state: SecretState) -> None:
        """Delete a secret. Succeeds if it is already gone."""
        model = state.model

        try:
            self.client.delete_secret(model.vault, model.name)
        except MintError as e:
            raise ResourceError("Error deleting secret in Mint", f"Unexpected error: {e}") from e

        logger.info(f"Deleted secret '{model.name}' from vault '{model.vault}'")
