"""Lifecycle workflow for Mint vault variables."""
import logging
import posixpath
from dataclasses import replace
from typing import Optional

from ..domains.api_client import MintClient
from ..domains.errors import (
    MintError,
    NotFoundError,
    ResourceAlreadyExistsError,
    ResourceError,
    ValidationError,
)
from ..domains.models import Variable
from .resource_models import VariableModel, validate_identifier, validate_value

logger = logging.getLogger(__name__)


def _validate(plan: VariableModel) -> None:
    validate_identifier("vault", plan.vault)
    validate_identifier("name", plan.name)
    validate_value("value", plan.value)


def parse_import_id(import_id: str) -> VariableModel:
    """
    Parse an import ID of the form "<vault>/<name>".

    The ID is split on its last slash; the vault part is path-normalised.

    Raises:
        ValidationError: If the ID has no vault part or no name
    """
    vault, name = posixpath.split(import_id)
    if not vault or not name:
        raise ValidationError(f"import ID {import_id!r} must have the form <vault>/<name>")

    return VariableModel(vault=posixpath.normpath(vault), name=name)


class VariableResource:
    """Create, read, update, delete and import variables held in a Mint vault."""

    def __init__(self, client: MintClient):
        self.client = client

    def create(self, plan: VariableModel) -> VariableModel:
        """
        Create a variable, refusing to overwrite an existing one.

        Raises:
            ResourceAlreadyExistsError: If the vault already has a variable with this name
            ResourceError: If any Mint call fails
        """
        _validate(plan)

        # Mint only upserts; check first so create never overwrites.
        try:
            self.client.get_variable(plan.vault, plan.name)
        except NotFoundError:
            pass
        except MintError as e:
            raise ResourceError("Error creating variable in Mint", f"Unexpected error: {e}") from e
        else:
            raise ResourceAlreadyExistsError(
                "Variable already exists in Vault - please choose a different name or vault",
                f'Vault "{plan.vault}" already contains a variable with name "{plan.name}"',
            )

        try:
            self.client.set_variable(plan.vault, Variable(name=plan.name, value=plan.value))
        except MintError as e:
            raise ResourceError("Error creating variable in Mint", f"Unexpected error: {e}") from e

        logger.info(f"Created variable '{plan.name}' in vault '{plan.vault}'")
        return plan

    def read(self, state: VariableModel) -> Optional[VariableModel]:
        """Refresh a variable from Mint, or return None if it no longer exists."""
        try:
            variable = self.client.get_variable(state.vault, state.name)
        except NotFoundError:
            logger.info(f"Variable '{state.name}' no longer exists in vault '{state.vault}'")
            return None
        except MintError as e:
            raise ResourceError("Error reading variable from Mint", f"Unexpected error: {e}") from e

        return replace(state, value=variable.value)

    def update(self, plan: VariableModel) -> VariableModel:
        _validate(plan)

        try:
            self.client.set_variable(plan.vault, Variable(name=plan.name, value=plan.value))
        except MintError as e:
            raise ResourceError("Error updating variable in Mint", f"Unexpected error: {e}") from e

        logger.info(f"Updated variable '{plan.name}' in vault '{plan.vault}'")
        return plan

    def delete(self, state: VariableModel) -> None:
        """Delete a variable. Succeeds if it is already gone."""
        try:
            self.client.delete_variable(state.vault, state.name)
        except MintError as e:
            raise ResourceError("Error deleting variable in Mint", f"Unexpected error: {e}") from e

        logger.info(f"Deleted variable '{state.name}' from vault '{state.vault}'")

    def import_state(self, import_id: str) -> Optional[VariableModel]:
        """
        Import an existing variable by "<vault>/<name>" and read its value.

        Returns:
            The imported variable, or None if Mint has no such variable
        """
        state = parse_import_id(import_id)
        validate_identifier("vault", state.vault)
        validate_identifier("name", state.name)
        return self.read(state)
