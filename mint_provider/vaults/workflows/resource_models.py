"""Desired-state records handled by the resource workflows."""
import re
from dataclasses import dataclass
from typing import Optional

from ..domains.errors import ValidationError

NAME_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')
NAME_RULE = "can only include alphanumeric characters, dashes, or underscores"


@dataclass
class SecretModel:
    """Desired state of a secret."""
    vault: str
    name: str
    secret_value: str = ""
    description: Optional[str] = None


@dataclass
class SecretState:
    """
    Stored state of a secret.

    version is private to the caller: it is the last secret version seen,
    used to notice that the value was changed outside this provider.
    """
    model: SecretModel
    version: Optional[int] = None


@dataclass
class VariableModel:
    """Desired state of a variable."""
    vault: str
    name: str
    value: str = ""


def validate_identifier(field_name: str, value: str) -> None:
    """
    Check a vault or resource name.

    Raises:
        ValidationError: If value is empty or has characters outside [a-zA-Z0-9_-]
    """
    if not value:
        raise ValidationError(f"{field_name} must not be empty")
    if not NAME_PATTERN.match(value):
        raise ValidationError(f"{field_name} {value!r} {NAME_RULE}")


def validate_value(field_name: str, value: str) -> None:
    if not value:
        raise ValidationError(f"{field_name} must not be empty")
