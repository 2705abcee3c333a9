"""Domain models for Mint vault secrets and variables."""
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .errors import DecodeError


def _decoded(data: Dict[str, Any], key: str, kind: type, default: Any) -> Any:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise DecodeError(
            f"unable to decode JSON response: '{key}' must be {kind.__name__}, got {type(value).__name__}"
        )
    return value


@dataclass
class Secret:
    """A vault secret. The value is write-only and never returned by reads."""
    name: str
    secret_value: str = ""
    description: str = ""
    version: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "name": self.name,
            "secret": self.secret_value,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], name: str = "") -> "Secret":
        """
        Decode a secret from a Mint response.

        Raises:
            DecodeError: If a field has the wrong JSON type
        """
        return cls(
            name=_decoded(data, "name", str, "") or name,
            secret_value=_decoded(data, "secret", str, ""),
            description=_decoded(data, "description", str, ""),
            version=_decoded(data, "version", int, 0),
        )


@dataclass
class Variable:
    """A vault variable, readable in plain text."""
    name: str
    value: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any], name: str = "") -> "Variable":
        return cls(
            name=_decoded(data, "name", str, "") or name,
            value=_decoded(data, "value", str, ""),
        )


@dataclass
class StackEntry:
    """One frame of a remote stack trace."""
    file_name: str = ""
    line: int = 0
    column: int = 0
    name: str = ""


@dataclass
class ErrorMessage:
    """Structured diagnostic returned by Mint when a request fails."""
    message: str = ""
    stack_trace: List[StackEntry] = field(default_factory=list)
    frame: str = ""
    advice: str = ""
