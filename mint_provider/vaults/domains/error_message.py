"""Parsing and formatting of Mint API error bodies."""
import json
import logging
from typing import Any, Dict, List, Union

from .models import ErrorMessage, StackEntry

logger = logging.getLogger(__name__)


def _field(raw: Dict[str, Any], key: str, kind: type, default: Any) -> Any:
    """Read an optional field, rejecting values of the wrong JSON type."""
    value = raw.get(key)
    if value is None:
        return default
    # bool is an int subclass but never a valid line or column
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise TypeError(f"'{key}' must be {kind.__name__}, got {type(value).__name__}")
    return value


def _parse_stack_entry(raw: Any) -> StackEntry:
    if not isinstance(raw, dict):
        raise TypeError(f"stack entry must be an object, got {type(raw).__name__}")

    return StackEntry(
        file_name=_field(raw, "file_name", str, ""),
        line=_field(raw, "line", int, 0),
        column=_field(raw, "column", int, 0),
        name=_field(raw, "name", str, ""),
    )


def _parse_error_message(raw: Any) -> ErrorMessage:
    if not isinstance(raw, dict):
        raise TypeError(f"error message must be an object, got {type(raw).__name__}")

    return ErrorMessage(
        message=_field(raw, "message", str, ""),
        stack_trace=[_parse_stack_entry(entry) for entry in _field(raw, "stack_trace", list, [])],
        frame=_field(raw, "frame", str, ""),
        advice=_field(raw, "advice", str, ""),
    )


def format_stack_trace(stack_trace: List[StackEntry]) -> List[str]:
    """
    Render stack frames innermost-first.

    Args:
        stack_trace: Frames in the order Mint returned them

    Returns:
        One line per frame, e.g. "  at foo (b.rb:3:4)" or "  at a.rb:1:2"
    """
    lines = []
    for entry in reversed(stack_trace):
        location = f"{entry.file_name}:{entry.line}:{entry.column}"
        if entry.name:
            lines.append(f"  at {entry.name} ({location})")
        else:
            lines.append(f"  at {location}")
    return lines


def format_user_message(error_message: ErrorMessage) -> str:
    """Render a single ErrorMessage as the multi-line text shown to users."""
    parts = []

    if error_message.message:
        parts.append(error_message.message)

    if error_message.frame:
        parts.append(error_message.frame)

    parts.extend(format_stack_trace(error_message.stack_trace))

    if error_message.advice:
        parts.append(error_message.advice)

    return "\n".join(parts)


def extract_error_message(body: Union[str, bytes]) -> str:
    """
    Extract a human-readable message from a Mint error body.

    Expected shape: {"error": "...", "error_messages": [ErrorMessage, ...]}

    Args:
        body: Raw response body

    Returns:
        The formatted error_messages joined by blank lines, else the "error"
        field, else an empty string. Malformed bodies, including fields of
        the wrong type, yield an empty string.
    """
    try:
        payload = json.loads(body)
    except (ValueError, TypeError) as e:
        logger.debug(f"Error body is not valid JSON: {e}")
        return ""

    if not isinstance(payload, dict):
        return ""

    try:
        error = _field(payload, "error", str, "")
        error_messages = [_parse_error_message(raw) for raw in _field(payload, "error_messages", list, [])]
    except TypeError as e:
        logger.debug(f"Error body has an unexpected shape: {e}")
        return ""

    if error_messages:
        return "\n\n".join(format_user_message(error_message) for error_message in error_messages)

    return error
