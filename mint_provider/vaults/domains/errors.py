"""Exceptions raised by the Mint API client and resource workflows."""
from typing import Optional


class MintError(Exception):
    """Base exception for Mint provider errors."""
    pass


class ValidationError(MintError):
    """Invalid client configuration or resource input, raised before any request."""
    pass


class TransportError(MintError):
    """The HTTP request could not be completed (DNS, connection, TLS)."""
    pass


class NotFoundError(MintError):
    """The requested secret or variable does not exist (HTTP 404)."""

    def __init__(self, message: str = "not found"):
        super().__init__(message)


class APIError(MintError):
    """Mint answered with an unexpected status code."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(MintError):
    """A success response body could not be decoded."""
    pass


class InvariantError(MintError):
    """A success response is missing data the client relies on."""
    pass


class ResourceError(MintError):
    """
    Lifecycle failure reported back to the caller of a resource workflow.

    Carries a short summary and a longer detail, mirroring how a provider
    host displays diagnostics.
    """

    def __init__(self, summary: str, detail: str = ""):
        super().__init__(f"{summary}: {detail}" if detail else summary)
        self.summary = summary
        self.detail = detail


class ResourceAlreadyExistsError(ResourceError):
    """Create was refused because the vault already holds an entity with that name."""
    pass
