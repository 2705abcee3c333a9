"""Build a configured Mint client from the config file and environment."""
import logging
from typing import Optional

import httpx

from ..domains.api_client import ClientConfig, MintClient
from ..domains.config_loader import ConfigError, resolve_settings
from ..domains.errors import ValidationError

logger = logging.getLogger(__name__)


def configure_provider(version: str, transport: Optional[httpx.BaseTransport] = None) -> MintClient:
    """
    Create the Mint API client used by the resource workflows.

    Args:
        version: Provider version, sent in the User-Agent header
        transport: Optional httpx transport override

    Returns:
        Configured MintClient

    Raises:
        ConfigError: If settings are missing or the client rejects them
    """
    settings = resolve_settings()

    try:
        client = MintClient(
            ClientConfig(
                access_token=settings["access_token"],
                host=settings["host"],
                version=version,
            ),
            transport=transport,
        )
    except ValidationError as e:
        raise ConfigError(
            "Unable to create Mint API client\n"
            "An unexpected error occurred when creating the Mint API client. "
            "If the error is not clear, please contact us at support@rwx.com.\n\n"
            f"Original Error: {e}"
        ) from e

    logger.debug(f"Mint client configured for {settings['host']}")
    return client
