"""Configuration loader for the Mint provider."""
import os
import logging
from pathlib import Path
from typing import Dict, Optional

import yaml

from .preferences import get_preference

logger = logging.getLogger(__name__)

DEFAULT_HOST = "cloud.rwx.com"
HOST_ENV_VAR = "MINT_HOST"
ACCESS_TOKEN_ENV_VAR = "RWX_ACCESS_TOKEN"
CONFIG_KEYS = ("host", "access_token")


class ConfigError(Exception):
    """Configuration error exception."""
    pass


def default_config_path() -> Path:
    return Path.home() / ".config" / "mint-provider" / "config.yml"


def _get_config_path() -> Optional[str]:
    """
    Get config file path using XDG Base Directory standard.

    Priority order:
    1. User preference (stored in ~/.config/mint-provider/preferences.json)
    2. Default location: ~/.config/mint-provider/config.yml

    Returns:
        Absolute path to config file, or None when neither location has one.
        The config file is optional: host and token may come from the environment.
    """
    config_path_pref = get_preference("config_path")
    if config_path_pref:
        config_path = Path(config_path_pref)
        if config_path.exists():
            logger.info(f"Using config from preference: {config_path}")
            return str(config_path)
        logger.warning(f"Config path from preference doesn't exist: {config_path}")

    default_config = default_config_path()
    if default_config.exists():
        logger.info(f"Using default config location: {default_config}")
        return str(default_config)

    logger.debug("No config file found, relying on environment variables")
    return None


def load_config() -> Dict[str, str]:
    """
    Load and validate the provider config file.

    Recognised keys:
        host: Mint host, e.g. cloud.rwx.com
        access_token: RWX access token

    Returns:
        Dict with whichever of the recognised keys the file sets; empty if
        there is no config file

    Raises:
        ConfigError: If the file cannot be read or parsed, is not a mapping,
            or holds non-string values
    """
    # Resolved on every call so preference changes apply immediately
    config_path = _get_config_path()
    if config_path is None:
        return {}

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config at {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read config file at {config_path}: {e}")

    if config is None:
        logger.warning(f"Config file at {config_path} is empty")
        return {}

    if not isinstance(config, dict):
        raise ConfigError(
            f"Config file at {config_path} must be a mapping\n"
            f"Required format:\n"
            f"host: cloud.rwx.com\n"
            f"access_token: <your RWX access token>"
        )

    loaded = {}
    for key in CONFIG_KEYS:
        value = config.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ConfigError(f"'{key}' in config at {config_path} must be a string")
        loaded[key] = value

    unknown = sorted(set(config) - set(CONFIG_KEYS))
    if unknown:
        logger.warning(f"Ignoring unknown keys in {config_path}: {', '.join(map(str, unknown))}")

    logger.info(f"Configuration loaded successfully from {config_path}")
    return loaded


def resolve_settings() -> Dict[str, str]:
    """
    Resolve host and access token.

    Priority order for each setting:
    1. Config file
    2. Environment variable (MINT_HOST, RWX_ACCESS_TOKEN)
    3. Default (host only: cloud.rwx.com)

    Returns:
        Dict with "host" and "access_token"

    Raises:
        ConfigError: If no access token is configured anywhere
    """
    config = load_config()

    host = config.get("host") or os.getenv(HOST_ENV_VAR) or DEFAULT_HOST
    access_token = config.get("access_token") or os.getenv(ACCESS_TOKEN_ENV_VAR) or ""

    if not access_token:
        raise ConfigError(
            "Missing Mint Access Token\n"
            "The provider cannot create the Mint API client as there is a missing or empty value for the Mint access token. "
            f"Set access_token in the config file or use the {ACCESS_TOKEN_ENV_VAR} environment variable. "
            "If either is already set, ensure the value is not empty."
        )

    logger.debug(f"Using Mint host: {host}")
    return {"host": host, "access_token": access_token}
