# =============================================================================
# billing/config.py  —  API Key & Connection Settings
# =============================================================================
#
# WHERE THE API KEY COMES FROM (first non-empty source wins):
#   1. SCHEMATIC_API_KEY in the environment.  main.py calls load_dotenv()
#      first, so a .env file in the working directory counts as environment.
#   2. ~/.schematic-mcp/config.json  →  {"apiKey": "sk_..."}
#
#   The config file is only read when the environment has nothing.  A
#   missing, unreadable or malformed file behaves exactly like no file.
#
# OPTIONAL SETTINGS:
#   SCHEMATIC_API_URL          → API base URL (default: production API)
#   SCHEMATIC_TIMEOUT_SECONDS  → per-request timeout; unset = wait forever
# =============================================================================

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from billing.errors import ConfigurationMissing

logger = logging.getLogger(__name__)

API_KEY_ENV_VAR = "SCHEMATIC_API_KEY"
API_URL_ENV_VAR = "SCHEMATIC_API_URL"
TIMEOUT_ENV_VAR = "SCHEMATIC_TIMEOUT_SECONDS"

DEFAULT_API_URL = "https://api.schematichq.com"


def default_config_path() -> Path:
    """The fallback config file: ~/.schematic-mcp/config.json"""
    return Path.home() / ".schematic-mcp" / "config.json"


@dataclass(frozen=True)
class Settings:
    """Everything needed to build a SchematicClient."""

    api_key: str
    api_url: str = DEFAULT_API_URL
    timeout_seconds: float | None = None   # None → no client-side timeout


def _read_config_file_key(path: Path) -> str | None:
    """Return the apiKey field from the config file, or None for any problem."""
    try:
        with open(path, encoding="utf-8") as f:
            config = json.load(f)
    except (OSError, ValueError) as e:
        logger.debug("Config file %s not usable: %s", path, e)
        return None

    if not isinstance(config, dict):
        logger.debug("Config file %s is not a JSON object", path)
        return None

    api_key = config.get("apiKey")
    if isinstance(api_key, str) and api_key:
        return api_key
    return None


def get_api_key(
    environ: dict[str, str] | None = None,
    config_path: Path | None = None,
) -> str:
    """Resolve the Schematic API key.

    Args:
        environ: Mapping to read variables from (defaults to os.environ).
        config_path: Fallback JSON file (defaults to ~/.schematic-mcp/config.json).

    Returns:
        The API key.

    Raises:
        ConfigurationMissing: Neither source produced a non-empty key.
    """
    env = os.environ if environ is None else environ

    env_key = env.get(API_KEY_ENV_VAR)
    if env_key:
        return env_key

    file_key = _read_config_file_key(config_path or default_config_path())
    if file_key:
        return file_key

    raise ConfigurationMissing(
        f"{API_KEY_ENV_VAR} environment variable or config file "
        "(~/.schematic-mcp/config.json) is required"
    )


def load_settings(
    environ: dict[str, str] | None = None,
    config_path: Path | None = None,
) -> Settings:
    """Build Settings from the environment (plus the config file for the key)."""
    env = os.environ if environ is None else environ

    api_key = get_api_key(env, config_path)
    api_url = env.get(API_URL_ENV_VAR) or DEFAULT_API_URL

    timeout_seconds = None
    raw_timeout = env.get(TIMEOUT_ENV_VAR)
    if raw_timeout:
        try:
            timeout_seconds = float(raw_timeout)
        except ValueError:
            raise ConfigurationMissing(
                f"{TIMEOUT_ENV_VAR} must be a number of seconds, got {raw_timeout!r}"
            ) from None

    return Settings(api_key=api_key, api_url=api_url.rstrip("/"), timeout_seconds=timeout_seconds)
