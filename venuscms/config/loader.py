"""Configuration loader for VenusCMS.

Loads configuration from TOML files and secrets from .env files.
Environment variables can override any configuration value.
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Callable

from venuscms.config.schema import SecretsConfig, VenusConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.toml"
SECRETS_FILENAME = "secrets.env"


def _parse_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


def _parse_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _search_paths(filename: str) -> list[Path]:
    """Build the search path list for a config-directory file.

    Priority order (first found wins):
    1. ./<filename> (project root - for development)
    2. ~/.config/venuscms/<filename> (user config)
    3. /etc/venuscms/<filename> (system config)
    """
    return [
        Path.cwd() / filename,
        Path.home() / ".config" / "venuscms" / filename,
        Path("/etc/venuscms") / filename,
    ]


def get_config_search_paths() -> list[Path]:
    """Get the list of paths to search for configuration files."""
    return _search_paths(CONFIG_FILENAME)


def get_secrets_search_paths() -> list[Path]:
    """Get the list of paths to search for secrets files."""
    return _search_paths(SECRETS_FILENAME)


def _find_first(paths: list[Path]) -> Path | None:
    for path in paths:
        if path.exists() and path.is_file():
            logger.debug("Found file: %s", path)
            return path
    return None


def find_config_file() -> Path | None:
    """Find the first existing config file from search paths."""
    return _find_first(get_config_search_paths())


def find_secrets_file() -> Path | None:
    """Find the first existing secrets file from search paths."""
    return _find_first(get_secrets_search_paths())


def load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dictionary."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def parse_env_file(path: Path) -> dict[str, str]:
    """Parse a simple .env file into a dictionary.

    Supports:
    - KEY=value
    - KEY="quoted value"
    - # comments
    - Empty lines
    """
    env_vars: dict[str, str] = {}

    with open(path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip()

            if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
                value = value[1:-1]

            env_vars[key] = value

    return env_vars


# env var suffix -> (section, key, converter)
ENV_OVERRIDES: dict[str, tuple[str, str, Callable[[str], Any]]] = {
    # Server
    "SERVER_HOST": ("server", "host", str),
    "SERVER_PORT": ("server", "port", int),
    "SERVER_DEBUG": ("server", "debug", _parse_bool),
    "SERVER_CORS_ORIGINS": ("server", "cors_origins", _parse_list),
    "HOST": ("server", "host", str),
    "PORT": ("server", "port", int),
    "DEBUG": ("server", "debug", _parse_bool),
    # Import
    "IMPORT_MAX_UPLOAD_MB": ("imports", "max_upload_mb", int),
    "IMPORT_MAX_ROWS": ("imports", "max_rows", int),
    "IMPORT_PREVIEW_ROWS": ("imports", "preview_rows", int),
    "IMPORT_SESSION_TTL_MINUTES": ("imports", "session_ttl_minutes", int),
    "IMPORT_MAX_SESSIONS": ("imports", "max_sessions", int),
    # Export
    "EXPORT_DEFAULT_FORMAT": ("export", "default_format", str),
    # Notifications
    "NOTIFICATIONS_DURATION_MS": ("notifications", "default_duration_ms", int),
    "NOTIFICATIONS_MAX_RETAINED": ("notifications", "max_retained", int),
    # Record store
    "RECORDS_BACKEND": ("records", "backend", str),
    "RECORDS_API_URL": ("records", "api_url", str),
    "RECORDS_TIMEOUT_SECONDS": ("records", "timeout_seconds", float),
    "RECORDS_PAGE_SIZE": ("records", "page_size", int),
    "API_URL": ("records", "api_url", str),
}


def apply_env_overrides(config_dict: dict[str, Any], prefix: str = "VENUSCMS") -> None:
    """Apply environment variable overrides to configuration dictionary.

    Environment variables are mapped as follows:
    - VENUSCMS_SERVER_PORT -> config_dict["server"]["port"]
    - VENUSCMS_RECORDS_API_URL -> config_dict["records"]["api_url"]
    - etc.

    Note: This modifies config_dict in place.
    """
    for suffix, (section, key, convert) in ENV_OVERRIDES.items():
        value = os.environ.get(f"{prefix}_{suffix}")
        if value is None:
            continue
        config_dict.setdefault(section, {})[key] = convert(value)


def load_secrets(secrets_file: Path | None = None) -> SecretsConfig:
    """Load secrets from environment variables and optional secrets.env file.

    Environment variables take precedence over file values.
    """
    key_mapping = {
        "VENUSCMS_API_TOKEN": "api_token",
    }
    secrets_dict: dict[str, str | None] = {}

    if secrets_file is None:
        secrets_file = find_secrets_file()

    if secrets_file and secrets_file.exists():
        logger.info("Loading secrets from: %s", secrets_file)
        file_secrets = parse_env_file(secrets_file)
        for file_key, config_key in key_mapping.items():
            if file_key in file_secrets:
                secrets_dict[config_key] = file_secrets[file_key]

    for env_var, config_key in key_mapping.items():
        value = os.environ.get(env_var)
        if value:
            secrets_dict[config_key] = value

    return SecretsConfig(**secrets_dict)


def load_config(config_file: Path | None = None) -> VenusConfig:
    """Load configuration from TOML file with environment variable overrides.

    Args:
        config_file: Optional path to config file. If not provided,
                     searches default locations.

    Returns:
        VenusConfig instance with all settings loaded.
    """
    config_dict: dict[str, Any] = {}

    if config_file is None:
        config_file = find_config_file()

    if config_file and config_file.exists():
        logger.info("Loading config from: %s", config_file)
        config_dict = load_toml_file(config_file)
    else:
        logger.info("No config file found, using defaults with env overrides")

    apply_env_overrides(config_dict)

    return VenusConfig(**config_dict)
