"""VenusCMS configuration module.

This module provides TOML-based configuration with environment variable overrides.

Configuration is loaded from the following locations (in order of priority):
1. Environment variables (highest priority)
2. ./config.toml (project root - for development)
3. ~/.config/venuscms/config.toml (user config)
4. /etc/venuscms/config.toml (system config)

Secrets are loaded from secrets.env files in the same directories.
"""

from venuscms.config.schema import (
    ExportConfig,
    ImportConfig,
    NotificationConfig,
    RecordsConfig,
    SecretsConfig,
    ServerConfig,
    VenusConfig,
)
from venuscms.config.settings import Settings, get_settings, reset_settings, settings

__all__ = [
    "ExportConfig",
    "ImportConfig",
    "NotificationConfig",
    "RecordsConfig",
    "SecretsConfig",
    "ServerConfig",
    "Settings",
    "VenusConfig",
    "get_settings",
    "reset_settings",
    "settings",
]
