"""Global settings instance for VenusCMS.

This module provides a unified settings object that combines:
- Configuration from config.toml
- Secrets from secrets.env
- Environment variable overrides
"""

import logging

from venuscms.config.loader import load_config, load_secrets
from venuscms.config.schema import SecretsConfig, VenusConfig

logger = logging.getLogger(__name__)


class Settings:
    """Unified settings object combining config and secrets.

    Exposes a flat property interface over the structured VenusConfig and
    SecretsConfig models.
    """

    def __init__(
        self,
        config: VenusConfig | None = None,
        secrets: SecretsConfig | None = None,
    ):
        """Initialize settings.

        Args:
            config: Optional VenusConfig instance. If not provided, loads from file.
            secrets: Optional SecretsConfig instance. If not provided, loads from file.
        """
        self._config = config or load_config()
        self._secrets = secrets or load_secrets()

        if self._config.records.backend == "api" and not self._secrets.api_token:
            logger.info("No API token configured; record API requests are unauthenticated")

    @property
    def config(self) -> VenusConfig:
        """Get the full configuration object."""
        return self._config

    @property
    def secrets(self) -> SecretsConfig:
        """Get the secrets configuration object."""
        return self._secrets

    # Application
    @property
    def app_name(self) -> str:
        return self._config.app_name

    @property
    def debug(self) -> bool:
        return self._config.server.debug

    # Server
    @property
    def host(self) -> str:
        return self._config.server.host

    @property
    def port(self) -> int:
        return self._config.server.port

    @property
    def cors_origins(self) -> list[str]:
        return self._config.server.cors_origins

    # Import
    @property
    def max_upload_size_bytes(self) -> int:
        return self._config.imports.max_upload_bytes

    @property
    def max_import_rows(self) -> int:
        return self._config.imports.max_rows

    @property
    def preview_rows(self) -> int:
        return self._config.imports.preview_rows

    @property
    def import_session_ttl_minutes(self) -> int:
        return self._config.imports.session_ttl_minutes

    @property
    def max_import_sessions(self) -> int:
        return self._config.imports.max_sessions

    # Export
    @property
    def default_export_format(self) -> str:
        return self._config.export.default_format

    # Notifications
    @property
    def notification_duration_ms(self) -> int:
        return self._config.notifications.default_duration_ms

    @property
    def max_notifications(self) -> int:
        return self._config.notifications.max_retained

    # Record store
    @property
    def records_backend(self) -> str:
        return self._config.records.backend

    @property
    def records_api_url(self) -> str:
        return self._config.records.api_url

    @property
    def records_timeout_seconds(self) -> float:
        return self._config.records.timeout_seconds

    @property
    def records_page_size(self) -> int:
        return self._config.records.page_size

    # Secrets
    @property
    def api_token(self) -> str | None:
        return self._secrets.api_token


# Global settings instance - lazily initialized
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance.

    The settings are loaded once and cached for subsequent calls.

    Returns:
        The global Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance.

    This is primarily useful for testing to reload configuration.
    """
    global _settings
    _settings = None


class _SettingsProxy:
    """Proxy object that lazily loads settings on first access."""

    def __getattr__(self, name: str):
        return getattr(get_settings(), name)

    def __repr__(self) -> str:
        return repr(get_settings())


settings = _SettingsProxy()
