"""Pydantic models for VenusCMS configuration.

These models define the structure of config.toml and secrets.env files.
"""

from typing import Literal

from pydantic import BaseModel, Field


class ServerConfig(BaseModel):
    """API server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    # CORS configuration - empty list means same-origin only
    cors_origins: list[str] = []


class ImportConfig(BaseModel):
    """Bulk CSV import configuration."""

    max_upload_mb: int = 10
    max_rows: int = 5000
    preview_rows: int = 10
    # Unprocessed sessions expire after session_ttl_minutes
    session_ttl_minutes: int = 60
    max_sessions: int = 20

    @property
    def max_upload_bytes(self) -> int:
        """Get max upload size in bytes."""
        return self.max_upload_mb * 1024 * 1024


class ExportConfig(BaseModel):
    """Export configuration."""

    default_format: Literal["csv", "json", "spreadsheet"] = "csv"


class NotificationConfig(BaseModel):
    """User-facing notification configuration."""

    default_duration_ms: int = 5000
    max_retained: int = 5


class RecordsConfig(BaseModel):
    """Record store (content backend) configuration."""

    backend: Literal["memory", "api"] = "memory"
    api_url: str = "http://localhost:3001/api"
    timeout_seconds: float = 30.0
    page_size: int = 100


class VenusConfig(BaseModel):
    """Main VenusCMS configuration loaded from config.toml."""

    app_name: str = "VenusCMS"
    server: ServerConfig = Field(default_factory=ServerConfig)
    imports: ImportConfig = Field(default_factory=ImportConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    records: RecordsConfig = Field(default_factory=RecordsConfig)


class SecretsConfig(BaseModel):
    """Secrets loaded from secrets.env file.

    These are sensitive values that should not be stored in config.toml.
    """

    api_token: str | None = None
