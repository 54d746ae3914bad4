"""
Configuration Management for Hawkward

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here, so the file locations, the
heartbeat timeout and the server binding are visible in one place and
validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Location of the JSON document and its backup copies."""

    model_config = SettingsConfigDict(
        env_prefix="HAWKWARD_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the primary document and its backups"
    )
    data_file: str = Field(
        default="data.json",
        description="File name of the primary document"
    )
    backup_file: str = Field(
        default="data.backup.json",
        description="File name of the backup taken on every process start"
    )
    import_safety_file: str = Field(
        default="data.import_safety.json",
        description="File name of the snapshot taken before a bulk import"
    )

    @property
    def data_path(self) -> Path:
        return self.data_dir / self.data_file

    @property
    def backup_path(self) -> Path:
        return self.data_dir / self.backup_file

    @property
    def import_safety_path(self) -> Path:
        return self.data_dir / self.import_safety_file


class LifecycleSettings(BaseSettings):
    """Heartbeat-driven auto-shutdown configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HAWKWARD_LIFECYCLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    timeout_seconds: float = Field(
        default=10.0,
        ge=1,
        le=86400,
        description="Seconds without a heartbeat before the process exits"
    )
    enabled: bool = Field(
        default=True,
        description="Whether auto-shutdown is active at startup"
    )
    suppressed: bool = Field(
        default=False,
        description="Non-interactive run: the monitor never arms"
    )


class ServerSettings(BaseSettings):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HAWKWARD_SERVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    host: str = Field(
        default="127.0.0.1",
        description="Interface to bind; use 0.0.0.0 for network access"
    )
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="TCP port"
    )
    open_browser: bool = Field(
        default=True,
        description="Open the client in the default browser after startup"
    )
    static_dir: Optional[Path] = Field(
        default=None,
        description="Directory with the browser client, served at /"
    )
    cors_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        description="Comma-separated list of origins allowed to call the API"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Get allowed origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def local_url(self) -> str:
        return f"http://localhost:{self.port}"


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def lifecycle(self) -> LifecycleSettings:
        return LifecycleSettings()

    @property
    def server(self) -> ServerSettings:
        return ServerSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus an
    ``<name>_error`` entry for every section that failed.
    """
    results = {}
    settings = get_settings()

    for name in ("storage", "lifecycle", "server"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
