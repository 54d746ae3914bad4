"""Configuration package."""

from hawkward.config.settings import (
    LifecycleSettings,
    ServerSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "LifecycleSettings",
    "ServerSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
