"""
Component Wiring for Hawkward

Builds the persistence and lifecycle components from settings and runs
the startup and shutdown flows:

Startup:
1. Initialize → create the document with empty stores if absent
2. Backup → copy the document to the startup backup (non-fatal)
3. Arm → start the heartbeat countdown

Shutdown:
1. Disarm → cancel any pending countdown
"""

from dataclasses import dataclass
from typing import Callable, Optional

from hawkward.config import LifecycleSettings, StorageSettings, get_settings
from hawkward.diagnostics import DiagnosticsLogger
from hawkward.lifecycle import SessionMonitor
from hawkward.services.storage import BackupManager, JsonDocumentStore


@dataclass
class AppComponents:
    """Everything the request router needs."""
    store: JsonDocumentStore
    backup: BackupManager
    monitor: SessionMonitor
    logger: DiagnosticsLogger


def create_app_components(
    storage_settings: Optional[StorageSettings] = None,
    lifecycle_settings: Optional[LifecycleSettings] = None,
    terminate: Optional[Callable[[], None]] = None,
    logger: Optional[DiagnosticsLogger] = None,
) -> AppComponents:
    """
    Create all application components.

    Settings not passed in are loaded from the environment.
    """
    settings = get_settings()
    storage_settings = storage_settings or settings.storage
    lifecycle_settings = lifecycle_settings or settings.lifecycle
    logger = logger or DiagnosticsLogger()

    backup = BackupManager(
        primary_path=storage_settings.data_path,
        backup_path=storage_settings.backup_path,
        import_safety_path=storage_settings.import_safety_path,
        logger=logger,
    )
    store = JsonDocumentStore(
        path=storage_settings.data_path,
        backup=backup,
        logger=logger,
    )
    monitor = SessionMonitor(
        timeout_seconds=lifecycle_settings.timeout_seconds,
        enabled=lifecycle_settings.enabled,
        suppressed=lifecycle_settings.suppressed,
        terminate=terminate,
        logger=logger,
    )

    return AppComponents(
        store=store,
        backup=backup,
        monitor=monitor,
        logger=logger,
    )


async def startup(components: AppComponents) -> None:
    """Initialize the document, back it up and arm the monitor."""
    await components.store.ensure_initialized()
    await components.backup.create_startup_backup()
    components.monitor.on_heartbeat()


async def shutdown(components: AppComponents) -> None:
    """Stop the countdown so an orderly exit does not race it."""
    components.monitor.disarm()
