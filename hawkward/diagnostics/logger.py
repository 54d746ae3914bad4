"""
Diagnostics Logger

Every significant persistence and lifecycle step is logged as a
structured JSON line:
- startup backups and restores
- store saves and dropped records
- heartbeats, configuration changes and the final shutdown
"""

import logging
import sys
from typing import Optional

import structlog

from hawkward.models.events import (
    DiagnosticEvent,
    DiagnosticEventBuilder,
    EventSeverity,
)


def configure_logging(level: str = "INFO") -> None:
    """Wire stdlib logging and structlog together at the given level."""
    logging.basicConfig(format="%(message)s", stream=sys.stdout)
    logging.getLogger().setLevel(level.upper())

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class DiagnosticsLogger:
    """
    Central diagnostics logging service.

    Components receive one shared instance; tests can pass their own
    structlog logger to capture output.
    """

    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self._logger = logger or structlog.get_logger("hawkward")

    def log(self, event: DiagnosticEvent) -> None:
        """Log an event at its own severity."""
        log_dict = event.to_log_dict()
        if event.severity == EventSeverity.ERROR:
            self._logger.error(event.event_type.value, **log_dict)
        elif event.severity == EventSeverity.WARNING:
            self._logger.warning(event.event_type.value, **log_dict)
        elif event.severity == EventSeverity.DEBUG:
            self._logger.debug(event.event_type.value, **log_dict)
        else:
            self._logger.info(event.event_type.value, **log_dict)

    # -- document store -----------------------------------------------------

    def log_document_initialized(self, path) -> None:
        self.log(DiagnosticEventBuilder.document_initialized(path))

    def log_document_corrupt(self, path, error: str) -> None:
        self.log(DiagnosticEventBuilder.document_corrupt(path, error))

    def log_store_saved(self, store: str, key: Optional[str] = None) -> None:
        self.log(DiagnosticEventBuilder.store_saved(store, key))

    def log_records_dropped(self, store: str, dropped: int) -> None:
        self.log(DiagnosticEventBuilder.records_dropped(store, dropped))

    def log_write_failed(self, path, error: str) -> None:
        self.log(DiagnosticEventBuilder.write_failed(path, error))

    def log_document_imported(self, accounts: int) -> None:
        self.log(DiagnosticEventBuilder.document_imported(accounts))

    # -- backups ------------------------------------------------------------

    def log_startup_backup_created(self, backup_path) -> None:
        self.log(DiagnosticEventBuilder.startup_backup_created(backup_path))

    def log_startup_backup_failed(self, backup_path, error: str) -> None:
        self.log(DiagnosticEventBuilder.startup_backup_failed(backup_path, error))

    def log_startup_backup_skipped(self, primary_path, backup_path, error: str) -> None:
        self.log(DiagnosticEventBuilder.startup_backup_skipped(primary_path, backup_path, error))

    def log_restored_from_backup(self, backup_path, primary_path) -> None:
        self.log(DiagnosticEventBuilder.restored_from_backup(backup_path, primary_path))

    def log_restore_failed(self, backup_path, error: str) -> None:
        self.log(DiagnosticEventBuilder.restore_failed(backup_path, error))

    def log_import_safety_backup_created(self, path) -> None:
        self.log(DiagnosticEventBuilder.import_safety_backup_created(path))

    # -- session lifecycle --------------------------------------------------

    def log_heartbeat(self, armed: bool) -> None:
        self.log(DiagnosticEventBuilder.heartbeat_received(armed))

    def log_monitor_config_changed(self, timeout_seconds: float, enabled: bool) -> None:
        self.log(DiagnosticEventBuilder.monitor_config_changed(timeout_seconds, enabled))

    def log_monitor_suppressed(self) -> None:
        self.log(DiagnosticEventBuilder.monitor_suppressed())

    def log_tab_closed(self, timeout_seconds: float) -> None:
        self.log(DiagnosticEventBuilder.tab_closed(timeout_seconds))

    def log_shutdown_triggered(self, timeout_seconds: float) -> None:
        self.log(DiagnosticEventBuilder.shutdown_triggered(timeout_seconds))
