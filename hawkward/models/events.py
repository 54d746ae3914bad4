"""
Diagnostic Event Models for Hawkward

Every significant persistence and lifecycle action produces one event.
Events are only written to the local structured log; they are never
stored in the document.
"""

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Types of events we log."""
    # Document store
    DOCUMENT_INITIALIZED = "document_initialized"
    DOCUMENT_CORRUPT = "document_corrupt"
    STORE_SAVED = "store_saved"
    RECORDS_DROPPED = "records_dropped"
    WRITE_FAILED = "write_failed"
    DOCUMENT_IMPORTED = "document_imported"

    # Backups
    STARTUP_BACKUP_CREATED = "startup_backup_created"
    STARTUP_BACKUP_FAILED = "startup_backup_failed"
    STARTUP_BACKUP_SKIPPED = "startup_backup_skipped"
    RESTORED_FROM_BACKUP = "restored_from_backup"
    RESTORE_FAILED = "restore_failed"
    IMPORT_SAFETY_BACKUP_CREATED = "import_safety_backup_created"

    # Session lifecycle
    HEARTBEAT_RECEIVED = "heartbeat_received"
    MONITOR_CONFIG_CHANGED = "monitor_config_changed"
    MONITOR_SUPPRESSED = "monitor_suppressed"
    TAB_CLOSED = "tab_closed"
    SHUTDOWN_TRIGGERED = "shutdown_triggered"


class EventSeverity(str, Enum):
    """Severity level for diagnostic events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class DiagnosticEvent(BaseModel):
    """A single diagnostic event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: EventType
    severity: EventSeverity = EventSeverity.INFO
    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class DiagnosticEventBuilder:
    """
    Helper class to build diagnostic events with common patterns.

    Usage:
        event = DiagnosticEventBuilder.store_saved("accounts", key=None)
        event = DiagnosticEventBuilder.restored_from_backup(backup_path)
    """

    @staticmethod
    def document_initialized(path: Path) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=EventType.DOCUMENT_INITIALIZED,
            description=f"Created empty document: {path.name}",
            details={"path": str(path)},
        )

    @staticmethod
    def document_corrupt(path: Path, error: str) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=EventType.DOCUMENT_CORRUPT,
            severity=EventSeverity.ERROR,
            description="Document unreadable, attempting restore from backup",
            details={"path": str(path)},
            error_message=error,
        )

    @staticmethod
    def store_saved(store: str, key: Optional[str]) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=EventType.STORE_SAVED,
            severity=EventSeverity.DEBUG,
            description=f"Store saved: {store}",
            details={"store": store, "key": key},
        )

    @staticmethod
    def records_dropped(store: str, dropped: int) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=EventType.RECORDS_DROPPED,
            severity=EventSeverity.WARNING,
            description=f"Dropped {dropped} malformed record(s) from {store}",
            details={"store": store, "dropped": dropped},
        )

    @staticmethod
    def write_failed(path: Path, error: str) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=EventType.WRITE_FAILED,
            severity=EventSeverity.ERROR,
            description="Failed to persist document",
            details={"path": str(path)},
            error_message=error,
        )

    @staticmethod
    def document_imported(accounts: int) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=EventType.DOCUMENT_IMPORTED,
            description="Database restored from import",
            details={"accounts": accounts},
        )

    @staticmethod
    def startup_backup_created(backup_path: Path) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=EventType.STARTUP_BACKUP_CREATED,
            description=f"Data backup created: {backup_path.name}",
            details={"path": str(backup_path)},
        )

    @staticmethod
    def startup_backup_failed(backup_path: Path, error: str) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=EventType.STARTUP_BACKUP_FAILED,
            severity=EventSeverity.WARNING,
            description="Failed to create startup backup",
            details={"path": str(backup_path)},
            error_message=error,
        )

    @staticmethod
    def startup_backup_skipped(primary_path: Path, backup_path: Path, error: str) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=EventType.STARTUP_BACKUP_SKIPPED,
            severity=EventSeverity.WARNING,
            description=f"Document unreadable, keeping existing backup: {backup_path.name}",
            details={"path": str(primary_path), "backup_path": str(backup_path)},
            error_message=error,
        )

    @staticmethod
    def restored_from_backup(backup_path: Path, primary_path: Path) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=EventType.RESTORED_FROM_BACKUP,
            severity=EventSeverity.WARNING,
            description="Primary document repaired from backup",
            details={"backup": str(backup_path), "primary": str(primary_path)},
        )

    @staticmethod
    def restore_failed(backup_path: Path, error: str) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=EventType.RESTORE_FAILED,
            severity=EventSeverity.ERROR,
            description="Backup restoration failed",
            details={"backup": str(backup_path)},
            error_message=error,
        )

    @staticmethod
    def import_safety_backup_created(path: Path) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=EventType.IMPORT_SAFETY_BACKUP_CREATED,
            description=f"Import safety backup created: {path.name}",
            details={"path": str(path)},
        )

    @staticmethod
    def heartbeat_received(armed: bool) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=EventType.HEARTBEAT_RECEIVED,
            severity=EventSeverity.DEBUG,
            description="Heartbeat received",
            details={"armed": armed},
        )

    @staticmethod
    def monitor_config_changed(timeout_seconds: float, enabled: bool) -> DiagnosticEvent:
        state = "ENABLED" if enabled else "DISABLED"
        return DiagnosticEvent(
            event_type=EventType.MONITOR_CONFIG_CHANGED,
            description=f"Auto-shutdown {state}, timeout {timeout_seconds:g}s",
            details={"timeout_seconds": timeout_seconds, "enabled": enabled},
        )

    @staticmethod
    def monitor_suppressed() -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=EventType.MONITOR_SUPPRESSED,
            description="Non-interactive environment, auto-shutdown will never arm",
        )

    @staticmethod
    def tab_closed(timeout_seconds: float) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=EventType.TAB_CLOSED,
            description=f"Tab closed signal received, shutdown in {timeout_seconds:g}s unless a heartbeat arrives",
            details={"timeout_seconds": timeout_seconds},
        )

    @staticmethod
    def shutdown_triggered(timeout_seconds: float) -> DiagnosticEvent:
        return DiagnosticEvent(
            event_type=EventType.SHUTDOWN_TRIGGERED,
            severity=EventSeverity.WARNING,
            description="No active tab detected. Shutting down...",
            details={"timeout_seconds": timeout_seconds},
        )
