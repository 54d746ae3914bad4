"""
Backup Manager

A single JSON file is a single point of failure, so every path that
could destroy user data has a snapshot before it or a recovery after it:

- on process start a readable document is copied to the startup backup
- when the document cannot be parsed, the startup backup is promoted
  back to primary
- before a bulk import overwrites the document, it is copied to the
  import-safety backup

Only this component touches the two backup paths.
"""

import asyncio
from pathlib import Path
from typing import Any, Optional

from hawkward.diagnostics import DiagnosticsLogger
from hawkward.services.storage.files import atomic_write_bytes, read_json_object
from hawkward.services.storage.interface import (
    CorruptDocumentError,
    UnrecoverableStoreError,
    WriteFailureError,
)


class BackupManager:
    """Startup backup, restore-on-corruption and import-safety snapshots."""

    def __init__(
        self,
        primary_path: Path,
        backup_path: Path,
        import_safety_path: Path,
        logger: Optional[DiagnosticsLogger] = None,
    ):
        self.primary_path = primary_path
        self.backup_path = backup_path
        self.import_safety_path = import_safety_path
        self._logger = logger or DiagnosticsLogger()

    async def create_startup_backup(self) -> bool:
        """
        Copy the current document to the startup backup.

        A primary that does not parse is never copied, so the last good
        backup survives a restart and stays available to ``restore``.
        Failure is logged and otherwise ignored; the process keeps running.

        Returns:
            True if a backup was written
        """
        if not self.primary_path.exists():
            return False

        try:
            raw, _ = await asyncio.to_thread(read_json_object, self.primary_path)
        except CorruptDocumentError as e:
            self._logger.log_startup_backup_skipped(
                self.primary_path, self.backup_path, e.details or e.message
            )
            return False

        try:
            await asyncio.to_thread(atomic_write_bytes, self.backup_path, raw)
        except OSError as e:
            self._logger.log_startup_backup_failed(self.backup_path, str(e))
            return False

        self._logger.log_startup_backup_created(self.backup_path)
        return True

    async def restore(self, cause: Optional[CorruptDocumentError] = None) -> dict[str, Any]:
        """
        Promote the startup backup to primary and return its content.

        Note that this is a read path that writes: the primary file is
        overwritten with the backup bytes. Callers run it inside the
        store's write queue.

        Args:
            cause: The error that made the primary unreadable, for diagnostics

        Raises:
            UnrecoverableStoreError: If the backup is missing or corrupt
        """
        primary_error = (cause.details or cause.message) if cause else None

        if not self.backup_path.exists():
            self._logger.log_restore_failed(self.backup_path, "backup file not found")
            raise UnrecoverableStoreError(
                "Data corrupted and no backup available",
                path=self.primary_path,
                details=primary_error,
            )

        try:
            raw, data = await asyncio.to_thread(read_json_object, self.backup_path)
        except CorruptDocumentError as e:
            backup_error = e.details or e.message
            self._logger.log_restore_failed(self.backup_path, backup_error)
            details = f"{self.backup_path.name}: {backup_error}"
            if primary_error:
                details = f"{self.primary_path.name}: {primary_error}; {details}"
            raise UnrecoverableStoreError(
                "Data corrupted and backup restoration failed",
                path=self.backup_path,
                details=details,
            ) from e

        try:
            await asyncio.to_thread(atomic_write_bytes, self.primary_path, raw)
        except OSError as e:
            # The backup content is still served; the next save retries the write
            self._logger.log_write_failed(self.primary_path, str(e))
        else:
            self._logger.log_restored_from_backup(self.backup_path, self.primary_path)

        return data

    async def create_import_safety_backup(self) -> bool:
        """
        Copy the current document to the import-safety backup.

        Raises:
            WriteFailureError: If the snapshot could not be written; the
                import must not proceed without it
        """
        try:
            created = await asyncio.to_thread(
                self._copy, self.primary_path, self.import_safety_path
            )
        except OSError as e:
            raise WriteFailureError(
                "Failed to create import safety backup",
                path=self.import_safety_path,
                details=str(e),
            ) from e

        if created:
            self._logger.log_import_safety_backup_created(self.import_safety_path)
        return created

    @staticmethod
    def _copy(source: Path, target: Path) -> bool:
        if not source.exists():
            return False
        atomic_write_bytes(target, source.read_bytes())
        return True
