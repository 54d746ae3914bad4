"""
JSON File Document Store

The whole application state lives in one JSON file. This store:
- creates it with empty stores on first start
- reads it whole, recovering from the startup backup when it is corrupt
- writes it whole through a write queue, with atomic file replacement

Store-level saves are a read-modify-write of the full document and run
as one unit inside the queue.
"""

import asyncio
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable, Optional

from hawkward.diagnostics import DiagnosticsLogger
from hawkward.models.document import Document, StoreName, empty_document
from hawkward.services.storage.backup import BackupManager
from hawkward.services.storage.files import (
    atomic_write_bytes,
    dump_json,
    read_json_object,
)
from hawkward.services.storage.interface import (
    CorruptDocumentError,
    DocumentStoreInterface,
    UnknownStoreError,
    ValidationFailureError,
    WriteFailureError,
)
from hawkward.services.storage.write_queue import WriteQueue
from hawkward.validation import (
    assign_account_ids,
    normalize_accounts,
    normalize_document,
)


DocumentUpdate = Callable[[Document], Document]


def resolve_store(store_name: Any) -> StoreName:
    """
    Map a client-supplied name onto the fixed set of stores.

    Raises:
        UnknownStoreError: If the name is not one of the five stores
    """
    try:
        return StoreName(store_name)
    except ValueError:
        raise UnknownStoreError(
            f"Unknown store: {store_name}",
            details=f"expected one of: {', '.join(s.value for s in StoreName)}",
        ) from None


class JsonDocumentStore(DocumentStoreInterface):
    """Document store backed by a single JSON file."""

    def __init__(
        self,
        path: Path,
        backup: Optional[BackupManager] = None,
        logger: Optional[DiagnosticsLogger] = None,
        write_queue: Optional[WriteQueue] = None,
    ):
        """
        Args:
            path: Primary document file
            backup: Backup manager used for recovery and import snapshots.
                    If None, a corrupt document is reported as-is.
            logger: Diagnostics logger
            write_queue: Serializer for every mutation
        """
        self.path = path
        self._backup = backup
        self._logger = logger or DiagnosticsLogger()
        self._queue = write_queue or WriteQueue()

        self._store_updates: dict[StoreName, Callable[[Any, Optional[str]], DocumentUpdate]] = {
            StoreName.ACCOUNTS: self._accounts_update,
            StoreName.PROFILE: self._keyed_update(StoreName.PROFILE),
            StoreName.TIMELINE: self._keyed_update(StoreName.TIMELINE),
            StoreName.GOALS: self._replace_update(StoreName.GOALS, list),
            StoreName.SETTINGS: self._replace_update(StoreName.SETTINGS, Mapping),
        }

    @property
    def write_queue(self) -> WriteQueue:
        return self._queue

    # =========================================================================
    # DOCUMENT OPERATIONS
    # =========================================================================

    async def ensure_initialized(self) -> bool:
        async def initialize() -> bool:
            if self.path.exists():
                return False
            await self._write_bytes(dump_json(empty_document()))
            self._logger.log_document_initialized(self.path)
            return True

        return await self._queue.enqueue(initialize)

    async def read_document(self) -> Document:
        return normalize_document(await self._load())

    async def write_document(self, document: Document) -> None:
        await self._queue.enqueue(lambda: self._persist(document))

    async def read_store(self, store_name: str) -> Any:
        store = resolve_store(store_name)
        document = await self.read_document()
        return document.get_store(store)

    async def write_store(
        self,
        store_name: str,
        value: Any,
        sub_key: Optional[str] = None,
    ) -> None:
        store = resolve_store(store_name)
        update = self._store_updates[store](value, sub_key)

        async def read_modify_write() -> None:
            document = normalize_document(await self._load(queued=True))
            await self._persist(update(document))
            self._logger.log_store_saved(store.value, sub_key)

        await self._queue.enqueue(read_modify_write)

    async def import_document(self, raw: Any) -> Document:
        if not isinstance(raw, Mapping):
            raise ValidationFailureError(
                "Invalid JSON data",
                details="import payload must be a JSON object",
            )
        document = normalize_document(raw)

        async def replace() -> None:
            if self._backup is not None:
                await self._backup.create_import_safety_backup()
            await self._persist(document)

        await self._queue.enqueue(replace)
        self._logger.log_document_imported(len(document.accounts))
        return document

    # =========================================================================
    # STORE UPDATES
    # =========================================================================
    # Each builder validates the incoming value up front and returns the
    # pure function that applies it to the current document.

    def _accounts_update(self, value: Any, sub_key: Optional[str]) -> DocumentUpdate:
        if not isinstance(value, list):
            raise ValidationFailureError(
                "Invalid data for store: accounts",
                details="accounts must be a list",
            )
        accounts = normalize_accounts(value)
        dropped = len(value) - len(accounts)
        if dropped:
            self._logger.log_records_dropped(StoreName.ACCOUNTS.value, dropped)
        accounts = assign_account_ids(accounts)

        return lambda document: document.model_copy(update={"accounts": accounts})

    def _keyed_update(self, store: StoreName) -> Callable[[Any, Optional[str]], DocumentUpdate]:
        replace = self._replace_update(store, Mapping)

        def build(value: Any, sub_key: Optional[str]) -> DocumentUpdate:
            if not sub_key:
                return replace(value, None)

            def apply(document: Document) -> Document:
                merged = dict(getattr(document, store.value))
                merged[sub_key] = value
                return document.model_copy(update={store.value: merged})

            return apply

        return build

    @staticmethod
    def _replace_update(store: StoreName, container: type) -> Callable[[Any, Optional[str]], DocumentUpdate]:
        def build(value: Any, sub_key: Optional[str]) -> DocumentUpdate:
            if not isinstance(value, container):
                expected = "a list" if container is list else "an object"
                raise ValidationFailureError(
                    f"Invalid data for store: {store.value}",
                    details=f"{store.value} must be {expected}",
                )
            replacement = list(value) if container is list else dict(value)
            return lambda document: document.model_copy(update={store.value: replacement})

        return build

    # =========================================================================
    # FILE ACCESS
    # =========================================================================

    async def _load(self, queued: bool = False) -> dict[str, Any]:
        """
        Parse the primary file, recovering from backup when it is corrupt.

        Recovery rewrites the primary, so it runs through the write queue
        like any other write. ``queued`` marks callers already inside it.
        """
        try:
            _, data = await asyncio.to_thread(read_json_object, self.path)
            return data
        except CorruptDocumentError as e:
            if self._backup is None:
                raise
            self._logger.log_document_corrupt(self.path, e.details or e.message)
            cause = e

        if queued:
            return await self._backup.restore(cause)

        async def recover() -> dict[str, Any]:
            # A write or restore queued ahead of us may have replaced the file
            try:
                _, data = await asyncio.to_thread(read_json_object, self.path)
                return data
            except CorruptDocumentError:
                return await self._backup.restore(cause)

        return await self._queue.enqueue(recover)

    async def _persist(self, document: Document) -> None:
        await self._write_bytes(dump_json(document.to_json_dict()))

    async def _write_bytes(self, payload: bytes) -> None:
        try:
            await asyncio.to_thread(atomic_write_bytes, self.path, payload)
        except OSError as e:
            self._logger.log_write_failed(self.path, str(e))
            raise WriteFailureError(
                "Failed to save data",
                path=self.path,
                details=str(e),
            ) from e
