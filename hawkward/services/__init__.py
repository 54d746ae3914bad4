"""Services package."""

from hawkward.services.storage import (
    BackupManager,
    CorruptDocumentError,
    DocumentStoreInterface,
    JsonDocumentStore,
    StorageError,
    UnknownStoreError,
    UnrecoverableStoreError,
    ValidationFailureError,
    WriteFailureError,
    WriteQueue,
)

__all__ = [
    "BackupManager",
    "CorruptDocumentError",
    "DocumentStoreInterface",
    "JsonDocumentStore",
    "StorageError",
    "UnknownStoreError",
    "UnrecoverableStoreError",
    "ValidationFailureError",
    "WriteFailureError",
    "WriteQueue",
]
