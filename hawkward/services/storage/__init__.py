"""
Storage Services Package

Provides the abstract document store interface and its JSON file
implementation, together with the backup manager and write queue it
is built from.
"""

from hawkward.services.storage.interface import (
    CorruptDocumentError,
    DocumentStoreInterface,
    StorageError,
    UnknownStoreError,
    UnrecoverableStoreError,
    ValidationFailureError,
    WriteFailureError,
)
from hawkward.services.storage.backup import BackupManager
from hawkward.services.storage.json_file import JsonDocumentStore, resolve_store
from hawkward.services.storage.write_queue import WriteQueue

__all__ = [
    # Interfaces
    "DocumentStoreInterface",
    # Exceptions
    "CorruptDocumentError",
    "StorageError",
    "UnknownStoreError",
    "UnrecoverableStoreError",
    "ValidationFailureError",
    "WriteFailureError",
    # JSON file implementation
    "BackupManager",
    "JsonDocumentStore",
    "WriteQueue",
    "resolve_store",
]
