"""
Abstract Document Store Interface

The application persists exactly one document split into five named
stores. The interface is small: whole-document reads,
whole-document writes and whole-store writes. There is no per-record
update.

Implementations must route every mutation through a write serializer
so concurrent saves are applied one at a time, in submission order.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from hawkward.models.document import Document


class DocumentStoreInterface(ABC):
    """
    Abstract interface for the document store.

    Any storage implementation (JSON file, in-memory for tests...)
    must implement these methods.
    """

    @abstractmethod
    async def ensure_initialized(self) -> bool:
        """
        Create the document with empty stores if it does not exist.

        Idempotent.

        Returns:
            True if a new document was created
        """
        pass

    @abstractmethod
    async def read_document(self) -> Document:
        """
        Read and normalize the whole document.

        Raises:
            CorruptDocumentError: If the document cannot be parsed and
                no recovery is available
            UnrecoverableStoreError: If recovery from backup also failed
        """
        pass

    @abstractmethod
    async def write_document(self, document: Document) -> None:
        """
        Replace the whole document.

        Raises:
            WriteFailureError: If the document could not be persisted
        """
        pass

    @abstractmethod
    async def read_store(self, store_name: str) -> Any:
        """
        Read one top-level store.

        Raises:
            UnknownStoreError: If store_name is not a recognized store
        """
        pass

    @abstractmethod
    async def write_store(
        self,
        store_name: str,
        value: Any,
        sub_key: Optional[str] = None,
    ) -> None:
        """
        Replace one store, or merge ``value`` under ``sub_key`` for the
        keyed stores (profile, timeline).

        Raises:
            UnknownStoreError: If store_name is not a recognized store
            ValidationFailureError: If value has the wrong container type
            WriteFailureError: If the document could not be persisted
        """
        pass

    @abstractmethod
    async def import_document(self, raw: Any) -> Document:
        """
        Replace the whole document with an imported snapshot.

        A safety copy of the current document is taken first.

        Returns:
            The normalized document that was written
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""

    def __init__(self, message: str, path: Optional[Path] = None, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.details = details

    def to_response(self) -> dict[str, Any]:
        """Error body safe to return to the client."""
        body: dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        if self.path is not None:
            body["file"] = self.path.name
        return body


class CorruptDocumentError(StorageError):
    """Document exists but is not valid structured data."""
    pass


class UnrecoverableStoreError(StorageError):
    """Both the document and its backup are unreadable."""
    pass


class UnknownStoreError(StorageError):
    """Save requested for a store name outside the recognized set."""
    pass


class ValidationFailureError(StorageError):
    """Input could not be coerced into a usable shape."""
    pass


class WriteFailureError(StorageError):
    """The document could not be persisted."""
    pass
