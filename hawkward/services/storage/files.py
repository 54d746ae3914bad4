"""
File helpers shared by the document store and the backup manager.

Writes go to a temporary file in the target directory and are then
renamed over the target, so a reader sees either the old bytes or the
new bytes, never a partial file.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from hawkward.services.storage.interface import CorruptDocumentError


def dump_json(data: Any) -> bytes:
    """Serialize the way the document is stored on disk."""
    return json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")


def parse_json_object(raw: bytes, path: Path) -> dict[str, Any]:
    """
    Parse document bytes.

    Raises:
        CorruptDocumentError: If the bytes are not a JSON object
    """
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CorruptDocumentError(
            f"Document is not valid JSON: {path.name}",
            path=path,
            details=str(e),
        ) from e

    if not isinstance(data, dict):
        raise CorruptDocumentError(
            f"Document is not a JSON object: {path.name}",
            path=path,
            details=f"top-level value is {type(data).__name__}",
        )
    return data


def read_json_object(path: Path) -> tuple[bytes, dict[str, Any]]:
    """
    Read and parse a document file.

    Returns:
        (raw_bytes, parsed_object)

    Raises:
        CorruptDocumentError: If the file is missing, unreadable or invalid
    """
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise CorruptDocumentError(
            f"Document could not be read: {path.name}",
            path=path,
            details=str(e),
        ) from e
    return raw, parse_json_object(raw, path)


# Windows keeps a file locked for a moment after an antivirus or indexer
# touched it; the rename is retried in that case only.
@retry(
    retry=retry_if_exception_type(PermissionError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
    reraise=True,
)
def _replace(source: str, target: Path) -> None:
    os.replace(source, target)


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """
    Replace ``path`` with ``data`` atomically.

    Raises:
        OSError: If the bytes could not be written or renamed into place
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        _replace(tmp_name, path)
    finally:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
