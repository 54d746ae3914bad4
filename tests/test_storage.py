"""Tests for the JSON document store, its write queue and backups."""

import asyncio
import json
import time

import pytest

from hawkward.models import empty_document
from hawkward.services.storage import backup as backup_module
from hawkward.services.storage import (
    CorruptDocumentError,
    JsonDocumentStore,
    UnknownStoreError,
    UnrecoverableStoreError,
    ValidationFailureError,
    WriteFailureError,
    WriteQueue,
)
from hawkward.services.storage.files import read_json_object
from hawkward.validation import normalize_document


def read_file(path):
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def slow_backup_reads(monkeypatch):
    """Make backup reads slow enough for other tasks to run meanwhile."""
    def slow_read(path):
        time.sleep(0.2)
        return read_json_object(path)

    monkeypatch.setattr(backup_module, "read_json_object", slow_read)


class TestInitialization:
    """Tests for first-start behavior."""

    @pytest.mark.asyncio
    async def test_creates_empty_document(self, store):
        """Test the document is created with all stores empty."""
        assert await store.ensure_initialized() is True
        assert read_file(store.path) == empty_document()

    @pytest.mark.asyncio
    async def test_is_idempotent(self, store):
        """Test a second call leaves the file byte-identical."""
        await store.ensure_initialized()
        await store.write_store("goals", [{"name": "Car"}])
        before = store.path.read_bytes()

        assert await store.ensure_initialized() is False
        assert store.path.read_bytes() == before


class TestStoreOperations:
    """Tests for store-level reads and saves."""

    @pytest.mark.asyncio
    async def test_round_trip(self, store):
        """Test a saved store is read back unchanged."""
        await store.ensure_initialized()
        goals = [{"name": "Vacation", "target": 3000}]
        await store.write_store("goals", goals)
        assert await store.read_store("goals") == goals

    @pytest.mark.asyncio
    async def test_document_round_trip(self, store):
        """Test a written document reads back as its normalized form."""
        raw = {
            "accounts": [{"id": 2, "name": "Gym", "monthlyPayment": 30}],
            "profile": {"cards": [{"id": "card_1", "displayName": "Visa"}]},
            "goals": [{"name": "Ünïcode", "target": 100}],
        }
        document = normalize_document(raw)

        await store.write_document(document)

        assert await store.read_document() == document
        assert "Ünïcode" in store.path.read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_accounts_are_normalized(self, store):
        """Test accounts are sanitized and given ids on save."""
        await store.ensure_initialized()
        await store.write_store("accounts", [{"name": "<b>Rent</b>", "monthlyPayment": "1200.5"}, 42])

        accounts = await store.read_store("accounts")
        assert len(accounts) == 1
        assert accounts[0]["name"] == "Rent"
        assert accounts[0]["monthlyPayment"] == 1200.5
        assert accounts[0]["id"] == 1
        assert accounts[0]["status"] == "Active"

    @pytest.mark.asyncio
    async def test_assigned_ids_are_stable(self, store):
        """Test saving the stored accounts back keeps their ids."""
        await store.ensure_initialized()
        await store.write_store("accounts", [{"name": "Rent"}, {"name": "Gym"}])
        accounts = await store.read_store("accounts")

        await store.write_store("accounts", accounts + [{"name": "Netflix"}])

        assert [a["id"] for a in await store.read_store("accounts")] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_keyed_save_merges(self, store):
        """Test a keyed save leaves sibling keys alone."""
        await store.ensure_initialized()
        await store.write_store("profile", {"a": 1}, "first")
        await store.write_store("profile", {"b": 2}, "second")

        assert await store.read_store("profile") == {"first": {"a": 1}, "second": {"b": 2}}

    @pytest.mark.asyncio
    async def test_unkeyed_save_replaces(self, store):
        """Test a save without a key replaces the whole store."""
        await store.ensure_initialized()
        await store.write_store("timeline", {"old": {}}, "old")
        await store.write_store("timeline", {"new": {}})

        assert await store.read_store("timeline") == {"new": {}}

    @pytest.mark.asyncio
    async def test_settings_key_is_ignored(self, store):
        """Test settings is always replaced whole."""
        await store.ensure_initialized()
        await store.write_store("settings", {"theme": "dark"}, "ignored")

        assert await store.read_store("settings") == {"theme": "dark"}

    @pytest.mark.asyncio
    async def test_save_keeps_other_stores(self, store):
        """Test a save only touches its own store."""
        await store.ensure_initialized()
        await store.write_store("goals", [1])
        await store.write_store("settings", {"x": 1})

        data = read_file(store.path)
        assert data["goals"] == [1]
        assert data["settings"] == {"x": 1}

    @pytest.mark.asyncio
    async def test_unknown_store_fails_before_io(self, store):
        """Test an unknown store name never touches the file."""
        with pytest.raises(UnknownStoreError):
            await store.write_store("secrets", {})
        assert not store.path.exists()

    @pytest.mark.asyncio
    async def test_unknown_store_read(self, store):
        """Test reading an unknown store is rejected."""
        await store.ensure_initialized()
        with pytest.raises(UnknownStoreError):
            await store.read_store("secrets")

    @pytest.mark.asyncio
    async def test_wrong_container_fails_before_io(self, store):
        """Test a value of the wrong shape is rejected."""
        with pytest.raises(ValidationFailureError):
            await store.write_store("accounts", {"not": "a list"})
        with pytest.raises(ValidationFailureError):
            await store.write_store("goals", "nope")
        assert not store.path.exists()

    @pytest.mark.asyncio
    async def test_concurrent_saves_are_serialized(self, store):
        """Test overlapping keyed saves all land."""
        await store.ensure_initialized()
        await asyncio.gather(*[
            store.write_store("profile", i, f"k{i}") for i in range(10)
        ])

        profile = await store.read_store("profile")
        assert profile == {f"k{i}": i for i in range(10)}

    @pytest.mark.asyncio
    async def test_last_write_wins_in_submission_order(self, store):
        """Test unkeyed saves apply in the order they were submitted."""
        await store.ensure_initialized()
        await asyncio.gather(*[
            store.write_store("goals", [i]) for i in range(5)
        ])
        assert await store.read_store("goals") == [4]

    @pytest.mark.asyncio
    async def test_write_failure(self, tmp_path):
        """Test an unwritable target raises WriteFailureError."""
        target = tmp_path / "data.json"
        target.mkdir()
        store = JsonDocumentStore(target)

        with pytest.raises(WriteFailureError) as exc_info:
            await store.write_document(normalize_document({}))
        assert exc_info.value.message == "Failed to save data"


class TestWriteQueue:
    """Tests for the write serializer."""

    @pytest.mark.asyncio
    async def test_runs_in_submission_order(self):
        """Test writes run one at a time, first in first out."""
        queue = WriteQueue()
        order = []

        def make(i, delay):
            async def write():
                order.append(("start", i))
                await asyncio.sleep(delay)
                order.append(("end", i))
                return i
            return write

        results = await asyncio.gather(
            queue.enqueue(make(0, 0.03)),
            queue.enqueue(make(1, 0.0)),
            queue.enqueue(make(2, 0.01)),
        )

        assert results == [0, 1, 2]
        assert order == [
            ("start", 0), ("end", 0),
            ("start", 1), ("end", 1),
            ("start", 2), ("end", 2),
        ]
        assert queue.pending == 0

    @pytest.mark.asyncio
    async def test_failure_releases_queue(self):
        """Test a failing write does not block the next one."""
        queue = WriteQueue()

        async def fail():
            raise RuntimeError("boom")

        async def succeed():
            return "ok"

        results = await asyncio.gather(
            queue.enqueue(fail),
            queue.enqueue(succeed),
            return_exceptions=True,
        )

        assert isinstance(results[0], RuntimeError)
        assert results[1] == "ok"
        assert queue.pending == 0


class TestBackupRecovery:
    """Tests for startup backups and restore-on-corruption."""

    @pytest.mark.asyncio
    async def test_startup_backup_copies_document(self, store, backup):
        """Test the startup backup is a byte copy of the primary."""
        await store.ensure_initialized()
        await store.write_store("goals", [1, 2])

        assert await backup.create_startup_backup() is True
        assert backup.backup_path.read_bytes() == store.path.read_bytes()

    @pytest.mark.asyncio
    async def test_startup_backup_without_document(self, backup):
        """Test nothing is written when there is no primary yet."""
        assert await backup.create_startup_backup() is False
        assert not backup.backup_path.exists()

    @pytest.mark.asyncio
    async def test_startup_backup_failure_is_not_fatal(self, store, backup):
        """Test a failed backup is reported, not raised."""
        await store.ensure_initialized()
        backup.backup_path.mkdir()

        assert await backup.create_startup_backup() is False

    @pytest.mark.asyncio
    async def test_startup_backup_keeps_last_good_copy(self, store, backup):
        """Test a corrupt primary never overwrites the backup on restart."""
        await store.ensure_initialized()
        await store.write_store("goals", ["precious"])
        await backup.create_startup_backup()
        good_backup = backup.backup_path.read_bytes()
        store.path.write_text("{broken", encoding="utf-8")

        assert await store.ensure_initialized() is False
        assert await backup.create_startup_backup() is False

        assert backup.backup_path.read_bytes() == good_backup
        assert (await store.read_document()).goals == ["precious"]

    @pytest.mark.asyncio
    async def test_corrupt_document_is_restored(self, store, backup):
        """Test a corrupt primary is replaced with the backup."""
        await store.ensure_initialized()
        await store.write_store("goals", ["saved"])
        await backup.create_startup_backup()
        store.path.write_text("{not json", encoding="utf-8")

        document = await store.read_document()

        assert document.goals == ["saved"]
        assert store.path.read_bytes() == backup.backup_path.read_bytes()

    @pytest.mark.asyncio
    async def test_non_object_document_is_restored(self, store, backup):
        """Test a primary holding a JSON array counts as corrupt."""
        await store.ensure_initialized()
        await backup.create_startup_backup()
        store.path.write_text("[1, 2, 3]", encoding="utf-8")

        assert (await store.read_document()).accounts == []
        assert read_file(store.path) == empty_document()

    @pytest.mark.asyncio
    async def test_concurrent_reads_restore_once(self, store, backup):
        """Test parallel reads of a corrupt file all get the backup."""
        await store.ensure_initialized()
        await store.write_store("goals", ["saved"])
        await backup.create_startup_backup()
        store.path.write_text("garbage", encoding="utf-8")

        documents = await asyncio.gather(*[store.read_document() for _ in range(5)])

        assert all(document.goals == ["saved"] for document in documents)

    @pytest.mark.asyncio
    async def test_recovery_does_not_undo_concurrent_import(self, store, backup, slow_backup_reads):
        """Test a restore never overwrites an import that already succeeded."""
        await store.ensure_initialized()
        backup.backup_path.write_text('{"goals": ["old"]}', encoding="utf-8")
        store.path.write_text("{broken", encoding="utf-8")

        document, _ = await asyncio.gather(
            store.read_document(),
            store.import_document({"goals": ["imported"]}),
        )

        assert read_file(store.path)["goals"] == ["imported"]
        assert document.goals in (["old"], ["imported"])

    @pytest.mark.asyncio
    async def test_recovery_and_save_are_serialized(self, store, backup, slow_backup_reads):
        """Test a save racing a recovering read lands on the restored document."""
        await store.ensure_initialized()
        backup.backup_path.write_text('{"goals": ["old"]}', encoding="utf-8")
        store.path.write_text("{broken", encoding="utf-8")

        await asyncio.gather(
            store.read_document(),
            store.write_store("settings", {"theme": "dark"}),
        )

        data = read_file(store.path)
        assert data["goals"] == ["old"]
        assert data["settings"] == {"theme": "dark"}

    @pytest.mark.asyncio
    async def test_missing_backup_is_unrecoverable(self, store):
        """Test corruption without a backup raises UnrecoverableStoreError."""
        await store.ensure_initialized()
        store.path.write_text("{", encoding="utf-8")

        with pytest.raises(UnrecoverableStoreError) as exc_info:
            await store.read_document()
        assert exc_info.value.message == "Data corrupted and no backup available"

    @pytest.mark.asyncio
    async def test_corrupt_backup_is_unrecoverable(self, store, backup):
        """Test a corrupt backup raises UnrecoverableStoreError."""
        await store.ensure_initialized()
        store.path.write_text("{", encoding="utf-8")
        backup.backup_path.write_text("also broken", encoding="utf-8")

        with pytest.raises(UnrecoverableStoreError) as exc_info:
            await store.read_document()
        assert exc_info.value.message == "Data corrupted and backup restoration failed"
        assert exc_info.value.to_response()["file"] == backup.backup_path.name

    @pytest.mark.asyncio
    async def test_store_without_backup_reports_corruption(self, storage_settings):
        """Test a store with no backup manager surfaces the parse error."""
        store = JsonDocumentStore(storage_settings.data_path)
        await store.ensure_initialized()
        store.path.write_text("{", encoding="utf-8")

        with pytest.raises(CorruptDocumentError):
            await store.read_document()


class TestImport:
    """Tests for bulk import."""

    @pytest.mark.asyncio
    async def test_import_takes_safety_backup(self, store, backup):
        """Test the previous document is kept before being replaced."""
        await store.ensure_initialized()
        await store.write_store("goals", ["old"])
        previous = store.path.read_bytes()

        await store.import_document({"goals": ["new"], "accounts": [{"name": "Rent"}]})

        assert backup.import_safety_path.read_bytes() == previous
        data = read_file(store.path)
        assert data["goals"] == ["new"]
        assert data["accounts"][0]["name"] == "Rent"
        assert data["profile"] == {}

    @pytest.mark.asyncio
    async def test_import_rejects_non_object(self, store):
        """Test a non-object payload is refused without touching the file."""
        await store.ensure_initialized()
        before = store.path.read_bytes()

        with pytest.raises(ValidationFailureError):
            await store.import_document([1, 2])
        assert store.path.read_bytes() == before
