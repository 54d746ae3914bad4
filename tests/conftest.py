"""Shared fixtures: every test gets its own data directory."""

import pytest

from hawkward.config import StorageSettings
from hawkward.services.storage import BackupManager, JsonDocumentStore


@pytest.fixture
def storage_settings(tmp_path):
    return StorageSettings(data_dir=tmp_path / "data")


@pytest.fixture
def backup(storage_settings):
    return BackupManager(
        primary_path=storage_settings.data_path,
        backup_path=storage_settings.backup_path,
        import_safety_path=storage_settings.import_safety_path,
    )


@pytest.fixture
def store(storage_settings, backup):
    return JsonDocumentStore(storage_settings.data_path, backup=backup)
