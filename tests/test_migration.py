"""
Tests for scripts/migrate_json_to_db.py.
"""

import importlib.util
from pathlib import Path

import pytest

from jobhelper.database import SqliteStore
from jobhelper.storage import save_store

SCRIPT = Path(__file__).parent.parent / "scripts" / "migrate_json_to_db.py"


@pytest.fixture(scope="module")
def migrate():
    spec = importlib.util.spec_from_file_location("migrate_json_to_db", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.migrate


@pytest.fixture
def json_store(tmp_path):
    path = tmp_path / "store.json"
    save_store(path, {
        "keywords": [{"text": "Confidential", "enabled": True}],
        "minHourlyRate": 30,
        "verification_cache": {"Acme": {"website": "https://acme.example", "social": [], "timestamp": 1}},
    })
    return path


class TestMigrate:

    def test_copies_every_slot(self, migrate, json_store, tmp_path):
        db_path = tmp_path / "store.db"

        assert migrate(json_store, db_path) is True

        db = SqliteStore(db_path)
        assert db.keys() == ["keywords", "minHourlyRate", "verification_cache"]
        assert db.get("minHourlyRate") == 30
        assert db.get("verification_cache")["Acme"]["website"] == "https://acme.example"

    def test_dry_run_writes_nothing(self, migrate, json_store, tmp_path):
        db_path = tmp_path / "store.db"
        assert migrate(json_store, db_path, dry_run=True) is True
        assert not db_path.exists()

    def test_existing_slot_skipped_and_reported(self, migrate, json_store, tmp_path):
        db_path = tmp_path / "store.db"
        SqliteStore(db_path).set("minHourlyRate", 50)

        assert migrate(json_store, db_path) is False
        assert SqliteStore(db_path).get("minHourlyRate") == 50

    def test_overwrite(self, migrate, json_store, tmp_path):
        db_path = tmp_path / "store.db"
        SqliteStore(db_path).set("minHourlyRate", 50)

        assert migrate(json_store, db_path, overwrite=True) is True
        assert SqliteStore(db_path).get("minHourlyRate") == 30
