"""Tests for escala.core.backup."""

import json
import os

import pytest

from escala.board.errors import StoreReadError
from escala.core.backup import (
    BACKUP_TYPE,
    backup_document,
    get_backup_dir,
    list_backups,
    restore_backup,
)


class TestGetBackupDir:
    """Tests for get_backup_dir function."""

    def test_defaults_next_to_data_file(self, store, data_file):
        result = get_backup_dir(store)

        assert result == data_file.parent / "backups"
        assert result.is_dir()

    def test_accepts_string_path(self, store, tmp_path):
        result = get_backup_dir(store, str(tmp_path / "elsewhere"))
        assert result == tmp_path / "elsewhere"
        assert result.exists()


class TestBackupDocument:
    """Tests for backup_document function."""

    def test_creates_backup_file(self, store, seeded, tmp_path):
        filepath = backup_document(store, tmp_path / "bk")

        assert filepath.exists()
        assert filepath.suffix == ".json"
        assert filepath.name.startswith("escala_")

    def test_backup_contains_document(self, store, write_document, make_doc, tmp_path):
        doc = make_doc(assignments={"o1|2026-02-23": "FO"})
        write_document(doc)

        filepath = backup_document(store, tmp_path)

        data = json.loads(filepath.read_text(encoding="utf-8"))
        assert data["backup_type"] == BACKUP_TYPE
        assert data["history_count"] == 0
        assert data["document"] == doc
        assert "timestamp" in data

    def test_custom_prefix(self, store, seeded, tmp_path):
        assert backup_document(store, tmp_path, prefix="antes").name.startswith("antes_")

    def test_seeds_missing_document(self, store, data_file, tmp_path):
        backup_document(store, tmp_path)
        assert data_file.exists()


class TestRestoreBackup:
    """Tests for restore_backup function."""

    def test_restores_wrapped_backup(
        self, store, write_document, make_doc, read_document, tmp_path
    ):
        write_document(make_doc(assignments={"o1|2026-02-23": "FO"}))
        filepath = backup_document(store, tmp_path)
        write_document(make_doc())

        restored = restore_backup(store, filepath)

        assert restored.assignments == {"o1|2026-02-23": "FO"}
        assert read_document()["assignments"] == {"o1|2026-02-23": "FO"}

    def test_restores_bare_legacy_document(self, store, read_document, tmp_path):
        path = tmp_path / "old.json"
        path.write_text(
            json.dumps({"oficiais": [{"id": "o1", "posto": "Cap", "nome": "Ana"}]}),
            encoding="utf-8",
        )

        restore_backup(store, path)

        assert read_document()["officers"] == [{"id": "o1", "rank": "Cap", "name": "Ana"}]

    def test_unreadable_backup(self, store, tmp_path):
        with pytest.raises(StoreReadError):
            restore_backup(store, tmp_path / "missing.json")

    def test_non_object_backup(self, store, seeded, read_document, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(StoreReadError):
            restore_backup(store, path)

        assert read_document() == seeded


class TestListBackups:
    """Tests for list_backups function."""

    def test_empty_directory(self, store, tmp_path):
        assert list_backups(store, tmp_path) == []

    def test_sorted_newest_first(self, store, tmp_path):
        old = tmp_path / "escala_old.json"
        new = tmp_path / "escala_new.json"
        old.write_text("{}")
        new.write_text("{}")
        os.utime(old, (1_000_000, 1_000_000))
        os.utime(new, (2_000_000, 2_000_000))

        assert list_backups(store, tmp_path) == [new, old]

    def test_ignores_other_files(self, store, tmp_path):
        (tmp_path / "notes.txt").write_text("x")
        assert list_backups(store, tmp_path) == []
