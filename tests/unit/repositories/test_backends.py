"""
Unit Tests for Storage Backends.

The JSON file backend is exercised against real files under tmp_path.
"""

import json
from unittest.mock import patch

import pytest

from studynotes.core.exceptions import StorageError
from studynotes.repositories.backends import JsonFileBackend, MemoryBackend


class TestMemoryBackend:
    """Tests for the in-process backend."""

    def test_missing_key_reads_none(self):
        assert MemoryBackend().get_item("absent") is None

    def test_set_get_remove(self):
        backend = MemoryBackend()
        backend.set_item("k", "v")
        assert backend.get_item("k") == "v"
        assert backend.keys() == ["k"]

        backend.remove_item("k")
        assert backend.get_item("k") is None
        backend.remove_item("k")

    def test_initial_items_are_copied(self):
        initial = {"k": "v"}
        backend = MemoryBackend(initial)
        backend.set_item("k", "changed")
        assert initial == {"k": "v"}


class TestJsonFileBackend:
    """Tests for the single-file JSON backend."""

    def test_missing_file_reads_empty(self, tmp_path):
        backend = JsonFileBackend(tmp_path / "store.json")
        assert backend.get_item("notes-list") is None
        assert backend.keys() == []

    def test_values_persist_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "store.json"
        JsonFileBackend(path).set_item("current-note-id", "abc")

        assert JsonFileBackend(path).get_item("current-note-id") == "abc"
        assert json.loads(path.read_text()) == {"current-note-id": "abc"}

    def test_remove_item(self, tmp_path):
        backend = JsonFileBackend(tmp_path / "store.json")
        backend.set_item("a", "1")
        backend.set_item("b", "2")
        backend.remove_item("a")

        assert backend.keys() == ["b"]

    def test_corrupted_file_reads_empty(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json")

        backend = JsonFileBackend(path)
        assert backend.get_item("notes-list") is None
        assert backend.keys() == []

    def test_non_object_file_reads_empty(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2, 3]")

        assert JsonFileBackend(path).keys() == []

    def test_non_string_values_are_ignored(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text(json.dumps({"good": "yes", "bad": 3}))

        backend = JsonFileBackend(path)
        assert backend.get_item("good") == "yes"
        assert backend.get_item("bad") is None

    def test_write_after_corruption_replaces_file(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("garbage")

        JsonFileBackend(path).set_item("k", "v")

        assert json.loads(path.read_text()) == {"k": "v"}

    def test_write_failure_raises_storage_error(self, tmp_path):
        backend = JsonFileBackend(tmp_path / "store.json")

        with patch("studynotes.repositories.backends.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(StorageError, match="disk full"):
                backend.set_item("k", "v")

        assert not (tmp_path / "store.json").exists()
        assert list(tmp_path.iterdir()) == []
