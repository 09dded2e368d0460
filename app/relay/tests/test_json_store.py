"""Tests for the JsonStore document file."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from app.relay.errors import StorageFailure
from app.relay.state._json_store import JsonStore


class TestJsonStore:
    def test_load_missing_creates_empty_document(self, tmp_path: Path) -> None:
        path = tmp_path / "missing.json"
        store = JsonStore(path)
        assert store.load() == {}
        assert json.loads(path.read_text()) == {}

    def test_load_missing_creates_parent_dirs(self, tmp_path: Path) -> None:
        path = tmp_path / "deep" / "nested" / "store.json"
        assert JsonStore(path).load() == {}
        assert path.exists()

    def test_save_and_load_roundtrip(self, tmp_path: Path) -> None:
        store = JsonStore(tmp_path / "data.json")
        store.save({"42": {"subscribed": ["123"]}})
        assert store.load() == {"42": {"subscribed": ["123"]}}

    def test_save_overwrites(self, tmp_path: Path) -> None:
        store = JsonStore(tmp_path / "data.json")
        store.save({"a": 1, "b": 2})
        store.save({"c": 3})
        assert store.load() == {"c": 3}

    def test_save_leaves_no_temp_files(self, tmp_path: Path) -> None:
        store = JsonStore(tmp_path / "data.json")
        store.save({"x": 1})
        store.save({"x": 2})
        assert [p.name for p in tmp_path.iterdir()] == ["data.json"]

    def test_corrupt_json_reads_as_default(self, tmp_path: Path) -> None:
        path = tmp_path / "corrupt.json"
        path.write_text("{bad json!!!")
        assert JsonStore(path).load() == {}

    def test_invalid_utf8_reads_as_default(self, tmp_path: Path) -> None:
        path = tmp_path / "binary.json"
        path.write_bytes(b'{"42": {"subscribed": ["1"]}}\xff\xfe')
        assert JsonStore(path).load() == {}

    def test_default_copies_are_independent(self, tmp_path: Path) -> None:
        store = JsonStore(tmp_path / "missing.json", default={"key": []})
        a = store.default()
        a["key"].append(1)
        assert store.default() == {"key": []}

    def test_read_error_raises_storage_failure(self, tmp_path: Path) -> None:
        path = tmp_path / "dir.json"
        path.mkdir()
        with pytest.raises(StorageFailure):
            JsonStore(path).load()

    def test_write_error_raises_storage_failure(self, tmp_path: Path) -> None:
        store = JsonStore(tmp_path / "data.json")
        with patch("app.relay.state._json_store.os.replace", side_effect=PermissionError("denied")):
            with pytest.raises(StorageFailure, match="cannot write"):
                store.save({"x": 1})
        assert [p.name for p in tmp_path.iterdir()] == []

    def test_path_property(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        assert JsonStore(path).path == path
