"""
Tests for the JSON FileStore backend.
"""

import json

import pytest

from repoprov.exit_codes import StoreUnavailableError
from repoprov.infra import FileStore


class TestFileStore:

    def test_creates_file_and_parents(self, tmp_path):
        path = tmp_path / "stores" / "repositories.json"

        store = FileStore(path)

        assert store.initialized
        assert json.loads(path.read_text()) == {}

    def test_put_get_delete(self, tmp_path):
        store = FileStore(tmp_path / "store.json")

        store.put("demo-repository", {"cloned": True})

        assert store.get("demo-repository") == {"cloned": True}
        assert "demo-repository" in store
        assert len(store) == 1
        assert store.delete("demo-repository") is True
        assert store.delete("demo-repository") is False
        assert store.get("demo-repository") is None

    def test_put_replaces(self, tmp_path):
        store = FileStore(tmp_path / "store.json")
        store.put("k", {"timestamp": 1})
        store.put("k", {"timestamp": 2})

        assert store.get("k") == {"timestamp": 2}
        assert store.keys() == ["k"]

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "store.json"
        FileStore(path).put("k", {"v": 1})

        assert FileStore(path).get("k") == {"v": 1}

    def test_uninitialized_store_refuses_access(self, tmp_path):
        store = FileStore(tmp_path / "absent.json", auto_create=False)

        assert not store.initialized
        with pytest.raises(StoreUnavailableError):
            store.get("k")
        with pytest.raises(StoreUnavailableError):
            store.put("k", {})

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{ not json")

        store = FileStore(path)

        assert store.read() == {}
        store.put("k", {"v": 1})
        assert json.loads(path.read_text()) == {"k": {"v": 1}}

    def test_invalidate_cache_rereads_disk(self, tmp_path):
        path = tmp_path / "store.json"
        store = FileStore(path)
        store.read()
        path.write_text(json.dumps({"external": 1}))

        assert store.get("external") is None
        store.invalidate_cache()
        assert store.get("external") == 1

    def test_no_temp_files_left(self, tmp_path):
        store = FileStore(tmp_path / "store.json")
        store.put("a", 1)
        store.put("b", 2)

        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]
