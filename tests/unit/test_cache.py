"""Unit tests for cache backends and the cache gateway."""

import os
import pickle
import time

import pytest

from flatdata.core.cache import CacheGateway, FileCache, InMemoryCache
from flatdata.core.exceptions import CacheDirectoryNotFound
from flatdata.repositories.protocols import RecordCache


class TestInMemoryCache:
    """Tests for the process-local cache."""

    def test_get_set(self):
        cache = InMemoryCache()
        cache.set("key1", b"value1")
        assert cache.get("key1") == b"value1"

    def test_get_missing_returns_none(self):
        assert InMemoryCache().get("nonexistent") is None

    def test_ttl_expiry(self):
        cache = InMemoryCache(default_ttl=3600)
        cache.set("key1", b"value1")

        # Manually expire by adjusting the stored expiry time
        cache._cache["key1"] = (b"value1", time.time() - 10)

        assert cache.get("key1") is None

    def test_no_ttl_never_expires(self):
        cache = InMemoryCache()
        cache.set("key1", b"value1")
        assert cache._cache["key1"][1] is None

    def test_delete_and_clear(self):
        cache = InMemoryCache()
        cache.set("k1", b"v1")
        cache.set("k2", b"v2")
        cache.delete("k1")
        cache.delete("nonexistent")  # Should not raise
        assert cache.get("k1") is None
        assert cache.stats() == {"entries": 1, "size_bytes": 2}
        cache.clear()
        assert cache.get("k2") is None


class TestFileCache:
    """Tests for the filesystem cache."""

    def test_missing_directory_fails(self, tmp_path):
        with pytest.raises(CacheDirectoryNotFound):
            FileCache(tmp_path / "missing")

    def test_get_set(self, tmp_path):
        cache = FileCache(tmp_path)
        cache.set("flat-data-repository:user", b"payload")
        assert cache.get("flat-data-repository:user") == b"payload"
        assert cache.stats()["entries"] == 1

    def test_survives_new_instance(self, tmp_path):
        FileCache(tmp_path).set("key", b"payload")
        assert FileCache(tmp_path).get("key") == b"payload"

    def test_ttl_by_mtime(self, tmp_path):
        cache = FileCache(tmp_path, default_ttl=60)
        cache.set("key", b"payload")
        cache_file = cache._get_cache_file("key")
        old = time.time() - 120
        os.utime(cache_file, (old, old))

        assert cache.get("key") is None
        assert not cache_file.exists()

    def test_delete_and_clear(self, tmp_path):
        cache = FileCache(tmp_path)
        cache.set("k1", b"v1")
        cache.set("k2", b"v2")
        cache.delete("k1")
        assert cache.get("k1") is None
        cache.clear()
        assert cache.get("k2") is None
        assert cache.stats()["entries"] == 0


class BrokenCache:
    def get(self, key):
        raise OSError("cache store unreadable")

    def set(self, key, data):
        raise OSError("cache store unwritable")


class TestCacheGateway:
    """Tests for record set serialization and failure handling."""

    def test_backends_satisfy_protocol(self, tmp_path):
        assert isinstance(InMemoryCache(), RecordCache)
        assert isinstance(FileCache(tmp_path), RecordCache)

    def test_key_format(self):
        gateway = CacheGateway(InMemoryCache())
        assert gateway.make_key("project") == "flat-data-repository:project"

    def test_custom_prefix(self):
        gateway = CacheGateway(InMemoryCache(), key_prefix="test:")
        assert gateway.make_key("project") == "test:project"

    def test_round_trip(self):
        records = {
            0: {"name": "project 0", "some_value": 0},
            "real_project_1": {"manager": {"name": "Mr. Admin"}, "users": {"joe": {}}},
        }
        backend = InMemoryCache()
        gateway = CacheGateway(backend)

        gateway.store("project", records)
        assert isinstance(backend.get("flat-data-repository:project"), bytes)

        loaded = gateway.load("project")
        assert loaded == records
        assert 0 in loaded

    def test_miss(self):
        assert CacheGateway(InMemoryCache()).load("project") is None

    def test_backend_failure_is_a_miss(self):
        gateway = CacheGateway(BrokenCache())
        gateway.store("project", {"a": {}})  # Should not raise
        assert gateway.load("project") is None

    def test_corrupt_entry_is_a_miss(self):
        backend = InMemoryCache()
        backend.set("flat-data-repository:project", b"not a pickle")
        assert CacheGateway(backend).load("project") is None

    def test_serialization_is_pickle(self):
        backend = InMemoryCache()
        CacheGateway(backend).store("user", {"joe": {"name": "Joe"}})
        assert pickle.loads(backend.get("flat-data-repository:user")) == {"joe": {"name": "Joe"}}
