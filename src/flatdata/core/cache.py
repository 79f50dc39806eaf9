"""
Caching of hydrated record sets.

Backends (:class:`InMemoryCache`, :class:`FileCache`) store opaque bytes by
key. :class:`CacheGateway` owns serialization and key derivation and treats
every backend failure as a miss.
"""

from __future__ import annotations

import hashlib
import logging
import pickle
import time
from pathlib import Path
from typing import Any

from flatdata.core.exceptions import CacheDirectoryNotFound
from flatdata.core.values import RecordSet
from flatdata.repositories.protocols import RecordCache

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "flat-data-repository:"


class InMemoryCache:
    """Process-local cache with optional TTL."""

    def __init__(self, default_ttl: int | None = None):
        """
        Initialize in-memory cache.

        Args:
            default_ttl: Seconds an entry stays valid (None = forever)
        """
        self._cache: dict[str, tuple[bytes, float | None]] = {}  # key -> (data, expiry)
        self._default_ttl = default_ttl

    def get(self, key: str) -> bytes | None:
        """Get value from cache."""
        if key not in self._cache:
            return None

        data, expiry = self._cache[key]
        if expiry is not None and time.time() >= expiry:
            del self._cache[key]
            return None
        return data

    def set(self, key: str, data: bytes, ttl: int | None = None) -> None:
        """Set value in cache."""
        ttl = ttl if ttl is not None else self._default_ttl
        expiry = time.time() + ttl if ttl is not None else None
        self._cache[key] = (data, expiry)

    def delete(self, key: str) -> None:
        """Delete key from cache."""
        self._cache.pop(key, None)

    def clear(self) -> None:
        """Clear entire cache."""
        self._cache.clear()

    def stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        return {
            "entries": len(self._cache),
            "size_bytes": sum(len(data) for data, _ in self._cache.values()),
        }


class FileCache:
    """
    Filesystem cache, one file per key.

    Survives restarts; entries never expire unless a TTL is given, in which
    case age is measured from the file's modification time.
    """

    suffix = ".cache"

    def __init__(self, cache_dir: Path | str, default_ttl: int | None = None):
        """
        Initialize file cache.

        Args:
            cache_dir: Existing directory for cache files
            default_ttl: Maximum entry age in seconds (None = forever)

        Raises:
            CacheDirectoryNotFound: If ``cache_dir`` does not exist.
        """
        self._cache_dir = Path(cache_dir)
        if not self._cache_dir.is_dir():
            raise CacheDirectoryNotFound(self._cache_dir)
        self._default_ttl = default_ttl

    def get(self, key: str) -> bytes | None:
        """Get value from cache."""
        cache_file = self._get_cache_file(key)

        if not cache_file.exists():
            return None

        if self._default_ttl is not None:
            mtime = cache_file.stat().st_mtime
            if time.time() - mtime > self._default_ttl:
                self.delete(key)
                return None

        return cache_file.read_bytes()

    def set(self, key: str, data: bytes) -> None:
        """Set value in cache."""
        cache_file = self._get_cache_file(key)
        tmp_file = cache_file.with_suffix(".tmp")
        tmp_file.write_bytes(data)
        tmp_file.replace(cache_file)

    def delete(self, key: str) -> None:
        """Delete key from cache."""
        cache_file = self._get_cache_file(key)
        if cache_file.exists():
            cache_file.unlink()

    def clear(self) -> None:
        """Clear entire cache."""
        for cache_file in self._cache_dir.glob(f"*{self.suffix}"):
            cache_file.unlink()

    def _get_cache_file(self, key: str) -> Path:
        """Get cache file path for key."""
        # Hash key to get safe filename
        key_hash = hashlib.md5(key.encode()).hexdigest()
        return self._cache_dir / f"{key_hash}{self.suffix}"

    def stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        cache_files = list(self._cache_dir.glob(f"*{self.suffix}"))
        return {
            "entries": len(cache_files),
            "size_bytes": sum(f.stat().st_size for f in cache_files),
        }


class CacheGateway:
    """
    Stores and retrieves hydrated record sets keyed by repository name.

    The engine never invalidates entries; a stale entry after a repository
    file changes must be cleared by the operator.
    """

    def __init__(self, cache: RecordCache, key_prefix: str = DEFAULT_KEY_PREFIX):
        self.cache = cache
        self.key_prefix = key_prefix

    def make_key(self, repository_name: str) -> str:
        """Cache key for a repository, stable across processes."""
        return f"{self.key_prefix}{repository_name}"

    def load(self, repository_name: str) -> RecordSet | None:
        """
        Fetch a hydrated record set.

        Returns:
            The record set, or None on a miss or any cache failure.
        """
        key = self.make_key(repository_name)
        try:
            data = self.cache.get(key)
            if data is None:
                logger.debug("Cache miss for %s", key)
                return None
            records = pickle.loads(data)
        except Exception as e:
            logger.warning("Cache read failed for %s, treating as miss: %s", key, e)
            return None

        logger.debug("Cache hit for %s", key)
        return records

    def store(self, repository_name: str, records: RecordSet) -> None:
        """Write a hydrated record set; failures are logged and ignored."""
        key = self.make_key(repository_name)
        try:
            self.cache.set(key, pickle.dumps(records, protocol=pickle.HIGHEST_PROTOCOL))
        except Exception as e:
            logger.warning("Cache write failed for %s: %s", key, e)
