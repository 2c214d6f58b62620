"""Tests for the bundled cache adapters."""

from __future__ import annotations

import asyncio
import sqlite3
from pathlib import Path

import pytest

from sanity.cache import CacheAdapter, MemoryCache, SqliteCache


@pytest.fixture
def sqlite_cache(tmp_path: Path) -> SqliteCache:
    c = SqliteCache(db_path=tmp_path / "nested" / "cache.db")
    asyncio.run(c.init())
    return c


class TestMemoryCache:
    def test_protocol(self, cache: MemoryCache) -> None:
        assert isinstance(cache, CacheAdapter)

    def test_set_get(self, cache: MemoryCache) -> None:
        asyncio.run(cache.set("m", {"value": "ok"}, 60))
        assert asyncio.run(cache.get("m")) == {"value": "ok"}

    def test_miss(self, cache: MemoryCache) -> None:
        assert asyncio.run(cache.get("missing")) is None

    def test_expiry(self) -> None:
        now = [0.0]
        c = MemoryCache(clock=lambda: now[0])
        asyncio.run(c.set("m", "v", 5))
        now[0] = 4.9
        assert asyncio.run(c.get("m")) == "v"
        now[0] = 5.0
        assert asyncio.run(c.get("m")) is None


class TestSqliteCache:
    def test_protocol(self, sqlite_cache: SqliteCache) -> None:
        assert isinstance(sqlite_cache, CacheAdapter)

    def test_set_get_roundtrip_json(self, sqlite_cache: SqliteCache) -> None:
        value = {"last_run": "2025-01-01T00:00:00+00:00", "frequency": "1m", "value": {"a": "ok"}}
        asyncio.run(sqlite_cache.set("m", value, 60))
        assert asyncio.run(sqlite_cache.get("m")) == value

    def test_keys_are_mangled(self, sqlite_cache: SqliteCache, tmp_path: Path) -> None:
        asyncio.run(sqlite_cache.set("disk", "v", 60))
        conn = sqlite3.connect(str(tmp_path / "nested" / "cache.db"))
        keys = [r[0] for r in conn.execute("SELECT key FROM cache_entries")]
        conn.close()
        assert keys == ["sanity/disk"]

    def test_expired_is_miss(self, sqlite_cache: SqliteCache) -> None:
        asyncio.run(sqlite_cache.set("m", "v", 0))
        assert asyncio.run(sqlite_cache.get("m")) is None
        assert sqlite_cache.cleanup_expired() == 1

    def test_overwrite(self, sqlite_cache: SqliteCache) -> None:
        asyncio.run(sqlite_cache.set("m", "old", 60))
        asyncio.run(sqlite_cache.set("m", "new", 60))
        assert asyncio.run(sqlite_cache.get("m")) == "new"

    def test_survives_reopen(self, sqlite_cache: SqliteCache) -> None:
        asyncio.run(sqlite_cache.set("m", "v", 60))
        sqlite_cache.close()
        assert asyncio.run(sqlite_cache.get("m")) == "v"
