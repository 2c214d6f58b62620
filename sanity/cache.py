"""Cache adapters for frequency-gated module results.

Any object with async ``init()``, ``get(key)`` and ``set(key, value, ttl)``
works as a cache. Two are bundled: an in-process ``MemoryCache`` and a
SQLite-backed ``SqliteCache`` that survives between CLI invocations.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import time
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

DB_PATH = Path.home() / ".cache" / "sanity" / "cache.db"


@runtime_checkable
class CacheAdapter(Protocol):
    async def init(self) -> None: ...

    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl: float) -> None: ...


def mangle_key(key: str) -> str:
    return f"sanity/{key}"


# ── Memory ───────────────────────────────────────────────────────────────────


class MemoryCache:
    """Process-local cache. Entries expire ``ttl`` seconds after being set."""

    def __init__(self, clock: Any = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    async def init(self) -> None:
        return None

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(mangle_key(key))
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            self._entries.pop(mangle_key(key), None)
            return None
        return value

    async def set(self, key: str, value: Any, ttl: float) -> None:
        self._entries[mangle_key(key)] = (self._clock() + ttl, value)

    def clear(self) -> None:
        self._entries.clear()


# ── SQLite ───────────────────────────────────────────────────────────────────


class SqliteCache:
    """SQLite-backed cache storing JSON values with an absolute expiry time."""

    def __init__(self, db_path: Path | None = None) -> None:
        self._db_path = db_path or DB_PATH
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode=WAL")
        return self._conn

    async def init(self) -> None:
        conn = self._get_conn()
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS cache_entries (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                expires_at REAL NOT NULL
            );
        """)
        conn.commit()
        logger.debug("SQLite cache ready at %s", self._db_path)

    async def get(self, key: str) -> Any | None:
        row = self._get_conn().execute(
            "SELECT value, expires_at FROM cache_entries WHERE key = ?",
            (mangle_key(key),),
        ).fetchone()
        if row is None:
            return None
        if row["expires_at"] <= time.time():
            return None
        return json.loads(row["value"])

    async def set(self, key: str, value: Any, ttl: float) -> None:
        conn = self._get_conn()
        conn.execute(
            "INSERT OR REPLACE INTO cache_entries (key, value, expires_at) VALUES (?, ?, ?)",
            (mangle_key(key), json.dumps(value), time.time() + ttl),
        )
        conn.commit()

    def cleanup_expired(self) -> int:
        """Remove expired rows. Returns the number deleted."""
        conn = self._get_conn()
        cursor = conn.execute(
            "DELETE FROM cache_entries WHERE expires_at <= ?", (time.time(),),
        )
        conn.commit()
        return cursor.rowcount

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None
