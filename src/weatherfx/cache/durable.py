"""
SQLite-backed durable key/value cache.

Stores JSON documents under string keys so cached weather, exchange rates,
and rate-limit markers survive process restarts. Entries carry their own
fetch timestamp; expiry is decided by readers and by the startup sweep.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Generator, Iterable, Optional

from weatherfx.core.config import default_cache_path
from weatherfx.core.exceptions import CacheError
from weatherfx.core.models import CacheEntry, CacheStats, epoch_ms

logger = logging.getLogger(__name__)

# Prefixes reported separately by stats()
KNOWN_PREFIXES = ("rateLimit_rates_", "rateLimit_weather_", "rates_", "weather_")


class DurableCache:
    """Persistent string-keyed store with JSON (de)serialization.

    Malformed values are never raised to callers: reads treat them as
    absent and remove them.
    """

    def __init__(
        self,
        db_path: Optional[Path] = None,
        clock: Callable[[], int] = epoch_ms,
    ):
        """Initialize the durable cache.

        Args:
            db_path: Path to SQLite database file. Defaults to ~/.weatherfx/cache.db
            clock: Callable returning the current time in epoch milliseconds.
        """
        if db_path is None:
            db_path = default_cache_path()

        self.db_path = Path(db_path)
        self.clock = clock

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        """Initialize the cache database schema."""
        try:
            with self._connection() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS cache (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                """)
        except sqlite3.Error as e:
            raise CacheError("initialization", str(e))

    @contextmanager
    def _connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection context manager.

        Yields:
            sqlite3.Connection that auto-commits on success.
        """
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise CacheError("database operation", str(e))
        finally:
            conn.close()

    def get_json(self, key: str) -> Optional[Any]:
        """Get the decoded JSON value stored under key.

        Args:
            key: Cache key.

        Returns:
            Decoded value, or None if absent or not valid JSON.
        """
        try:
            with self._connection() as conn:
                row = conn.execute(
                    "SELECT value FROM cache WHERE key = ?",
                    (key,),
                ).fetchone()
        except sqlite3.Error as e:
            raise CacheError("get", str(e))

        if row is None:
            return None

        try:
            return json.loads(row["value"])
        except (json.JSONDecodeError, TypeError):
            logger.debug("Discarding malformed cache value at %s", key)
            self._discard(key)
            return None

    def set_json(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under key, overwriting.

        Args:
            key: Cache key.
            value: Value to store.
        """
        try:
            value_json = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise CacheError("set", str(e))

        try:
            with self._connection() as conn:
                conn.execute(
                    "INSERT OR REPLACE INTO cache (key, value) VALUES (?, ?)",
                    (key, value_json),
                )
        except sqlite3.Error as e:
            raise CacheError("set", str(e))

    def get(self, key: str) -> Optional[CacheEntry]:
        """Get the cache entry stored under key.

        Args:
            key: Cache key.

        Returns:
            CacheEntry, or None if absent or malformed.
        """
        data = self.get_json(key)
        if data is None:
            return None

        try:
            return CacheEntry.from_dict(data)
        except ValueError:
            logger.debug("Discarding malformed cache entry at %s", key)
            self._discard(key)
            return None

    def set(self, key: str, entry: CacheEntry) -> None:
        """Store a cache entry under key, replacing any previous entry."""
        self.set_json(key, entry.to_dict())

    def remove(self, key: str) -> bool:
        """Delete a specific cache entry.

        Args:
            key: Cache key to delete.

        Returns:
            True if entry was deleted, False if not found.
        """
        try:
            with self._connection() as conn:
                cursor = conn.execute("DELETE FROM cache WHERE key = ?", (key,))
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            raise CacheError("remove", str(e))

    def _discard(self, key: str) -> None:
        try:
            self.remove(key)
        except CacheError as e:
            logger.debug("Could not remove malformed entry %s: %s", key, e)

    def keys(self, prefix: Optional[str] = None) -> list[str]:
        """List stored keys, optionally only those starting with prefix."""
        try:
            with self._connection() as conn:
                if prefix is None:
                    rows = conn.execute("SELECT key FROM cache ORDER BY key").fetchall()
                else:
                    rows = conn.execute(
                        "SELECT key FROM cache WHERE substr(key, 1, ?) = ? ORDER BY key",
                        (len(prefix), prefix),
                    ).fetchall()
        except sqlite3.Error as e:
            raise CacheError("keys", str(e))
        return [row["key"] for row in rows]

    def sweep(self, prefixes: Iterable[str], max_age_ms: int) -> int:
        """Remove entries under the given prefixes older than max_age_ms.

        The age of an entry is taken from its ``timestamp`` field, or from
        ``last_attempt`` for rate-limit markers. Values that cannot be
        parsed are left in place.

        Args:
            prefixes: Key prefixes to inspect.
            max_age_ms: Entries fetched before ``now - max_age_ms`` are removed.

        Returns:
            Number of entries removed.
        """
        cutoff = self.clock() - max_age_ms
        stale: list[str] = []

        try:
            with self._connection() as conn:
                for prefix in set(prefixes):
                    rows = conn.execute(
                        "SELECT key, value FROM cache WHERE substr(key, 1, ?) = ?",
                        (len(prefix), prefix),
                    ).fetchall()
                    for row in rows:
                        stamp = _stored_timestamp(row["value"])
                        if stamp is not None and stamp < cutoff:
                            stale.append(row["key"])

                conn.executemany(
                    "DELETE FROM cache WHERE key = ?",
                    [(key,) for key in stale],
                )
        except sqlite3.Error as e:
            raise CacheError("sweep", str(e))

        if stale:
            logger.debug("Swept %d stale entries", len(stale))
        return len(stale)

    def clear_all(self) -> int:
        """Clear all cache entries.

        Returns:
            Number of entries removed.
        """
        try:
            with self._connection() as conn:
                cursor = conn.execute("DELETE FROM cache")
                return cursor.rowcount
        except sqlite3.Error as e:
            raise CacheError("clear", str(e))

    def stats(self) -> CacheStats:
        """Get cache statistics.

        Returns:
            CacheStats with entry counts per known key prefix.
        """
        keys = self.keys()
        by_prefix: dict[str, int] = {}
        for key in keys:
            prefix = next((p for p in KNOWN_PREFIXES if key.startswith(p)), "other")
            by_prefix[prefix] = by_prefix.get(prefix, 0) + 1

        return CacheStats(
            total_entries=len(keys),
            db_size_bytes=self.db_path.stat().st_size if self.db_path.exists() else 0,
            db_path=str(self.db_path),
            entries_by_prefix=by_prefix,
        )


def _stored_timestamp(raw: str) -> Optional[int]:
    """Extract the fetch or attempt time from a stored JSON value."""
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return None

    if not isinstance(data, dict):
        return None

    for field_name in ("timestamp", "last_attempt"):
        value = data.get(field_name)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return int(value)
    return None
