"""
SQLite-backed data cache for fetched activity records.
Entries are keyed by data kind + the system-specific identity id and expire lazily on read.
"""

import enum
import json
import logging
import sqlite3
import threading
import time
from typing import Optional, Any, Dict, Callable, List

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60


class DataKind(enum.Enum):
    ISSUES = 'issues'
    COMMITS = 'commits'
    REVIEWS = 'reviews'


def identity_key_for(kind: DataKind, identity) -> str:
    """The id an identity is cached under for one kind: the Jira id for issues, the GitHub login otherwise."""
    return identity.jira_id if kind is DataKind.ISSUES else identity.github_id


# noinspection SqlResolve
SQL_CREATE = """
CREATE TABLE IF NOT EXISTS data_cache (
    key TEXT PRIMARY KEY,
    payload TEXT,
    stored_at REAL
);
"""


class DataCache:
    def __init__(self, path: Optional[str] = None, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.time):
        """Create a cache instance.

        :param path: SQLite file path or None for a process-local in-memory cache.
        :param ttl_seconds: entries older than this are treated as missing and deleted on read.
        :param clock: returns the current time in epoch seconds.
        """
        self.path = path or ':memory:'
        self.conn = sqlite3.connect(self.path, check_same_thread=False)
        self._lock = threading.RLock()
        self.ttl_seconds = float(ttl_seconds)
        self.clock = clock
        self._init_db()

    def _init_db(self):
        with self._lock:
            cur = self.conn.cursor()
            cur.executescript(SQL_CREATE)
            self.conn.commit()

    def close(self):
        with self._lock:
            if self.conn is not None:
                self.conn.close()
                self.conn = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @staticmethod
    def _key(kind: DataKind, identity_key: str) -> str:
        return f"{kind.value}:{identity_key}"

    # noinspection SqlResolve
    def get(self, kind: DataKind, identity_key: str) -> Optional[List[Any]]:
        """Return the payload stored for (kind, identity_key), or None on a miss or after expiry."""
        key = self._key(kind, identity_key)
        with self._lock:
            cur = self.conn.cursor()
            cur.execute('SELECT payload, stored_at FROM data_cache WHERE key = ?', (key,))
            row = cur.fetchone()
            if not row:
                logger.debug("Cache MISS for %s", key)
                return None
            payload, stored_at = row
            age = self.clock() - float(stored_at)
            if age > self.ttl_seconds:
                cur.execute('DELETE FROM data_cache WHERE key = ?', (key,))
                self.conn.commit()
                logger.debug("Cache EXPIRED for %s (age %.1fs)", key, age)
                return None
        logger.info("Cache HIT for %s", key)
        return json.loads(payload)

    # noinspection SqlResolve
    def put(self, kind: DataKind, identity_key: str, payload: List[Any]) -> None:
        """Store a JSON-serializable payload, replacing any previous entry for the key."""
        key = self._key(kind, identity_key)
        encoded = json.dumps(payload)
        with self._lock:
            cur = self.conn.cursor()
            cur.execute('REPLACE INTO data_cache(key, payload, stored_at) VALUES (?, ?, ?)', (key, encoded, self.clock()))
            self.conn.commit()
        logger.info("Cached %d record(s) for %s", len(payload), key)

    # noinspection SqlResolve
    def stats(self) -> Dict[str, Any]:
        """Return basic statistics about the cache: count, oldest and newest store times."""
        with self._lock:
            cur = self.conn.cursor()
            cur.execute('SELECT COUNT(1), MIN(stored_at), MAX(stored_at) FROM data_cache')
            count, oldest, newest = cur.fetchone()
        return {
            'count': int(count or 0),
            'oldest': float(oldest) if oldest is not None else None,
            'newest': float(newest) if newest is not None else None,
            'ttl_seconds': self.ttl_seconds,
        }

    # noinspection SqlResolve
    def list_keys(self, limit: int = 1000) -> list:
        """Return cache keys with their store time and age, newest first."""
        with self._lock:
            cur = self.conn.cursor()
            cur.execute('SELECT key, stored_at FROM data_cache ORDER BY stored_at DESC LIMIT ?', (limit,))
            rows = cur.fetchall()
        now = self.clock()
        return [{'key': k, 'stored_at': float(ts), 'age_seconds': round(now - float(ts), 1)} for k, ts in rows]

    # noinspection SqlResolve
    def delete_key(self, key: str) -> int:
        """Delete a specific cache key. Returns number of rows deleted."""
        with self._lock:
            cur = self.conn.cursor()
            cur.execute('DELETE FROM data_cache WHERE key = ?', (key,))
            self.conn.commit()
            return cur.rowcount

    # noinspection SqlWithoutWhere
    def clear(self):
        """Clear all entries from the cache."""
        with self._lock:
            cur = self.conn.cursor()
            cur.execute('DELETE FROM data_cache')
            self.conn.commit()


__all__ = ["DataCache", "DataKind", "identity_key_for", "DEFAULT_TTL_SECONDS"]
