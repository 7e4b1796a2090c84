"""
Session-scoped cache for location search results.

Entries are JSON text in a key/value storage backend, like browser session
storage. There is no TTL and no eviction; an entry lives as long as the
backend does and is overwritten by a later write for the same key.
"""
from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading
import time
from typing import Dict, List, Optional, Protocol, Sequence

from domain.models import SERPAPI_SOURCE, Suggestion
from services.errors import CacheWriteFailure
from settings import settings

logger = logging.getLogger(__name__)

KEY_SEPARATOR = "|"
# Fixed region tags. Country and bounding box are not part of the key, so
# searches that compose to the same text share an entry.
KEY_REGION_TAGS = ("IN", "rajasthan")


class CacheStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def clear(self) -> None: ...


class InMemoryStorage:
    """Dict-backed storage that lasts for the lifetime of the process."""

    def __init__(self) -> None:
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)


class SqliteStorage:
    """SQLite-backed storage, for sharing the cache across CLI runs or workers."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        parent = os.path.dirname(os.path.abspath(db_path))
        os.makedirs(parent, exist_ok=True)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._init_schema()

    def _init_schema(self) -> None:
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS search_cache (
                key TEXT PRIMARY KEY,
                payload TEXT NOT NULL,
                created_at INTEGER NOT NULL
            )
            """
        )
        self._conn.commit()

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            row = self._conn.execute(
                "SELECT payload FROM search_cache WHERE key=?", (key,)
            ).fetchone()
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._conn.execute(
                "INSERT OR REPLACE INTO search_cache (key, payload, created_at) VALUES (?, ?, ?)",
                (key, value, int(time.time())),
            )
            self._conn.commit()

    def clear(self) -> None:
        with self._lock:
            self._conn.execute("DELETE FROM search_cache")
            self._conn.commit()


def normalize_query(query: str) -> str:
    return (query or "").strip().lower()


class SearchCache:
    def __init__(self, storage: Optional[CacheStorage] = None, namespace: str = SERPAPI_SOURCE):
        self.storage = storage if storage is not None else InMemoryStorage()
        self.namespace = namespace

    def build_key(self, query: str) -> str:
        return KEY_SEPARATOR.join((self.namespace, *KEY_REGION_TAGS, normalize_query(query)))

    def get(self, key: str) -> Optional[List[Suggestion]]:
        """
        Return cached suggestions for key, or None when the entry is missing,
        unreadable or empty.
        """
        try:
            raw = self.storage.get_item(key)
        except Exception as exc:
            logger.debug("SearchCache.get: storage read failed for %r: %s", key, exc)
            return None
        if raw is None:
            return None
        try:
            payload = json.loads(raw)
            if not isinstance(payload, list) or not payload:
                return None
            return [Suggestion.from_dict(item) for item in payload]
        except (TypeError, ValueError) as exc:
            logger.debug("SearchCache.get: discarding malformed entry %r: %s", key, exc)
            return None

    def put(self, key: str, suggestions: Sequence[Suggestion]) -> None:
        """Store suggestions under key. Empty sequences and storage errors are ignored."""
        if not suggestions:
            return
        try:
            self._write(key, json.dumps([s.to_dict() for s in suggestions]))
        except CacheWriteFailure as exc:
            logger.debug("SearchCache.put: %s", exc)

    def _write(self, key: str, value: str) -> None:
        try:
            self.storage.set_item(key, value)
        except Exception as exc:
            raise CacheWriteFailure(f"storage rejected write for {key!r}: {exc}") from exc

    def clear(self) -> None:
        self.storage.clear()


_default_search_cache: Optional[SearchCache] = None


def get_default_search_cache() -> SearchCache:
    global _default_search_cache
    if _default_search_cache is None:
        if settings.SEARCH_CACHE_PATH:
            _default_search_cache = SearchCache(SqliteStorage(settings.SEARCH_CACHE_PATH))
        else:
            _default_search_cache = SearchCache()
    return _default_search_cache
