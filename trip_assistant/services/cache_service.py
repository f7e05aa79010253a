"""
TTL caches for vibe suggestions.

Vibes for a destination rarely change, so repeated lookups are served from
cache instead of calling Gemini again. The in-memory cache is the default;
the DynamoDB cache shares entries across processes when the DynamoDB
backing is enabled.
"""

import hashlib
import threading
import time
from typing import Any, Protocol

from trip_assistant.data.dynamodb import DynamoDBClient


class CacheService(Protocol):
    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...


class InMemoryCache:
    """Process-local cache with per-entry expiry."""

    def __init__(self, ttl: int = 3600):
        self.ttl = ttl
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = (time.monotonic() + self.ttl, value)

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= time.monotonic():
                del self._entries[key]
                return None
            return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class DynamoDBCache:
    """Cache backed by DynamoDB with TTL auto-expiry."""

    def __init__(self, db: DynamoDBClient, ttl: int = 3600):
        self.db = db
        self.ttl = ttl

    def _cache_key(self, key: str) -> tuple[str, str]:
        hashed = hashlib.sha256(key.encode()).hexdigest()[:16]
        return f"CACHE#{hashed}", "DATA"

    def set(self, key: str, value: Any) -> None:
        pk, sk = self._cache_key(key)
        self.db.put_item(
            {
                "PK": pk,
                "SK": sk,
                "EntityType": "Cache",
                "Data": {"value": value},
                "TTL": int(time.time()) + self.ttl,
            }
        )

    def get(self, key: str) -> Any | None:
        pk, sk = self._cache_key(key)
        item = self.db.get_item(pk, sk)
        if not item:
            return None
        # DynamoDB deletes expired items lazily
        if item.get("TTL", 0) < time.time():
            return None
        return item.get("Data", {}).get("value")
