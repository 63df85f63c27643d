"""Process-local key-value store for development

Simulates the Redis store when no Redis server is configured. Data lives only
as long as the current process. Documents are deep-copied on the way in and
out so callers never share mutable state with the store.
"""

import copy
import fnmatch
import threading
import time
from typing import Any

from beartype import beartype

from qrlinks.dao.base import KeyValueBaseStore


class InMemoryKeyValueStore(KeyValueBaseStore):
    """Dict-backed key-value store with lazy TTL expiry.

    Attributes:
        is_local (bool):
            Always True, data is not shared between processes.

    Example:
        >>> store = InMemoryKeyValueStore()
        >>> store.set('ratelimit:203.0.113.7', {'attempts': 1, 'firstAttempt': 0}, ttl=1800)
        True
        >>> store.get('ratelimit:203.0.113.7')
        {'attempts': 1, 'firstAttempt': 0}
    """

    is_local = True

    def __init__(self, clock=time.monotonic):
        self._data: dict[str, dict[str, Any]] = {}
        self._expiry: dict[str, float] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def _alive(self, key: str) -> bool:
        # Caller must hold self._lock
        expires_at = self._expiry.get(key)
        if expires_at is not None and expires_at <= self._clock():
            self._data.pop(key, None)
            self._expiry.pop(key, None)
        return key in self._data

    @beartype
    def get(self, key: str) -> dict[str, Any] | None:
        with self._lock:
            if not self._alive(key):
                return None
            return copy.deepcopy(self._data[key])

    @beartype
    def set(self, key: str, value: dict[str, Any], ttl: int | None = None, nx: bool = False) -> bool:
        with self._lock:
            if nx and self._alive(key):
                return False
            self._data[key] = copy.deepcopy(value)
            if ttl is None:
                self._expiry.pop(key, None)
            else:
                self._expiry[key] = self._clock() + ttl
            return True

    @beartype
    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)
            self._expiry.pop(key, None)

    @beartype
    def keys(self, pattern: str) -> list[str]:
        with self._lock:
            return [key for key in list(self._data) if self._alive(key) and fnmatch.fnmatchcase(key, pattern)]

    @beartype
    def hincrby(self, key: str, field: str, amount: int) -> int | None:
        with self._lock:
            if not self._alive(key):
                return None
            document = self._data[key]
            document[field] = int(document.get(field) or 0) + amount
            return document[field]

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self._expiry.clear()

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for key in list(self._data) if self._alive(key))
