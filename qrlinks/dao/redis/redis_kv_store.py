"""Key-value store implementation backed by Redis

This module provides the durable implementation of KeyValueBaseStore. Every
value is a JSON document serialized to a Redis string.

Responsibilities:
    - Get/set/delete JSON documents (with optional TTL and SET NX semantics);
    - Enumerate keys by glob pattern without blocking Redis (SCAN);
    - Atomically increment a field of a stored JSON document;
    - Translate Redis connectivity failures into DAO exceptions.

Classes:
    RedisKeyValueStore:
        Store JSON documents in a Redis datastore.

Example:
    >>> from qrlinks.dao.redis import RedisKeyValueStore

    >>> store = RedisKeyValueStore(redis_url='redis://localhost:6379/0')

    >>> store.set('link:promo', {'destination': 'https://example.com', 'clicks': 0}, nx=True)
    True
    >>> store.set('link:promo', {'destination': 'https://example.org', 'clicks': 0}, nx=True)
    False

    >>> store.hincrby('link:promo', 'clicks', 1)
    1
    >>> store.get('link:promo')
    {'destination': 'https://example.com', 'clicks': 1}
"""

import json
from typing import Any

from beartype import beartype

from qrlinks.dao.base import KeyValueBaseStore
from qrlinks.dao.redis.mixins import RedisClientMixin
from qrlinks.dao.redis.helpers import handle_redis_connection_error
from qrlinks.dao.exceptions import CorruptDocumentError


SCAN_BATCH_SIZE = 500


class RedisKeyValueStore(RedisClientMixin, KeyValueBaseStore):
    """Redis-based key-value store for JSON documents

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.

    Methods:
        get(key: str) -> dict | None:
            GET and decode a JSON document.

        set(key: str, value: dict, ttl: int | None = None, nx: bool = False) -> bool:
            SET a JSON document, optionally with EX and NX.

        delete(key: str) -> None:
            DEL a key.

        keys(pattern: str) -> list[str]:
            SCAN for keys matching a glob pattern.

        hincrby(key: str, field: str, amount: int) -> int | None:
            Increment a document field inside a WATCH/MULTI/EXEC transaction.

    All methods raise DataStoreError on connectivity issues with Redis.
    """

    is_local = False

    @staticmethod
    def _decode(key: str, raw: str | bytes | None) -> dict[str, Any] | None:
        if raw is None:
            return None
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptDocumentError(f"Value stored under '{key}' is not valid JSON.") from e
        if not isinstance(document, dict):
            raise CorruptDocumentError(f"Value stored under '{key}' is not a JSON object.")
        return document

    @handle_redis_connection_error
    @beartype
    def get(self, key: str) -> dict[str, Any] | None:
        return self._decode(key, self.redis.get(key))

    @handle_redis_connection_error
    @beartype
    def set(self, key: str, value: dict[str, Any], ttl: int | None = None, nx: bool = False) -> bool:
        """SET a JSON document

        NOTE: Redis answers SET ... NX with nil when the key already exists,
              which is how a lost race on the same key is detected.

        Example:
            >>> store.set('session:abc', {'createdAt': 1, 'expiresAt': 2}, ttl=604800)
            True
        """
        written = self.redis.set(key, json.dumps(value), ex=ttl, nx=nx)
        return bool(written)

    @handle_redis_connection_error
    @beartype
    def delete(self, key: str) -> None:
        self.redis.delete(key)

    @handle_redis_connection_error
    @beartype
    def keys(self, pattern: str) -> list[str]:
        return list(self.redis.scan_iter(match=pattern, count=SCAN_BATCH_SIZE))

    @handle_redis_connection_error
    @beartype
    def hincrby(self, key: str, field: str, amount: int) -> int | None:
        """Increment an integer field of a stored JSON document

        The read-modify-write runs inside an optimistic transaction: the key is
        WATCHed, and redis-py retries the whole callable if another client
        modifies the key before EXEC. Concurrent increments are therefore never
        lost. The key's TTL (if any) is preserved via KEEPTTL.

        Example:
            >>> store.hincrby('link:promo', 'clicks', 1)
            8
        """

        def _increment(pipe) -> int | None:
            document = self._decode(key, pipe.get(key))
            if document is None:
                return None

            document[field] = int(document.get(field) or 0) + amount
            pipe.multi()
            pipe.set(key, json.dumps(document), keepttl=True)
            return document[field]

        return self.redis.transaction(_increment, key, value_from_callable=True)
