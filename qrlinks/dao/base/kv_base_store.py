"""Abstract base class for key-value stores.

This class establishes a consistent contract for every storage backend the
application can run on (a Redis server or a process-local map). Services
depend only on this contract and receive a concrete store by injection.

Responsibilities:
    - Store and retrieve JSON documents under string keys.
    - Enumerate keys by glob pattern.
    - Increment an integer field of a stored document.
    - Standardize error handling across backends (DataStoreError).

Example:
    >>> from qrlinks.dao.memory import InMemoryKeyValueStore
    >>> store = InMemoryKeyValueStore()
    >>> store.set('link:promo', {'destination': 'https://example.com', 'clicks': 0})
    True
    >>> store.hincrby('link:promo', 'clicks', 1)
    1
    >>> store.keys('link:*')
    ['link:promo']
"""

from abc import ABC, abstractmethod
from typing import Any


class KeyValueBaseStore(ABC):
    """Interface for key-value stores.

    Methods:
        get(key: str) -> dict | None:
            Return the JSON document stored under `key`, or None.

        set(key: str, value: dict, ttl: int | None = None, nx: bool = False) -> bool:
            Store a JSON document. Optionally expire it after `ttl` seconds
            and/or only write it if the key doesn't exist yet.

        delete(key: str) -> None:
            Remove a key. Deleting a missing key is a no-op.

        keys(pattern: str) -> list[str]:
            Return all keys matching a glob pattern (e.g. 'link:*').

        hincrby(key: str, field: str, amount: int) -> int | None:
            Increment an integer field of the document stored under `key`.

    Attributes:
        is_local (bool):
            True if data lives only in the current process.

    NOTE:
        - No transactional guarantees span multiple keys.
        - All methods raise DataStoreError on backend failures.
    """

    is_local: bool = False

    @abstractmethod
    def get(self, key: str) -> dict[str, Any] | None:
        """Retrieve a JSON document.

        Args:
            key (str):
                Store key.

        Returns:
            dict | None: The stored document, or None if the key doesn't exist (or expired).

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def set(self, key: str, value: dict[str, Any], ttl: int | None = None, nx: bool = False) -> bool:
        """Store a JSON document.

        Args:
            key (str):
                Store key.

            value (dict):
                JSON-serializable document.

            ttl (int | None):
                Expire the key after this many seconds. None keeps it forever.

            nx (bool):
                Only write if the key doesn't exist yet.

        Returns:
            bool: True if the document was written, False if `nx` prevented the write.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    @abstractmethod
    def keys(self, pattern: str) -> list[str]:
        pass

    @abstractmethod
    def hincrby(self, key: str, field: str, amount: int) -> int | None:
        """Increment an integer field of a stored JSON document.

        Implementations must apply the increment atomically for a single key.
        A missing field counts as 0.

        Args:
            key (str):
                Store key holding the document.

            field (str):
                Document field to increment.

            amount (int):
                Increment (may be negative).

        Returns:
            int | None: The new field value, or None if the key doesn't exist.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
