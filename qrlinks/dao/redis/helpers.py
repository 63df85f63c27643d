import functools
from collections.abc import Callable
from typing import Any

import redis

from qrlinks.dao.exceptions import DataStoreError


__all__ = []


def _describe_connection(client: redis.Redis) -> str:
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def handle_redis_connection_error[F: Callable[..., Any]](method: F) -> F:
    """Wrap Redis-interacting store methods to handle connection errors

    Args:
        method (Callable[..., Any]):
            Store method performing Redis operations which may raise
            redis.exceptions.ConnectionError or redis.exceptions.TimeoutError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on connectivity issues with Redis.

    Example:
        >>> @handle_redis_connection_error
        ... def get(self, key):
        ...     return self.redis.get(key)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise DataStoreError(f"Can't connect to Redis at {_describe_connection(self.redis)}.") from e

    return wrapper
