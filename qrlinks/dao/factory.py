"""Process-wide key-value store selection.

The backend is chosen once, on first use, from `store_config()` and then
shared by every service in the process. Handlers inject the result into the
services they build; business logic never looks at the environment.

Example:
    >>> from qrlinks.dao.factory import kv_store
    >>> store = kv_store()
    >>> store.is_local
    True
"""

import functools
import logging

from qrlinks.dao.base import KeyValueBaseStore
from qrlinks.dao.memory import InMemoryKeyValueStore
from qrlinks.dao.redis import RedisKeyValueStore
from qrlinks.exceptions import BadConfigurationError
from qrlinks.utils.config import store_config


logger = logging.getLogger(__name__)


def build_store(config: dict) -> KeyValueBaseStore:
    """Build a store from a {<backend>: {...params}} configuration"""
    if 'redis' in config:
        redis_config = {f'redis_{k}': v for k, v in config['redis'].items()}
        return RedisKeyValueStore(**redis_config)
    if 'memory' in config:
        return InMemoryKeyValueStore()
    raise BadConfigurationError(f'No supported store backend in configuration (given: {sorted(config)}).')


@functools.cache
def kv_store() -> KeyValueBaseStore:
    config = store_config()
    store = build_store(config)
    logger.info('Selected key-value store backend.', extra={'backend': next(iter(config)), 'isLocal': store.is_local})
    return store
