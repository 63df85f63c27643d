from qrlinks.dao.base import KeyValueBaseStore
from qrlinks.dao.key_schema import KeySchema
from qrlinks.dao.memory import InMemoryKeyValueStore
from qrlinks.dao.redis import RedisKeyValueStore


__all__ = [
    'KeyValueBaseStore',
    'KeySchema',
    'InMemoryKeyValueStore',
    'RedisKeyValueStore',
]
