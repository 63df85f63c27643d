from qrlinks.dao.redis.mixins import RedisClientMixin
from qrlinks.dao.redis.redis_kv_store import RedisKeyValueStore


__all__ = [
    'RedisClientMixin',
    'RedisKeyValueStore',
]
