from qrlinks.dao.memory.memory_kv_store import InMemoryKeyValueStore


__all__ = [
    'InMemoryKeyValueStore',
]
