from qrlinks.dao.base.kv_base_store import KeyValueBaseStore


__all__ = [
    'KeyValueBaseStore',
]
