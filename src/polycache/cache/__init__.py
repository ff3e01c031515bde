"""polycache cache: one contract over process-local, filesystem and redis storage."""

from polycache.cache.adapters.filesystem import FileSystemCacheAdapter
from polycache.cache.adapters.local import LocalCacheAdapter
from polycache.cache.adapters.redis import RedisCacheAdapter
from polycache.cache.auto_configuration import CacheAutoConfiguration, create_cache_adapter
from polycache.cache.expiration import Expiration
from polycache.cache.keys import hash_key, serialize_key, validate_key
from polycache.cache.ports.outbound import CacheAdapter, TouchableCacheAdapter
from polycache.cache.store import InProcessStore, default_store

__all__ = [
    "CacheAdapter",
    "CacheAutoConfiguration",
    "Expiration",
    "FileSystemCacheAdapter",
    "InProcessStore",
    "LocalCacheAdapter",
    "RedisCacheAdapter",
    "TouchableCacheAdapter",
    "create_cache_adapter",
    "default_store",
    "hash_key",
    "serialize_key",
    "validate_key",
]
