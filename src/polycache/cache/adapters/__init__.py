"""Cache adapters: concrete cache implementations."""

from polycache.cache.adapters.filesystem import FileSystemCacheAdapter
from polycache.cache.adapters.local import LocalCacheAdapter
from polycache.cache.adapters.redis import RedisCacheAdapter

__all__ = ["FileSystemCacheAdapter", "LocalCacheAdapter", "RedisCacheAdapter"]
