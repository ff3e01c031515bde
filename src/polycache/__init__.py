"""polycache: uniform set/get/expire/clear/exists over interchangeable cache backends."""

from polycache.cache import (
    CacheAdapter,
    Expiration,
    FileSystemCacheAdapter,
    LocalCacheAdapter,
    RedisCacheAdapter,
    TouchableCacheAdapter,
    create_cache_adapter,
)
from polycache.kernel.exceptions import (
    ConfigurationException,
    PolyCacheException,
    ProtocolException,
    ValidationException,
)

__version__ = "0.1.0"

__all__ = [
    "CacheAdapter",
    "ConfigurationException",
    "Expiration",
    "FileSystemCacheAdapter",
    "LocalCacheAdapter",
    "PolyCacheException",
    "ProtocolException",
    "RedisCacheAdapter",
    "TouchableCacheAdapter",
    "ValidationException",
    "create_cache_adapter",
]
