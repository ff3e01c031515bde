"""Typed configuration property classes for polycache."""

from polycache.config.properties.cache import (
    CacheProperties,
    FileSystemCacheProperties,
    LocalCacheProperties,
    RedisCacheProperties,
)
from polycache.config.properties.logging import LoggingProperties

__all__ = [
    "CacheProperties",
    "FileSystemCacheProperties",
    "LocalCacheProperties",
    "LoggingProperties",
    "RedisCacheProperties",
]
