"""Cache ports: the adapter contract and its storage collaborators."""

from polycache.cache.ports.outbound import CacheAdapter, TouchableCacheAdapter
from polycache.cache.ports.storage import FileHandle, LocalStore, StoreEntry

__all__ = ["CacheAdapter", "FileHandle", "LocalStore", "StoreEntry", "TouchableCacheAdapter"]
