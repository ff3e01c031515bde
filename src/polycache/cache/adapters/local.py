# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Process-local cache adapter over the in-process store."""

from __future__ import annotations

from typing import Any, Self

import structlog

from polycache.cache.keys import CacheKey, serialize_key
from polycache.cache.ports.storage import LocalStore
from polycache.cache.store import default_store
from polycache.kernel.exceptions import ConfigurationException, ValidationException

logger = structlog.get_logger("polycache.cache.local")


class LocalCacheAdapter:
    """Cache adapter backed by a process-wide in-memory segment.

    TTLs are in seconds. Every adapter built without an explicit *store*
    shares :func:`~polycache.cache.store.default_store`, so :meth:`clear`
    empties the segment for all of them, not just for this instance.
    """

    def __init__(self, store: LocalStore | None = None) -> None:
        store = store if store is not None else default_store()
        if store is None:
            raise ConfigurationException(
                "Can not use the process-local cache: no in-process store is available",
                code="CACHE_STORE_MISSING",
            )
        if not store.enabled:
            raise ConfigurationException(
                "Can not use the process-local cache: the in-process store is disabled. "
                "Enable it with polycache.cache.local.enabled=true",
                code="CACHE_STORE_DISABLED",
            )
        self._store = store

    @staticmethod
    def _check_ttl(ttl: int | None) -> None:
        if ttl is not None and ttl < 0:
            raise ValidationException(
                f"TTL must be 0 (no expiry) or a positive number of seconds, {ttl!r} given",
                code="CACHE_INVALID_TTL",
            )

    def set(self, key: CacheKey, value: Any, ttl: int | None = 300) -> Self:
        """Store *value*, replacing any existing entry for *key*."""
        name = serialize_key(key)
        self._check_ttl(ttl)
        self._store.delete(name)
        self._store.add(name, value, ttl or 0)
        return self

    def get(self, key: CacheKey, default: Any = None) -> Any:
        value, success = self._store.fetch(serialize_key(key))
        if success:
            return value
        return default

    def expire(self, key: CacheKey) -> Self:
        self._store.delete(serialize_key(key))
        return self

    def clear(self) -> Self:
        """Empty the whole shared segment."""
        self._store.clear()
        return self

    def exists(self, key: CacheKey) -> bool:
        return self._store.exists(serialize_key(key))

    def touch(self, key: CacheKey, ttl: int | None = None) -> Self:
        """Restart the lifetime of *key*, keeping its TTL unless *ttl* is given.

        The store has no "reset TTL" primitive, so this scans every entry in
        the shared segment to recover the current TTL: O(n) in the total
        number of entries held by all callers.
        """
        name = serialize_key(key)
        self._check_ttl(ttl)
        if not self._store.exists(name):
            return self

        for entry in self._store.entries():
            if entry.info == name:
                lifetime = entry.ttl if ttl is None else ttl
                self._store.delete(name)
                self._store.add(name, entry.value, lifetime)
                logger.debug("local_cache_touch", key=name, ttl=lifetime)
                break

        return self
