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
"""In-process key-value segment shared by every caller in the interpreter."""

from __future__ import annotations

import time
from collections.abc import Callable
from threading import Lock
from typing import Any

from polycache.cache.ports.storage import StoreEntry


class InProcessStore:
    """Thread-safe in-memory store with per-entry TTLs in seconds.

    Mirrors the behaviour of a shared-memory extension: ``add`` refuses to
    overwrite a live entry, ``fetch`` reports success separately from the
    value, expired entries behave as absent and are dropped lazily, and
    ``entries`` lists every live entry with its TTL and creation time.
    """

    def __init__(self, enabled: bool = True, clock: Callable[[], float] = time.time) -> None:
        self.enabled = enabled
        self._clock = clock
        self._rows: dict[str, StoreEntry] = {}
        self._lock = Lock()

    def _live(self, key: str, now: float) -> StoreEntry | None:
        row = self._rows.get(key)
        if row is None:
            return None
        if row.ttl > 0 and now >= row.creation_time + row.ttl:
            del self._rows[key]
            return None
        return row

    def add(self, key: str, value: Any, ttl: int = 0) -> bool:
        """Insert *value* unless a live entry already holds *key*."""
        with self._lock:
            now = self._clock()
            if self._live(key, now) is not None:
                return False
            self._rows[key] = StoreEntry(info=key, value=value, ttl=max(0, int(ttl)), creation_time=now)
            return True

    def fetch(self, key: str) -> tuple[Any, bool]:
        with self._lock:
            row = self._live(key, self._clock())
        if row is None:
            return None, False
        return row.value, True

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if a live entry existed."""
        with self._lock:
            existed = self._live(key, self._clock()) is not None
            self._rows.pop(key, None)
            return existed

    def exists(self, key: str) -> bool:
        with self._lock:
            return self._live(key, self._clock()) is not None

    def clear(self) -> None:
        with self._lock:
            self._rows.clear()

    def entries(self) -> list[StoreEntry]:
        """Snapshot of all live entries, in insertion order."""
        with self._lock:
            now = self._clock()
            return [row for key in list(self._rows) if (row := self._live(key, now)) is not None]

    def __len__(self) -> int:
        return len(self.entries())


_default_store: InProcessStore | None = InProcessStore()


def default_store() -> InProcessStore | None:
    """The process-wide segment shared by adapters built without an explicit store."""
    return _default_store


def set_default_store(store: InProcessStore | None) -> InProcessStore | None:
    """Replace the process-wide segment (None removes it); returns the previous one."""
    global _default_store
    previous, _default_store = _default_store, store
    return previous
