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
"""Filesystem cache adapter.

Each entry is one artifact file inside the cache directory. Its TTL state
lives in the file name, so expiry checks never open the file::

    <md5(key)>-<ttl ms>-<expiry unix seconds><extension>

The wildcard form ``<md5(key)>-*-*<extension>`` is only ever used as a glob
pattern to find the artifact of a key; it is never written to disk.

Expired artifacts are removed when a read runs into them and by a
probabilistic sweep: each ``set``/``get`` has a 1-in-``probability`` chance of
running :meth:`FileSystemCacheAdapter.clear_expired` over the directory.
Sweep timing is therefore not guaranteed.

No locking is done. Concurrent writers racing on one key may leave
duplicate artifacts behind or lose a write; reads use the first match.
"""

from __future__ import annotations

import glob
import os
import pickle
import random
import re
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, Self

import structlog

from polycache.cache.expiration import Expiration
from polycache.cache.files import LocalFile
from polycache.cache.keys import CacheKey, hash_key, validate_key
from polycache.cache.ports.storage import FileHandle
from polycache.kernel.exceptions import ConfigurationException, ValidationException

logger = structlog.get_logger("polycache.cache.filesystem")

WILDCARD = "*"

_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def format_name(key_hash: str, ttl: int | None, expires_at: float | None, extension: str) -> str:
    """Compose an artifact name; a missing *ttl* yields the wildcard lookup form."""
    if not ttl or expires_at is None:
        return f"{key_hash}-{WILDCARD}-{WILDCARD}{extension}"
    return f"{key_hash}-{int(ttl)}-{float(expires_at)!r}{extension}"


def _number_prefix(segment: str) -> float:
    match = _NUMBER_PREFIX.match(segment)
    return float(match.group(0)) if match else 0.0


def parse_name(name: str) -> Expiration:
    """Decode the TTL and expiry instant carried by an artifact name.

    Names with fewer than three dash-separated segments decode to the zero
    expiration. Each numeric segment is read up to its first non-numeric
    character, so the trailing extension does not matter.
    """
    parts = name.split("-")
    if len(parts) < 3:
        return Expiration()
    return Expiration(time=_number_prefix(parts[2]), expiration=int(_number_prefix(parts[1])))


def normalize_extension(extension: str) -> str:
    """``"cache"``, ``".cache"`` and ``"..cache"`` all become ``".cache"``."""
    return "." + extension.lstrip(".")


class FileSystemCacheAdapter:
    """Cache adapter storing pickled values in TTL-named artifact files.

    TTLs are in milliseconds.

    Args:
        directory: Existing cache directory; must be readable and writable.
        extension: Artifact file extension, with or without leading dot.
        probability: Garbage collection runs on roughly one in *probability*
            ``set``/``get`` calls; ``0`` disables automatic collection.
        rng: Random source for the collection draw.
        clock: Returns the current time in Unix seconds.
        file_factory: Builds the :class:`FileHandle` for a path.
    """

    def __init__(
        self,
        directory: str | Path,
        extension: str = ".cache",
        probability: int = 5,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
        file_factory: Callable[[Path], FileHandle] = LocalFile,
    ) -> None:
        self._directory = self._check_directory(Path(directory))
        self._extension = normalize_extension(extension)
        self.set_probability(probability)
        self._rng = rng if rng is not None else random.Random()
        self._clock = clock
        self._file_factory = file_factory

    @staticmethod
    def _check_directory(directory: Path) -> Path:
        if not directory.is_dir():
            raise ConfigurationException(
                f"Cache folder '{directory}' does not exist",
                code="CACHE_DIRECTORY_MISSING",
                context={"directory": str(directory)},
            )
        if not os.access(directory, os.W_OK):
            raise ConfigurationException(
                f"Cache folder '{directory}' is not writable",
                code="CACHE_DIRECTORY_NOT_WRITABLE",
                context={"directory": str(directory)},
            )
        if not os.access(directory, os.R_OK):
            raise ConfigurationException(
                f"Cache folder '{directory}' is not readable",
                code="CACHE_DIRECTORY_NOT_READABLE",
                context={"directory": str(directory)},
            )
        return directory

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def extension(self) -> str:
        return self._extension

    @property
    def probability(self) -> int:
        return self._probability

    def set_extension(self, extension: str) -> Self:
        self._extension = normalize_extension(extension)
        return self

    def set_probability(self, probability: int) -> Self:
        """Higher numbers make a sweep less likely; 0 disables automatic sweeps."""
        if probability < 0:
            raise ConfigurationException(
                f"Garbage collection probability must be 0 or greater, {probability} given",
                code="CACHE_INVALID_PROBABILITY",
            )
        self._probability = probability
        return self

    # ------------------------------------------------------------------
    # Cache contract
    # ------------------------------------------------------------------

    def set(self, key: CacheKey, value: Any, ttl: int | None = 300000) -> Self:
        """Store *value* for *ttl* milliseconds, replacing any previous artifact."""
        validate_key(key)
        if ttl is None or isinstance(ttl, bool) or ttl <= 0:
            raise ValidationException(
                f"TTL must be a positive number of milliseconds, {ttl!r} given",
                code="CACHE_INVALID_TTL",
            )

        self._collect_garbage()

        for handle in self._find(key):
            handle.delete()

        artifact = self._file_factory(self._directory / self.generate_name(key, ttl))
        artifact.create()
        artifact.append(pickle.dumps(value, protocol=pickle.HIGHEST_PROTOCOL))
        return self

    def get(self, key: CacheKey, default: Any = None) -> Any:
        validate_key(key)
        self._collect_garbage()

        handle = self._first_live(key)
        if handle is None:
            return default

        content = handle.get_content()
        if not content:
            return default
        return pickle.loads(content)

    def get_expiration(self, key: CacheKey) -> Expiration | None:
        """Expiry metadata of a live entry, or None. Never triggers a sweep."""
        handle = self._first_live(key)
        if handle is None:
            return None
        return parse_name(handle.get_name())

    def expire(self, key: CacheKey) -> Self:
        for handle in self._find(key):
            handle.delete()
        return self

    def clear(self) -> Self:
        """Delete every file in the cache directory, whatever its extension."""
        for handle in self._all():
            handle.delete()
        return self

    def clear_expired(self) -> Self:
        """Delete every file whose name decodes to a past expiry instant."""
        now = self._clock()
        removed = 0
        for handle in self._all():
            if parse_name(handle.get_name()).time <= now:
                handle.delete()
                removed += 1
        logger.debug("cache_clear_expired", directory=str(self._directory), removed=removed)
        return self

    def touch(self, key: CacheKey, ttl: int | None = None) -> Self:
        """Restart the lifetime of a live entry, keeping its TTL unless *ttl* is given.

        The artifact is renamed; its content is left untouched. Entries that
        already expired are removed instead of being revived.
        """
        handle = self._first_live(key)
        if handle is None:
            return self

        if ttl is None:
            ttl = parse_name(handle.get_name()).expiration
        if ttl <= 0:
            return self

        handle.rename(self.generate_name(key, ttl))
        return self

    def exists(self, key: CacheKey) -> bool:
        return self._first_live(key) is not None

    # ------------------------------------------------------------------
    # Artifact naming and lookup
    # ------------------------------------------------------------------

    def generate_name(self, key: CacheKey, ttl: int | None = None) -> str:
        """Artifact name for *key*; without *ttl* the wildcard lookup pattern."""
        expires_at = self._clock() + ttl / 1000 if ttl else None
        return format_name(hash_key(key), ttl, expires_at, self._extension)

    def _find(self, key: CacheKey) -> list[FileHandle]:
        pattern = f"{hash_key(key)}-{WILDCARD}-{WILDCARD}{glob.escape(self._extension)}"
        return [self._file_factory(path) for path in sorted(self._directory.glob(pattern)) if path.is_file()]

    def _all(self) -> list[FileHandle]:
        return [self._file_factory(path) for path in sorted(self._directory.iterdir()) if path.is_file()]

    def _first_live(self, key: CacheKey) -> FileHandle | None:
        """First artifact of *key* if it has not expired; an expired one is deleted."""
        handles = self._find(key)
        if not handles:
            return None

        handle = handles[0]
        if parse_name(handle.get_name()).time >= self._clock():
            return handle

        handle.delete()
        return None

    def _collect_garbage(self) -> None:
        if self._probability == 0:
            return
        if self._rng.randint(1, self._probability) == 1:
            logger.debug("cache_gc_sweep", directory=str(self._directory), probability=self._probability)
            self.clear_expired()
