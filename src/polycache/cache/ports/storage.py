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
"""Storage collaborator protocols used by the cache adapters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class FileHandle(Protocol):
    """Primitive I/O capability scoped to a single path.

    The filesystem adapter never touches paths beyond composing
    ``directory / name``; everything else goes through this handle.
    """

    def create(self) -> None: ...

    def append(self, data: bytes) -> None: ...

    def get_content(self) -> bytes | None: ...

    def delete(self) -> None: ...

    def rename(self, new_name: str) -> None: ...

    def get_name(self) -> str: ...


@dataclass(frozen=True, slots=True)
class StoreEntry:
    """One row of an in-process store listing.

    ``ttl`` is in seconds; ``0`` means the entry never expires.
    """

    info: str
    value: Any
    ttl: int
    creation_time: float


@runtime_checkable
class LocalStore(Protocol):
    """Process-wide key-value segment behind the process-local adapter."""

    enabled: bool

    def add(self, key: str, value: Any, ttl: int = 0) -> bool: ...

    def fetch(self, key: str) -> tuple[Any, bool]: ...

    def delete(self, key: str) -> bool: ...

    def exists(self, key: str) -> bool: ...

    def clear(self) -> None: ...

    def entries(self) -> list[StoreEntry]: ...
