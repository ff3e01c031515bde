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
"""Cache adapter protocols."""

from __future__ import annotations

from typing import Any, Protocol, Self, runtime_checkable


@runtime_checkable
class CacheAdapter(Protocol):
    """Common cache contract.

    All backends (process-local, filesystem, redis) implement this protocol.
    Keys are non-empty strings or non-empty structured values; the unit of
    ``ttl`` is backend specific (seconds for the process-local store,
    milliseconds elsewhere).
    """

    def set(self, key: Any, value: Any, ttl: int | None = ...) -> Self: ...

    def get(self, key: Any, default: Any = None) -> Any: ...

    def expire(self, key: Any) -> Self: ...

    def clear(self) -> Self: ...

    def exists(self, key: Any) -> bool: ...


@runtime_checkable
class TouchableCacheAdapter(CacheAdapter, Protocol):
    """Cache whose entries can have their lifetime restarted."""

    def touch(self, key: Any, ttl: int | None = None) -> Self: ...
