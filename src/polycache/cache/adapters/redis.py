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
"""Redis-backed cache adapter speaking RESP over a single socket."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any, Protocol, Self

from polycache.cache.expiration import Expiration
from polycache.cache.keys import CacheKey, serialize_key, validate_key
from polycache.cache.resp import RespConnection

DEFAULT_TTL_MS = 300000


class CommandConnection(Protocol):
    """What the adapter needs from a connection."""

    def command(self, name: str, *args: Any) -> Any: ...

    def close(self) -> None: ...


class RedisCacheAdapter:
    """Cache adapter for a Redis server, TTLs in milliseconds.

    Structured values are sent as JSON text and come back parsed, so
    ``set(k, {"foo": "bar"})`` followed by ``get(k)`` returns a dict. Text
    that happens to be valid JSON (``"42"``, ``"true"``) is parsed as well.

    The adapter owns exactly one connection, opened by the first command
    and closed by :meth:`close`, on context exit, or when the adapter is
    garbage collected. Connection and protocol failures surface as
    :class:`~polycache.kernel.exceptions.ProtocolException`.
    """

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int | None = 6379,
        password: str | None = None,
        timeout: float | None = 2.5,
        connection: CommandConnection | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._connection: CommandConnection = (
            connection if connection is not None else RespConnection(host, port, password, timeout)
        )
        self._clock = clock

    @staticmethod
    def _wire_key(key: CacheKey) -> str:
        validate_key(key)
        return key if isinstance(key, str) else serialize_key(key)

    def _command(self, name: str, *args: Any) -> Any:
        return self._connection.command(name, *args)

    def set(self, key: CacheKey, value: Any, ttl: int | None = DEFAULT_TTL_MS) -> Self:
        """Store *value*; without *ttl* the entry never expires."""
        self._command("SET", self._wire_key(key), value)
        if ttl is not None:
            self.touch(key, ttl)
        return self

    def get(self, key: CacheKey, default: Any = None) -> Any:
        response = self._command("GET", self._wire_key(key))
        return default if response is None else response

    def get_expiration(self, key: CacheKey) -> Expiration | None:
        """Remaining lifetime of *key*.

        None for a missing key and for a key without TTL.
        """
        remaining = int(self._command("PTTL", self._wire_key(key)))
        if remaining < 0:
            return None
        return Expiration(time=self._clock() + remaining / 1000, expiration=remaining)

    def expire(self, key: CacheKey) -> Self:
        self._command("PEXPIRE", self._wire_key(key), -1)
        return self

    def clear(self) -> Self:
        """Flush every database on the server."""
        self._command("FLUSHALL")
        return self

    def touch(self, key: CacheKey, ttl: int | None = None) -> Self:
        """Restart the lifetime of *key* with *ttl* (default five minutes)."""
        self._command("PEXPIRE", self._wire_key(key), DEFAULT_TTL_MS if ttl is None else ttl)
        return self

    def exists(self, key: CacheKey) -> bool:
        return bool(self._command("EXISTS", self._wire_key(key)))

    def close(self) -> None:
        """Close the connection; a later command reconnects."""
        self._connection.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __del__(self) -> None:
        connection = getattr(self, "_connection", None)
        if connection is not None:
            connection.close()
