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
"""Minimal RESP (REdis Serialization Protocol) client.

Requests are arrays of bulk strings. Replies are decoded by marker byte::

    -  error    -> ProtocolException
    +  status   -> True for "OK", the text otherwise
    :  integer  -> int
    $  bulk     -> str (bytes when not UTF-8), None for length -1
    *  array    -> list, each element decoded recursively

Framing and JSON handling are separate steps: :class:`RespReader` only
frames, :func:`decode_reply` then turns textual values that are valid JSON
into the parsed value, which is what lets structured values written with
``SET`` come back structured from ``GET``.
"""

from __future__ import annotations

import json
import socket
from typing import Any, BinaryIO, Self

import structlog

from polycache.kernel.exceptions import ProtocolException

logger = structlog.get_logger("polycache.cache.resp")

CRLF = b"\r\n"

# Upper bound for a single read while consuming a bulk reply.
MAX_CHUNK_SIZE = 8192


# =============================================================================
# Encoding
# =============================================================================


def encode_argument(arg: Any) -> bytes:
    """Bytes pass through, text is UTF-8 encoded, anything else becomes JSON."""
    if isinstance(arg, bytes):
        return arg
    if isinstance(arg, str):
        return arg.encode("utf-8")
    return json.dumps(arg, ensure_ascii=False).encode("utf-8")


def encode_command(name: str, *args: Any) -> bytes:
    """Serialize a command as a RESP array of bulk strings."""
    parts = [name.upper().encode("ascii"), *(encode_argument(arg) for arg in args)]
    buffer = bytearray(b"*%d\r\n" % len(parts))
    for part in parts:
        buffer += b"$%d\r\n" % len(part)
        buffer += part
        buffer += CRLF
    return bytes(buffer)


# =============================================================================
# Decoding
# =============================================================================


class RespReader:
    """Recursive-descent reply parser over a blocking binary stream.

    *stream* needs ``readline()`` and ``read(n)``; a socket file object and
    ``io.BytesIO`` both qualify.
    """

    def __init__(self, stream: BinaryIO, chunk_size: int = MAX_CHUNK_SIZE) -> None:
        self._stream = stream
        self._chunk_size = chunk_size

    def read_reply(self) -> Any:
        line = self._read_line()
        marker, payload = line[:1], line[1:]

        if marker == b"-":
            message = payload.decode("utf-8", errors="replace")
            raise ProtocolException(message, code="CACHE_SERVER_ERROR", context={"reply": message})

        if marker == b"+":
            status = payload.decode("utf-8", errors="replace")
            return True if status == "OK" else status

        if marker == b":":
            return self._parse_int(payload)

        if marker == b"$":
            return self._read_bulk(self._parse_int(payload))

        if marker == b"*":
            count = self._parse_int(payload)
            if count < 0:
                return None
            return self._read_array(count)

        raise ProtocolException(
            "Unexpected response",
            code="CACHE_UNEXPECTED_REPLY",
            context={"line": line.decode("utf-8", errors="replace")},
        )

    def _read_array(self, count: int) -> list[Any]:
        """Read *count* elements; an error element is raised once the array is consumed."""
        items: list[Any] = []
        error: ProtocolException | None = None
        for _ in range(count):
            try:
                items.append(self.read_reply())
            except ProtocolException as exc:
                if exc.code != "CACHE_SERVER_ERROR":
                    raise
                if error is None:
                    error = exc
        if error is not None:
            raise error
        return items

    def _read_line(self) -> bytes:
        line = self._stream.readline()
        if not line:
            raise ProtocolException("Connection closed by server", code="CACHE_CONNECTION_CLOSED")
        if not line.endswith(CRLF):
            raise ProtocolException(
                "Truncated reply line",
                code="CACHE_UNEXPECTED_REPLY",
                context={"line": line.decode("utf-8", errors="replace")},
            )
        return line[:-2]

    def _read_exact(self, size: int) -> bytes:
        """Read *size* bytes in chunks of at most ``chunk_size``."""
        chunks: list[bytes] = []
        remaining = size
        while remaining > 0:
            chunk = self._stream.read(min(remaining, self._chunk_size))
            if not chunk:
                raise ProtocolException(
                    "Connection closed while reading bulk reply",
                    code="CACHE_CONNECTION_CLOSED",
                    context={"expected": size, "received": size - remaining},
                )
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def _read_bulk(self, size: int) -> str | bytes | None:
        if size < 0:
            return None

        data = self._read_exact(size)
        self._read_exact(len(CRLF))

        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            return data

    @staticmethod
    def _parse_int(payload: bytes) -> int:
        try:
            return int(payload)
        except ValueError as exc:
            raise ProtocolException(
                f"Malformed integer in reply: {payload!r}",
                code="CACHE_UNEXPECTED_REPLY",
            ) from exc


def _reject_constant(name: str) -> Any:
    raise ValueError(f"not a JSON value: {name}")


def decode_reply(value: Any) -> Any:
    """Replace textual values that are valid JSON with the parsed value.

    Array replies are processed element by element. ``NaN`` and
    ``Infinity`` are kept as text.
    """
    if isinstance(value, list):
        return [decode_reply(item) for item in value]
    if isinstance(value, str):
        try:
            return json.loads(value, parse_constant=_reject_constant)
        except ValueError:
            return value
    return value


# =============================================================================
# Connection
# =============================================================================


class RespConnection:
    """One lazily opened connection to a RESP server.

    The socket is opened by the first :meth:`command`. With a *password*
    an ``AUTH`` command is sent right after connecting, before the command
    that triggered the connect. A ``port`` of ``None`` connects to the Unix
    socket at *host*. *timeout* bounds connection establishment only.

    Failures are raised as :class:`ProtocolException` and never retried.
    After a transport failure or a reply that cannot be parsed the socket is
    dropped; the next command opens a new one. Error replies keep it open.
    """

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int | None = 6379,
        password: str | None = None,
        timeout: float | None = 2.5,
    ) -> None:
        self._host = host
        self._port = port
        self._password = password
        self._timeout = timeout
        self._socket: socket.socket | None = None
        self._reader: RespReader | None = None
        self._stream: BinaryIO | None = None

    @property
    def address(self) -> str:
        if self._port is None:
            return f"unix://{self._host}"
        return f"tcp://{self._host}:{self._port}"

    @property
    def connected(self) -> bool:
        return self._socket is not None

    def connect(self) -> None:
        try:
            sock = self._open_socket()
        except OSError as exc:
            message = exc.strerror or str(exc)
            raise ProtocolException(
                f'Could not connect with Redis server. Error number: {exc.errno} with message "{message}"',
                code="CACHE_CONNECTION_FAILED",
                context={"errno": exc.errno, "message": message, "address": self.address},
            ) from exc

        sock.settimeout(None)
        self._socket = sock
        self._stream = sock.makefile("rb")
        self._reader = RespReader(self._stream)
        logger.debug("redis_connected", address=self.address)

        if self._password is not None:
            try:
                self._execute("AUTH", self._password)
            except ProtocolException:
                self.close()
                raise

    def _open_socket(self) -> socket.socket:
        if self._port is None:
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            try:
                sock.settimeout(self._timeout)
                sock.connect(self._host)
            except OSError:
                sock.close()
                raise
            return sock
        return socket.create_connection((self._host, self._port), timeout=self._timeout)

    def command(self, name: str, *args: Any) -> Any:
        """Send one command and return its decoded reply."""
        if self._socket is None:
            self.connect()
        return decode_reply(self._execute(name, *args))

    def _execute(self, name: str, *args: Any) -> Any:
        assert self._socket is not None and self._reader is not None
        try:
            self._socket.sendall(encode_command(name, *args))
            return self._reader.read_reply()
        except OSError as exc:
            self.close()
            raise ProtocolException(
                f"Connection to Redis server failed during {name.upper()}: {exc}",
                code="CACHE_CONNECTION_FAILED",
                context={"errno": exc.errno, "address": self.address},
            ) from exc
        except ProtocolException as exc:
            # Anything but a server error reply leaves the stream out of sync.
            if exc.code in ("CACHE_CONNECTION_CLOSED", "CACHE_UNEXPECTED_REPLY"):
                self.close()
            raise

    def close(self) -> None:
        stream, sock = self._stream, self._socket
        self._stream = self._socket = self._reader = None
        if stream is not None:
            stream.close()
        if sock is not None:
            sock.close()
            logger.debug("redis_disconnected", address=self.address)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
