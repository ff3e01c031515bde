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
"""Shared fixtures for the cache tests: an in-process fake RESP server."""

from __future__ import annotations

import socket
import socketserver
import threading
import time
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from polycache.cache.resp import RespReader
from polycache.kernel.exceptions import ProtocolException


def bulk(value: str | None) -> bytes:
    if value is None:
        return b"$-1\r\n"
    data = value.encode("utf-8")
    return b"$%d\r\n%s\r\n" % (len(data), data)


def integer(value: int) -> bytes:
    return b":%d\r\n" % value


OK = b"+OK\r\n"


class FakeRedisMixin:
    """Keeps a tiny Redis keyspace with millisecond expiry."""

    daemon_threads = True
    block_on_close = False

    def setup_state(self, password: str | None) -> None:
        self.password = password
        self.data: dict[str, tuple[str, float | None]] = {}
        self.commands: list[list[Any]] = []
        self.connections = 0
        # Raw replies sent verbatim, one per request, before normal dispatch.
        self.scripted: list[bytes] = []
        self.lock = threading.Lock()

    def _live(self, key: str) -> tuple[str, float | None] | None:
        row = self.data.get(key)
        if row is not None and row[1] is not None and time.monotonic() >= row[1]:
            del self.data[key]
            return None
        return row

    def dispatch(self, name: str, args: list[str]) -> bytes:
        with self.lock:
            if name == "PING":
                return b"+PONG\r\n"
            if name == "SET":
                self.data[args[0]] = (args[1], None)
                return OK
            if name == "GET":
                row = self._live(args[0])
                return bulk(None if row is None else row[0])
            if name == "EXISTS":
                return integer(int(self._live(args[0]) is not None))
            if name == "PEXPIRE":
                row = self._live(args[0])
                if row is None:
                    return integer(0)
                ms = int(args[1])
                if ms <= 0:
                    del self.data[args[0]]
                else:
                    self.data[args[0]] = (row[0], time.monotonic() + ms / 1000)
                return integer(1)
            if name == "PTTL":
                row = self._live(args[0])
                if row is None:
                    return integer(-2)
                if row[1] is None:
                    return integer(-1)
                return integer(int((row[1] - time.monotonic()) * 1000))
            if name == "FLUSHALL":
                self.data.clear()
                return OK
        return b"-ERR unknown command '%s'\r\n" % name.encode()


class FakeRedisHandler(socketserver.StreamRequestHandler):
    def handle(self) -> None:
        server: Any = self.server
        server.connections += 1
        authenticated = server.password is None
        reader = RespReader(self.rfile)

        while True:
            try:
                request = reader.read_reply()
            except ProtocolException:
                return

            name, *args = request
            server.commands.append([name, *args])

            if name == "AUTH":
                if args == [server.password]:
                    authenticated = True
                    reply = OK
                else:
                    reply = b"-WRONGPASS invalid username-password pair\r\n"
            elif server.scripted:
                reply = server.scripted.pop(0)
            elif not authenticated:
                reply = b"-NOAUTH Authentication required.\r\n"
            else:
                reply = server.dispatch(name, args)

            self.wfile.write(reply)
            self.wfile.flush()


class FakeRedisServer(FakeRedisMixin, socketserver.ThreadingTCPServer):
    allow_reuse_address = True

    def __init__(self, password: str | None = None) -> None:
        super().__init__(("127.0.0.1", 0), FakeRedisHandler)
        self.setup_state(password)

    @property
    def port(self) -> int:
        return self.server_address[1]


if hasattr(socketserver, "ThreadingUnixStreamServer"):

    class FakeRedisUnixServer(FakeRedisMixin, socketserver.ThreadingUnixStreamServer):
        def __init__(self, path: Path) -> None:
            super().__init__(str(path), FakeRedisHandler)
            self.setup_state(None)


def _serve(server: socketserver.BaseServer) -> Iterator[Any]:
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture
def redis_server() -> Iterator[FakeRedisServer]:
    yield from _serve(FakeRedisServer())


@pytest.fixture
def secured_redis_server() -> Iterator[FakeRedisServer]:
    yield from _serve(FakeRedisServer(password="s3cret"))


@pytest.fixture
def unix_redis_server(tmp_path: Path) -> Iterator[Any]:
    if not hasattr(socket, "AF_UNIX") or not hasattr(socketserver, "ThreadingUnixStreamServer"):
        pytest.skip("Unix domain sockets are not available")
    yield from _serve(FakeRedisUnixServer(tmp_path / "redis.sock"))


@pytest.fixture
def closed_port() -> int:
    """A local TCP port nothing listens on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]
