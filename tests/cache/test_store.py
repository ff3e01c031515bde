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
"""Tests for the in-process store behind the process-local adapter."""

from __future__ import annotations

from polycache.cache.ports.storage import LocalStore
from polycache.cache.store import InProcessStore, default_store, set_default_store


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestInProcessStore:
    def test_protocol_compliance(self):
        assert isinstance(InProcessStore(), LocalStore)

    def test_add_and_fetch(self):
        store = InProcessStore()
        assert store.add("k", "v", 10) is True
        assert store.fetch("k") == ("v", True)

    def test_fetch_missing_reports_failure(self):
        store = InProcessStore()
        assert store.fetch("missing") == (None, False)

    def test_fetch_distinguishes_falsy_values(self):
        store = InProcessStore()
        store.add("zero", 0)
        assert store.fetch("zero") == (0, True)

    def test_add_refuses_live_key(self):
        store = InProcessStore()
        store.add("k", "first")
        assert store.add("k", "second") is False
        assert store.fetch("k") == ("first", True)

    def test_entries_expire_lazily(self):
        clock = FakeClock()
        store = InProcessStore(clock=clock)
        store.add("k", "v", 5)
        clock.now += 4
        assert store.exists("k") is True
        clock.now += 1
        assert store.exists("k") is False
        assert store.add("k", "again", 5) is True

    def test_zero_ttl_never_expires(self):
        clock = FakeClock()
        store = InProcessStore(clock=clock)
        store.add("k", "v", 0)
        clock.now += 10**9
        assert store.exists("k") is True

    def test_delete(self):
        store = InProcessStore()
        store.add("k", "v")
        assert store.delete("k") is True
        assert store.delete("k") is False

    def test_entries_lists_live_rows(self):
        clock = FakeClock()
        store = InProcessStore(clock=clock)
        store.add("short", 1, 1)
        store.add("long", 2, 100)
        clock.now += 2
        rows = store.entries()
        assert [row.info for row in rows] == ["long"]
        assert rows[0].ttl == 100
        assert rows[0].creation_time == 1000.0
        assert len(store) == 1

    def test_clear(self):
        store = InProcessStore()
        store.add("a", 1)
        store.add("b", 2)
        store.clear()
        assert store.entries() == []


class TestDefaultStore:
    def test_default_store_is_shared(self):
        assert default_store() is default_store()

    def test_set_default_store_returns_previous(self):
        replacement = InProcessStore()
        previous = set_default_store(replacement)
        try:
            assert default_store() is replacement
        finally:
            set_default_store(previous)
