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
"""Tests for LocalCacheAdapter over an injected in-process store."""

from __future__ import annotations

import pytest

from polycache.cache.adapters.local import LocalCacheAdapter
from polycache.cache.keys import serialize_key
from polycache.cache.ports.outbound import CacheAdapter, TouchableCacheAdapter
from polycache.cache.store import InProcessStore, default_store, set_default_store
from polycache.kernel.exceptions import ConfigurationException, ValidationException


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InProcessStore:
    return InProcessStore(clock=clock)


@pytest.fixture
def cache(store: InProcessStore) -> LocalCacheAdapter:
    return LocalCacheAdapter(store)


class TestLocalCacheAdapterConstruction:
    def test_protocol_compliance(self, cache):
        assert isinstance(cache, CacheAdapter)
        assert isinstance(cache, TouchableCacheAdapter)

    def test_uses_process_wide_store_by_default(self):
        replacement = InProcessStore()
        previous = set_default_store(replacement)
        try:
            LocalCacheAdapter().set("key", "value")
            assert replacement.fetch(serialize_key("key")) == ("value", True)
        finally:
            set_default_store(previous)

    def test_missing_store_fails(self):
        previous = set_default_store(None)
        try:
            with pytest.raises(ConfigurationException) as exc_info:
                LocalCacheAdapter()
            assert exc_info.value.code == "CACHE_STORE_MISSING"
        finally:
            set_default_store(previous)

    def test_disabled_store_fails(self):
        with pytest.raises(ConfigurationException, match="disabled"):
            LocalCacheAdapter(InProcessStore(enabled=False))

    def test_default_store_is_enabled(self):
        assert default_store() is not None
        assert default_store().enabled is True


class TestLocalCacheAdapter:
    def test_set_and_get(self, cache):
        cache.set("key", "value", 1)
        assert cache.exists("key") is True
        assert cache.get("key") == "value"

    def test_set_returns_self(self, cache):
        assert cache.set("key", "value") is cache

    def test_get_missing_returns_default(self, cache):
        assert cache.get("missing") is None
        assert cache.get("missing", "fallback") == "fallback"

    def test_falsy_values_are_hits(self, cache):
        cache.set("zero", 0)
        cache.set("empty", "")
        assert cache.get("zero", "default") == 0
        assert cache.get("empty", "default") == ""

    def test_set_overwrites_existing_entry(self, cache):
        cache.set("key", "first")
        cache.set("key", "second")
        assert cache.get("key") == "second"

    def test_structured_keys(self, cache):
        cache.set(["user", 42], {"name": "Alice"})
        assert cache.get(["user", 42]) == {"name": "Alice"}
        assert cache.exists(["user", 43]) is False

    def test_entry_expires_after_ttl(self, cache, clock):
        cache.set("key", "value", 2)
        clock.now += 2
        assert cache.exists("key") is False
        assert cache.get("key", "default") == "default"

    def test_none_ttl_never_expires(self, cache, clock):
        cache.set("key", "value", None)
        clock.now += 10**6
        assert cache.get("key") == "value"

    def test_expire(self, cache):
        cache.set("key", "value", 5)
        assert cache.expire("key") is cache
        assert cache.exists("key") is False

    def test_expire_missing_is_noop(self, cache):
        cache.expire("missing")
        assert cache.exists("missing") is False

    def test_clear_empties_shared_store(self, store):
        first = LocalCacheAdapter(store)
        second = LocalCacheAdapter(store)
        first.set("a", 1)
        second.set("b", 2)
        first.clear()
        assert second.exists("b") is False
        assert store.entries() == []

    @pytest.mark.parametrize("key", ["", [], 42, None])
    def test_invalid_keys_rejected(self, cache, key):
        with pytest.raises(ValidationException):
            cache.set(key, "value", 1)

    def test_negative_ttl_rejected(self, cache):
        with pytest.raises(ValidationException) as exc_info:
            cache.set("key", "value", -1)
        assert exc_info.value.code == "CACHE_INVALID_TTL"
        assert cache.exists("key") is False

    def test_negative_touch_ttl_rejected(self, cache, clock):
        cache.set("key", "value", 5)
        with pytest.raises(ValidationException):
            cache.touch("key", -5)
        clock.now += 6
        assert cache.exists("key") is False


class TestLocalCacheAdapterTouch:
    def test_touch_restarts_lifetime(self, cache, clock):
        cache.set("key", "value", 3)
        clock.now += 2
        cache.touch("key")
        clock.now += 2
        assert cache.exists("key") is True
        assert cache.get("key") == "value"

    def test_touch_keeps_original_ttl(self, cache, store, clock):
        cache.set("key", "value", 3)
        clock.now += 2
        cache.touch("key")
        (entry,) = store.entries()
        assert entry.ttl == 3
        assert entry.creation_time == 1002.0

    def test_touch_with_explicit_ttl(self, cache, store):
        cache.set("key", "value", 3)
        cache.touch("key", 60)
        (entry,) = store.entries()
        assert entry.ttl == 60

    def test_touch_missing_is_noop(self, cache, store):
        assert cache.touch("missing") is cache
        assert store.entries() == []

    def test_touch_only_matches_exact_key(self, cache, store, clock):
        cache.set("a", 1, 3)
        cache.set(["a"], 2, 3)
        clock.now += 2
        cache.touch(["a"])
        clock.now += 2
        assert cache.exists("a") is False
        assert cache.get(["a"]) == 2
