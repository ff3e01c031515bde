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
"""Cache key validation and canonical serialization.

A cache key is either a non-empty string or a non-empty structured value
(a list/tuple style sequence or a mapping). Every adapter calls
:func:`validate_key` before touching its storage.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping, Sequence
from typing import Any

from polycache.kernel.exceptions import ValidationException

CacheKey = str | Sequence[Any] | Mapping[Any, Any]


def is_structured_key(key: Any) -> bool:
    """True for list/tuple-like sequences and mappings, never for text or bytes."""
    if isinstance(key, (str, bytes, bytearray, memoryview)):
        return False
    return isinstance(key, (Sequence, Mapping))


def validate_key(key: Any) -> None:
    """Raise :class:`ValidationException` unless *key* is a usable cache key."""
    if isinstance(key, str):
        if len(key) == 0:
            raise ValidationException(
                "Cache key may not be an empty string",
                code="CACHE_INVALID_KEY",
            )
        return

    if not is_structured_key(key):
        raise ValidationException(
            f"Cache key must be of the type string or a structured value, '{type(key).__name__}' given",
            code="CACHE_INVALID_KEY",
            context={"type": type(key).__name__},
        )

    if len(key) == 0:
        raise ValidationException(
            f"Cache key may not be an empty {type(key).__name__}",
            code="CACHE_INVALID_KEY",
            context={"type": type(key).__name__},
        )


def _check_mapping_keys(value: Any) -> None:
    if isinstance(value, Mapping):
        for name, item in value.items():
            if not isinstance(name, str):
                raise ValidationException(
                    f"Structured cache key mappings need string keys, '{type(name).__name__}' given",
                    code="CACHE_INVALID_KEY",
                    context={"type": type(name).__name__},
                )
            _check_mapping_keys(item)
    elif is_structured_key(value):
        for item in value:
            _check_mapping_keys(item)


def serialize_key(key: CacheKey) -> str:
    """Deterministic text form of a validated key.

    Strings are JSON-quoted so that ``"a"`` and ``["a"]`` never serialize
    alike. Mapping order is preserved, so ``{"a": 1, "b": 2}`` and
    ``{"b": 2, "a": 1}`` are different keys. Mappings must use string keys
    at every level; JSON would otherwise fold ``{1: "a"}`` into
    ``{"1": "a"}``. Lists and tuples with equal items are the same key.
    """
    validate_key(key)
    _check_mapping_keys(key)
    try:
        return json.dumps(key, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise ValidationException(
            f"Structured cache key is not serializable: {exc}",
            code="CACHE_INVALID_KEY",
        ) from exc


def hash_key(key: CacheKey) -> str:
    """Hex MD5 digest of the serialized key; the fixed part of an artifact name."""
    return hashlib.md5(serialize_key(key).encode("utf-8"), usedforsecurity=False).hexdigest()
