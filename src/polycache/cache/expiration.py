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
"""Expiration value returned by ``get_expiration()`` queries."""

from __future__ import annotations

import time
from dataclasses import dataclass


@dataclass(frozen=True)
class Expiration:
    """Absolute expiry instant paired with the TTL it was computed from.

    Attributes:
        time: Expiry instant in Unix seconds.
        expiration: TTL in milliseconds. The filesystem adapter reports the
            TTL requested at set/touch time, the redis adapter the TTL still
            remaining on the server.

    The default instance (``time=0.0, expiration=0``) stands for "no usable
    metadata" and is always expired.
    """

    time: float = 0.0
    expiration: int = 0

    def is_expired(self, now: float | None = None) -> bool:
        return self.time < (time.time() if now is None else now)
