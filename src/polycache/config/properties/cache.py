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
"""Cache subsystem configuration properties."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from polycache.core.config import config_properties


class LocalCacheProperties(BaseModel):
    """Process-local store settings (polycache.cache.local.*)."""

    enabled: bool = True


class FileSystemCacheProperties(BaseModel):
    """Filesystem adapter settings (polycache.cache.filesystem.*)."""

    directory: str = ".cache"
    extension: str = ".cache"
    # 1-in-N chance of an expired-artifact sweep per set/get; 0 disables it.
    probability: int = Field(default=5, ge=0)


class RedisCacheProperties(BaseModel):
    """Network adapter settings (polycache.cache.redis.*).

    A ``port`` of ``None`` connects to a Unix socket located at ``host``.
    """

    host: str = "127.0.0.1"
    port: int | None = Field(default=6379, ge=1, le=65535)
    password: str | None = None
    timeout: float = Field(default=2.5, gt=0)


@config_properties(prefix="polycache.cache")
class CacheProperties(BaseModel):
    """Configuration for the cache subsystem (polycache.cache.*)."""

    provider: Literal["local", "filesystem", "redis"] = "filesystem"
    local: LocalCacheProperties = Field(default_factory=LocalCacheProperties)
    filesystem: FileSystemCacheProperties = Field(default_factory=FileSystemCacheProperties)
    redis: RedisCacheProperties = Field(default_factory=RedisCacheProperties)
