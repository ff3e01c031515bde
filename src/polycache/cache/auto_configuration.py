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
"""Cache adapter auto-configuration from ``polycache.cache.*`` settings."""

from __future__ import annotations

import structlog

from polycache.cache.adapters.filesystem import FileSystemCacheAdapter
from polycache.cache.adapters.local import LocalCacheAdapter
from polycache.cache.adapters.redis import RedisCacheAdapter
from polycache.cache.ports.outbound import CacheAdapter
from polycache.cache.store import default_store
from polycache.config.properties.cache import CacheProperties
from polycache.core.config import Config
from polycache.kernel.exceptions import ConfigurationException

logger = structlog.get_logger("polycache.cache.auto")


class CacheAutoConfiguration:
    """Builds the configured cache adapter."""

    @staticmethod
    def properties(config: Config) -> CacheProperties:
        try:
            return config.bind(CacheProperties)
        except ValueError as exc:
            raise ConfigurationException(str(exc), code="CACHE_INVALID_CONFIGURATION") from exc

    def cache_adapter(self, config: Config) -> CacheAdapter:
        props = self.properties(config)

        if props.provider == "redis":
            redis = props.redis
            adapter: CacheAdapter = RedisCacheAdapter(
                host=redis.host,
                port=redis.port,
                password=redis.password,
                timeout=redis.timeout,
            )
            logger.info("cache_configured", provider="redis", host=redis.host, port=redis.port)
            return adapter

        if props.provider == "local":
            if not props.local.enabled:
                raise ConfigurationException(
                    "Can not use the process-local cache: polycache.cache.local.enabled is false",
                    code="CACHE_STORE_DISABLED",
                )
            adapter = LocalCacheAdapter(default_store())
            logger.info("cache_configured", provider="local")
            return adapter

        fs = props.filesystem
        adapter = FileSystemCacheAdapter(fs.directory, extension=fs.extension, probability=fs.probability)
        logger.info(
            "cache_configured",
            provider="filesystem",
            directory=fs.directory,
            extension=fs.extension,
            probability=fs.probability,
        )
        return adapter


def create_cache_adapter(config: Config | None = None) -> CacheAdapter:
    """Build the adapter selected by ``polycache.cache.provider``.

    Without *config* the packaged defaults (plus ``POLYCACHE_*`` environment
    overrides) are used.
    """
    return CacheAutoConfiguration().cache_adapter(config if config is not None else Config.defaults())
