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
"""structlog setup for polycache.

Library modules emit events through ``structlog.get_logger("polycache...")``
whether or not :func:`configure_logging` ran; configuring only decides the
levels and how events are rendered to stderr.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from polycache.config.properties.logging import LoggingProperties
from polycache.core.config import Config
from polycache.kernel.exceptions import ConfigurationException

_SHARED_PROCESSORS: tuple[structlog.types.Processor, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.format_exc_info,
)


def _renderer(fmt: str) -> structlog.types.Processor:
    if fmt == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


class StructlogAdapter:
    """Applies :class:`LoggingProperties` to structlog and the stdlib loggers."""

    def __init__(self) -> None:
        self.properties = LoggingProperties()

    def configure(self, config: Config) -> None:
        try:
            self.properties = config.bind(LoggingProperties)
        except ValueError as exc:
            raise ConfigurationException(str(exc), code="LOGGING_INVALID_CONFIGURATION") from exc

        structlog.configure(
            processors=[*_SHARED_PROCESSORS, _renderer(self.properties.format)],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stderr,
            level=self._level(self.properties.root_level),
            force=True,
        )
        for name, level in self.properties.logger_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        """Unknown level names fall back to INFO."""
        logging.getLogger(name).setLevel(self._level(level))

    @staticmethod
    def _level(name: str) -> int:
        level = logging.getLevelName(name.upper())
        return level if isinstance(level, int) else logging.INFO


def configure_logging(config: Config | None = None) -> StructlogAdapter:
    """Configure polycache logging from *config* (packaged defaults if omitted)."""
    adapter = StructlogAdapter()
    adapter.configure(config if config is not None else Config.defaults())
    return adapter
