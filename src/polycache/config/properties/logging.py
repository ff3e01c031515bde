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
"""Logging configuration properties."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from polycache.core.config import config_properties


@config_properties(prefix="polycache.logging")
class LoggingProperties(BaseModel):
    """Configuration for polycache log output (polycache.logging.*).

    ``level`` maps logger names to level names; the ``root`` entry sets the
    root logger, every other entry one named logger such as
    ``polycache.cache.resp``.
    """

    format: Literal["console", "json"] = "console"
    level: dict[str, str] = Field(default_factory=lambda: {"root": "INFO"})

    @field_validator("format", mode="before")
    @classmethod
    def _lower_format(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @property
    def root_level(self) -> str:
        return self.level.get("root", "INFO").upper()

    @property
    def logger_levels(self) -> dict[str, str]:
        return {name: level.upper() for name, level in self.level.items() if name != "root"}
