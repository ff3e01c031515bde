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
"""Cache configuration: YAML/TOML files, env vars, and typed property binding."""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, cast, get_type_hints

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

T = TypeVar("T")

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")

_CONFIG_PROPERTIES_ATTR = "__polycache_config_prefix__"

_ENV_PREFIX = "POLYCACHE_"


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a class as bindable to a configuration prefix.

    Works with dataclasses and Pydantic ``BaseModel`` subclasses. Pydantic
    models are bound with ``model_validate()`` so invalid settings fail at
    startup instead of on the first cache call.

    Usage:
        @config_properties(prefix="polycache.cache.redis")
        class RedisProperties(BaseModel):
            host: str = "127.0.0.1"
            port: int | None = Field(default=6379, ge=1, le=65535)
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


class Config:
    """Hierarchical configuration with dot-notation access and env var overrides.

    Priority (highest wins):
    1. Environment variables (POLYCACHE_SECTION_KEY format)
    2. Configuration dict / file values
    3. Packaged defaults (polycache-defaults.yaml)
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """Config file paths that were loaded, in merge order."""
        return list(self._loaded_sources)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Load configuration from a YAML or TOML file.

        Profile overlays named ``<stem>-<profile><suffix>`` next to *path*
        are merged on top, in the order the profiles are given. A missing
        file is not an error; only the defaults are loaded then.
        """
        path = Path(path)
        data: dict[str, Any] = {}
        sources: list[str] = []

        if load_defaults:
            data = cls._load_defaults()
            sources.append("polycache-defaults.yaml (defaults)")

        if path.is_file():
            data = cls._deep_merge(data, cls._load_config_data(path))
            sources.append(str(path))

            for profile in active_profiles or []:
                overlay = path.with_name(f"{path.stem}-{profile}{path.suffix}")
                if overlay.is_file():
                    data = cls._deep_merge(data, cls._load_config_data(overlay))
                    sources.append(f"{overlay} (profile: {profile})")

        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @classmethod
    def defaults(cls) -> Config:
        """Configuration holding only the packaged defaults."""
        instance = cls(cls._load_defaults())
        instance._loaded_sources = ["polycache-defaults.yaml (defaults)"]
        return instance

    @staticmethod
    def _load_config_data(path: Path) -> dict[str, Any]:
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f) or {}
        with open(path) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _load_defaults() -> dict[str, Any]:
        defaults_file = importlib.resources.files("polycache.resources").joinpath("polycache-defaults.yaml")
        with importlib.resources.as_file(defaults_file) as p, open(p) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge override into base, with override values winning."""
        merged = dict(base)
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    @staticmethod
    def env_key(key: str) -> str:
        """Environment variable that overrides *key*.

        ``polycache.cache.redis.host`` -> ``POLYCACHE_CACHE_REDIS_HOST``
        """
        base = key.removeprefix("polycache.")
        return _ENV_PREFIX + base.upper().replace(".", "_").replace("-", "_")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, checking env vars first.

        String values may contain ``${ENV_VAR}``, ``${config.key}`` or
        ``${key:default}`` placeholders.
        """
        env_val = os.environ.get(self.env_key(key))
        if env_val is not None:
            return env_val

        current = self._lookup(key)
        if current is None:
            return default

        if isinstance(current, str) and "${" in current:
            return self._resolve_placeholders(current)

        return current

    def _lookup(self, key: str) -> Any:
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
            if current is None:
                return None
        return current

    def _resolve_placeholders(self, value: str, _depth: int = 0) -> str:
        if _depth > 10:
            raise ValueError(
                f"Max recursion depth exceeded resolving placeholders in '{value}'. Check for circular references."
            )

        def _replace(match: re.Match[str]) -> str:
            inner = match.group(1)
            if ":" in inner:
                ref_key, default_val = inner.split(":", 1)
            else:
                ref_key, default_val = inner, None

            env_val = os.environ.get(ref_key)
            if env_val is not None:
                return env_val

            current = self._lookup(ref_key)
            if current is not None:
                resolved = str(current)
                if "${" in resolved:
                    resolved = self._resolve_placeholders(resolved, _depth + 1)
                return resolved

            if default_val is not None:
                return cast(str, default_val)

            raise ValueError(f"Cannot resolve placeholder '${{{inner}}}': not found in environment or config")

        return _PLACEHOLDER_RE.sub(_replace, value)

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Get all values under a prefix, with env overrides applied to leaf keys."""
        current = self._lookup(prefix)
        section = dict(current) if isinstance(current, dict) else {}
        for name, value in list(section.items()):
            if isinstance(value, dict):
                section[name] = self.get_section(f"{prefix}.{name}")
            else:
                section[name] = self.get(f"{prefix}.{name}", value)
        return section

    def bind(self, config_cls: type[T]) -> T:
        """Bind configuration to a @config_properties dataclass or Pydantic model."""
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        section = self.get_section(prefix)

        if isinstance(config_cls, type) and issubclass(config_cls, BaseModel):
            try:
                return cast(T, config_cls.model_validate(section))
            except ValidationError as exc:
                raise ValueError(
                    f"Configuration validation failed for '{config_cls.__name__}' (prefix='{prefix}'):\n{exc}"
                ) from exc

        hints = get_type_hints(config_cls)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            if field.name in section:
                value = section[field.name]
                expected_type = hints.get(field.name)
                if expected_type is int and isinstance(value, str):
                    value = int(value)
                elif expected_type is float and isinstance(value, str):
                    value = float(value)
                elif expected_type is bool and isinstance(value, str):
                    value = value.lower() in ("true", "1", "yes")
                kwargs[field.name] = value

        return config_cls(**kwargs)
