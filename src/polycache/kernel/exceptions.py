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
"""Unified exception hierarchy for polycache.

All library exceptions inherit from PolyCacheException, so callers can catch
a single type or target a specific failure category.

Categories:
- ConfigurationException: Adapter cannot be constructed in this environment
- BusinessException: Caller supplied invalid input (keys, TTLs)
- InfrastructureException: Backend and transport failures
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class PolyCacheException(Exception):
    """Base exception for all polycache errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CACHE_INVALID_KEY").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(PolyCacheException):
    """A required backend capability is missing, disabled or unusable.

    Raised at adapter construction time and never recovered from.
    """


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(PolyCacheException):
    """Caller-side rule violations."""


class ValidationException(BusinessException):
    """Input validation failures (empty or wrong-typed keys, bad TTLs)."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(PolyCacheException):
    """Backend failures: filesystem, sockets, remote servers."""


class ProtocolException(InfrastructureException):
    """Wire protocol failure.

    Covers transport connect errors, error replies sent by the server and
    malformed or unexpected replies. Never retried internally.
    """
