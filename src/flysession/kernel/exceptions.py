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
"""Unified exception hierarchy for flysession.

All exceptions inherit from FlySessionException so callers can catch the
whole family at once, or pick a specific subclass for targeted handling.

Categories:
- SessionException: identifier allocation and payload decoding failures
- InfrastructureException: backing-store and network failures

None of these is meant to abort request processing. The session manager
catches them, logs them, and degrades to "no session" or "write lost".
"""

from __future__ import annotations

# =============================================================================
# Base Exception
# =============================================================================


class FlySessionException(Exception):
    """Base exception for all flysession errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "SESSION_STORE").
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
# Session Exceptions
# =============================================================================


class SessionException(FlySessionException):
    """Errors raised while building or decoding a session."""


class AllocationError(SessionException):
    """The entropy source could not produce a session identifier."""


class SerializationError(SessionException):
    """A session payload could not be encoded, or a stored one decoded."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(FlySessionException):
    """Infrastructure failures: backing store, network."""


class StoreError(InfrastructureException):
    """A get, set, delete or ping against the session store failed."""
