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
"""IdentifierAllocator — random session identifiers."""

from __future__ import annotations

import secrets
from collections.abc import Callable

from flysession.kernel.exceptions import AllocationError

MIN_IDENTIFIER_BYTES = 16  # 128 bits


class IdentifierAllocator:
    """Produces hex-encoded session identifiers from a CSPRNG.

    Args:
        nbytes: Number of random bytes per identifier (at least 16).
        entropy: Callable returning *n* random bytes. Defaults to
            :func:`secrets.token_bytes`.
    """

    def __init__(
        self,
        nbytes: int = MIN_IDENTIFIER_BYTES,
        entropy: Callable[[int], bytes] = secrets.token_bytes,
    ) -> None:
        if nbytes < MIN_IDENTIFIER_BYTES:
            raise ValueError(f"Session identifiers need at least {MIN_IDENTIFIER_BYTES} random bytes, got {nbytes}")
        self._nbytes = nbytes
        self._entropy = entropy

    def allocate(self) -> str:
        """Return a fresh identifier, or raise :class:`AllocationError`."""
        try:
            raw = self._entropy(self._nbytes)
        except (OSError, NotImplementedError) as exc:
            raise AllocationError(
                "Entropy source unavailable",
                code="SESSION_ALLOCATION",
                context={"error": str(exc)},
            ) from exc
        if len(raw) < self._nbytes:
            raise AllocationError(
                "Entropy source returned too few bytes",
                code="SESSION_ALLOCATION",
                context={"expected": self._nbytes, "received": len(raw)},
            )
        return raw.hex()
