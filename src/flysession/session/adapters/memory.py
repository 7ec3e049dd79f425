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
"""In-memory session store with TTL-based expiry."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable


class InMemorySessionStore:
    """In-memory session store with TTL support and asyncio.Lock for safety.

    Suitable for development, testing, and single-process applications.
    Expired entries are dropped lazily when read.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._store: dict[str, tuple[bytes, float | None]] = {}
        self._lock = asyncio.Lock()
        self._clock = clock

    async def get(self, key: str) -> bytes | None:
        """Return the payload, or ``None`` if missing or expired."""
        async with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None

            payload, expires_at = entry
            if expires_at is not None and self._clock() >= expires_at:
                del self._store[key]
                return None

            return payload

    async def set(self, key: str, payload: bytes, ttl: int | None) -> None:
        """Store a payload; the TTL restarts from this call."""
        async with self._lock:
            expires_at = self._clock() + ttl if ttl is not None else None
            self._store[key] = (payload, expires_at)

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._store.pop(key, None)

    async def ping(self) -> None:
        return None

    def __len__(self) -> int:
        return len(self._store)
