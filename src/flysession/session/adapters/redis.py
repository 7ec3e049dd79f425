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
"""Redis-backed session store."""

from __future__ import annotations

from typing import Any

from redis.exceptions import RedisError

from flysession.kernel.exceptions import StoreError

# Connection-level failures surface as OSError subclasses on some code paths.
_CLIENT_ERRORS = (RedisError, OSError)


class RedisSessionStore:
    """Session store backed by ``redis.asyncio``.

    Payloads are stored as-is under the key given by the session manager
    (already namespaced with the configured key prefix).  Client failures
    are re-raised as :class:`StoreError`; retries, if any, are configured on
    the client passed in.
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    async def get(self, key: str) -> bytes | None:
        try:
            raw = await self._client.get(key)
        except _CLIENT_ERRORS as exc:
            raise _store_error("get", key, exc) from exc
        if raw is None:
            return None
        return raw.encode() if isinstance(raw, str) else bytes(raw)

    async def set(self, key: str, payload: bytes, ttl: int | None) -> None:
        """Store a payload with ``EX ttl``, or without expiry when *ttl* is ``None``."""
        try:
            await self._client.set(key, payload, ex=ttl)
        except _CLIENT_ERRORS as exc:
            raise _store_error("set", key, exc) from exc

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except _CLIENT_ERRORS as exc:
            raise _store_error("delete", key, exc) from exc

    async def ping(self) -> None:
        """Validate connectivity by pinging Redis."""
        try:
            await self._client.ping()
        except _CLIENT_ERRORS as exc:
            raise _store_error("ping", None, exc) from exc

    async def close(self) -> None:
        """Close the underlying Redis connection."""
        await self._client.aclose()


def _store_error(operation: str, key: str | None, exc: Exception) -> StoreError:
    return StoreError(
        f"Redis {operation} failed: {exc}",
        code="SESSION_STORE",
        context={"operation": operation, "key": key, "error_type": type(exc).__name__},
    )
