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
"""Tests for RedisSessionStore using a FakeRedis stub."""

from __future__ import annotations

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from flysession.kernel.exceptions import StoreError
from flysession.session.adapters.redis import RedisSessionStore
from flysession.session.ports.outbound import SessionStore


class FakeRedis:
    """Minimal in-memory stub matching the redis.asyncio.Redis interface."""

    def __init__(self) -> None:
        self._store: dict[str, bytes] = {}
        self.expiries: dict[str, int | None] = {}
        self.closed = False

    async def get(self, key: str) -> bytes | None:
        return self._store.get(key)

    async def set(self, key: str, value: bytes, ex: int | None = None) -> None:
        self._store[key] = value
        self.expiries[key] = ex

    async def delete(self, *keys: str) -> int:
        count = 0
        for k in keys:
            if k in self._store:
                del self._store[k]
                count += 1
        return count

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        self.closed = True


class DownRedis:
    async def get(self, key: str) -> bytes | None:
        raise RedisConnectionError("Error 111 connecting to localhost:6379")

    async def set(self, key: str, value: bytes, ex: int | None = None) -> None:
        raise RedisConnectionError("Error 111 connecting to localhost:6379")

    async def delete(self, *keys: str) -> int:
        raise TimeoutError("timed out")

    async def ping(self) -> bool:
        raise RedisConnectionError("Error 111 connecting to localhost:6379")


class TestRedisSessionStore:
    def test_protocol_compliance(self):
        assert isinstance(RedisSessionStore(FakeRedis()), SessionStore)

    @pytest.mark.asyncio
    async def test_set_and_get(self):
        store = RedisSessionStore(FakeRedis())
        await store.set("session:abc", b'{"version":1}', 3605)
        assert await store.get("session:abc") == b'{"version":1}'

    @pytest.mark.asyncio
    async def test_ttl_forwarded_as_ex(self):
        fake = FakeRedis()
        store = RedisSessionStore(fake)
        await store.set("session:abc", b"x", 3605)
        await store.set("session:forever", b"x", None)
        assert fake.expiries == {"session:abc": 3605, "session:forever": None}

    @pytest.mark.asyncio
    async def test_get_decoded_client_returns_bytes(self):
        fake = FakeRedis()
        fake._store["k"] = "text"  # type: ignore[assignment]
        assert await RedisSessionStore(fake).get("k") == b"text"

    @pytest.mark.asyncio
    async def test_get_missing(self):
        assert await RedisSessionStore(FakeRedis()).get("nope") is None

    @pytest.mark.asyncio
    async def test_delete(self):
        store = RedisSessionStore(FakeRedis())
        await store.set("k", b"v", 10)
        await store.delete("k")
        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_close(self):
        fake = FakeRedis()
        await RedisSessionStore(fake).close()
        assert fake.closed is True


class TestRedisSessionStoreFailures:
    @pytest.mark.asyncio
    async def test_get_failure_becomes_store_error(self):
        with pytest.raises(StoreError) as exc_info:
            await RedisSessionStore(DownRedis()).get("session:abc")
        assert exc_info.value.context["operation"] == "get"
        assert exc_info.value.context["key"] == "session:abc"

    @pytest.mark.asyncio
    async def test_set_failure_becomes_store_error(self):
        with pytest.raises(StoreError):
            await RedisSessionStore(DownRedis()).set("session:abc", b"x", 10)

    @pytest.mark.asyncio
    async def test_os_level_failure_becomes_store_error(self):
        with pytest.raises(StoreError) as exc_info:
            await RedisSessionStore(DownRedis()).delete("session:abc")
        assert exc_info.value.context["error_type"] == "TimeoutError"

    @pytest.mark.asyncio
    async def test_ping_failure_becomes_store_error(self):
        with pytest.raises(StoreError):
            await RedisSessionStore(DownRedis()).ping()
