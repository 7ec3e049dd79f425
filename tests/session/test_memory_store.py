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
"""Tests for InMemorySessionStore."""

import pytest

from flysession.session.adapters.memory import InMemorySessionStore
from flysession.session.ports.outbound import SessionStore


class FakeMonotonic:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestInMemorySessionStore:
    def test_protocol_compliance(self):
        assert isinstance(InMemorySessionStore(), SessionStore)

    @pytest.mark.asyncio
    async def test_set_and_get(self):
        store = InMemorySessionStore()
        await store.set("session:a", b"payload", 60)
        assert await store.get("session:a") == b"payload"

    @pytest.mark.asyncio
    async def test_get_missing(self):
        assert await InMemorySessionStore().get("session:none") is None

    @pytest.mark.asyncio
    async def test_entry_expires_after_ttl(self):
        clock = FakeMonotonic()
        store = InMemorySessionStore(clock=clock)
        await store.set("k", b"v", 10)

        clock.now = 9.9
        assert await store.get("k") == b"v"
        clock.now = 10.0
        assert await store.get("k") is None
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_ttl_slides_from_last_set(self):
        clock = FakeMonotonic()
        store = InMemorySessionStore(clock=clock)
        await store.set("k", b"v1", 10)
        clock.now = 8.0
        await store.set("k", b"v2", 10)

        clock.now = 15.0
        assert await store.get("k") == b"v2"

    @pytest.mark.asyncio
    async def test_none_ttl_never_expires(self):
        clock = FakeMonotonic()
        store = InMemorySessionStore(clock=clock)
        await store.set("k", b"v", None)
        clock.now = 1e12
        assert await store.get("k") == b"v"

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self):
        store = InMemorySessionStore()
        await store.set("k", b"v", 10)
        await store.delete("k")
        await store.delete("k")
        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_ping(self):
        assert await InMemorySessionStore().ping() is None
