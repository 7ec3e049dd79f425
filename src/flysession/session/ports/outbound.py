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
"""Session store protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SessionStore(Protocol):
    """Key/value persistence with per-key TTL.

    Payloads are opaque bytes; encoding and decoding belong to the session
    manager.  ``ttl`` is in seconds, measured from the call, and ``None``
    means the entry never expires.  Every method may raise
    :class:`~flysession.kernel.exceptions.StoreError`; callers must not
    expect the store to retry on their behalf beyond what its client does.
    """

    async def get(self, key: str) -> bytes | None: ...

    async def set(self, key: str, payload: bytes, ttl: int | None) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def ping(self) -> None: ...
