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
"""CookieTransport protocol — framework-agnostic identifier transport.

Uses generic ``Any`` types for Request/Response so that vendor-specific
types (e.g. Starlette) remain confined to the adapter layer.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CookieTransport(Protocol):
    """Carries the session identifier between client and server."""

    def read_identifier(self, request: Any) -> str:
        """Return the identifier presented by the client, ``""`` if none."""
        ...

    def write_identifier(self, response: Any, identifier: str, max_age: int | None) -> None:
        """Issue *identifier* to the client; ``max_age=None`` omits Max-Age."""
        ...

    def clear_identifier(self, response: Any) -> None:
        """Tell the client to drop its identifier."""
        ...
