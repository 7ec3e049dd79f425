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
"""SessionRecord — the per-request session entity, and its snapshot."""

from __future__ import annotations

import copy
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SessionSnapshot:
    """State of a record as it was before the handler ran.

    ``value`` is a structural deep copy, so later mutations of nested
    containers in the live record do not leak into it.
    """

    value: dict[str, Any] = field(default_factory=dict)
    last_update: float = 0.0
    last_cookie_update: float = 0.0


class SessionRecord:
    """Wraps a session value dictionary with convenience accessors.

    Attributes:
        id: The session identifier, ``""`` while unbound.
        last_update: Wall-clock time of the last persisted write.
        last_cookie_update: Wall-clock time the identifier was last sent
            to the client.
    """

    def __init__(
        self,
        session_id: str = "",
        value: dict[str, Any] | None = None,
        *,
        last_update: float,
        last_cookie_update: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._id = session_id
        self._value: dict[str, Any] = value if value is not None else {}
        self._last_update = last_update
        self._last_cookie_update = last_cookie_update
        self._clock = clock
        self._invalidated = False

    @property
    def id(self) -> str:
        return self._id

    @property
    def is_bound(self) -> bool:
        return bool(self._id)

    @property
    def last_update(self) -> float:
        return self._last_update

    @property
    def last_cookie_update(self) -> float:
        return self._last_cookie_update

    @property
    def value(self) -> dict[str, Any]:
        """The mutable application payload."""
        return self._value

    @property
    def invalidated(self) -> bool:
        return self._invalidated

    def get_attribute(self, name: str, default: Any = None) -> Any:
        """Return the session attribute value, or *default* if absent."""
        return self._value.get(name, default)

    def set_attribute(self, name: str, value: Any) -> None:
        self._value[name] = value

    def remove_attribute(self, name: str) -> None:
        """Remove a session attribute if it exists."""
        self._value.pop(name, None)

    def get_attribute_names(self) -> list[str]:
        return list(self._value)

    def update(self) -> None:
        """Force a write at the end of the request even if nothing changed."""
        self._last_update = self._clock()

    def invalidate(self) -> None:
        """Mark the session for deletion at the end of the request."""
        self._invalidated = True

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            value=copy.deepcopy(self._value),
            last_update=self._last_update,
            last_cookie_update=self._last_cookie_update,
        )

    def is_dirty(self, snapshot: SessionSnapshot) -> bool:
        """Return ``True`` if the value or the update stamp moved since *snapshot*."""
        return self._value != snapshot.value or self._last_update != snapshot.last_update

    # -- used by SessionManager -------------------------------------------

    def assign_id(self, session_id: str) -> None:
        if self._id:
            raise ValueError(f"Session is already bound to '{self._id}'")
        self._id = session_id

    def unbind(self) -> None:
        self._id = ""

    def stamp_update(self, now: float) -> None:
        # never move backwards, even if the wall clock does
        self._last_update = max(now, self._last_update)

    def stamp_cookie(self, now: float) -> None:
        self._last_cookie_update = now

    def __repr__(self) -> str:
        return f"SessionRecord(id={self._id!r}, keys={self.get_attribute_names()!r})"
