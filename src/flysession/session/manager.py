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
"""SessionManager — decides per request what to load, write, delete and reissue.

A request goes through two calls:

1. :meth:`SessionManager.load` turns the identifier presented by the client
   into a :class:`SessionBinding` (record + snapshot + state).
2. :meth:`SessionManager.reconcile` runs after the handler and compares the
   record against its snapshot to decide whether to write it back, delete
   it, and whether the client's cookie must be reissued.

Writes are throttled: an unchanged session is rewritten only once it is
within ``session_delay`` seconds of ``max_age``, and the store TTL is padded
by ``session_delay`` so the entry outlives the cookie's logical lifetime.
Cookie renewal runs on its own, coarser cadence (once per ``max_age``).

Concurrency: records are never shared between requests and no lock is taken
on the store.  Two concurrent requests for the same identifier each load,
mutate and save independently; the last ``set`` wins and the other request's
changes are lost.  Expiry is evaluated lazily on ``load``; nothing sweeps the
store in the background.
"""

from __future__ import annotations

import enum
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from flysession.kernel.exceptions import (
    AllocationError,
    FlySessionException,
    SerializationError,
    StoreError,
)
from flysession.session.codec import decode_payload, encode_record
from flysession.session.identifier import IdentifierAllocator
from flysession.session.ports.outbound import SessionStore
from flysession.session.record import SessionRecord, SessionSnapshot

logger = structlog.get_logger("flysession.session")

DEFAULT_SESSION_DELAY = 5
DEFAULT_COOKIE_MAX_AGE_FACTOR = 2


class SessionState(enum.Enum):
    UNBOUND = "unbound"
    """No usable session was presented; an identifier is allocated on reconcile."""
    FRESH = "fresh"
    STALE = "stale"
    """Alive, but old enough that the next reconcile rewrites it."""
    EXPIRED = "expired"
    """Still in the store but past ``max_age``; deleted on reconcile."""


@dataclass
class SessionBinding:
    """A loaded record together with what is needed to reconcile it."""

    record: SessionRecord
    snapshot: SessionSnapshot
    state: SessionState
    presented_id: str = ""


@dataclass
class ReconcileOutcome:
    """What reconcile did to the store and what the response must carry.

    ``errors`` holds every non-fatal failure met on the way; the request
    continues regardless.
    """

    identifier: str = ""
    persisted: bool = False
    destroyed: bool = False
    renew_cookie: bool = False
    cookie_max_age: int | None = None
    clear_cookie: bool = False
    errors: list[FlySessionException] = field(default_factory=list)


class SessionManager:
    """Loads, persists and expires sessions against a :class:`SessionStore`.

    Args:
        store: Backing store handle.
        max_age: Logical session lifetime in seconds; ``0`` disables expiry.
        session_delay: Latency tolerance in seconds added to the store TTL
            and subtracted from the refresh threshold.
        key_prefix: Store keys are ``"{key_prefix}:{identifier}"``.
        cookie_max_age_factor: Renewed cookies advertise
            ``cookie_max_age_factor * max_age`` seconds.
        allocator: Identifier source.
        clock: Wall-clock time in seconds.
    """

    def __init__(
        self,
        store: SessionStore,
        *,
        max_age: int = 0,
        session_delay: int = DEFAULT_SESSION_DELAY,
        key_prefix: str = "session",
        cookie_max_age_factor: int = DEFAULT_COOKIE_MAX_AGE_FACTOR,
        allocator: IdentifierAllocator | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_age < 0:
            raise ValueError(f"max_age must be >= 0, got {max_age}")
        if session_delay < 0:
            raise ValueError(f"session_delay must be >= 0, got {session_delay}")
        if cookie_max_age_factor < 1:
            raise ValueError(f"cookie_max_age_factor must be >= 1, got {cookie_max_age_factor}")
        self._store = store
        self._max_age = max_age
        self._session_delay = session_delay
        self._key_prefix = key_prefix
        self._cookie_max_age_factor = cookie_max_age_factor
        self._allocator = allocator or IdentifierAllocator()
        self._clock = clock

    @property
    def max_age(self) -> int:
        return self._max_age

    @property
    def store_ttl(self) -> int | None:
        """TTL passed to the store: ``max_age + session_delay``, or no expiry."""
        if self._max_age <= 0:
            return None
        return self._max_age + self._session_delay

    @property
    def cookie_max_age(self) -> int | None:
        """Max-Age advertised on renewed cookies; ``None`` for a browser-session cookie."""
        if self._max_age <= 0:
            return None
        return self._max_age * self._cookie_max_age_factor

    def store_key(self, session_id: str) -> str:
        return f"{self._key_prefix}:{session_id}"

    # -- lifecycle ---------------------------------------------------------

    async def start(self) -> None:
        """Ping the store.  Raises :class:`StoreError`; the caller decides if that is fatal."""
        await self._store.ping()
        logger.info("session_store_ready", store=type(self._store).__name__)

    async def health_check(self) -> bool:
        try:
            await self._store.ping()
        except StoreError as exc:
            logger.warning("session_store_unhealthy", error=str(exc))
            return False
        return True

    # -- per request -------------------------------------------------------

    async def load(self, session_id: str | None) -> SessionBinding:
        """Bind a record to the request for the identifier the client presented."""
        now = self._clock()
        presented = session_id or ""
        if not presented:
            return self._bind(self._new_record(now), SessionState.UNBOUND)

        try:
            raw = await self._store.get(self.store_key(presented))
        except StoreError as exc:
            logger.warning("session_store_failed", operation="get", error=str(exc))
            return self._bind(self._new_record(now), SessionState.UNBOUND, presented)

        if raw is None:
            logger.debug("session_miss")
            return self._bind(self._new_record(now), SessionState.UNBOUND, presented)

        try:
            stored = decode_payload(raw)
        except SerializationError as exc:
            logger.warning("session_corrupt", session_id=presented, error=str(exc))
            return self._bind(self._new_record(now), SessionState.UNBOUND, presented)

        elapsed = now - stored.last_update
        if self._max_age > 0 and elapsed >= self._max_age:
            logger.info("session_expired", session_id=presented, elapsed=round(elapsed, 3))
            return self._bind(self._new_record(now), SessionState.EXPIRED, presented)

        record = SessionRecord(
            presented,
            stored.value,
            last_update=stored.last_update,
            last_cookie_update=stored.last_cookie_update,
            clock=self._clock,
        )
        state = SessionState.STALE if self._due_for_refresh(stored.last_update, now) else SessionState.FRESH
        logger.debug("session_loaded", session_id=presented, state=state.value)
        return self._bind(record, state, presented)

    async def reconcile(self, binding: SessionBinding, *, allocate: bool = True) -> ReconcileOutcome:
        """Write back, delete, or leave the session alone after the handler ran.

        With ``allocate=False`` an unbound record is dropped instead of being
        given an identifier, for requests whose response will carry no cookie.
        """
        record = binding.record
        outcome = ReconcileOutcome(identifier=record.id)

        if binding.state is SessionState.EXPIRED:
            outcome.destroyed = await self._delete(binding.presented_id, outcome)
            outcome.identifier = ""
            outcome.clear_cookie = True
            return outcome

        if record.invalidated:
            if record.is_bound:
                outcome.destroyed = await self._delete(record.id, outcome)
                record.unbind()
            outcome.identifier = ""
            outcome.clear_cookie = bool(binding.presented_id)
            return outcome

        now = self._clock()
        just_allocated = False
        if not record.is_bound:
            if not allocate:
                return outcome
            try:
                record.assign_id(self._allocator.allocate())
            except AllocationError as exc:
                logger.warning("session_allocation_failed", error=str(exc))
                outcome.errors.append(exc)
                outcome.clear_cookie = bool(binding.presented_id)
                return outcome
            just_allocated = True
            outcome.identifier = record.id

        changed = record.is_dirty(binding.snapshot)
        due = self._due_for_refresh(binding.snapshot.last_update, now)
        renew = just_allocated or self._due_for_cookie(record.last_cookie_update, now)
        if renew:
            record.stamp_cookie(now)

        # renewal moved last_cookie_update, which must reach the store too
        if changed or due or renew:
            outcome.persisted = await self._persist(record, now, outcome)

        # an id that never reached the store is not worth handing out
        if renew and (outcome.persisted or not just_allocated):
            outcome.renew_cookie = True
            outcome.cookie_max_age = self.cookie_max_age
        return outcome

    async def destroy(self, record: SessionRecord) -> bool:
        """Delete *record* from the store and unbind it.  Returns ``True`` on success."""
        if not record.is_bound:
            return False
        outcome = ReconcileOutcome()
        deleted = await self._delete(record.id, outcome)
        record.unbind()
        return deleted

    # -- internals ---------------------------------------------------------

    def _new_record(self, now: float) -> SessionRecord:
        return SessionRecord(last_update=now, last_cookie_update=now, clock=self._clock)

    @staticmethod
    def _bind(record: SessionRecord, state: SessionState, presented: str = "") -> SessionBinding:
        return SessionBinding(record=record, snapshot=record.snapshot(), state=state, presented_id=presented)

    def _due_for_refresh(self, last_update: float, now: float) -> bool:
        return self._max_age > 0 and now - last_update >= self._max_age - self._session_delay

    def _due_for_cookie(self, last_cookie_update: float, now: float) -> bool:
        return self._max_age > 0 and now - last_cookie_update >= self._max_age

    async def _persist(self, record: SessionRecord, now: float, outcome: ReconcileOutcome) -> bool:
        record.stamp_update(now)
        try:
            payload = encode_record(record)
        except SerializationError as exc:
            logger.error("session_encode_failed", session_id=record.id, error=str(exc))
            outcome.errors.append(exc)
            return False

        try:
            await self._store.set(self.store_key(record.id), payload, self.store_ttl)
        except StoreError as exc:
            logger.warning("session_store_failed", operation="set", session_id=record.id, error=str(exc))
            outcome.errors.append(exc)
            return False

        logger.debug("session_saved", session_id=record.id, ttl=self.store_ttl)
        return True

    async def _delete(self, session_id: str, outcome: ReconcileOutcome) -> bool:
        try:
            await self._store.delete(self.store_key(session_id))
        except StoreError as exc:
            logger.warning("session_store_failed", operation="delete", session_id=session_id, error=str(exc))
            outcome.errors.append(exc)
            return False
        logger.debug("session_destroyed", session_id=session_id)
        return True
