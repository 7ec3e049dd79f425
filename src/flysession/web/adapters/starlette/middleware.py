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
"""SessionMiddleware — pure ASGI middleware binding a session to each request."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from fnmatch import fnmatch
from typing import Any

import structlog
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send

from flysession.session.manager import ReconcileOutcome, SessionManager
from flysession.session.record import SessionRecord
from flysession.web.ports.cookie import CookieTransport

logger = structlog.get_logger("flysession.web")


def get_session(request: Request) -> SessionRecord:
    """Return the session record bound to *request* by :class:`SessionMiddleware`."""
    return request.state.session  # type: ignore[no-any-return]


class SessionMiddleware:
    """Loads the session before the app runs and reconciles it afterwards.

    The downstream response is buffered so that reconciliation happens after
    the handler has fully returned and the cookie decision can still be
    added to the headers.

    If the request is cancelled before reconciliation, pending writes are
    abandoned.  If the app raises, the store side is still reconciled and
    the exception propagates without a cookie update.  A session that had no
    identifier yet is not stored then, since no cookie could point at it.

    Attributes:
        exclude_patterns: Glob patterns of paths that bypass session handling.
    """

    def __init__(
        self,
        app: ASGIApp,
        manager: SessionManager,
        cookies: CookieTransport,
        exclude_patterns: Sequence[str] = (),
    ) -> None:
        self.app = app
        self._manager = manager
        self._cookies = cookies
        self.exclude_patterns = list(exclude_patterns)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive, send)
        if self.should_not_filter(request):
            await self.app(scope, receive, send)
            return

        binding = await self._manager.load(self._cookies.read_identifier(request))
        request.state.session = binding.record

        try:
            response = await self._call_app(scope, receive)
        except asyncio.CancelledError:
            logger.info("session_reconcile_abandoned", path=request.url.path)
            raise
        except Exception:
            await self._manager.reconcile(binding, allocate=False)
            raise

        outcome = await self._manager.reconcile(binding)
        self._apply(outcome, response)
        await response(scope, receive, send)

    def should_not_filter(self, request: Request) -> bool:
        path = request.url.path
        return any(fnmatch(path, p) for p in self.exclude_patterns)

    async def _call_app(self, scope: Scope, receive: Receive) -> Response:
        """Run the downstream ASGI app and capture its response."""
        status_code = 200
        raw_headers: list[tuple[bytes, bytes]] = []
        body_parts: list[bytes] = []

        async def _intercept(message: Any) -> None:
            nonlocal status_code, raw_headers
            if message["type"] == "http.response.start":
                status_code = message["status"]
                raw_headers = list(message.get("headers", []))
            elif message["type"] == "http.response.body":
                body = message.get("body", b"")
                if body:
                    body_parts.append(body)

        await self.app(scope, receive, _intercept)

        response = Response(content=b"".join(body_parts), status_code=status_code)
        response.raw_headers[:] = raw_headers
        return response

    def _apply(self, outcome: ReconcileOutcome, response: Response) -> None:
        if outcome.renew_cookie:
            self._cookies.write_identifier(response, outcome.identifier, outcome.cookie_max_age)
        elif outcome.clear_cookie:
            self._cookies.clear_identifier(response)

        if outcome.errors:
            logger.warning(
                "session_degraded",
                errors=[type(e).__name__ for e in outcome.errors],
                persisted=outcome.persisted,
            )
