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
"""Starlette cookie transport for session identifiers."""

from __future__ import annotations

from typing import Literal

from starlette.requests import Request
from starlette.responses import Response

from flysession.session.properties import SessionProperties


class StarletteCookieTransport:
    """Reads and writes the session cookie on Starlette requests/responses."""

    def __init__(
        self,
        name: str = "session",
        *,
        path: str = "/",
        domain: str | None = None,
        secure: bool = False,
        http_only: bool = False,
        same_site: Literal["lax", "strict", "none"] | None = "lax",
    ) -> None:
        self.name = name
        self._path = path
        self._domain = domain
        self._secure = secure
        self._http_only = http_only
        self._same_site = same_site

    @classmethod
    def from_properties(cls, properties: SessionProperties) -> StarletteCookieTransport:
        return cls(
            properties.cookie_name,
            path=properties.path,
            domain=properties.domain,
            secure=properties.secure,
            http_only=properties.http_only,
            same_site=properties.same_site,
        )

    def read_identifier(self, request: Request) -> str:
        return request.cookies.get(self.name, "")

    def write_identifier(self, response: Response, identifier: str, max_age: int | None) -> None:
        response.set_cookie(
            key=self.name,
            value=identifier,
            max_age=max_age,
            path=self._path,
            domain=self._domain,
            secure=self._secure,
            httponly=self._http_only,
            samesite=self._same_site,
        )

    def clear_identifier(self, response: Response) -> None:
        response.delete_cookie(
            key=self.name,
            path=self._path,
            domain=self._domain,
            secure=self._secure,
            httponly=self._http_only,
            samesite=self._same_site,
        )
