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
"""Session configuration bound from the ``flysession.session`` section."""

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from flysession.core.config import config_properties
from flysession.session.manager import DEFAULT_COOKIE_MAX_AGE_FACTOR, DEFAULT_SESSION_DELAY


class StoreProperties(BaseModel):
    """Store connection parameters, handed to the redis client untouched."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    type: Literal["memory", "redis"] = "memory"
    url: str | None = None
    host: str = "localhost"
    port: int = Field(default=6379, ge=1, le=65535)
    password: str | None = None
    db: int = Field(default=0, ge=0)
    dial_timeout: float | None = Field(default=None, gt=0, alias="dial-timeout")
    retries: int = Field(default=0, ge=0)


@config_properties(prefix="flysession.session")
class SessionProperties(BaseModel):
    """Cookie, expiry and store settings.

    Example ``flysession.yaml``::

        flysession:
          session:
            cookie-name: sid
            max-age: 3600
            session-delay: 5
            secure: true
            http-only: true
            store:
              type: redis
              host: cache.internal
              password: ${REDIS_PASSWORD}
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    cookie_name: str = Field(default="session", min_length=1, alias="cookie-name")
    max_age: int = Field(default=0, ge=0, alias="max-age")
    session_delay: int = Field(
        default=DEFAULT_SESSION_DELAY,
        ge=0,
        validation_alias=AliasChoices("session-delay", "max-age-tolerance", "session_delay"),
    )
    cookie_max_age_factor: int = Field(default=DEFAULT_COOKIE_MAX_AGE_FACTOR, ge=1, alias="cookie-max-age-factor")
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    http_only: bool = Field(default=False, alias="http-only")
    same_site: Literal["lax", "strict", "none"] | None = Field(default="lax", alias="same-site")
    key_prefix: str | None = Field(default=None, alias="key-prefix")
    exclude_patterns: list[str] = Field(default_factory=list, alias="exclude-patterns")
    store: StoreProperties = Field(default_factory=StoreProperties)

    @model_validator(mode="after")
    def _default_key_prefix(self) -> SessionProperties:
        if not self.key_prefix:
            self.key_prefix = self.cookie_name
        return self
