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
"""Session subsystem wiring from configuration.

Nothing here talks to the store.  Construction never fails because the
store is down; call :meth:`SessionManager.start` afterwards and decide
whether a :class:`~flysession.kernel.exceptions.StoreError` is fatal::

    config = Config.from_file("flysession.yaml")
    manager = install_session_middleware(app, config)

    @asynccontextmanager
    async def lifespan(app):
        await manager.start()
        yield
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import structlog
from starlette.applications import Starlette

from flysession.core.config import Config
from flysession.logging.structlog_adapter import StructlogAdapter
from flysession.session.adapters.memory import InMemorySessionStore
from flysession.session.adapters.redis import RedisSessionStore
from flysession.session.manager import SessionManager
from flysession.session.ports.outbound import SessionStore
from flysession.session.properties import SessionProperties, StoreProperties
from flysession.web.adapters.starlette.cookies import StarletteCookieTransport
from flysession.web.adapters.starlette.middleware import SessionMiddleware

logger = structlog.get_logger("flysession.session")


def redis_client(properties: StoreProperties) -> Any:
    """Build a ``redis.asyncio`` client; connection options pass straight through."""
    import redis.asyncio as aioredis
    from redis.asyncio.retry import Retry
    from redis.backoff import ExponentialBackoff

    options: dict[str, Any] = {
        "socket_connect_timeout": properties.dial_timeout,
        "retry": Retry(ExponentialBackoff(), properties.retries),
    }
    if properties.url:
        return aioredis.from_url(properties.url, **options)
    return aioredis.Redis(
        host=properties.host,
        port=properties.port,
        password=properties.password,
        db=properties.db,
        **options,
    )


def session_store(properties: SessionProperties) -> SessionStore:
    """Create the store selected by ``store.type``."""
    if properties.store.type == "redis":
        logger.info("session_store_configured", type="redis", host=properties.store.host, db=properties.store.db)
        return RedisSessionStore(client=redis_client(properties.store))

    logger.info("session_store_configured", type="memory")
    return InMemorySessionStore()


def session_manager(
    properties: SessionProperties,
    store: SessionStore | None = None,
    *,
    clock: Callable[[], float] = time.time,
) -> SessionManager:
    return SessionManager(
        store if store is not None else session_store(properties),
        max_age=properties.max_age,
        session_delay=properties.session_delay,
        key_prefix=properties.key_prefix or properties.cookie_name,
        cookie_max_age_factor=properties.cookie_max_age_factor,
        clock=clock,
    )


def install_session_middleware(
    app: Starlette,
    config: Config,
    store: SessionStore | None = None,
) -> SessionManager:
    """Bind ``flysession.session`` from *config* and add :class:`SessionMiddleware` to *app*.

    A ``flysession.logging`` section, when present, configures structlog first.
    """
    if config.get_section("flysession.logging"):
        StructlogAdapter().configure(config)

    properties = config.bind(SessionProperties)
    manager = session_manager(properties, store)
    app.add_middleware(
        SessionMiddleware,
        manager=manager,
        cookies=StarletteCookieTransport.from_properties(properties),
        exclude_patterns=properties.exclude_patterns,
    )
    return manager
