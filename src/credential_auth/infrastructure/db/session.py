"""Async SQLAlchemy session factory helpers."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Literal

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from credential_auth.config.settings import ConfigurationError

SslMode = Literal["disable", "require"]
logger = logging.getLogger(__name__)


def create_session_factory(
    database_url: str,
    *,
    ssl_mode: SslMode = "disable",
) -> async_sessionmaker[AsyncSession]:
    """Create a reusable async session factory for the provided database URL."""

    engine = create_async_engine(database_url, **_engine_options(database_url, ssl_mode))
    return async_sessionmaker(engine, expire_on_commit=False)


class LazySessionFactory:
    """Session factory that builds its engine on first use, exactly once.

    Construction never touches the database, so applications can be built
    without a reachable database or even a configured URL.
    """

    def __init__(
        self,
        database_url: str | None,
        *,
        ssl_mode: SslMode = "disable",
        factory: Callable[..., async_sessionmaker[AsyncSession]] = create_session_factory,
    ) -> None:
        self._database_url = database_url
        self._ssl_mode = ssl_mode
        self._factory = factory
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._lock = threading.Lock()

    def __call__(self) -> AsyncSession:
        return self.get()()

    def get(self) -> async_sessionmaker[AsyncSession]:
        """Return the shared session factory, creating it on first call."""

        session_factory = self._session_factory
        if session_factory is not None:
            return session_factory

        with self._lock:
            if self._session_factory is None:
                if not self._database_url:
                    raise ConfigurationError("DATABASE_URL environment variable is not set")
                self._session_factory = self._factory(
                    self._database_url,
                    ssl_mode=self._ssl_mode,
                )
                logger.info("database_engine_initialized ssl_mode=%s", self._ssl_mode)
            return self._session_factory

    @property
    def is_initialized(self) -> bool:
        return self._session_factory is not None

    async def dispose(self) -> None:
        """Dispose the engine if it was ever created."""

        with self._lock:
            session_factory = self._session_factory
            self._session_factory = None
        if session_factory is None:
            return
        engine: AsyncEngine = session_factory.kw["bind"]
        await engine.dispose()


def _engine_options(database_url: str, ssl_mode: SslMode) -> dict[str, object]:
    if ssl_mode != "require":
        return {}
    if make_url(database_url).get_driver_name() != "asyncpg":
        raise ConfigurationError("DATABASE_SSL_MODE=require is only supported with asyncpg")
    return {"connect_args": {"ssl": "require"}}
