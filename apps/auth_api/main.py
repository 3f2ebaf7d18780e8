"""auth-api entrypoint and HTTP route wiring."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from credential_auth.application.services.auth_service import Authenticator
from credential_auth.config.settings import Settings, load_settings
from credential_auth.infrastructure.db.session import LazySessionFactory
from credential_auth.infrastructure.db.user_repository import SqlAlchemyUserRepository
from credential_auth.infrastructure.http.auth_router import build_auth_router
from credential_auth.infrastructure.logging import configure_logging
from credential_auth.infrastructure.security.password_hasher import BcryptPasswordHasher

AUTH_API_HOST = "0.0.0.0"
AUTH_API_PORT = 8000
DEFAULT_AUTH_TIMEOUT_SECONDS = 10.0
logger = logging.getLogger(__name__)


def build_authenticator(
    settings: Settings,
    *,
    session_factory: LazySessionFactory,
) -> Authenticator:
    """Build authenticator with SQLAlchemy-backed user lookup and bcrypt verification."""

    return Authenticator(
        users=SqlAlchemyUserRepository(session_factory),
        password_hasher=BcryptPasswordHasher(rounds=settings.bcrypt_rounds),
        min_password_length=settings.password_min_length,
    )


def create_app(
    *,
    authenticator: Authenticator | None = None,
    settings: Settings | None = None,
    timeout_seconds: float | None = None,
) -> FastAPI:
    """Create FastAPI app exposing the credential check endpoint.

    The database engine is created lazily on the first lookup, so the app can
    be built before the database is reachable.
    """

    session_factory: LazySessionFactory | None = None
    if authenticator is None:
        settings = settings or load_settings()
        configure_logging(level=settings.log_level)
        session_factory = LazySessionFactory(
            settings.database_url,
            ssl_mode=settings.database_ssl_mode,
        )
        authenticator = build_authenticator(settings, session_factory=session_factory)

    if timeout_seconds is None:
        timeout_seconds = (
            settings.auth_timeout_seconds if settings is not None else DEFAULT_AUTH_TIMEOUT_SECONDS
        )

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        if session_factory is not None:
            await session_factory.dispose()
            logger.info("database_engine_disposed")

    app = FastAPI(lifespan=lifespan)
    app.include_router(
        build_auth_router(authenticator=authenticator, timeout_seconds=timeout_seconds)
    )
    return app


def run_asgi_server(*, host: str = AUTH_API_HOST, port: int = AUTH_API_PORT) -> None:
    """Run auth-api as a long-lived ASGI process using application factory mode."""

    uvicorn.run(
        "apps.auth_api.main:create_app",
        host=host,
        port=port,
        factory=True,
    )


def main() -> None:
    """Run auth-api runtime process."""

    run_asgi_server()


if __name__ == "__main__":
    main()
