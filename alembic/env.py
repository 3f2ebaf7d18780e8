"""Alembic environment for the users schema.

Migrations run on an async engine built from ``DATABASE_URL`` (or the ini
URL), or on a connection handed in through ``config.attributes["connection"]``
by programmatic callers such as tests.
"""

from __future__ import annotations

import asyncio
import os
from logging.config import fileConfig
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context
from credential_auth.infrastructure.db.metadata import metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

load_dotenv(Path(__file__).resolve().parents[1] / ".env")


def _configure_and_run(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=metadata)
    with context.begin_transaction():
        context.run_migrations()


async def _run_on_async_engine(url: str) -> None:
    engine = create_async_engine(url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_configure_and_run)
    finally:
        await engine.dispose()


def run_migrations() -> None:
    """Run migrations on a supplied connection or on an async engine."""

    supplied: Connection | None = config.attributes.get("connection")
    if supplied is not None:
        _configure_and_run(supplied)
        return

    url = os.getenv("DATABASE_URL") or config.get_main_option("sqlalchemy.url")
    if not url:
        raise RuntimeError("DATABASE_URL environment variable is not set")
    asyncio.run(_run_on_async_engine(url))


if context.is_offline_mode():
    raise RuntimeError("offline migrations are not supported; run against a database")
run_migrations()
