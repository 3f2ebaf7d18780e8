"""SQLAlchemy adapter for user lookup queries."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import cast
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from credential_auth.application.ports.user_repository_port import (
    StorageUnavailableError,
    UserRecord,
    UserRepositoryPort,
)
from credential_auth.infrastructure.db.metadata import users

logger = logging.getLogger(__name__)


class SqlAlchemyUserRepository(UserRepositoryPort):
    """User repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: Callable[[], AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by normalized email with a single uncached query."""

        statement = sa.select(
            users.c.id,
            users.c.email,
            users.c.name,
            users.c.password_hash,
            users.c.created_at,
            users.c.updated_at,
        ).where(users.c.email == email).limit(1)

        try:
            async with self._session_factory() as session:
                result = await session.execute(statement)
                row = result.mappings().first()
        except (SQLAlchemyError, OSError, TimeoutError) as error:
            logger.error("user_lookup_failed error_type=%s", type(error).__name__)
            raise StorageUnavailableError("failed to fetch user") from error

        if row is None:
            return None
        return _to_user_record(row)


def _to_user_record(row: sa.RowMapping) -> UserRecord:
    raw_user_id = row["id"]
    user_id = raw_user_id if isinstance(raw_user_id, UUID) else UUID(str(raw_user_id))
    return UserRecord(
        user_id=user_id,
        email=cast(str, row["email"]),
        name=cast(str, row["name"]),
        password_hash=cast(str, row["password_hash"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )
