"""Port for user lookup operations used by authentication services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol
from uuid import UUID


class StorageUnavailableError(RuntimeError):
    """Raised when the user store cannot be reached or fails mid-query.

    Distinct from a missing user: callers may retry the attempt later.
    """


@dataclass(frozen=True)
class UserRecord:
    """User persistence model."""

    user_id: UUID
    email: str
    name: str
    password_hash: str = field(repr=False)
    created_at: datetime
    updated_at: datetime


class UserRepositoryPort(Protocol):
    """User repository contract."""

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by normalized email, or None when no record matches.

        Raises StorageUnavailableError on storage failure.
        """
