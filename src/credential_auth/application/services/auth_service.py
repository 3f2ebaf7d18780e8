"""Application authentication service for credential verification."""

from __future__ import annotations

import asyncio
import logging
import secrets
from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID

from credential_auth.application.ports.password_hasher_port import PasswordHasherPort
from credential_auth.application.ports.user_repository_port import UserRecord, UserRepositoryPort
from credential_auth.domain.auth.credentials import (
    DEFAULT_MIN_PASSWORD_LENGTH,
    validate_credentials,
)

logger = logging.getLogger(__name__)


class AuthOutcome(StrEnum):
    """Supported authentication outcomes."""

    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"
    MALFORMED_INPUT = "malformed_input"


@dataclass(frozen=True)
class AuthenticatedUser:
    """User identity handed back to callers; never carries the password hash."""

    user_id: UUID
    email: str
    name: str

    @classmethod
    def from_record(cls, record: UserRecord) -> AuthenticatedUser:
        return cls(user_id=record.user_id, email=record.email, name=record.name)


@dataclass(frozen=True)
class AuthResult:
    """Authentication result model."""

    outcome: AuthOutcome
    user: AuthenticatedUser | None = None


class Authenticator:
    """Verify raw login credentials against the user store.

    Each call is a single pass: validate, look up, compare. Storage failures
    raise ``StorageUnavailableError``; every other outcome is returned as an
    ``AuthResult``. Instances hold no per-call state and may be shared by
    concurrent requests.
    """

    def __init__(
        self,
        *,
        users: UserRepositoryPort,
        password_hasher: PasswordHasherPort,
        min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
        dummy_password_hash: str | None = None,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._min_password_length = min_password_length
        # Compared against when the email is unknown, so both rejection paths
        # pay the same hashing cost.
        self._dummy_password_hash = dummy_password_hash or password_hasher.hash_password(
            secrets.token_urlsafe(32)
        )

    async def authenticate(self, raw_credentials: object) -> AuthResult:
        """Authenticate untrusted credential input and return its outcome."""

        credentials = validate_credentials(
            raw_credentials,
            min_password_length=self._min_password_length,
        )
        if credentials is None:
            logger.info("auth_attempt_result outcome=%s", AuthOutcome.MALFORMED_INPUT.value)
            return AuthResult(outcome=AuthOutcome.MALFORMED_INPUT)

        user = await self._users.get_by_email(email=credentials.email)
        if user is None:
            await self._verify(
                password=credentials.password,
                password_hash=self._dummy_password_hash,
            )
            logger.info("auth_attempt_result outcome=%s", AuthOutcome.REJECTED.value)
            return AuthResult(outcome=AuthOutcome.REJECTED)

        if not await self._verify(password=credentials.password, password_hash=user.password_hash):
            logger.info(
                "auth_attempt_result outcome=%s user_id=%s",
                AuthOutcome.REJECTED.value,
                user.user_id,
            )
            return AuthResult(outcome=AuthOutcome.REJECTED)

        logger.info(
            "auth_attempt_result outcome=%s user_id=%s",
            AuthOutcome.AUTHENTICATED.value,
            user.user_id,
        )
        return AuthResult(
            outcome=AuthOutcome.AUTHENTICATED,
            user=AuthenticatedUser.from_record(user),
        )

    async def _verify(self, *, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(
            self._password_hasher.verify_password,
            password=password,
            password_hash=password_hash,
        )
