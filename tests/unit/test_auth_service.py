from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

import pytest

from credential_auth.application.ports.user_repository_port import (
    StorageUnavailableError,
    UserRecord,
)
from credential_auth.application.services.auth_service import (
    AuthenticatedUser,
    Authenticator,
    AuthOutcome,
)

DUMMY_HASH = "hashed::dummy"


@dataclass
class FakeUserRepository:
    user: UserRecord | None
    unavailable: bool = False
    lookups: list[str] = field(default_factory=list)

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        self.lookups.append(email)
        if self.unavailable:
            raise StorageUnavailableError("failed to fetch user")
        if self.user is None or self.user.email != email:
            return None
        return self.user


class FakePasswordHasher:
    def __init__(self) -> None:
        self.hash_calls: list[str] = []
        self.verify_calls: list[tuple[str, str]] = []

    def hash_password(self, password: str) -> str:
        self.hash_calls.append(password)
        return f"hashed::{password}"

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        self.verify_calls.append((password, password_hash))
        return password_hash == f"hashed::{password}"


def _user(*, email: str = "user@example.com", password: str = "123456") -> UserRecord:
    now = datetime.now(tz=UTC)
    return UserRecord(
        user_id=uuid4(),
        email=email,
        name="Example User",
        password_hash=f"hashed::{password}",
        created_at=now,
        updated_at=now,
    )


def _authenticator(
    users: FakeUserRepository,
    hasher: FakePasswordHasher,
    **kwargs: object,
) -> Authenticator:
    return Authenticator(
        users=users,
        password_hasher=hasher,
        dummy_password_hash=DUMMY_HASH,
        **kwargs,  # type: ignore[arg-type]
    )


@pytest.mark.asyncio
async def test_correct_password_authenticates_and_returns_user_without_hash() -> None:
    user = _user()
    users = FakeUserRepository(user=user)
    hasher = FakePasswordHasher()
    authenticator = _authenticator(users, hasher)

    result = await authenticator.authenticate({"email": "user@example.com", "password": "123456"})

    assert result.outcome is AuthOutcome.AUTHENTICATED
    assert result.user == AuthenticatedUser(
        user_id=user.user_id,
        email="user@example.com",
        name="Example User",
    )
    assert not hasattr(result.user, "password_hash")
    assert users.lookups == ["user@example.com"]
    assert hasher.verify_calls == [("123456", "hashed::123456")]


@pytest.mark.asyncio
async def test_wrong_password_is_rejected() -> None:
    users = FakeUserRepository(user=_user())
    hasher = FakePasswordHasher()
    authenticator = _authenticator(users, hasher)

    result = await authenticator.authenticate({"email": "user@example.com", "password": "654321"})

    assert result.outcome is AuthOutcome.REJECTED
    assert result.user is None
    assert hasher.verify_calls == [("654321", "hashed::123456")]


@pytest.mark.asyncio
async def test_unknown_email_is_rejected_after_dummy_hash_comparison() -> None:
    users = FakeUserRepository(user=None)
    hasher = FakePasswordHasher()
    authenticator = _authenticator(users, hasher)

    result = await authenticator.authenticate({"email": "user@example.com", "password": "123456"})

    assert result.outcome is AuthOutcome.REJECTED
    assert result.user is None
    assert users.lookups == ["user@example.com"]
    assert hasher.verify_calls == [("123456", DUMMY_HASH)]


def test_placeholder_hash_is_generated_once_with_configured_hasher() -> None:
    hasher = FakePasswordHasher()

    Authenticator(users=FakeUserRepository(user=None), password_hasher=hasher)

    assert len(hasher.hash_calls) == 1
    assert len(hasher.hash_calls[0]) >= 32


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"email": "user@example.com"},
        {"password": "123456"},
        {"email": "user@example.com", "password": "short"},
        {"email": "not-an-email", "password": "123456"},
        {"email": "user@example.com", "password": 123456},
        {"email": "Mallory <user@example.com>", "password": "123456"},
        None,
        "user@example.com",
    ],
)
async def test_malformed_input_skips_lookup_and_hashing(raw: object) -> None:
    users = FakeUserRepository(user=_user())
    hasher = FakePasswordHasher()
    authenticator = _authenticator(users, hasher)

    result = await authenticator.authenticate(raw)

    assert result.outcome is AuthOutcome.MALFORMED_INPUT
    assert result.user is None
    assert users.lookups == []
    assert hasher.verify_calls == []


@pytest.mark.asyncio
async def test_storage_outage_raises_instead_of_rejecting() -> None:
    users = FakeUserRepository(user=_user(), unavailable=True)
    hasher = FakePasswordHasher()
    authenticator = _authenticator(users, hasher)

    with pytest.raises(StorageUnavailableError):
        await authenticator.authenticate({"email": "user@example.com", "password": "123456"})

    assert hasher.verify_calls == []


@pytest.mark.asyncio
async def test_email_is_normalized_before_lookup() -> None:
    users = FakeUserRepository(user=_user())
    hasher = FakePasswordHasher()
    authenticator = _authenticator(users, hasher)

    result = await authenticator.authenticate({"email": "USER@Example.com", "password": "123456"})

    assert result.outcome is AuthOutcome.AUTHENTICATED
    assert users.lookups == ["user@example.com"]


@pytest.mark.asyncio
async def test_minimum_password_length_is_configurable() -> None:
    users = FakeUserRepository(user=_user())
    hasher = FakePasswordHasher()
    authenticator = _authenticator(users, hasher, min_password_length=8)

    result = await authenticator.authenticate({"email": "user@example.com", "password": "123456"})

    assert result.outcome is AuthOutcome.MALFORMED_INPUT
    assert users.lookups == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ({"email": "user@example.com", "password": "123456"}, AuthOutcome.AUTHENTICATED),
        ({"email": "user@example.com", "password": "wrong-password"}, AuthOutcome.REJECTED),
        ({"email": "other@example.com", "password": "123456"}, AuthOutcome.REJECTED),
        ({"email": "user@example.com", "password": "short"}, AuthOutcome.MALFORMED_INPUT),
    ],
)
async def test_repeated_attempts_yield_the_same_outcome(
    raw: dict[str, str],
    expected: AuthOutcome,
) -> None:
    authenticator = _authenticator(FakeUserRepository(user=_user()), FakePasswordHasher())

    outcomes = [(await authenticator.authenticate(raw)).outcome for _ in range(3)]

    assert outcomes == [expected, expected, expected]


@pytest.mark.asyncio
async def test_concurrent_attempts_do_not_interfere() -> None:
    authenticator = _authenticator(FakeUserRepository(user=_user()), FakePasswordHasher())
    attempts = [
        {"email": "user@example.com", "password": "123456"},
        {"email": "user@example.com", "password": "wrong-password"},
        {"email": "other@example.com", "password": "123456"},
        {"email": "user@example.com", "password": "short"},
    ] * 5

    results = await asyncio.gather(*(authenticator.authenticate(raw) for raw in attempts))

    assert [result.outcome for result in results] == [
        AuthOutcome.AUTHENTICATED,
        AuthOutcome.REJECTED,
        AuthOutcome.REJECTED,
        AuthOutcome.MALFORMED_INPUT,
    ] * 5
