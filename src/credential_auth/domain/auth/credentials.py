"""Shape validation and normalization for untrusted login credentials."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Annotated

from email_validator import validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, ValidationError

DEFAULT_MIN_PASSWORD_LENGTH = 6
# bcrypt only reads the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72


def _plain_email_address(value: str) -> str:
    # Bare addresses only; display-name forms like "Name <addr>" are rejected.
    return validate_email(value.strip(), check_deliverability=False).normalized


EmailAddress = Annotated[str, AfterValidator(_plain_email_address)]


@dataclass(frozen=True)
class Credentials:
    """Validated email and plaintext password awaiting verification."""

    email: str
    password: str = field(repr=False)


class _CredentialsInput(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore", frozen=True)

    email: EmailAddress
    password: str


def normalize_user_email(*, email: str) -> str:
    """Normalize one user email and reject blank values."""

    normalized = email.strip().lower()
    if not normalized:
        raise ValueError("email cannot be blank")
    return normalized


def validate_credentials(
    raw: object,
    *,
    min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
) -> Credentials | None:
    """Return validated credentials, or None when the input is malformed.

    Every failure collapses into the same ``None`` result so callers cannot
    tell which field was rejected.
    """

    if not isinstance(raw, Mapping):
        return None
    try:
        parsed = _CredentialsInput.model_validate(dict(raw))
    except ValidationError:
        return None

    if len(parsed.password) < min_password_length:
        return None
    if len(parsed.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return None
    return Credentials(
        email=normalize_user_email(email=parsed.email),
        password=parsed.password,
    )
