"""Port for password hashing and verification."""

from __future__ import annotations

from typing import Protocol


class PasswordHasherPort(Protocol):
    """Salted, deliberately slow password hashing contract.

    Implementations must compare digests in constant time and must never log
    or return the plaintext.
    """

    def hash_password(self, password: str) -> str:
        """Hash plaintext password for storage.

        Raises ValueError when the password exceeds the algorithm's input
        limit (72 UTF-8 bytes for bcrypt).
        """

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        """Verify plaintext password against stored hash.

        Returns False, never raises, for a malformed hash or an over-long
        password.
        """
