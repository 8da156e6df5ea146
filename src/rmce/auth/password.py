"""
Password hashing primitive and strength rules.

The credential store only ever sees the output of ``PasswordHasher.hash``;
algorithm parameters live here so they can be raised without touching callers
(``needs_rehash`` flags stored hashes created with older parameters).
"""

from __future__ import annotations

import argon2

from rmce.config import get_settings


class PasswordStrengthError(ValueError):
    """Raised when a password does not meet strength requirements."""


class PasswordHasher:
    """argon2id wrapper exposing hash(plaintext) and verify(plaintext, hash)."""

    def __init__(self, time_cost: int = 2, memory_cost: int = 65536, parallelism: int = 1) -> None:
        self._argon = argon2.PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,  # KiB
            parallelism=parallelism,
            hash_len=32,
            salt_len=16,
            type=argon2.Type.ID,
        )

    def hash(self, plaintext: str) -> str:
        return self._argon.hash(plaintext)

    def verify(self, plaintext: str, password_hash: str) -> bool:
        """True on match. Mismatches and unreadable hashes return False, never raise."""
        try:
            return self._argon.verify(password_hash, plaintext)
        except (argon2.exceptions.VerifyMismatchError, argon2.exceptions.InvalidHashError):
            return False

    def needs_rehash(self, password_hash: str) -> bool:
        return self._argon.check_needs_rehash(password_hash)


password_hasher = PasswordHasher()


def validate_password_strength(password: str) -> None:
    """
    Reject passwords that are blank, outside the configured length bounds,
    or missing an uppercase letter, a lowercase letter or a digit.
    """
    settings = get_settings()
    checks = [
        (bool(password and password.strip()), "Password cannot be empty"),
        (
            len(password) >= settings.password_min_length,
            f"Password must be at least {settings.password_min_length} characters",
        ),
        (
            len(password) <= settings.password_max_length,
            f"Password must not exceed {settings.password_max_length} characters",
        ),
        (any(c.isupper() for c in password), "Password must contain at least one uppercase letter"),
        (any(c.islower() for c in password), "Password must contain at least one lowercase letter"),
        (any(c.isdigit() for c in password), "Password must contain at least one digit"),
    ]
    for ok, message in checks:
        if not ok:
            raise PasswordStrengthError(message)
