"""
Password hashing.

Passwords are stored as bcrypt hashes produced through Django's hasher
framework.  The work factor comes from ``settings.PASSWORD_HASH_ROUNDS`` so
it can be raised in production and lowered in tests.
"""
from __future__ import annotations

import logging

from django.conf import settings
from django.contrib.auth.hashers import BCryptSHA256PasswordHasher, check_password, make_password

logger = logging.getLogger(__name__)


class BCryptHasher(BCryptSHA256PasswordHasher):
    """bcrypt(sha256(password)) with a configurable cost."""

    @property
    def rounds(self) -> int:  # type: ignore[override]
        return settings.PASSWORD_HASH_ROUNDS


def hash_password(plaintext: str) -> str:
    """Return a salted one-way hash of ``plaintext``."""
    return make_password(plaintext)


def verify_password(plaintext: str, hashed: str) -> bool:
    """Check ``plaintext`` against a stored hash.

    A malformed or unusable hash is a failed match, never an error.
    """
    try:
        return check_password(plaintext, hashed)
    except (ValueError, TypeError):
        logger.warning("stored password hash could not be parsed")
        return False


def dummy_verify(plaintext: str) -> None:
    """Spend one hash worth of time for an identifier that does not exist."""
    make_password(plaintext)
