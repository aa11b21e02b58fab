"""
Password Service

Hashing interface plus the pure helpers used by the password flows:
strength validation, temporary passwords and opaque token digests.
"""

import base64
import hashlib
import secrets
import string
from abc import ABC, abstractmethod
from typing import Tuple

from libs.result import Result, Return
from src.domain import errors

MIN_PASSWORD_LENGTH = 8
TEMPORARY_PASSWORD_LENGTH = 12
RESET_TOKEN_BYTES = 32

_UPPER = string.ascii_uppercase
_LOWER = string.ascii_lowercase
_DIGITS = string.digits
_ALPHABET = _UPPER + _LOWER + _DIGITS


class InvalidHashError(ValueError):
    """Stored password hash cannot be parsed"""


class IPasswordHasher(ABC):
    """Slow, salted password hashing - application layer"""

    @abstractmethod
    def hash(self, password: str) -> str:
        """Hash a password into a self-describing string with a random salt"""
        pass

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        """
        Check a password against a stored hash.

        Returns False on mismatch and raises InvalidHashError only when the
        stored hash is malformed.
        """
        pass

    @abstractmethod
    def dummy_verify(self, password: str) -> None:
        """Spend the same time as a real verify when there is no user to check"""
        pass


def validate_password(password: str) -> Result[None]:
    """At least 8 characters with an uppercase letter, a lowercase letter and a digit."""
    if (
        len(password) < MIN_PASSWORD_LENGTH
        or not any(c.isupper() for c in password)
        or not any(c.islower() for c in password)
        or not any(c.isdigit() for c in password)
    ):
        return Return.err(errors.PASSWORD_WEAK)
    return Return.ok(None)


def generate_temporary_password() -> str:
    """Random 12-character password that always passes validate_password."""
    chars = [
        secrets.choice(_UPPER),
        secrets.choice(_LOWER),
        secrets.choice(_DIGITS),
    ]
    chars.extend(
        secrets.choice(_ALPHABET) for _ in range(TEMPORARY_PASSWORD_LENGTH - len(chars))
    )
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)


def hash_token(plain_token: str) -> str:
    """Fast lookup digest for high-entropy tokens (refresh and reset tokens)."""
    digest = hashlib.sha256(plain_token.encode()).digest()
    return base64.urlsafe_b64encode(digest).decode()


def generate_reset_token() -> Tuple[str, str]:
    """Returns (plain token, digest). Only the digest is ever persisted."""
    plain = base64.urlsafe_b64encode(secrets.token_bytes(RESET_TOKEN_BYTES)).decode()
    return plain, hash_token(plain)
