"""
Credential Store - one-way password hashing and verification.

Passwords are hashed with bcrypt and compared with bcrypt's constant-time
check. Unknown emails are compared against a dummy hash of the same cost
factor so the "no such account" path costs the same as a wrong password.

bcrypt only reads the first 72 bytes of a password (and bcrypt 5 refuses
longer input), so longer passwords are rejected at hashing time and can
never verify.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache

import bcrypt

from .exceptions import ValidationError
from .ports import AccountRepository

logger = logging.getLogger(__name__)

MAX_PASSWORD_BYTES = 72


@lru_cache
def _dummy_hash(cost: int) -> bytes:
    """Hash of a throwaway password at the given cost factor."""
    return bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(rounds=cost))


@dataclass
class CredentialStore:
    """Holds hashed credentials through the account repository."""

    repository: AccountRepository
    cost: int = 10

    def hash(self, plaintext: str) -> str:
        """
        Hash a password with bcrypt at the configured cost factor.

        Raises:
            ValidationError: If the password is longer than 72 bytes
        """
        secret = plaintext.encode()
        if len(secret) > MAX_PASSWORD_BYTES:
            raise ValidationError("Password must be at most 72 bytes")
        return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=self.cost)).decode()

    def verify(self, email: str, plaintext: str) -> bool:
        """
        Check a plaintext password against the stored hash for an email.

        Always runs one bcrypt comparison, whether or not the email exists
        and whatever the password length.

        Returns:
            True only if the account exists and the password matches
        """
        stored_hash = self.repository.get_password_hash(email)
        candidate_hash = (
            stored_hash.encode() if stored_hash is not None else _dummy_hash(self.cost)
        )

        secret = plaintext.encode()
        too_long = len(secret) > MAX_PASSWORD_BYTES
        if too_long:
            # Still pay for one comparison; the result is discarded
            secret = secret[:MAX_PASSWORD_BYTES]

        try:
            matches = bcrypt.checkpw(secret, candidate_hash)
        except ValueError:
            # Stored value is not a bcrypt hash
            logger.error("Unreadable password hash for %s", email)
            return False

        return stored_hash is not None and matches and not too_long
