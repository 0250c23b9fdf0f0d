"""
Account Registry - account lifecycle state machine.

Account Lifecycle
=================

Flags:
- isVerified: False at registration; set only by an administrator
- isBlocked:  False at registration; toggled only by an administrator
- role:       USER at registration; never settable by the registrant

Transitions:
    register                 -> (unverified, unblocked)
    set_verification         -> isVerified := value
    set_blocked_and_verified -> (isBlocked, isVerified) := (value, value), one update
    delete                   -> account removed (repeat calls raise NotFoundError)

Authentication refuses blocked accounts, but only after the credentials
themselves have been confirmed. Unknown email and wrong password raise the
same InvalidCredentials error.

Each transition is a single atomic repository call; the registry holds no
state of its own.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from .credentials import CredentialStore
from .exceptions import (
    AccountBlocked,
    ConflictError,
    InvalidCredentials,
    NotFoundError,
    ValidationError,
)
from .models import Account, ClaimSet, NewAccount, RecentAccounts
from .ports import AccountRepository

logger = logging.getLogger(__name__)

RECENT_SHORT_WINDOW = timedelta(minutes=30)
RECENT_LONG_WINDOW = timedelta(hours=24)


@dataclass
class AccountRegistry:
    """
    Domain service owning Account state transitions.

    Orchestrates registration, authentication and the administrative
    verify/block/delete actions over an injected repository.
    """

    repository: AccountRepository
    credentials: CredentialStore

    def register(self, candidate: NewAccount) -> Account:
        """
        Register a new account in the unverified, unblocked state.

        Args:
            candidate: Schema-validated registration data

        Returns:
            The stored Account (role USER)

        Raises:
            ValidationError: If password and confirmPassword differ
            ConflictError: If the email is already registered
        """
        if candidate.password != candidate.confirm_password:
            raise ValidationError("Passwords do not match")

        # Fast path only; the unique constraint in storage decides races.
        if self.repository.email_exists(candidate.email):
            raise ConflictError("User already exists")

        password_hash = self.credentials.hash(candidate.password)
        account = self.repository.create(candidate, password_hash)
        if account is None:
            raise ConflictError("User already exists")

        logger.info("Registered account %s", account.email)
        return account

    def authenticate(self, email: str, password: str) -> ClaimSet:
        """
        Check credentials and build the claim set for the token issuer.

        Raises:
            InvalidCredentials: Unknown email or wrong password
            AccountBlocked: Credentials valid but account is blocked
        """
        if not self.credentials.verify(email, password):
            logger.warning("Rejected login for %s", email)
            raise InvalidCredentials()

        account = self.repository.get(email)
        if account is None:
            # Deleted between the credential check and this read
            raise InvalidCredentials()

        if account.is_blocked:
            logger.warning("Blocked account attempted login: %s", email)
            raise AccountBlocked()

        return ClaimSet(
            email=account.email,
            role=account.role,
            is_verified=account.is_verified,
            is_blocked=account.is_blocked,
        )

    def set_verification(self, email: str, is_verified: bool = True) -> None:
        """Set the verification flag. Idempotent."""
        if not self.repository.set_verified(email, is_verified):
            raise NotFoundError("User not found")
        logger.info("Account %s verification set to %s", email, is_verified)

    def set_blocked_and_verified(self, email: str, is_blocked: bool, is_verified: bool) -> None:
        """Set both administrative flags in one atomic update."""
        if not self.repository.set_blocked_and_verified(email, is_blocked, is_verified):
            raise NotFoundError("User not found")
        logger.info(
            "Account %s status set to blocked=%s verified=%s", email, is_blocked, is_verified
        )

    def delete(self, email: str | None) -> None:
        """
        Permanently remove an account.

        Raises:
            ValidationError: If no email was supplied
            NotFoundError: If no account matches (including a repeat delete)
        """
        if not email:
            raise ValidationError("Email is required")
        if not self.repository.delete(email):
            raise NotFoundError("User not found")
        logger.info("Deleted account %s", email)

    def list_accounts(self) -> list[Account]:
        """All accounts, newest first, without credentials."""
        return self.repository.list_all()

    def recent_windows(self, now: datetime) -> RecentAccounts:
        """
        Accounts created in the last 30 minutes and last 24 hours of ``now``.

        One fetch covers the wider window; the narrow window is filtered from
        it, so both are measured from the same instant and snapshot.
        """
        last_24_hours = self.repository.list_created_since(now - RECENT_LONG_WINDOW)
        short_cutoff = now - RECENT_SHORT_WINDOW
        last_30_minutes = [a for a in last_24_hours if a.created_at >= short_cutoff]
        return RecentAccounts(last_30_minutes=last_30_minutes, last_24_hours=last_24_hours)
