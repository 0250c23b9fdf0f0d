"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.

Every mutating method is a single atomic storage operation: the
repositories report "no such record" through their return value instead
of a separate lookup, so callers never see a read-modify-write window.
"""

from datetime import datetime
from typing import Protocol

from .models import Account, ClaimSet, NewAccount, NewReport, Report


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    def email_exists(self, email: str) -> bool:
        """Cheap existence probe. Not a correctness guard."""
        ...

    def create(self, candidate: NewAccount, password_hash: str) -> Account | None:
        """
        Insert a new unverified, unblocked USER account.

        The store's uniqueness constraint on email is authoritative:
        a concurrent duplicate insert must lose here.

        Args:
            candidate: Validated registration data
            password_hash: bcrypt hash of the candidate's password

        Returns:
            The stored Account, or None if the email is already registered
        """
        ...

    def get(self, email: str) -> Account | None:
        """Fetch an account by exact email."""
        ...

    def get_password_hash(self, email: str) -> str | None:
        """Fetch the stored hash for an email, or None if unknown."""
        ...

    def set_verified(self, email: str, is_verified: bool) -> bool:
        """Set isVerified. Returns False if no account matched."""
        ...

    def set_blocked_and_verified(self, email: str, is_blocked: bool, is_verified: bool) -> bool:
        """Set both flags in one update. Returns False if no account matched."""
        ...

    def delete(self, email: str) -> bool:
        """Remove an account. Returns False if no account matched."""
        ...

    def list_all(self) -> list[Account]:
        """All accounts, newest first."""
        ...

    def list_created_since(self, since: datetime) -> list[Account]:
        """Accounts with createdAt >= since, newest first."""
        ...


class ReportRepository(Protocol):
    """Port interface for report persistence."""

    def create(self, candidate: NewReport, created_at: datetime) -> Report:
        """Insert an open report and return it with its generated id."""
        ...

    def list_all(self) -> list[Report]:
        """All reports, newest first."""
        ...

    def resolve(self, report_id: str, solution: str, solver_name: str) -> Report | None:
        """
        Mark a report solved and stamp solvedAt in one update.

        Returns:
            The updated Report, or None if report_id matches nothing
            (including ids that are not well-formed)
        """
        ...


class TokenIssuer(Protocol):
    """Port interface for the access token issuer."""

    def issue(self, claims: ClaimSet) -> str:
        """Sign a claim set into a bearer token."""
        ...
