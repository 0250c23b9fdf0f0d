"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account and report lifecycle rules for the
field-reporting service. It defines its own port interfaces for
infrastructure abstraction, ensuring true hexagonal architecture decoupling.
"""

from .accounts import AccountRegistry
from .credentials import CredentialStore
from .exceptions import (
    AccountBlocked,
    AuthError,
    ConflictError,
    InvalidCredentials,
    LifecycleError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from .models import (
    Account,
    ClaimSet,
    Location,
    NewAccount,
    NewReport,
    RecentAccounts,
    Report,
    ReportListing,
    Role,
)
from .ports import AccountRepository, ReportRepository, TokenIssuer
from .reports import ReportRegistry

__all__ = [
    "Account",
    "AccountBlocked",
    "AccountRegistry",
    "AccountRepository",
    "AuthError",
    "ClaimSet",
    "ConflictError",
    "CredentialStore",
    "InvalidCredentials",
    "LifecycleError",
    "Location",
    "NewAccount",
    "NewReport",
    "NotFoundError",
    "RecentAccounts",
    "Report",
    "ReportListing",
    "ReportRegistry",
    "ReportRepository",
    "Role",
    "StorageError",
    "TokenIssuer",
    "ValidationError",
]
