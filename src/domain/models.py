"""
Domain entities - Accounts, reports and the values derived from them.

Plain dataclasses with no framework imports. An ``Account`` never carries
its password hash: the hash only travels between the Credential Store and
the repository, so no account record handed outward can leak it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    """Account role. Registration always yields USER."""

    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class Location:
    lat: float
    lng: float


@dataclass(frozen=True)
class Account:
    """A registered identity, as visible outside the credential store."""

    email: str
    name: str
    institution: str
    mobile_number: str
    location: Location
    created_at: datetime
    designation: str | None = None
    role: Role = Role.USER
    is_verified: bool = False
    is_blocked: bool = False


@dataclass(frozen=True)
class NewAccount:
    """Registration candidate after schema validation."""

    name: str
    email: str
    password: str = field(repr=False)
    confirm_password: str = field(repr=False)
    location: Location
    institution: str
    mobile_number: str
    designation: str | None = None


@dataclass(frozen=True)
class ClaimSet:
    """Claims handed to the Access Token Issuer after a successful login."""

    email: str
    role: Role
    is_verified: bool
    is_blocked: bool

    def as_dict(self) -> dict:
        return {
            "email": self.email,
            "role": self.role.value,
            "isVerified": self.is_verified,
            "isBlocked": self.is_blocked,
        }


@dataclass(frozen=True)
class RecentAccounts:
    """Accounts created inside two windows measured from the same instant."""

    last_30_minutes: list[Account]
    last_24_hours: list[Account]


@dataclass(frozen=True)
class Report:
    """
    A submitted incident report.

    ``solution``, ``solver_name`` and ``solved_at`` are all None while
    ``is_solved`` is False and all set once it is True.
    """

    id: str
    name: str
    mobile_number: str
    address: str
    location: Location
    cause: str
    created_at: datetime
    other_cause: str | None = None
    is_solved: bool = False
    solution: str | None = None
    solver_name: str | None = None
    solved_at: datetime | None = None


@dataclass(frozen=True)
class NewReport:
    """Report candidate after schema validation."""

    name: str
    mobile_number: str
    address: str
    location: Location
    cause: str
    other_cause: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class ReportListing:
    """Full report list plus the subset created in the last 24 hours."""

    all_reports: list[Report]
    last_24_hours: list[Report]

    @property
    def count(self) -> int:
        return len(self.all_reports)
