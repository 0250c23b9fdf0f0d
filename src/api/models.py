"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Wire names are camelCase; request models are validated here, before any
registry logic runs, and converted to domain candidates with ``to_domain()``.
Account response models have no password field at all.
"""

import re
from datetime import datetime, timezone

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StrictFloat,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from src.domain.credentials import MAX_PASSWORD_BYTES
from src.domain.models import Account, Location, NewAccount, NewReport, Report

MOBILE_NUMBER_PATTERN = re.compile(r"[0-9]{11}")


def _check_mobile_number(value: str) -> str:
    if not MOBILE_NUMBER_PATTERN.fullmatch(value):
        raise PydanticCustomError("mobile_number", "Mobile number must be 11 digits")
    return value


class ApiModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LocationModel(ApiModel):
    # Numbers only; numeric strings are rejected
    lat: StrictFloat
    lng: StrictFloat

    def to_domain(self) -> Location:
        return Location(lat=self.lat, lng=self.lng)


class RegisterRequest(ApiModel):
    """Request model for user registration. Role is never accepted."""

    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6, description="User password (min 6 characters)")
    confirm_password: str = Field(..., min_length=6)
    location: LocationModel
    institution: str = Field(..., min_length=1)
    designation: str | None = None
    mobile_number: str = Field(..., description="11-digit mobile number")

    check_mobile_number = field_validator("mobile_number")(_check_mobile_number)

    @field_validator("email", mode="wrap")
    @classmethod
    def keep_email_as_sent(cls, value: object, handler: ValidatorFunctionWrapHandler) -> object:
        """Check the address syntax but store it exactly as typed, so login can match it."""
        handler(value)
        return value

    @field_validator("password")
    @classmethod
    def check_password_bytes(cls, value: str) -> str:
        if len(value.encode()) > MAX_PASSWORD_BYTES:
            raise PydanticCustomError("password_too_long", "Password must be at most 72 bytes")
        return value

    def to_domain(self) -> NewAccount:
        return NewAccount(
            name=self.name,
            email=self.email,
            password=self.password,
            confirm_password=self.confirm_password,
            location=self.location.to_domain(),
            institution=self.institution,
            designation=self.designation,
            mobile_number=self.mobile_number,
        )


class LoginRequest(ApiModel):
    email: str
    password: str


class BlockUserRequest(ApiModel):
    """Administrative compound update; both flags are required."""

    is_blocked: bool
    is_verified: bool


class DeleteUserRequest(ApiModel):
    # Presence is enforced by the registry so the error is a 400, not a schema miss
    email: str | None = None


_REQUIRED_MESSAGES = {
    "name": "Name is required",
    "address": "Address is required",
    "cause": "Please select a cause",
}


class ReportRequest(ApiModel):
    """Request model for incident report submission."""

    name: str
    mobile_number: str
    address: str
    location: LocationModel
    cause: str
    other_cause: str | None = None
    created_at: datetime | None = None

    check_mobile_number = field_validator("mobile_number")(_check_mobile_number)

    @field_validator("name", "address", "cause")
    @classmethod
    def check_required(cls, value: str, info: ValidationInfo) -> str:
        if not value:
            raise PydanticCustomError("required", _REQUIRED_MESSAGES[info.field_name])
        return value

    def to_domain(self) -> NewReport:
        created_at = self.created_at
        if created_at is not None and created_at.tzinfo is None:
            # Naive timestamps are taken as UTC
            created_at = created_at.replace(tzinfo=timezone.utc)
        return NewReport(
            name=self.name,
            mobile_number=self.mobile_number,
            address=self.address,
            location=self.location.to_domain(),
            cause=self.cause,
            other_cause=self.other_cause,
            created_at=created_at,
        )


class ResolveReportRequest(ApiModel):
    # All optional here; the registry rejects any missing field with a 400
    is_solved: bool | None = None
    solution: str | None = None
    solver_name: str | None = None


class AccountModel(ApiModel):
    """Public view of an account."""

    email: str
    name: str
    institution: str
    designation: str | None = None
    mobile_number: str
    location: LocationModel
    role: str
    is_verified: bool
    is_blocked: bool
    created_at: datetime

    @classmethod
    def from_domain(cls, account: Account) -> "AccountModel":
        return cls(
            email=account.email,
            name=account.name,
            institution=account.institution,
            designation=account.designation,
            mobile_number=account.mobile_number,
            location=LocationModel(lat=account.location.lat, lng=account.location.lng),
            role=account.role.value,
            is_verified=account.is_verified,
            is_blocked=account.is_blocked,
            created_at=account.created_at,
        )


class ReportModel(ApiModel):
    id: str
    name: str
    mobile_number: str
    address: str
    location: LocationModel
    cause: str
    other_cause: str | None = None
    is_solved: bool
    solution: str | None = None
    solver_name: str | None = None
    solved_at: datetime | None = None
    created_at: datetime

    @classmethod
    def from_domain(cls, report: Report) -> "ReportModel":
        return cls(
            id=report.id,
            name=report.name,
            mobile_number=report.mobile_number,
            address=report.address,
            location=LocationModel(lat=report.location.lat, lng=report.location.lng),
            cause=report.cause,
            other_cause=report.other_cause,
            is_solved=report.is_solved,
            solution=report.solution,
            solver_name=report.solver_name,
            solved_at=report.solved_at,
            created_at=report.created_at,
        )


class MessageResponse(ApiModel):
    """Standard success envelope."""

    success: bool = True
    message: str


class LoginResponse(MessageResponse):
    token: str
    role: str
    is_verified: bool
    is_blocked: bool


class UsersResponse(ApiModel):
    success: bool = True
    users: list[AccountModel]


class RecentUsersResponse(ApiModel):
    success: bool = True
    last_30_minutes_users: list[AccountModel] = Field(..., alias="last30MinutesUsers")
    last_24_hours_users: list[AccountModel] = Field(..., alias="last24HoursUsers")


class ReportResponse(MessageResponse):
    report: ReportModel


class ReportsResponse(ApiModel):
    success: bool = True
    all_reports_count: int
    all_reports: list[ReportModel]
    last_24_hours_reports: list[ReportModel] = Field(..., alias="last24HoursReports")


class ErrorResponse(BaseModel):
    """Standard error response model."""

    success: bool = False
    message: str
