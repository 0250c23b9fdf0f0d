"""
API v1 admin routes - Account triage.

Verification, blocking, deletion and listing of accounts.
"""

from collections.abc import Callable
from datetime import datetime

from fastapi import APIRouter, Depends

from src.api.dependencies import get_account_registry, get_clock
from src.api.models import (
    AccountModel,
    BlockUserRequest,
    DeleteUserRequest,
    ErrorResponse,
    MessageResponse,
    RecentUsersResponse,
    UsersResponse,
)
from src.domain.accounts import AccountRegistry

router = APIRouter(prefix="/admin", tags=["admin"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "User not found"}}


@router.patch(
    "/verify-user/{email}",
    response_model=MessageResponse,
    responses=_NOT_FOUND,
    summary="Verify a user",
)
def verify_user(
    email: str,
    registry: AccountRegistry = Depends(get_account_registry),
) -> MessageResponse:
    registry.set_verification(email, True)
    return MessageResponse(message="User verified successfully")


@router.patch(
    "/block-user/{email}",
    response_model=MessageResponse,
    responses=_NOT_FOUND,
    summary="Set a user's blocked and verified flags",
)
def block_user(
    email: str,
    request_data: BlockUserRequest,
    registry: AccountRegistry = Depends(get_account_registry),
) -> MessageResponse:
    """Both flags are applied in a single update."""
    registry.set_blocked_and_verified(email, request_data.is_blocked, request_data.is_verified)
    return MessageResponse(message="User status updated successfully")


@router.get(
    "/users",
    response_model=UsersResponse,
    summary="List all users, newest first",
)
def list_users(registry: AccountRegistry = Depends(get_account_registry)) -> UsersResponse:
    accounts = registry.list_accounts()
    return UsersResponse(users=[AccountModel.from_domain(a) for a in accounts])


@router.delete(
    "/users",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Email is required"},
        **_NOT_FOUND,
    },
    summary="Delete a user",
)
def delete_user(
    request_data: DeleteUserRequest | None = None,
    registry: AccountRegistry = Depends(get_account_registry),
) -> MessageResponse:
    registry.delete(request_data.email if request_data is not None else None)
    return MessageResponse(message="User deleted successfully")


@router.get(
    "/recent-users",
    response_model=RecentUsersResponse,
    summary="Users registered in the last 30 minutes and last 24 hours",
)
def recent_users(
    registry: AccountRegistry = Depends(get_account_registry),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> RecentUsersResponse:
    recent = registry.recent_windows(clock())
    return RecentUsersResponse(
        last_30_minutes_users=[AccountModel.from_domain(a) for a in recent.last_30_minutes],
        last_24_hours_users=[AccountModel.from_domain(a) for a in recent.last_24_hours],
    )
