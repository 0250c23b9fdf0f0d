"""
API v1 account routes - Registration and login.

- POST /api/v1/register - Create an unverified account
- POST /api/v1/login    - Exchange credentials for an access token
"""

from fastapi import APIRouter, Depends, status

from src.adapters.tokens.jwt_issuer import JwtTokenIssuer
from src.api.dependencies import get_account_registry, get_token_issuer
from src.api.models import (
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
)
from src.domain.accounts import AccountRegistry

router = APIRouter(tags=["accounts"])


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error or email already registered"},
    },
    summary="Register a new user",
    description="Create an account in the unverified state. "
    "An administrator must verify it before it is trusted.",
)
def register(
    request_data: RegisterRequest,
    registry: AccountRegistry = Depends(get_account_registry),
) -> MessageResponse:
    """
    Register a new field worker account.

    Role is always ``user``; any role in the body is ignored.
    """
    registry.register(request_data.to_domain())
    return MessageResponse(
        message="User registered successfully. Please verify your email or phone number.",
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid email or password"},
        403: {"model": ErrorResponse, "description": "Account is blocked"},
    },
    summary="Log in",
    description="Verify credentials and issue a bearer token valid for one day.",
)
def login(
    request_data: LoginRequest,
    registry: AccountRegistry = Depends(get_account_registry),
    issuer: JwtTokenIssuer = Depends(get_token_issuer),
) -> LoginResponse:
    claims = registry.authenticate(request_data.email, request_data.password)
    return LoginResponse(
        message="Login successful",
        token=issuer.issue(claims),
        role=claims.role.value,
        is_verified=claims.is_verified,
        is_blocked=claims.is_blocked,
    )
