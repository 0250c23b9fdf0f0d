"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain registries and infrastructure adapters into routes.
Registries are built per request around the pool held in app state;
nothing here is a process-wide database handle.
"""

from collections.abc import Callable
from datetime import datetime, timezone

from fastapi import Depends, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository, PostgresReportRepository
from src.adapters.tokens.jwt_issuer import JwtTokenIssuer
from src.config.settings import Settings, get_settings
from src.domain.accounts import AccountRegistry
from src.domain.credentials import CredentialStore
from src.domain.reports import ReportRegistry


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_account_registry(
    request: Request, settings: Settings = Depends(get_settings)
) -> AccountRegistry:
    """
    Create account registry with injected dependencies.

    Wires the Postgres repository and a bcrypt credential store at the
    configured cost factor.
    """
    repository = PostgresAccountRepository(get_pool(request))
    credentials = CredentialStore(repository=repository, cost=settings.bcrypt_cost)
    return AccountRegistry(repository=repository, credentials=credentials)


def get_report_registry(request: Request) -> ReportRegistry:
    """Create report registry with the Postgres repository."""
    return ReportRegistry(repository=PostgresReportRepository(get_pool(request)))


def get_token_issuer(settings: Settings = Depends(get_settings)) -> JwtTokenIssuer:
    return JwtTokenIssuer(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl_seconds=settings.token_ttl_seconds,
    )


def get_clock() -> Callable[[], datetime]:
    """Reference-time source for windowed queries."""
    return lambda: datetime.now(timezone.utc)
