"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for race condition, timing and
enumeration tests.
"""

from collections.abc import Callable, Generator

import bcrypt
import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository
from src.domain.accounts import AccountRegistry
from src.domain.credentials import CredentialStore


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresAccountRepository:
    """Create repository instance for each test."""
    return PostgresAccountRepository(pool)


@pytest.fixture
def registry(repository: PostgresAccountRepository) -> AccountRegistry:
    """Registry at the production bcrypt cost."""
    credentials = CredentialStore(repository=repository, cost=10)
    return AccountRegistry(repository=repository, credentials=credentials)


@pytest.fixture(autouse=True)
def _empty_tables(clean_database: None) -> Generator[None, None, None]:
    yield


@pytest.fixture
def create_account(pool: ConnectionPool) -> Callable[..., None]:
    """Insert an account directly, bypassing the registry."""

    def create(email: str, password: str, **flags: bool) -> None:
        password_hash = bcrypt.hashpw(password.encode(), bcrypt.gensalt(10)).decode()
        with pool.connection() as conn:
            conn.execute(
                """INSERT INTO accounts
                       (email, name, password_hash, institution, mobile_number, lat, lng,
                        is_verified, is_blocked)
                   VALUES (%s, 'Worker', %s, 'Clinic', '01712345678', 0, 0, %s, %s)""",
                (email, password_hash, flags.get("is_verified", False), flags.get("is_blocked", False)),
            )
            conn.commit()

    return create
