"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Domain object factories (accounts, reports, candidates)
- A PostgreSQL connection pool for integration and adversarial tests,
  skipped when the configured database is unreachable
"""

from collections.abc import Callable, Generator
from datetime import datetime, timezone

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import run_migrations
from src.config.settings import get_settings
from src.domain.models import Account, Location, NewAccount, NewReport, Report, Role

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now() -> datetime:
    """Reference instant for windowed queries."""
    return FIXED_NOW


@pytest.fixture
def account_factory() -> Callable[..., Account]:
    def make(**overrides) -> Account:
        fields = {
            "email": "worker@example.com",
            "name": "Field Worker",
            "institution": "District Hospital",
            "mobile_number": "01712345678",
            "location": Location(lat=23.8, lng=90.4),
            "created_at": FIXED_NOW,
            "designation": "Midwife",
            "role": Role.USER,
            "is_verified": False,
            "is_blocked": False,
        }
        fields.update(overrides)
        return Account(**fields)

    return make


@pytest.fixture
def candidate_factory() -> Callable[..., NewAccount]:
    def make(**overrides) -> NewAccount:
        fields = {
            "name": "Field Worker",
            "email": "worker@example.com",
            "password": "secret1",
            "confirm_password": "secret1",
            "location": Location(lat=23.8, lng=90.4),
            "institution": "District Hospital",
            "mobile_number": "01712345678",
            "designation": "Midwife",
        }
        fields.update(overrides)
        return NewAccount(**fields)

    return make


@pytest.fixture
def new_report_factory() -> Callable[..., NewReport]:
    def make(**overrides) -> NewReport:
        fields = {
            "name": "Reporter",
            "mobile_number": "01812345678",
            "address": "Village Road 4",
            "location": Location(lat=22.3, lng=91.8),
            "cause": "postpartum-haemorrhage",
        }
        fields.update(overrides)
        return NewReport(**fields)

    return make


@pytest.fixture
def report_factory() -> Callable[..., Report]:
    def make(**overrides) -> Report:
        fields = {
            "id": "6f1c2a8e-9f0b-4d7a-8a43-2b1f0c9d5e10",
            "name": "Reporter",
            "mobile_number": "01812345678",
            "address": "Village Road 4",
            "location": Location(lat=22.3, lng=91.8),
            "cause": "postpartum-haemorrhage",
            "created_at": FIXED_NOW,
        }
        fields.update(overrides)
        return Report(**fields)

    return make


@pytest.fixture(scope="session")
def pool() -> Generator[ConnectionPool, None, None]:
    """Connection pool against DATABASE_URL, with migrations applied."""
    settings = get_settings()
    try:
        with psycopg.connect(settings.database_url, connect_timeout=2):
            pass
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL not reachable: {e}")

    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=True,
    )
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty both tables before a test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM accounts")
        conn.execute("DELETE FROM reports")
        conn.commit()
    yield
