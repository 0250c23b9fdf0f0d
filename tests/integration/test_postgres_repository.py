"""
Integration tests for the PostgreSQL account and report repositories.

Tests repository operations against a real PostgreSQL database.
Requires PostgreSQL to be reachable at DATABASE_URL.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import (
    PostgresAccountRepository,
    PostgresReportRepository,
    storage_errors,
)
from src.domain.exceptions import StorageError
from src.domain.models import Role

pytestmark = pytest.mark.integration

HASH = "$2b$10$abcdefghijklmnopqrstuuOaJ3mQ2mAhS2fWqSx5mWn5W0pD8V1y."


@pytest.fixture
def accounts(pool: ConnectionPool) -> PostgresAccountRepository:
    return PostgresAccountRepository(pool)


@pytest.fixture
def reports(pool: ConnectionPool) -> PostgresReportRepository:
    return PostgresReportRepository(pool)


class TestAccountCreate:
    """Tests for account insertion and defaults."""

    def test_create_applies_defaults(self, accounts, candidate_factory) -> None:
        account = accounts.create(candidate_factory(), HASH)

        assert account is not None
        assert account.email == "worker@example.com"
        assert account.role == Role.USER
        assert account.is_verified is False
        assert account.is_blocked is False
        assert account.created_at.tzinfo is not None

    def test_create_stores_hash_not_plaintext(self, accounts, candidate_factory, pool) -> None:
        accounts.create(candidate_factory(password="secret1", confirm_password="secret1"), HASH)

        with pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT password_hash FROM accounts WHERE email = %s", ("worker@example.com",))
            assert cursor.fetchone()[0] == HASH

        assert accounts.get_password_hash("worker@example.com") == HASH

    def test_duplicate_email_returns_none(self, accounts, candidate_factory) -> None:
        accounts.create(candidate_factory(), HASH)

        assert accounts.create(candidate_factory(name="Someone Else"), HASH) is None
        assert accounts.get("worker@example.com").name == "Field Worker"

    def test_concurrent_duplicates_insert_one_row(self, accounts, candidate_factory, pool) -> None:
        candidate = candidate_factory()

        with ThreadPoolExecutor(max_workers=5) as executor:
            results = list(executor.map(lambda _: accounts.create(candidate, HASH), range(5)))

        assert sum(1 for r in results if r is not None) == 1
        with pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT COUNT(*) FROM accounts")
            assert cursor.fetchone()[0] == 1

    def test_email_exists(self, accounts, candidate_factory) -> None:
        assert accounts.email_exists("worker@example.com") is False
        accounts.create(candidate_factory(), HASH)
        assert accounts.email_exists("worker@example.com") is True

    def test_invalid_mobile_number_is_storage_error(self, accounts, candidate_factory) -> None:
        with pytest.raises(StorageError) as exc_info:
            accounts.create(candidate_factory(mobile_number="123"), HASH)

        assert exc_info.value.message == "Internal server error"


class TestAccountTransitions:
    """Tests for single-statement flag updates and deletion."""

    def test_get_unknown_returns_none(self, accounts) -> None:
        assert accounts.get("nobody@example.com") is None
        assert accounts.get_password_hash("nobody@example.com") is None

    def test_set_verified(self, accounts, candidate_factory) -> None:
        accounts.create(candidate_factory(), HASH)

        assert accounts.set_verified("worker@example.com", True) is True
        assert accounts.get("worker@example.com").is_verified is True

    def test_set_verified_is_idempotent(self, accounts, candidate_factory) -> None:
        accounts.create(candidate_factory(), HASH)

        assert accounts.set_verified("worker@example.com", True) is True
        assert accounts.set_verified("worker@example.com", True) is True

    def test_set_verified_unknown_returns_false(self, accounts) -> None:
        assert accounts.set_verified("nobody@example.com", True) is False

    def test_set_blocked_and_verified(self, accounts, candidate_factory) -> None:
        accounts.create(candidate_factory(), HASH)

        assert accounts.set_blocked_and_verified("worker@example.com", True, False) is True

        account = accounts.get("worker@example.com")
        assert account.is_blocked is True
        assert account.is_verified is False

    def test_set_blocked_and_verified_unknown_returns_false(self, accounts) -> None:
        assert accounts.set_blocked_and_verified("nobody@example.com", True, True) is False

    def test_delete(self, accounts, candidate_factory) -> None:
        accounts.create(candidate_factory(), HASH)

        assert accounts.delete("worker@example.com") is True
        assert accounts.get("worker@example.com") is None
        assert accounts.delete("worker@example.com") is False

    def test_email_reusable_after_delete(self, accounts, candidate_factory) -> None:
        accounts.create(candidate_factory(), HASH)
        accounts.delete("worker@example.com")

        assert accounts.create(candidate_factory(), HASH) is not None


class TestAccountListing:
    def _insert_at(self, pool, email: str, created_at: datetime) -> None:
        with pool.connection() as conn:
            conn.execute(
                """INSERT INTO accounts
                       (email, name, password_hash, institution, mobile_number, lat, lng, created_at)
                   VALUES (%s, 'N', %s, 'I', '01712345678', 0, 0, %s)""",
                (email, HASH, created_at),
            )
            conn.commit()

    def test_list_all_newest_first(self, accounts, pool) -> None:
        now = datetime.now(timezone.utc)
        self._insert_at(pool, "old@example.com", now - timedelta(days=2))
        self._insert_at(pool, "new@example.com", now)
        self._insert_at(pool, "mid@example.com", now - timedelta(hours=1))

        emails = [a.email for a in accounts.list_all()]

        assert emails == ["new@example.com", "mid@example.com", "old@example.com"]

    def test_list_created_since(self, accounts, pool) -> None:
        now = datetime.now(timezone.utc)
        self._insert_at(pool, "old@example.com", now - timedelta(days=2))
        self._insert_at(pool, "new@example.com", now - timedelta(hours=2))

        recent = accounts.list_created_since(now - timedelta(hours=24))

        assert [a.email for a in recent] == ["new@example.com"]

    def test_missing_blocked_flag_reads_as_false(self, accounts, pool) -> None:
        self._insert_at(pool, "legacy@example.com", datetime.now(timezone.utc))
        with pool.connection() as conn:
            conn.execute("UPDATE accounts SET is_blocked = NULL")
            conn.commit()

        assert accounts.get("legacy@example.com").is_blocked is False


class TestReportRepository:
    """Tests for report insertion, listing and resolution."""

    def test_create_returns_open_report(self, reports, new_report_factory, fixed_now) -> None:
        report = reports.create(new_report_factory(other_cause="fever"), fixed_now)

        assert report.id
        assert report.created_at == fixed_now
        assert report.other_cause == "fever"
        assert report.is_solved is False
        assert report.solution is None
        assert report.solver_name is None
        assert report.solved_at is None

    def test_ids_are_unique(self, reports, new_report_factory, fixed_now) -> None:
        ids = {reports.create(new_report_factory(), fixed_now).id for _ in range(3)}
        assert len(ids) == 3

    def test_list_all_newest_first(self, reports, new_report_factory, fixed_now) -> None:
        older = reports.create(new_report_factory(), fixed_now - timedelta(days=1))
        newer = reports.create(new_report_factory(), fixed_now)

        assert [r.id for r in reports.list_all()] == [newer.id, older.id]

    def test_resolve_sets_all_fields(self, reports, new_report_factory, fixed_now) -> None:
        created = reports.create(new_report_factory(), fixed_now)

        resolved = reports.resolve(created.id, "Referred to district hospital", "Dr. Rahman")

        assert resolved.is_solved is True
        assert resolved.solution == "Referred to district hospital"
        assert resolved.solver_name == "Dr. Rahman"
        assert resolved.solved_at is not None
        assert resolved.created_at == fixed_now

    def test_resolve_twice_overwrites(self, reports, new_report_factory, fixed_now) -> None:
        created = reports.create(new_report_factory(), fixed_now)
        first = reports.resolve(created.id, "First", "A")
        time.sleep(0.01)

        second = reports.resolve(created.id, "Second", "B")

        assert second.solution == "Second"
        assert second.solver_name == "B"
        assert second.solved_at >= first.solved_at

    def test_resolve_unknown_id_returns_none(self, reports) -> None:
        assert reports.resolve("00000000-0000-0000-0000-000000000000", "S", "N") is None

    def test_resolve_malformed_id_returns_none(self, reports) -> None:
        assert reports.resolve("not-a-uuid", "S", "N") is None

    def test_partial_resolution_rejected_by_constraint(
        self, reports, new_report_factory, fixed_now, pool
    ) -> None:
        created = reports.create(new_report_factory(), fixed_now)

        with pytest.raises(StorageError):
            with storage_errors("partial_resolve"):
                with pool.connection() as conn:
                    conn.execute(
                        "UPDATE reports SET is_solved = TRUE WHERE id = %s", (created.id,)
                    )


class TestStorageErrors:
    def test_driver_error_translated(self) -> None:
        with pytest.raises(StorageError) as exc_info:
            with storage_errors("probe"):
                raise psycopg.OperationalError("connection refused at 10.1.1.1")

        assert "10.1.1.1" not in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, psycopg.OperationalError)
