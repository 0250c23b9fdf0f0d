"""
PostgreSQL repository adapters - Implement the account and report ports.

This module provides the PostgreSQL implementations of the domain's
repository ports using psycopg3 with raw SQL.

Consistency Design:
-------------------
1. **Uniqueness**: ``accounts.email`` is UNIQUE. Registration inserts with
   ``ON CONFLICT (email) DO NOTHING``, so concurrent duplicate registrations
   resolve in the database: exactly one INSERT returns a row.

2. **Single-statement transitions**: verify, block, delete and resolve are
   each one UPDATE/DELETE. "Not found" is read from ``rowcount`` or an empty
   ``RETURNING``, never from a prior SELECT, so there is no read-modify-write
   window between concurrent administrators.

3. **Resolution invariant**: a CHECK constraint on ``reports`` requires
   solution, solver_name and solved_at to be all NULL while unsolved and all
   set once solved.

4. **Error translation**: any ``psycopg.Error`` (including pool timeouts) is
   logged and re-raised as the domain's ``StorageError``; driver messages
   never travel further.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from uuid import UUID

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from src.domain.exceptions import StorageError
from src.domain.models import Account, Location, NewAccount, NewReport, Report, Role

logger = logging.getLogger(__name__)

_ACCOUNT_COLUMNS = """
    email, name, institution, designation, mobile_number, lat, lng,
    role, is_verified, is_blocked, created_at
"""

_REPORT_COLUMNS = """
    id, name, mobile_number, address, lat, lng, cause, other_cause,
    is_solved, solution, solver_name, solved_at, created_at
"""


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Translate driver failures into StorageError."""
    try:
        yield
    except psycopg.Error as e:
        logger.error("Storage failure during %s: %s", operation, e)
        raise StorageError("Internal server error") from e


def _account_from_row(row: dict) -> Account:
    return Account(
        email=row["email"],
        name=row["name"],
        institution=row["institution"],
        designation=row["designation"],
        mobile_number=row["mobile_number"],
        location=Location(lat=row["lat"], lng=row["lng"]),
        role=Role(row["role"]),
        is_verified=row["is_verified"],
        # Older rows may predate the column default
        is_blocked=bool(row["is_blocked"]),
        created_at=row["created_at"],
    )


def _report_from_row(row: dict) -> Report:
    return Report(
        id=str(row["id"]),
        name=row["name"],
        mobile_number=row["mobile_number"],
        address=row["address"],
        location=Location(lat=row["lat"], lng=row["lng"]),
        cause=row["cause"],
        other_cause=row["other_cause"],
        is_solved=row["is_solved"],
        solution=row["solution"],
        solver_name=row["solver_name"],
        solved_at=row["solved_at"],
        created_at=row["created_at"],
    )


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def email_exists(self, email: str) -> bool:
        with storage_errors("email_exists"):
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute("SELECT 1 FROM accounts WHERE email = %s", (email,))
                return cursor.fetchone() is not None

    def create(self, candidate: NewAccount, password_hash: str) -> Account | None:
        """
        Insert a new account unless the email is taken.

        role, is_verified, is_blocked and created_at come from column
        defaults ('user', FALSE, FALSE, NOW()).

        Returns:
            The inserted Account, or None if the UNIQUE(email) constraint
            rejected it
        """
        sql = f"""
            INSERT INTO accounts
                (email, name, password_hash, institution, designation, mobile_number, lat, lng)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (email) DO NOTHING
            RETURNING {_ACCOUNT_COLUMNS}
        """
        params = (
            candidate.email,
            candidate.name,
            password_hash,
            candidate.institution,
            candidate.designation,
            candidate.mobile_number,
            candidate.location.lat,
            candidate.location.lng,
        )

        with storage_errors("create_account"):
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
                conn.commit()

        return _account_from_row(row) if row is not None else None

    def get(self, email: str) -> Account | None:
        sql = f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE email = %s"

        with storage_errors("get_account"):
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(sql, (email,))
                row = cursor.fetchone()

        return _account_from_row(row) if row is not None else None

    def get_password_hash(self, email: str) -> str | None:
        with storage_errors("get_password_hash"):
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute("SELECT password_hash FROM accounts WHERE email = %s", (email,))
                row = cursor.fetchone()

        return row[0] if row is not None else None

    def set_verified(self, email: str, is_verified: bool) -> bool:
        sql = "UPDATE accounts SET is_verified = %s WHERE email = %s"

        with storage_errors("set_verified"):
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (is_verified, email))
                conn.commit()
                return cursor.rowcount == 1

    def set_blocked_and_verified(self, email: str, is_blocked: bool, is_verified: bool) -> bool:
        """Both flags change in the same UPDATE, so readers see both or neither."""
        sql = "UPDATE accounts SET is_blocked = %s, is_verified = %s WHERE email = %s"

        with storage_errors("set_blocked_and_verified"):
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (is_blocked, is_verified, email))
                conn.commit()
                return cursor.rowcount == 1

    def delete(self, email: str) -> bool:
        with storage_errors("delete_account"):
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute("DELETE FROM accounts WHERE email = %s", (email,))
                conn.commit()
                return cursor.rowcount == 1

    def list_all(self) -> list[Account]:
        sql = f"SELECT {_ACCOUNT_COLUMNS} FROM accounts ORDER BY created_at DESC"

        with storage_errors("list_accounts"):
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(sql)
                rows = cursor.fetchall()

        return [_account_from_row(row) for row in rows]

    def list_created_since(self, since: datetime) -> list[Account]:
        sql = f"""
            SELECT {_ACCOUNT_COLUMNS} FROM accounts
            WHERE created_at >= %s
            ORDER BY created_at DESC
        """

        with storage_errors("list_recent_accounts"):
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(sql, (since,))
                rows = cursor.fetchall()

        return [_account_from_row(row) for row in rows]


class PostgresReportRepository:
    """
    Implements ReportRepository protocol via psycopg3.

    Report ids are database-generated UUIDs, exposed as strings.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def create(self, candidate: NewReport, created_at: datetime) -> Report:
        sql = f"""
            INSERT INTO reports
                (name, mobile_number, address, lat, lng, cause, other_cause, created_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING {_REPORT_COLUMNS}
        """
        params = (
            candidate.name,
            candidate.mobile_number,
            candidate.address,
            candidate.location.lat,
            candidate.location.lng,
            candidate.cause,
            candidate.other_cause,
            created_at,
        )

        with storage_errors("create_report"):
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
                conn.commit()

        return _report_from_row(row)

    def list_all(self) -> list[Report]:
        sql = f"SELECT {_REPORT_COLUMNS} FROM reports ORDER BY created_at DESC"

        with storage_errors("list_reports"):
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(sql)
                rows = cursor.fetchall()

        return [_report_from_row(row) for row in rows]

    def resolve(self, report_id: str, solution: str, solver_name: str) -> Report | None:
        """
        Set all resolution fields and solved_at (database time) in one UPDATE.

        A report_id that is not a UUID cannot match any row and returns None.
        """
        try:
            key = UUID(report_id)
        except ValueError:
            return None

        sql = f"""
            UPDATE reports
            SET is_solved = TRUE, solution = %s, solver_name = %s, solved_at = NOW()
            WHERE id = %s
            RETURNING {_REPORT_COLUMNS}
        """

        with storage_errors("resolve_report"):
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(sql, (solution, solver_name, key))
                row = cursor.fetchone()
                conn.commit()

        return _report_from_row(row) if row is not None else None


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration is idempotent (IF NOT EXISTS).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # src/adapters/repository/postgres.py -> <repo root>/migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))
    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        try:
            with pool.connection() as conn:
                conn.execute(sql_file.read_text())
        except psycopg.Error as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
        logger.info("Migration complete: %s", sql_file.name)
