"""Repository adapters - Database implementations."""

from .postgres import PostgresAccountRepository, PostgresReportRepository, run_migrations

__all__ = ["PostgresAccountRepository", "PostgresReportRepository", "run_migrations"]
