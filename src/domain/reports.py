"""
Report Registry - incident report resolution lifecycle.

Reports are created open (isSolved False, no resolution fields) and move
to solved through resolve(), which sets isSolved, solution, solverName and
solvedAt in one storage update. Resolving an already-solved report
overwrites its resolution fields; there is no un-resolve.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from .exceptions import NotFoundError, ValidationError
from .models import NewReport, Report, ReportListing
from .ports import ReportRepository

logger = logging.getLogger(__name__)

RECENT_REPORT_WINDOW = timedelta(hours=24)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ReportRegistry:
    """Domain service owning Report state transitions."""

    repository: ReportRepository
    clock: Callable[[], datetime] = field(default=utc_now)

    def submit(self, candidate: NewReport) -> Report:
        """Store a new open report; createdAt defaults to now."""
        created_at = candidate.created_at or self.clock()
        report = self.repository.create(candidate, created_at)
        logger.info("Report %s submitted (cause=%s)", report.id, report.cause)
        return report

    def list_reports(self) -> ReportListing:
        """
        All reports newest first, plus those created in the last 24 hours.

        The 24-hour subset is filtered from the same fetched list, so it is
        always a literal subset of ``all_reports``.
        """
        cutoff = self.clock() - RECENT_REPORT_WINDOW
        all_reports = self.repository.list_all()
        last_24_hours = [r for r in all_reports if r.created_at >= cutoff]
        return ReportListing(all_reports=all_reports, last_24_hours=last_24_hours)

    def resolve(
        self,
        report_id: str,
        is_solved: bool | None,
        solution: str | None,
        solver_name: str | None,
    ) -> Report:
        """
        Mark a report solved.

        Args:
            report_id: Identifier of the report
            is_solved: Must be truthy
            solution: Non-empty resolution text
            solver_name: Non-empty name of the resolver

        Returns:
            The updated Report

        Raises:
            ValidationError: If any of the three inputs is missing or empty
            NotFoundError: If report_id matches no report
        """
        if not is_solved or not solution or not solver_name:
            raise ValidationError("isSolved, solution, and solverName are required")

        report = self.repository.resolve(report_id, solution, solver_name)
        if report is None:
            raise NotFoundError("Report not found")

        logger.info("Report %s resolved by %s", report.id, report.solver_name)
        return report
