"""
API v1 report routes - Submission, listing and resolution.
"""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_report_registry
from src.api.models import (
    ErrorResponse,
    ReportModel,
    ReportRequest,
    ReportResponse,
    ReportsResponse,
    ResolveReportRequest,
)
from src.domain.reports import ReportRegistry

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post(
    "",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Validation error"}},
    summary="Submit a report",
)
def submit_report(
    request_data: ReportRequest,
    registry: ReportRegistry = Depends(get_report_registry),
) -> ReportResponse:
    report = registry.submit(request_data.to_domain())
    return ReportResponse(
        message="Report submitted successfully.",
        report=ReportModel.from_domain(report),
    )


@router.get(
    "",
    response_model=ReportsResponse,
    summary="List reports with the last-24-hours subset and total count",
)
def list_reports(registry: ReportRegistry = Depends(get_report_registry)) -> ReportsResponse:
    listing = registry.list_reports()
    return ReportsResponse(
        all_reports_count=listing.count,
        all_reports=[ReportModel.from_domain(r) for r in listing.all_reports],
        last_24_hours_reports=[ReportModel.from_domain(r) for r in listing.last_24_hours],
    )


@router.patch(
    "/{report_id}",
    response_model=ReportResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing resolution fields"},
        404: {"model": ErrorResponse, "description": "Report not found"},
    },
    summary="Resolve a report",
)
def resolve_report(
    report_id: str,
    request_data: ResolveReportRequest,
    registry: ReportRegistry = Depends(get_report_registry),
) -> ReportResponse:
    """
    Mark a report solved.

    - **isSolved**, **solution**, **solverName** are all required
    """
    report = registry.resolve(
        report_id,
        request_data.is_solved,
        request_data.solution,
        request_data.solver_name,
    )
    return ReportResponse(
        message="Report updated successfully",
        report=ReportModel.from_domain(report),
    )
