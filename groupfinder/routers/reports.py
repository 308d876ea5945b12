"""
Reports Router

Endpoints:
- POST /reports - Report a group
- GET /reports - List reports, filter by status and group (admin)
- GET /reports/{report_id} - Get a report (reporter or admin)
- PUT /reports/{report_id} - Change a report's status (admin)
- DELETE /reports/{report_id} - Delete a report (admin, or the reporter while pending)

Business Rules:
- One open report per user per group
- Closed (resolved or dismissed) reports cannot be reopened
"""

import logging
import math

from fastapi import APIRouter, HTTPException, Query, Request, status

from groupfinder.config import get_settings
from groupfinder.dependencies import ActiveUser, AdminUser, DbSession, Pagination
from groupfinder.models import ReportStatus
from groupfinder.schemas.report import (
    ReportCreate,
    ReportListResponse,
    ReportResponse,
    ReportStatusUpdate,
)
from groupfinder.services import reports as report_service
from groupfinder.services.authorization import can_delete_report, can_view_report
from groupfinder.services.rate_limiter import limiter

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    tags=["Reports"],
    responses={404: {"description": "Report or group not found"}},
)


@router.post(
    "/reports",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Report a group",
    description="""
    Flag a group for the moderators. You can have one open report per
    group; once it is closed you may report the group again.
    """,
    responses={409: {"description": "You already have an open report on this group"}},
)
@limiter.limit(settings.rate_limit_write)
def create_report(
    request: Request,
    report_data: ReportCreate,
    db: DbSession,
    current_user: ActiveUser,
) -> ReportResponse:
    report = report_service.submit_report(
        db,
        report_data.group_id,
        current_user.id,
        report_data.reason,
        report_data.comment,
    )
    return ReportResponse.model_validate(report)


@router.get(
    "/reports",
    response_model=ReportListResponse,
    summary="List reports",
)
@limiter.limit(settings.rate_limit_default)
def list_reports(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    admin: AdminUser,
    report_status: ReportStatus | None = Query(default=None, alias="status"),
    group_id: int | None = Query(default=None, ge=1),
) -> ReportListResponse:
    reports, total = report_service.list_reports(
        db,
        status=report_status.value if report_status else None,
        group_id=group_id,
        skip=pagination.skip,
        limit=pagination.per_page,
    )
    return ReportListResponse(
        items=[ReportResponse.model_validate(r) for r in reports],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=math.ceil(total / pagination.per_page) if total > 0 else 0,
    )


@router.get(
    "/reports/{report_id}",
    response_model=ReportResponse,
    summary="Get a report",
)
@limiter.limit(settings.rate_limit_default)
def read_report(
    request: Request,
    report_id: int,
    db: DbSession,
    current_user: ActiveUser,
) -> ReportResponse:
    report = report_service.get_report(db, report_id)
    if not can_view_report(current_user, report.user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only view your own reports",
        )
    return ReportResponse.model_validate(report)


@router.put(
    "/reports/{report_id}",
    response_model=ReportResponse,
    summary="Update a report's status",
    description="""
    Move a report to `pending`, `in_review`, `resolved` or `dismissed`.
    Resolving a report rewards the reporter; dismissing it costs them points.
    """,
)
@limiter.limit(settings.rate_limit_write)
def update_report(
    request: Request,
    report_id: int,
    body: ReportStatusUpdate,
    db: DbSession,
    admin: AdminUser,
) -> ReportResponse:
    report = report_service.update_report_status(
        db,
        report_id,
        admin,
        body.status,
        body.resolution_notes,
    )
    return ReportResponse.model_validate(report)


@router.delete(
    "/reports/{report_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a report",
)
@limiter.limit(settings.rate_limit_write)
def remove_report(
    request: Request,
    report_id: int,
    db: DbSession,
    current_user: ActiveUser,
) -> None:
    report = report_service.get_report(db, report_id)
    if not can_delete_report(current_user, report.user_id, report.status):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only withdraw your own pending reports",
        )

    report_service.delete_report(db, report_id)
    logger.info(f"User {current_user.id} deleted report {report_id}")
