"""
Reports Service

Users report problem groups; admins work the reports to a close.

Report lifecycle:
    pending <-> in_review -> resolved | dismissed

Reputation:
- Filing a report earns the reporter REPORT_SUBMISSION points
  (best-effort, see record_contribution)
- Closing it as resolved earns REPORT_ACCEPTED points; dismissing it
  costs REPORT_REJECTED points. The award is committed together with
  the status change, so a closed report always has exactly one outcome
  entry in the reporter's ledger.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from groupfinder.models import (
    OPEN_REPORT_STATUSES,
    Group,
    Report,
    ReportStatus,
    ReputationSource,
    User,
)
from groupfinder.services.exceptions import (
    ConflictError,
    GroupNotFoundError,
    ReportNotFoundError,
    ValidationError,
)
from groupfinder.services.reputation import (
    REPUTATION_POINTS,
    credit_points,
    record_contribution,
)
from groupfinder.utils import sanitize_text

logger = logging.getLogger(__name__)

VALID_REPORT_STATUSES = [s.value for s in ReportStatus]

# Closing status -> (points key, ledger reason)
CLOSING_OUTCOMES = {
    ReportStatus.RESOLVED.value: ("REPORT_ACCEPTED", "Report accepted"),
    ReportStatus.DISMISSED.value: ("REPORT_REJECTED", "Report dismissed"),
}


def _duplicate_report() -> ConflictError:
    return ConflictError(
        "You have already reported this group",
        code="duplicate_report",
    )


def _find_open_report(db: Session, group_id: int, user_id: int) -> Report | None:
    return db.scalar(
        select(Report).where(
            Report.group_id == group_id,
            Report.user_id == user_id,
            Report.status.in_(OPEN_REPORT_STATUSES),
        )
    )


def validate_report_status(status: str) -> str:
    if status not in VALID_REPORT_STATUSES:
        raise ValidationError(
            f"Invalid report status '{status}'. "
            f"Must be one of: {', '.join(VALID_REPORT_STATUSES)}",
            code="invalid_report_status",
        )
    return status


def submit_report(
    db: Session,
    group_id: int,
    user_id: int,
    reason: str,
    comment: str | None = None,
) -> Report:
    """
    File a report against a group.

    Raises:
        ValidationError: reason is blank after sanitizing
        GroupNotFoundError: group does not exist
        ConflictError: the user already has an open report on the group
    """
    clean_reason = sanitize_text(reason)
    if not clean_reason:
        raise ValidationError("Reason is required", code="invalid_reason")

    if db.get(Group, group_id) is None:
        raise GroupNotFoundError(group_id)

    if _find_open_report(db, group_id, user_id) is not None:
        raise _duplicate_report()

    report = Report(
        group_id=group_id,
        user_id=user_id,
        reason=clean_reason,
        comment=sanitize_text(comment),
    )
    db.add(report)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Concurrent report by user {user_id} on group {group_id}")
        raise _duplicate_report()

    record_contribution(
        db,
        user_id,
        "report",
        points=REPUTATION_POINTS["REPORT_SUBMISSION"],
        reason="Reported a group",
        source_type=ReputationSource.REPORT.value,
        source_id=str(report.id),
    )

    db.commit()
    db.refresh(report)

    logger.info(f"Report {report.id} filed on group {group_id} by user {user_id}")
    return report


def get_report(db: Session, report_id: int) -> Report:
    report = db.scalar(
        select(Report)
        .options(selectinload(Report.reporter), selectinload(Report.resolver))
        .where(Report.id == report_id)
    )
    if report is None:
        raise ReportNotFoundError(report_id)
    return report


def list_reports(
    db: Session,
    status: str | None = None,
    group_id: int | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Report], int]:
    """Reports newest first, optionally filtered by status and group."""
    filters = []
    if status is not None:
        filters.append(Report.status == validate_report_status(status))
    if group_id is not None:
        filters.append(Report.group_id == group_id)

    total = db.scalar(select(func.count(Report.id)).where(*filters)) or 0
    reports = db.scalars(
        select(Report)
        .options(selectinload(Report.reporter), selectinload(Report.resolver))
        .where(*filters)
        .order_by(Report.created_at.desc(), Report.id.desc())
        .offset(skip)
        .limit(limit)
    ).all()
    return list(reports), total


def update_report_status(
    db: Session,
    report_id: int,
    admin: User,
    status: str,
    resolution_notes: str | None = None,
) -> Report:
    """
    Move a report through its lifecycle.

    Closing a report (resolved or dismissed) stamps resolved_by and
    resolved_at and adjusts the reporter's reputation in the same commit.
    The caller is responsible for checking that `admin` is an administrator.

    Raises:
        ValidationError: status is not a known report status
        ReportNotFoundError: report does not exist
        ConflictError: the report is already closed
    """
    validate_report_status(status)

    report = db.get(Report, report_id)
    if report is None:
        raise ReportNotFoundError(report_id)
    if not report.is_open:
        raise ConflictError(
            f"Report {report_id} is already {report.status}",
            code="report_closed",
        )

    report.status = status
    if resolution_notes is not None:
        report.resolution_notes = sanitize_text(resolution_notes)

    outcome = CLOSING_OUTCOMES.get(status)
    if outcome is not None:
        points_key, reason = outcome
        report.resolved_by = admin.id
        report.resolved_at = datetime.now(UTC)
        credit_points(
            db,
            report.user_id,
            REPUTATION_POINTS[points_key],
            reason,
            ReputationSource.REPORT.value,
            str(report.id),
        )

    db.commit()
    db.refresh(report)

    logger.info(f"Report {report_id} set to '{status}' by user {admin.id}")
    return report


def delete_report(db: Session, report_id: int) -> None:
    """
    Delete a report.

    Points already awarded for it stay in the ledger.
    """
    report = db.get(Report, report_id)
    if report is None:
        raise ReportNotFoundError(report_id)

    db.delete(report)
    db.commit()
    logger.info(f"Report {report_id} deleted")
