"""
Verification Service

Moderation state of groups. set_verification updates the group's
verification fields and appends a VerificationLog row in one commit, so
the group's status always matches its newest log row and there is one
log row per call.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from groupfinder.models import Group, User, VerificationLog, VerificationStatus
from groupfinder.services.exceptions import GroupNotFoundError, ValidationError
from groupfinder.utils import sanitize_text

logger = logging.getLogger(__name__)

VALID_STATUSES = [status.value for status in VerificationStatus]


def validate_status(status: str) -> str:
    if status not in VALID_STATUSES:
        raise ValidationError(
            f"Invalid verification status '{status}'. "
            f"Must be one of: {', '.join(VALID_STATUSES)}",
            code="invalid_verification_status",
        )
    return status


def set_verification(
    db: Session,
    group_id: int,
    admin: User,
    status: str,
    notes: str | None = None,
) -> Group:
    """
    Move a group to a verification status and log the decision.

    Setting the status a group already has is allowed and still logged.
    The caller is responsible for checking that `admin` is an administrator.

    Raises:
        ValidationError: status is not a known verification status
        GroupNotFoundError: group does not exist
    """
    validate_status(status)

    group = db.get(Group, group_id)
    if group is None:
        raise GroupNotFoundError(group_id)

    now = datetime.now(UTC)
    clean_notes = sanitize_text(notes)

    group.verification_status = status
    group.verification_date = now
    group.verified_by = admin.id
    group.verification_notes = clean_notes
    group.is_verified = status == VerificationStatus.VERIFIED.value

    db.add(
        VerificationLog(
            group_id=group_id,
            user_id=admin.id,
            status=status,
            notes=clean_notes,
            created_at=now,
        )
    )
    db.commit()
    db.refresh(group)

    logger.info(f"Group {group_id} verification set to '{status}' by user {admin.id}")
    return group


def get_verification_history(db: Session, group_id: int) -> tuple[Group, list[VerificationLog]]:
    """
    Return the group and its verification log, newest first.

    Each log row has its acting admin loaded.
    """
    group = db.scalar(
        select(Group)
        .options(selectinload(Group.verified_user))
        .where(Group.id == group_id)
    )
    if group is None:
        raise GroupNotFoundError(group_id)

    logs = db.scalars(
        select(VerificationLog)
        .options(selectinload(VerificationLog.user))
        .where(VerificationLog.group_id == group_id)
        .order_by(VerificationLog.created_at.desc(), VerificationLog.id.desc())
    ).all()
    return group, list(logs)


def get_moderation_queue(
    db: Session,
    status: str = VerificationStatus.PENDING.value,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Group], int]:
    """Groups in the given status, oldest submission first."""
    validate_status(status)

    total = db.scalar(
        select(func.count(Group.id)).where(Group.verification_status == status)
    ) or 0
    groups = db.scalars(
        select(Group)
        .options(selectinload(Group.category), selectinload(Group.tags))
        .where(Group.verification_status == status)
        .order_by(Group.created_at.asc(), Group.id.asc())
        .offset(skip)
        .limit(limit)
    ).all()
    return list(groups), total
