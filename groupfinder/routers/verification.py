"""
Verification Router

Endpoints:
- PUT /groups/{group_id}/verification - Set a group's verification status (admin)
- GET /groups/{group_id}/verification - Current status and audit log
- GET /admin/verification - Moderation queue by status (admin)
"""

import logging
import math

from fastapi import APIRouter, Query, Request

from groupfinder.config import get_settings
from groupfinder.dependencies import ActiveUser, AdminUser, DbSession, Pagination
from groupfinder.models.group import VerificationStatus
from groupfinder.schemas.group import GroupResponse
from groupfinder.schemas.verification import (
    GroupVerification,
    ModerationQueueResponse,
    VerificationHistoryResponse,
    VerificationLogResponse,
    VerificationUpdate,
    VerificationUpdateResponse,
)
from groupfinder.services.rate_limiter import limiter
from groupfinder.services.verification import (
    get_moderation_queue,
    get_verification_history,
    set_verification,
)

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(tags=["Verification"])


@router.put(
    "/groups/{group_id}/verification",
    response_model=VerificationUpdateResponse,
    summary="Set verification status",
    description="""
    Move a group to `pending`, `verified`, `rejected`, `needs_review` or
    `flagged`. Every call is recorded in the group's verification log.
    """,
)
@limiter.limit(settings.rate_limit_write)
def update_verification(
    request: Request,
    group_id: int,
    body: VerificationUpdate,
    db: DbSession,
    admin: AdminUser,
) -> VerificationUpdateResponse:
    group = set_verification(db, group_id, admin, body.verification_status, body.notes)
    return VerificationUpdateResponse(
        success=True,
        message=f"Group verification status updated to {group.verification_status}",
    )


@router.get(
    "/groups/{group_id}/verification",
    response_model=VerificationHistoryResponse,
    summary="Get verification history",
)
@limiter.limit(settings.rate_limit_default)
def read_verification(
    request: Request,
    group_id: int,
    db: DbSession,
    current_user: ActiveUser,
) -> VerificationHistoryResponse:
    group, logs = get_verification_history(db, group_id)
    return VerificationHistoryResponse(
        verification=GroupVerification.model_validate(group),
        logs=[VerificationLogResponse.model_validate(log) for log in logs],
    )


@router.get(
    "/admin/verification",
    response_model=ModerationQueueResponse,
    summary="Moderation queue",
    description="Groups in a verification status, oldest first.",
)
@limiter.limit(settings.rate_limit_default)
def moderation_queue(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    admin: AdminUser,
    verification_status: VerificationStatus = Query(
        default=VerificationStatus.PENDING,
        alias="status",
    ),
) -> ModerationQueueResponse:
    groups, total = get_moderation_queue(
        db,
        verification_status.value,
        skip=pagination.skip,
        limit=pagination.per_page,
    )
    return ModerationQueueResponse(
        items=[GroupResponse.model_validate(g) for g in groups],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=math.ceil(total / pagination.per_page) if total > 0 else 0,
    )
