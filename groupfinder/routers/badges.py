"""
Badges Router

Badge catalog:
- GET /badges - List badges (filter by category and level)
- POST /badges - Create a badge (admin)
- PATCH /badges/{badge_id} - Update a badge (admin)
- DELETE /badges/{badge_id} - Delete a badge (admin)

Badges held by users:
- GET /user-badges?userId= - Badges of a user (own, or any user for admins)
- POST /user-badges - Award a badge (admin)
- DELETE /user-badges/{user_badge_id} - Take a badge away (admin)
"""

import logging

from fastapi import APIRouter, HTTPException, Query, Request, status
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from groupfinder.config import get_settings
from groupfinder.dependencies import ActiveUser, AdminUser, DbSession
from groupfinder.models import Badge, UserBadge
from groupfinder.schemas.badge import (
    AwardBadgeRequest,
    AwardBadgeResponse,
    BadgeCreate,
    BadgeResponse,
    BadgeUpdate,
    UserBadgeResponse,
)
from groupfinder.services import reputation as reputation_service
from groupfinder.services.authorization import can_view_user_data
from groupfinder.services.rate_limiter import limiter

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(tags=["Badges"])


def get_badge_or_404(db: DbSession, badge_id: int) -> Badge:
    badge = db.get(Badge, badge_id)
    if badge is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Badge with ID {badge_id} not found",
        )
    return badge


def _ensure_unique_name(db: DbSession, name: str, badge_id: int | None = None) -> None:
    stmt = select(Badge.id).where(Badge.name == name)
    if badge_id is not None:
        stmt = stmt.where(Badge.id != badge_id)
    if db.scalar(stmt) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A badge with this name already exists",
        )


# =============================================================================
# Badge Catalog
# =============================================================================


@router.get(
    "/badges",
    response_model=list[BadgeResponse],
    summary="List badges",
)
@limiter.limit(settings.rate_limit_default)
def list_badges(
    request: Request,
    db: DbSession,
    category: str | None = Query(default=None, max_length=50),
    level: int | None = Query(default=None, ge=1),
) -> list[BadgeResponse]:
    stmt = select(Badge)
    if category:
        stmt = stmt.where(Badge.category == category)
    if level is not None:
        stmt = stmt.where(Badge.level == level)
    stmt = stmt.order_by(Badge.display_order, Badge.id)
    return [BadgeResponse.model_validate(b) for b in db.scalars(stmt).all()]


@router.post(
    "/badges",
    response_model=BadgeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a badge",
)
@limiter.limit(settings.rate_limit_write)
def create_badge(
    request: Request,
    badge_data: BadgeCreate,
    db: DbSession,
    admin: AdminUser,
) -> BadgeResponse:
    _ensure_unique_name(db, badge_data.name)

    data = badge_data.model_dump()
    if badge_data.requirements is not None:
        data["requirements"] = badge_data.requirements.model_dump(exclude_none=True)

    badge = Badge(**data)
    db.add(badge)
    db.commit()
    db.refresh(badge)

    logger.info(f"Badge created: {badge.name} by user {admin.id}")
    return BadgeResponse.model_validate(badge)


@router.patch(
    "/badges/{badge_id}",
    response_model=BadgeResponse,
    summary="Update a badge",
)
@limiter.limit(settings.rate_limit_write)
def update_badge(
    request: Request,
    badge_id: int,
    badge_data: BadgeUpdate,
    db: DbSession,
    admin: AdminUser,
) -> BadgeResponse:
    badge = get_badge_or_404(db, badge_id)

    update_data = badge_data.model_dump(exclude_unset=True)
    if "name" in update_data and update_data["name"] is not None:
        _ensure_unique_name(db, update_data["name"], badge_id)
    if badge_data.requirements is not None:
        update_data["requirements"] = badge_data.requirements.model_dump(exclude_none=True)

    for field, value in update_data.items():
        setattr(badge, field, value)

    db.commit()
    db.refresh(badge)

    logger.info(f"Badge updated: {badge.id} by user {admin.id}")
    return BadgeResponse.model_validate(badge)


@router.delete(
    "/badges/{badge_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a badge",
    description="Deletes the badge and every award of it. Points already earned stay.",
)
@limiter.limit(settings.rate_limit_write)
def delete_badge(
    request: Request,
    badge_id: int,
    db: DbSession,
    admin: AdminUser,
) -> None:
    reputation_service.delete_badge(db, badge_id)
    logger.info(f"Badge deleted: {badge_id} by user {admin.id}")


# =============================================================================
# User Badges
# =============================================================================


@router.get(
    "/user-badges",
    response_model=list[UserBadgeResponse],
    summary="List a user's badges",
)
@limiter.limit(settings.rate_limit_default)
def list_user_badges(
    request: Request,
    db: DbSession,
    current_user: ActiveUser,
    user_id: int | None = Query(default=None, alias="userId", ge=1),
) -> list[UserBadgeResponse]:
    target_id = user_id or current_user.id
    if not can_view_user_data(current_user, target_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only view your own badges",
        )

    stmt = (
        select(UserBadge)
        .options(selectinload(UserBadge.badge))
        .where(UserBadge.user_id == target_id)
        .order_by(UserBadge.awarded_at.desc(), UserBadge.id.desc())
    )
    return [UserBadgeResponse.model_validate(ub) for ub in db.scalars(stmt).all()]


@router.post(
    "/user-badges",
    response_model=AwardBadgeResponse,
    summary="Award a badge",
    description="""
    Give a badge to a user. The first award adds the badge's points to the
    user's reputation; awarding it again only increments `times_awarded`.
    """,
)
@limiter.limit(settings.rate_limit_write)
def award_badge(
    request: Request,
    body: AwardBadgeRequest,
    db: DbSession,
    admin: AdminUser,
) -> AwardBadgeResponse:
    user_badge, created = reputation_service.award_badge(db, body.user_id, body.badge_id)
    logger.info(f"Admin {admin.id} awarded badge {body.badge_id} to user {body.user_id}")
    return AwardBadgeResponse(
        success=True,
        message="Badge awarded successfully" if created else "Badge awarded again",
        user_badge=UserBadgeResponse.model_validate(user_badge),
    )


@router.delete(
    "/user-badges/{user_badge_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a badge from a user",
)
@limiter.limit(settings.rate_limit_write)
def remove_user_badge(
    request: Request,
    user_badge_id: int,
    db: DbSession,
    admin: AdminUser,
) -> None:
    reputation_service.remove_badge(db, user_badge_id)
    logger.info(f"Admin {admin.id} removed user badge {user_badge_id}")
