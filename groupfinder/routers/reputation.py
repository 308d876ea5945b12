"""
Reputation Router

Endpoints:
- GET /reputation - Reputation summary and history (own, or any user for admins)
- POST /reputation - Award or deduct points (admin)
- GET /reputation/leaderboard - Users ranked by reputation
"""

import logging

from fastapi import APIRouter, HTTPException, Query, Request, status

from groupfinder.config import get_settings
from groupfinder.dependencies import ActiveUser, AdminUser, DbSession
from groupfinder.models.user import User
from groupfinder.schemas.reputation import (
    AwardPointsRequest,
    AwardPointsResponse,
    LeaderboardEntry,
    ReputationHistoryResponse,
    ReputationResponse,
    ReputationSummary,
)
from groupfinder.services import reputation as reputation_service
from groupfinder.services.authorization import can_view_user_data
from groupfinder.services.levels import level_name, points_to_next_level, progress_to_next_level
from groupfinder.services.rate_limiter import limiter

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/reputation", tags=["Reputation"])


def build_summary(user: User) -> ReputationSummary:
    return ReputationSummary(
        points=user.reputation_points,
        level=user.reputation_level,
        level_name=level_name(user.reputation_level),
        badges_count=user.badges_count,
        progress=progress_to_next_level(user.reputation_points, user.reputation_level),
        points_to_next_level=points_to_next_level(user.reputation_points, user.reputation_level),
    )


@router.get(
    "",
    response_model=ReputationResponse,
    summary="Get reputation and history",
)
@limiter.limit(settings.rate_limit_default)
def get_reputation(
    request: Request,
    db: DbSession,
    current_user: ActiveUser,
    user_id: int | None = Query(default=None, alias="userId", ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> ReputationResponse:
    target_id = user_id or current_user.id
    if not can_view_user_data(current_user, target_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only view your own reputation",
        )

    user, entries = reputation_service.get_history(db, target_id, limit=limit, offset=offset)
    return ReputationResponse(
        reputation=build_summary(user),
        history=[ReputationHistoryResponse.model_validate(e) for e in entries],
    )


@router.post(
    "",
    response_model=AwardPointsResponse,
    summary="Award reputation points",
)
@limiter.limit(settings.rate_limit_write)
def award_points(
    request: Request,
    body: AwardPointsRequest,
    db: DbSession,
    admin: AdminUser,
) -> AwardPointsResponse:
    user = reputation_service.award_points(
        db,
        body.user_id,
        body.points,
        body.reason,
        body.source_type,
        body.source_id,
    )
    logger.info(f"Admin {admin.id} awarded {body.points} points to user {body.user_id}")
    return AwardPointsResponse(success=True, reputation=build_summary(user))


@router.get(
    "/leaderboard",
    response_model=list[LeaderboardEntry],
    summary="Reputation leaderboard",
)
@limiter.limit(settings.rate_limit_default)
def leaderboard(
    request: Request,
    db: DbSession,
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> list[LeaderboardEntry]:
    users = reputation_service.get_leaderboard(db, limit=limit, offset=offset)
    return [
        LeaderboardEntry(
            rank=offset + index + 1,
            id=user.id,
            username=user.username,
            display_name=user.display_name,
            avatar_url=user.avatar_url,
            reputation_points=user.reputation_points,
            reputation_level=user.reputation_level,
            level_name=level_name(user.reputation_level),
            badges_count=user.badges_count,
        )
        for index, user in enumerate(users)
    ]
