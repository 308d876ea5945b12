"""
Reviews Router

Endpoints:
- GET /groups/{group_id}/reviews - List reviews for a group
- POST /groups/{group_id}/review - Create or update the caller's review
- GET /reviews/{review_id} - Get a specific review
- DELETE /reviews/{review_id} - Delete a review (owner or admin)

Business Rules:
- One review per user per group; submitting again updates it
  (201 on create, 200 on update)
- Every write recomputes the group's average rating
"""

import logging
import math

from fastapi import APIRouter, HTTPException, Request, Response, status
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from groupfinder.config import get_settings
from groupfinder.dependencies import ActiveUser, DbSession, Pagination
from groupfinder.models import Group, Review
from groupfinder.schemas.review import (
    ReviewCreate,
    ReviewListResponse,
    ReviewResponse,
    ReviewSubmitResponse,
)
from groupfinder.services.authorization import can_delete_review
from groupfinder.services.rate_limiter import limiter
from groupfinder.services.ratings import delete_review, submit_review

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    tags=["Reviews"],
    responses={404: {"description": "Review or group not found"}},
)


def get_review_or_404(db: DbSession, review_id: int) -> Review:
    """Get a review by ID with its author loaded, or raise 404."""
    stmt = (
        select(Review)
        .options(selectinload(Review.user))
        .where(Review.id == review_id)
    )
    review = db.execute(stmt).scalar_one_or_none()

    if review is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Review with ID {review_id} not found",
        )
    return review


@router.get(
    "/groups/{group_id}/reviews",
    response_model=ReviewListResponse,
    summary="List reviews for a group",
)
@limiter.limit(settings.rate_limit_default)
def list_group_reviews(
    request: Request,
    group_id: int,
    db: DbSession,
    pagination: Pagination,
) -> ReviewListResponse:
    if db.get(Group, group_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Group with ID {group_id} not found",
        )

    total = db.execute(
        select(func.count()).where(Review.group_id == group_id)
    ).scalar() or 0

    stmt = (
        select(Review)
        .options(selectinload(Review.user))
        .where(Review.group_id == group_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .offset(pagination.skip)
        .limit(pagination.per_page)
    )
    reviews = db.execute(stmt).scalars().all()

    return ReviewListResponse(
        items=[ReviewResponse.model_validate(r) for r in reviews],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=math.ceil(total / pagination.per_page) if total > 0 else 0,
    )


@router.post(
    "/groups/{group_id}/review",
    response_model=ReviewSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a review",
    description="Create your review of a group, or update it if you already reviewed it.",
    responses={200: {"description": "Existing review updated"}},
)
@limiter.limit(settings.rate_limit_write)
def submit_group_review(
    request: Request,
    response: Response,
    group_id: int,
    review_data: ReviewCreate,
    db: DbSession,
    current_user: ActiveUser,
) -> ReviewSubmitResponse:
    review, created = submit_review(
        db,
        group_id,
        current_user.id,
        review_data.rating,
        review_data.comment,
    )
    group = db.get(Group, group_id)

    if not created:
        response.status_code = status.HTTP_200_OK

    return ReviewSubmitResponse(
        message="Review submitted successfully" if created else "Review updated successfully",
        review_id=review.id,
        average_rating=group.average_rating,
        review_count=group.review_count,
    )


@router.get(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    summary="Get a review",
)
@limiter.limit(settings.rate_limit_default)
def get_review(request: Request, review_id: int, db: DbSession) -> ReviewResponse:
    return ReviewResponse.model_validate(get_review_or_404(db, review_id))


@router.delete(
    "/reviews/{review_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a review",
    description="Delete a review. Only the author or an admin can delete it.",
)
@limiter.limit(settings.rate_limit_write)
def remove_review(
    request: Request,
    review_id: int,
    db: DbSession,
    current_user: ActiveUser,
) -> None:
    review = get_review_or_404(db, review_id)

    if not can_delete_review(current_user, review.user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete your own reviews",
        )

    delete_review(db, review_id)
