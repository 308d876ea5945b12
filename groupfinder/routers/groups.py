"""
Groups Router

Endpoints:
- GET /groups - List groups (filter, sort, paginate)
- POST /groups - Submit a group (authenticated)
- GET /groups/{group_id} - Group detail

Rejected groups are hidden from the default listing unless the caller is
an admin or asks for a verification status explicitly.
"""

import logging
import math
from typing import Literal

from fastapi import APIRouter, HTTPException, Query, Request, status

from groupfinder.config import get_settings
from groupfinder.dependencies import ActiveUser, DbSession, OptionalUser, Pagination
from groupfinder.models.group import VerificationStatus
from groupfinder.schemas.group import GroupCreate, GroupListResponse, GroupResponse
from groupfinder.services import groups as group_service
from groupfinder.services.authorization import is_admin
from groupfinder.services.rate_limiter import limiter

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix="/groups",
    tags=["Groups"],
    responses={404: {"description": "Group not found"}},
)


@router.get(
    "",
    response_model=GroupListResponse,
    summary="List groups",
)
@limiter.limit(settings.rate_limit_default)
def list_groups(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    current_user: OptionalUser,
    category_id: int | None = Query(default=None, ge=1, description="Filter by category"),
    tag: str | None = Query(default=None, min_length=1, max_length=50, description="Filter by tag name"),
    verification_status: VerificationStatus | None = Query(
        default=None,
        description="Filter by verification status",
    ),
    sort: Literal["newest", "rating", "popular"] = Query(default="newest"),
) -> GroupListResponse:
    groups, total = group_service.list_groups(
        db,
        skip=pagination.skip,
        limit=pagination.per_page,
        sort=sort,
        category_id=category_id,
        tag=tag,
        verification_status=verification_status.value if verification_status else None,
        include_rejected=is_admin(current_user),
    )

    return GroupListResponse(
        items=[GroupResponse.model_validate(g) for g in groups],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=math.ceil(total / pagination.per_page) if total > 0 else 0,
    )


@router.post(
    "",
    response_model=GroupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a group",
    description="Submit a Facebook group to the directory. New groups start as `pending`.",
)
@limiter.limit(settings.rate_limit_write)
def create_group(
    request: Request,
    group_data: GroupCreate,
    db: DbSession,
    current_user: ActiveUser,
) -> GroupResponse:
    group = group_service.create_group(
        db,
        current_user,
        name=group_data.name,
        url=str(group_data.url),
        description=group_data.description,
        category_id=group_data.category_id,
        size=group_data.size,
        activity_level=group_data.activity_level.value,
        tags=group_data.tags,
    )
    return GroupResponse.model_validate(group)


@router.get(
    "/{group_id}",
    response_model=GroupResponse,
    summary="Get a group",
)
@limiter.limit(settings.rate_limit_default)
def get_group(request: Request, group_id: int, db: DbSession) -> GroupResponse:
    group = group_service.get_group(db, group_id)
    if group is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Group with ID {group_id} not found",
        )
    return GroupResponse.model_validate(group)
