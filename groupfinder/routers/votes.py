"""
Votes Router

Endpoints:
- POST /groups/{group_id}/vote - Cast, change or remove the caller's vote
- GET /groups/{group_id}/vote - The caller's current vote

Repeating a vote or removing a vote that does not exist is a successful
no-op; the response always carries the group's current counters.
"""

import logging

from fastapi import APIRouter, HTTPException, Request, status

from groupfinder.config import get_settings
from groupfinder.dependencies import ActiveUser, DbSession
from groupfinder.models import Group
from groupfinder.schemas.vote import UserVoteResponse, VoteRequest, VoteResponse
from groupfinder.services.rate_limiter import limiter
from groupfinder.services.votes import cast_vote, get_user_vote

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix="/groups",
    tags=["Votes"],
    responses={404: {"description": "Group not found"}},
)


@router.post(
    "/{group_id}/vote",
    response_model=VoteResponse,
    summary="Vote on a group",
    description="Body `{\"voteType\": \"up\" | \"down\" | \"remove\"}`.",
)
@limiter.limit(settings.rate_limit_write)
def vote_on_group(
    request: Request,
    group_id: int,
    vote_data: VoteRequest,
    db: DbSession,
    current_user: ActiveUser,
) -> VoteResponse:
    result = cast_vote(db, group_id, current_user.id, vote_data.vote_type)
    return VoteResponse(
        message=result.message,
        upvotes=result.upvotes,
        downvotes=result.downvotes,
        vote_type=result.vote_type,
    )


@router.get(
    "/{group_id}/vote",
    response_model=UserVoteResponse,
    summary="Get your vote on a group",
)
@limiter.limit(settings.rate_limit_default)
def get_my_vote(
    request: Request,
    group_id: int,
    db: DbSession,
    current_user: ActiveUser,
) -> UserVoteResponse:
    if db.get(Group, group_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Group with ID {group_id} not found",
        )
    vote = get_user_vote(db, group_id, current_user.id)
    return UserVoteResponse(group_id=group_id, vote_type=vote.vote_type if vote else None)
