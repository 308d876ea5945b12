"""
Votes Service

Keeps Group.upvotes / Group.downvotes in step with the votes table.

Every counter change is one atomic UPDATE issued in the same transaction
as the Vote insert, update or delete:

    UPDATE groups SET upvotes = CASE WHEN upvotes + 1 > 0 THEN upvotes + 1 ELSE 0 END

so concurrent voters never overwrite each other's increments and a
counter never drops below zero.

Vote transitions for one (group, user):
    none  + up/down  -> insert,  counter +1
    same  + same     -> no-op ("Vote already recorded")
    up    + down     -> flip,    upvotes -1, downvotes +1 (and vice versa)
    any   + remove   -> delete,  counter -1
    none  + remove   -> no-op ("No vote to remove")
"""

import logging
from dataclasses import dataclass

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from groupfinder.models import Group, Vote, VoteType
from groupfinder.services.exceptions import (
    ConflictError,
    GroupNotFoundError,
    ValidationError,
)
from groupfinder.services.reputation import record_contribution

logger = logging.getLogger(__name__)

REMOVE = "remove"
VALID_VOTE_ACTIONS = {VoteType.UP.value, VoteType.DOWN.value, REMOVE}

MSG_RECORDED = "Vote recorded successfully"
MSG_UPDATED = "Vote updated successfully"
MSG_REMOVED = "Vote removed successfully"
MSG_ALREADY_RECORDED = "Vote already recorded"
MSG_NOTHING_TO_REMOVE = "No vote to remove"


@dataclass
class VoteResult:
    """Outcome of cast_vote, including the counters after the call."""

    message: str
    upvotes: int
    downvotes: int
    vote_type: str | None
    changed: bool


def _counter_column(vote_type: str):
    return Group.upvotes if vote_type == VoteType.UP.value else Group.downvotes


def _adjust_counter(db: Session, group_id: int, vote_type: str, delta: int) -> None:
    """Atomically add `delta` to the group's counter for `vote_type`, floored at 0."""
    column = _counter_column(vote_type)
    db.execute(
        update(Group)
        .where(Group.id == group_id)
        .values({column.key: case((column + delta > 0, column + delta), else_=0)})
        .execution_options(synchronize_session=False)
    )


def _counts(db: Session, group_id: int) -> tuple[int, int]:
    row = db.execute(
        select(Group.upvotes, Group.downvotes).where(Group.id == group_id)
    ).one()
    return row.upvotes, row.downvotes


def get_user_vote(db: Session, group_id: int, user_id: int) -> Vote | None:
    stmt = select(Vote).where(Vote.group_id == group_id, Vote.user_id == user_id)
    return db.scalar(stmt)


def cast_vote(db: Session, group_id: int, user_id: int, vote_type: str) -> VoteResult:
    """
    Record, change or remove a user's vote on a group.

    Args:
        db: Database session
        group_id: Group being voted on
        user_id: Voting user
        vote_type: 'up', 'down' or 'remove'

    Returns:
        VoteResult with the message and the counters after the call

    Raises:
        ValidationError: vote_type is not one of the accepted values
        GroupNotFoundError: group does not exist
        ConflictError: a concurrent request inserted the same vote first
    """
    if vote_type not in VALID_VOTE_ACTIONS:
        raise ValidationError(
            f"Invalid vote type '{vote_type}'. Must be one of: up, down, remove",
            code="invalid_vote_type",
        )

    if db.get(Group, group_id) is None:
        raise GroupNotFoundError(group_id)

    existing = get_user_vote(db, group_id, user_id)

    # No-op cases report the current counters without writing
    if existing is None and vote_type == REMOVE:
        upvotes, downvotes = _counts(db, group_id)
        return VoteResult(MSG_NOTHING_TO_REMOVE, upvotes, downvotes, None, False)
    if existing is not None and existing.vote_type == vote_type:
        upvotes, downvotes = _counts(db, group_id)
        return VoteResult(MSG_ALREADY_RECORDED, upvotes, downvotes, vote_type, False)

    inserted = False
    try:
        if existing is None:
            db.add(Vote(group_id=group_id, user_id=user_id, vote_type=vote_type))
            db.flush()
            _adjust_counter(db, group_id, vote_type, 1)
            message = MSG_RECORDED
            inserted = True
        elif vote_type == REMOVE:
            old_type = existing.vote_type
            db.delete(existing)
            db.flush()
            _adjust_counter(db, group_id, old_type, -1)
            message = MSG_REMOVED
        else:
            old_type = existing.vote_type
            existing.vote_type = vote_type
            db.flush()
            _adjust_counter(db, group_id, old_type, -1)
            _adjust_counter(db, group_id, vote_type, 1)
            message = MSG_UPDATED
    except IntegrityError:
        db.rollback()
        logger.warning(f"Concurrent vote by user {user_id} on group {group_id}")
        raise ConflictError(
            "Your vote was recorded by another request. Please retry.",
            code="vote_conflict",
        )

    if inserted:
        record_contribution(db, user_id, "vote")

    db.commit()

    upvotes, downvotes = _counts(db, group_id)
    logger.info(
        f"Vote on group {group_id} by user {user_id}: {vote_type} "
        f"(up={upvotes}, down={downvotes})"
    )
    return VoteResult(
        message,
        upvotes,
        downvotes,
        None if vote_type == REMOVE else vote_type,
        True,
    )


def recount_votes(db: Session, group_id: int) -> tuple[int, int]:
    """
    Recompute a group's counters from the votes table. Does not commit.

    Used to repair counters that drifted (e.g. rows edited by hand).
    """
    stmt = select(
        func.count().filter(Vote.vote_type == VoteType.UP.value),
        func.count().filter(Vote.vote_type == VoteType.DOWN.value),
    ).where(Vote.group_id == group_id)
    upvotes, downvotes = db.execute(stmt).one()

    db.execute(
        update(Group)
        .where(Group.id == group_id)
        .values(upvotes=upvotes, downvotes=downvotes)
        .execution_options(synchronize_session=False)
    )
    return upvotes, downvotes
