"""
Reputation Ledger Service

Every change to a user's reputation goes through this module:

- award_points: append a ReputationHistory row and move the cached
  User.reputation_points / reputation_level with it
- award_badge / remove_badge: manage UserBadge rows and User.badges_count
- check_contribution_badges: award contribution badges earned by activity
- record_contribution: best-effort points and badges after a group
  submission, review, vote or report

Cached totals are moved with single UPDATE statements
(reputation_points = reputation_points + :delta) in the same transaction
as the history row, so concurrent awards never lose an increment and the
total always equals the sum of the ledger.

The private helpers (_apply_points, _grant_badge, _revoke_badge) never
commit; the public functions commit once at the end.
"""

import logging

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from groupfinder.models import (
    Badge,
    Group,
    ReputationHistory,
    Report,
    ReputationSource,
    Review,
    User,
    UserBadge,
    Vote,
)
from groupfinder.services.exceptions import (
    BadgeNotFoundError,
    GroupFinderError,
    NotFoundError,
    UserNotFoundError,
    ValidationError,
)
from groupfinder.services.levels import level_for_points

logger = logging.getLogger(__name__)

# Point values for contributions
REPUTATION_POINTS = {
    "GROUP_SUBMISSION": 15,
    "REVIEW": 10,
    "REPORT_SUBMISSION": 5,
    "REPORT_ACCEPTED": 10,
    "REPORT_REJECTED": -5,
}

REPUTATION_BADGE_CATEGORY = "reputation"
CONTRIBUTION_BADGE_CATEGORY = "contribution"

# Contribution action -> fact table column counted for it
CONTRIBUTION_COUNTERS = {
    "submit_group": Group.submitted_by,
    "write_review": Review.user_id,
    "vote": Vote.user_id,
    "report": Report.user_id,
}


def _get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


def _has_badge(db: Session, user_id: int, badge_id: int) -> bool:
    stmt = select(UserBadge.id).where(
        UserBadge.user_id == user_id,
        UserBadge.badge_id == badge_id,
    )
    return db.scalar(stmt) is not None


# =============================================================================
# Ledger primitives (no commit)
# =============================================================================


def _apply_points(
    db: Session,
    user_id: int,
    points: int,
    reason: str,
    source_type: str,
    source_id: str | None = None,
) -> int:
    """
    Append a history row and move the cached total and level.

    Returns:
        The user's new reputation_points
    """
    db.add(
        ReputationHistory(
            user_id=user_id,
            points=points,
            reason=reason,
            source_type=source_type,
            source_id=source_id,
        )
    )
    db.flush()

    db.execute(
        update(User)
        .where(User.id == user_id)
        .values(reputation_points=User.reputation_points + points)
        .execution_options(synchronize_session=False)
    )
    total = db.scalar(select(User.reputation_points).where(User.id == user_id))

    db.execute(
        update(User)
        .where(User.id == user_id)
        .values(reputation_level=level_for_points(total))
        .execution_options(synchronize_session=False)
    )

    logger.info(
        f"Awarded {points} points to user {user_id} ({source_type}: {reason}), total {total}"
    )
    return total


def _grant_badge(
    db: Session,
    user_id: int,
    badge: Badge,
    badge_name: str | None = None,
    point_value: int | None = None,
) -> tuple[UserBadge, bool]:
    """
    Give a badge to a user.

    A badge already held is not inserted again: times_awarded is bumped
    on the existing row and no further points are granted.

    Returns:
        Tuple of (user_badge, created)
    """
    name = badge_name or badge.name
    points = badge.points if point_value is None else point_value

    existing = db.scalar(
        select(UserBadge).where(
            UserBadge.user_id == user_id,
            UserBadge.badge_id == badge.id,
        )
    )
    if existing is not None:
        existing.times_awarded += 1
        db.flush()
        logger.info(
            f"Badge '{name}' re-awarded to user {user_id} "
            f"(times_awarded={existing.times_awarded})"
        )
        return existing, False

    user_badge = UserBadge(
        user_id=user_id,
        badge_id=badge.id,
        level=1,
        times_awarded=1,
    )
    db.add(user_badge)
    db.flush()

    db.execute(
        update(User)
        .where(User.id == user_id)
        .values(badges_count=User.badges_count + 1)
        .execution_options(synchronize_session=False)
    )
    logger.info(f"Badge '{name}' awarded to user {user_id}")

    if points:
        total = _apply_points(
            db,
            user_id,
            points,
            f'Earned the "{name}" badge',
            ReputationSource.BADGE_AWARDED.value,
            str(badge.id),
        )
        _check_reputation_badges(db, user_id, total)

    return user_badge, True


def _revoke_badge(db: Session, user_badge: UserBadge) -> None:
    """Delete a UserBadge and decrement the holder's badges_count, floored at 0."""
    user_id = user_badge.user_id
    db.delete(user_badge)
    db.flush()

    db.execute(
        update(User)
        .where(User.id == user_id)
        .values(
            badges_count=case(
                (User.badges_count > 0, User.badges_count - 1),
                else_=0,
            )
        )
        .execution_options(synchronize_session=False)
    )
    logger.info(f"User badge {user_badge.id} removed from user {user_id}")


def _check_reputation_badges(db: Session, user_id: int, points: int) -> list[UserBadge]:
    """Award every reputation badge whose minimum the user now meets."""
    badges = db.scalars(
        select(Badge)
        .where(Badge.category == REPUTATION_BADGE_CATEGORY)
        .order_by(Badge.display_order, Badge.id)
    ).all()

    awarded = []
    for badge in badges:
        requirements = badge.requirements or {}
        if requirements.get("action") != "reputation":
            continue
        minimum = requirements.get("minimum")
        if minimum is None or points < int(minimum):
            continue
        # Granting a badge with points can unlock others; re-check each one
        if _has_badge(db, user_id, badge.id):
            continue
        user_badge, _ = _grant_badge(db, user_id, badge)
        awarded.append(user_badge)
    return awarded


# =============================================================================
# Public operations
# =============================================================================


def credit_points(
    db: Session,
    user_id: int,
    points: int,
    reason: str,
    source_type: str,
    source_id: str | None = None,
) -> User:
    """
    Validate and apply a point award without committing.

    For callers that must commit the award together with their own write
    (see services/reports.py). Takes the same arguments as award_points.
    """
    if points == 0:
        raise ValidationError("Points must be a nonzero integer", code="invalid_points")
    if not reason or not reason.strip():
        raise ValidationError("Reason is required", code="invalid_reason")
    if not source_type or not source_type.strip():
        raise ValidationError("Source type is required", code="invalid_source_type")

    user = _get_user(db, user_id)

    total = _apply_points(db, user_id, points, reason.strip(), source_type.strip(), source_id)
    _check_reputation_badges(db, user_id, total)
    return user


def award_points(
    db: Session,
    user_id: int,
    points: int,
    reason: str,
    source_type: str,
    source_id: str | None = None,
) -> User:
    """
    Award (or deduct) reputation points.

    Args:
        db: Database session
        user_id: User receiving the points
        points: Nonzero signed point delta
        reason: Human-readable reason, must not be blank
        source_type: Kind of event; unknown kinds are stored as given
        source_id: Optional id of the row that caused the award

    Returns:
        The refreshed user

    Raises:
        ValidationError: points is zero or reason is blank
        UserNotFoundError: user does not exist
    """
    user = credit_points(db, user_id, points, reason, source_type, source_id)

    db.commit()
    db.refresh(user)
    return user


def award_badge(
    db: Session,
    user_id: int,
    badge_id: int,
    badge_name: str | None = None,
    point_value: int | None = None,
) -> tuple[UserBadge, bool]:
    """
    Award a badge to a user.

    badge_name and point_value default to the catalog entry's name and
    points.

    Returns:
        Tuple of (user_badge, created); created is False for a repeat award

    Raises:
        UserNotFoundError: user does not exist
        BadgeNotFoundError: badge does not exist
    """
    _get_user(db, user_id)
    badge = db.get(Badge, badge_id)
    if badge is None:
        raise BadgeNotFoundError(badge_id)

    user_badge, created = _grant_badge(db, user_id, badge, badge_name, point_value)

    db.commit()
    db.refresh(user_badge)
    return user_badge, created


def remove_badge(db: Session, user_badge_id: int) -> None:
    """
    Take a badge away from its holder.

    Points earned with the badge stay in the ledger.
    """
    user_badge = db.get(UserBadge, user_badge_id)
    if user_badge is None:
        raise NotFoundError(
            f"User badge with ID {user_badge_id} not found",
            code="user_badge_not_found",
        )

    _revoke_badge(db, user_badge)
    db.commit()


def delete_badge(db: Session, badge_id: int) -> None:
    """
    Delete a catalog badge and every award of it in one commit.

    Each holder's badges_count drops by one. Points earned with the badge
    stay in the ledger.

    Raises:
        BadgeNotFoundError: badge does not exist
    """
    badge = db.get(Badge, badge_id)
    if badge is None:
        raise BadgeNotFoundError(badge_id)

    holders = db.scalars(select(UserBadge).where(UserBadge.badge_id == badge_id)).all()
    for user_badge in holders:
        _revoke_badge(db, user_badge)

    db.delete(badge)
    db.commit()
    logger.info(f"Badge {badge_id} deleted, revoked from {len(holders)} users")


def get_history(
    db: Session,
    user_id: int,
    limit: int = 20,
    offset: int = 0,
) -> tuple[User, list[ReputationHistory]]:
    """Return the user and a newest-first page of their reputation history."""
    user = _get_user(db, user_id)
    entries = db.scalars(
        select(ReputationHistory)
        .where(ReputationHistory.user_id == user_id)
        .order_by(ReputationHistory.created_at.desc(), ReputationHistory.id.desc())
        .offset(offset)
        .limit(limit)
    ).all()
    return user, list(entries)


def get_leaderboard(db: Session, limit: int = 10, offset: int = 0) -> list[User]:
    """Active users ordered by reputation, ties broken by registration order."""
    return list(
        db.scalars(
            select(User)
            .where(User.is_active.is_(True))
            .order_by(User.reputation_points.desc(), User.id.asc())
            .offset(offset)
            .limit(limit)
        ).all()
    )


def check_contribution_badges(db: Session, user_id: int, action: str) -> list[UserBadge]:
    """
    Award contribution badges for `action` that the user now qualifies for.

    Badge rules look like {"action": "write_review", "count": 10}. Does not
    commit.
    """
    column = CONTRIBUTION_COUNTERS.get(action)
    if column is None:
        raise ValidationError(f"Unknown contribution action '{action}'", code="invalid_action")

    count = db.scalar(select(func.count()).where(column == user_id)) or 0

    badges = db.scalars(
        select(Badge)
        .where(Badge.category == CONTRIBUTION_BADGE_CATEGORY)
        .order_by(Badge.display_order, Badge.id)
    ).all()

    awarded = []
    for badge in badges:
        requirements = badge.requirements or {}
        required = requirements.get("count")
        if requirements.get("action") != action or not required:
            continue
        if count < int(required) or _has_badge(db, user_id, badge.id):
            continue
        user_badge, _ = _grant_badge(db, user_id, badge)
        awarded.append(user_badge)
    return awarded


def record_contribution(
    db: Session,
    user_id: int,
    action: str,
    points: int = 0,
    reason: str | None = None,
    source_type: str | None = None,
    source_id: str | None = None,
) -> None:
    """
    Best-effort reputation side effects of a contribution.

    Runs inside a SAVEPOINT: a failure is logged and rolled back to the
    savepoint, leaving the caller's primary write intact. Does not commit.
    """
    try:
        with db.begin_nested():
            if points:
                total = _apply_points(
                    db,
                    user_id,
                    points,
                    reason or action,
                    source_type or ReputationSource.OTHER.value,
                    source_id,
                )
                _check_reputation_badges(db, user_id, total)
            check_contribution_badges(db, user_id, action)
    except (SQLAlchemyError, GroupFinderError):
        logger.exception(
            f"Failed to record '{action}' contribution for user {user_id}; "
            "primary action kept"
        )
