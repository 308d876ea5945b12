"""
Ratings Service

Maintains the denormalized rating fields on the Group model:
- average_rating: the mean of all review ratings (0 when there are none)
- review_count: total number of reviews

Both are recomputed in full from the reviews table after every review
insert, update or delete, inside the same transaction as the review
write. There is no running average to drift.
"""

import logging

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from groupfinder.models import Group, ReputationSource, Review
from groupfinder.services.exceptions import (
    GroupNotFoundError,
    ReviewNotFoundError,
    ValidationError,
)
from groupfinder.services.reputation import REPUTATION_POINTS, record_contribution
from groupfinder.services.votes import recount_votes

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def recalculate_group_rating(db: Session, group_id: int) -> tuple[float, int]:
    """
    Recalculate a group's rating aggregations from its reviews.

    Does not commit; the caller commits together with the review write.

    Returns:
        Tuple of (average_rating, review_count)
    """
    db.flush()

    stmt = select(
        func.avg(Review.rating),
        func.count(Review.id),
    ).where(Review.group_id == group_id)
    avg_rating, review_count = db.execute(stmt).one()

    average = float(avg_rating) if avg_rating is not None else 0.0

    db.execute(
        update(Group)
        .where(Group.id == group_id)
        .values(average_rating=average, review_count=review_count)
        .execution_options(synchronize_session=False)
    )
    return average, review_count


def submit_review(
    db: Session,
    group_id: int,
    user_id: int,
    rating: int,
    comment: str | None = None,
) -> tuple[Review, bool]:
    """
    Create or update the user's review of a group.

    A first review on a group earns the author reputation points
    (best-effort, see record_contribution).

    Returns:
        Tuple of (review, created)

    Raises:
        ValidationError: rating outside 1-5
        GroupNotFoundError: group does not exist
    """
    if not isinstance(rating, int) or isinstance(rating, bool) or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(
            f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}",
            code="invalid_rating",
        )

    if db.get(Group, group_id) is None:
        raise GroupNotFoundError(group_id)

    review = db.scalar(
        select(Review).where(Review.group_id == group_id, Review.user_id == user_id)
    )
    created = review is None

    if created:
        review = Review(group_id=group_id, user_id=user_id, rating=rating, comment=comment)
        db.add(review)
    else:
        review.rating = rating
        review.comment = comment

    average, count = recalculate_group_rating(db, group_id)

    if created:
        record_contribution(
            db,
            user_id,
            "write_review",
            points=REPUTATION_POINTS["REVIEW"],
            reason="Wrote a review",
            source_type=ReputationSource.REVIEW.value,
            source_id=str(review.id),
        )

    db.commit()
    db.refresh(review)

    logger.info(
        f"Review {'created' if created else 'updated'} on group {group_id} by user {user_id}: "
        f"rating={rating}, average={average:.2f} over {count}"
    )
    return review, created


def delete_review(db: Session, review_id: int) -> int:
    """
    Delete a review and recompute its group's average.

    Returns:
        ID of the group the review belonged to
    """
    review = db.get(Review, review_id)
    if review is None:
        raise ReviewNotFoundError(review_id)

    group_id = review.group_id
    db.delete(review)
    recalculate_group_rating(db, group_id)
    db.commit()

    logger.info(f"Review {review_id} deleted from group {group_id}")
    return group_id


def recalculate_all_group_summaries(db: Session) -> int:
    """
    Recompute vote counters and rating aggregations for every group.

    Useful for data migrations or fixing inconsistencies.

    Returns:
        Number of groups updated
    """
    group_ids = db.execute(select(Group.id)).scalars().all()

    for group_id in group_ids:
        recount_votes(db, group_id)
        recalculate_group_rating(db, group_id)

    db.commit()
    logger.info(f"Recalculated summaries for {len(group_ids)} groups")
    return len(group_ids)
