"""
Groups Service

Submission and listing of directory groups.

A submitted group always starts in the `pending` verification state.
Its tags and the submitter's reputation are secondary writes: each runs
in a SAVEPOINT and a failure there is logged without undoing the
submission.
"""

import logging

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from groupfinder.models import Category, Group, ReputationSource, Tag, User, VerificationStatus
from groupfinder.services.exceptions import ConflictError, NotFoundError
from groupfinder.services.reputation import REPUTATION_POINTS, record_contribution

logger = logging.getLogger(__name__)

SORT_OPTIONS = {
    "newest": (Group.created_at.desc(), Group.id.desc()),
    "rating": (Group.average_rating.desc(), Group.review_count.desc(), Group.id.desc()),
    "popular": ((Group.upvotes - Group.downvotes).desc(), Group.upvotes.desc(), Group.id.desc()),
}


def get_group(db: Session, group_id: int) -> Group | None:
    stmt = (
        select(Group)
        .options(selectinload(Group.category), selectinload(Group.tags))
        .where(Group.id == group_id)
    )
    return db.execute(stmt).scalar_one_or_none()


def _attach_tags(db: Session, group: Group, tag_names: list[str]) -> None:
    """Attach tags by name, creating unknown ones. Best-effort."""
    try:
        with db.begin_nested():
            existing = {
                tag.name: tag
                for tag in db.scalars(select(Tag).where(Tag.name.in_(tag_names))).all()
            }
            for name in tag_names:
                tag = existing.get(name)
                if tag is None:
                    tag = Tag(name=name)
                    db.add(tag)
                group.tags.append(tag)
            db.flush()
    except SQLAlchemyError:
        logger.exception(f"Failed to attach tags {tag_names} to group {group.id}; continuing")


def create_group(
    db: Session,
    submitter: User,
    name: str,
    url: str,
    description: str,
    category_id: int,
    size: int | None = None,
    activity_level: str = "medium",
    tags: list[str] | None = None,
) -> Group:
    """
    Submit a group to the directory.

    Raises:
        NotFoundError: category does not exist
        ConflictError: a group with the same URL is already listed
    """
    if db.get(Category, category_id) is None:
        raise NotFoundError(f"Category with ID {category_id} not found", code="category_not_found")

    if db.scalar(select(Group.id).where(Group.url == url)) is not None:
        raise ConflictError("A group with this URL has already been submitted", code="duplicate_group")

    group = Group(
        name=name.strip(),
        url=url,
        description=description.strip(),
        category_id=category_id,
        submitted_by=submitter.id,
        size=size,
        activity_level=activity_level,
        verification_status=VerificationStatus.PENDING.value,
        is_verified=False,
    )
    db.add(group)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise ConflictError("A group with this URL has already been submitted", code="duplicate_group")

    if tags:
        _attach_tags(db, group, tags)

    record_contribution(
        db,
        submitter.id,
        "submit_group",
        points=REPUTATION_POINTS["GROUP_SUBMISSION"],
        reason="Submitted a group",
        source_type=ReputationSource.GROUP_SUBMISSION.value,
        source_id=str(group.id),
    )

    db.commit()
    logger.info(f"Group submitted: {group.id} '{group.name}' by user {submitter.id}")
    return get_group(db, group.id)


def build_group_query(
    category_id: int | None = None,
    tag: str | None = None,
    verification_status: str | None = None,
    include_rejected: bool = False,
) -> Select:
    """Base SELECT for group listings with the given filters applied."""
    stmt = select(Group)
    if category_id is not None:
        stmt = stmt.where(Group.category_id == category_id)
    if tag:
        stmt = stmt.where(Group.tags.any(Tag.name == tag.strip().lower()))
    if verification_status:
        stmt = stmt.where(Group.verification_status == verification_status)
    elif not include_rejected:
        stmt = stmt.where(Group.verification_status != VerificationStatus.REJECTED.value)
    return stmt


def list_groups(
    db: Session,
    skip: int,
    limit: int,
    sort: str = "newest",
    **filters,
) -> tuple[list[Group], int]:
    """Return one page of groups and the total number of matches."""
    stmt = build_group_query(**filters)

    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0

    stmt = (
        stmt.options(selectinload(Group.category), selectinload(Group.tags))
        .order_by(*SORT_OPTIONS.get(sort, SORT_OPTIONS["newest"]))
        .offset(skip)
        .limit(limit)
    )
    return list(db.scalars(stmt).all()), total
