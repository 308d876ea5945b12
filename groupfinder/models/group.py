"""
Group Model

The central model of GroupFinder: a Facebook group submitted to the
directory.

Besides its descriptive fields a Group carries two families of derived
state:

- Vote/rating summary: upvotes, downvotes, average_rating, review_count.
  Caches of the votes and reviews tables, written by
  groupfinder.services.votes and groupfinder.services.ratings in the same
  transaction as the underlying row.
- Verification state: verification_status and friends. Always equal to
  the newest verification_logs row for the group, or `pending` when the
  group has never been moderated.

This file also holds the group_tags association table.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    false,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from groupfinder.database import Base

if TYPE_CHECKING:
    from groupfinder.models.category import Category, Tag
    from groupfinder.models.report import Report
    from groupfinder.models.review import Review
    from groupfinder.models.user import User
    from groupfinder.models.verification import VerificationLog
    from groupfinder.models.vote import Vote


class VerificationStatus(str, Enum):
    """
    Moderation state of a group.

    Every status is reachable from every other one; admins may also move a
    group back to PENDING.
    """
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"
    NEEDS_REVIEW = "needs_review"
    FLAGGED = "flagged"


class ActivityLevel(str, Enum):
    """How active a group's members are, as reported by the submitter."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


group_tags = Table(
    "group_tags",
    Base.metadata,
    Column(
        "group_id",
        Integer,
        ForeignKey("groups.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    comment="Association table linking groups to tags",
)


class Group(Base):
    """
    Group model.

    Table: groups

    Example:
        group = Group(
            name="Street Photography Worldwide",
            url="https://www.facebook.com/groups/streetphoto",
            description="Share your candid street shots.",
            category_id=photography.id,
            submitted_by=user.id,
        )
    """

    __tablename__ = "groups"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    name: Mapped[str] = mapped_column(
        String(200),
        index=True,
        nullable=False,
        comment="Group name"
    )

    url: Mapped[str] = mapped_column(
        String(500),
        unique=True,
        nullable=False,
        comment="Facebook URL of the group"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    category_id: Mapped[int] = mapped_column(
        ForeignKey("categories.id", ondelete="RESTRICT"),
        index=True,
        nullable=False,
    )

    submitted_by: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
        comment="User who submitted the group"
    )

    size: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Approximate member count"
    )

    activity_level: Mapped[str] = mapped_column(
        String(20),
        default=ActivityLevel.MEDIUM.value,
        nullable=False,
    )

    view_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Vote/Rating Summary
    # -------------------------------------------------------------------------
    upvotes: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
        comment="Count of 'up' votes"
    )

    downvotes: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
        comment="Count of 'down' votes"
    )

    average_rating: Mapped[float] = mapped_column(
        Float,
        default=0.0,
        server_default="0",
        nullable=False,
        index=True,
        comment="Mean review rating, 0 when there are no reviews"
    )

    review_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Verification
    # -------------------------------------------------------------------------
    verification_status: Mapped[str] = mapped_column(
        String(20),
        default=VerificationStatus.PENDING.value,
        server_default=VerificationStatus.PENDING.value,
        nullable=False,
        index=True,
    )

    verification_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    verified_by: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        comment="Admin who last changed the verification status"
    )

    verification_notes: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    # Kept for consumers that only understand a boolean flag
    is_verified: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default=false(),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    category: Mapped["Category"] = relationship(
        "Category",
        back_populates="groups",
    )

    tags: Mapped[list["Tag"]] = relationship(
        "Tag",
        secondary=group_tags,
        back_populates="groups",
    )

    submitter: Mapped["User | None"] = relationship(
        "User",
        foreign_keys=[submitted_by],
    )

    verified_user: Mapped["User | None"] = relationship(
        "User",
        foreign_keys=[verified_by],
    )

    votes: Mapped[list["Vote"]] = relationship(
        "Vote",
        back_populates="group",
        cascade="all, delete-orphan",
    )

    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="group",
        cascade="all, delete-orphan",
    )

    verification_logs: Mapped[list["VerificationLog"]] = relationship(
        "VerificationLog",
        back_populates="group",
        cascade="all, delete-orphan",
    )

    reports: Mapped[list["Report"]] = relationship(
        "Report",
        back_populates="group",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"Group(id={self.id}, name='{self.name}', status='{self.verification_status}')"
