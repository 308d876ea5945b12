"""
Vote Model

A user's up or down vote on a group.

Business Rules:
- At most one vote per user per group (unique constraint)
- Changing a vote updates the existing row instead of inserting a new one
"""

from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from groupfinder.database import Base


class VoteType(str, Enum):
    """Direction of a stored vote."""
    UP = "up"
    DOWN = "down"


class Vote(Base):
    """
    Vote model.

    Attributes:
        id: Primary key
        group_id: Foreign key to groups table
        user_id: Foreign key to users table
        vote_type: 'up' or 'down'
        created_at: When the vote was first cast
    """

    __tablename__ = "votes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    group_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    vote_type: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        comment="'up' or 'down'",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    group = relationship("Group", back_populates="votes")
    user = relationship("User", back_populates="votes")

    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_vote_group_user"),
    )

    def __repr__(self) -> str:
        return f"<Vote(id={self.id}, group_id={self.group_id}, user_id={self.user_id}, type={self.vote_type})>"
