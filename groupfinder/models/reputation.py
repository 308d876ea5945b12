"""
Reputation History Model

Append-only ledger of reputation point awards. The sum of a user's rows
is cached on User.reputation_points.
"""

from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from groupfinder.database import Base


class ReputationSource(str, Enum):
    """
    Known kinds of reputation events.

    source_type is stored as free text, so values outside this list are
    accepted and kept as informational labels.
    """
    GROUP_SUBMISSION = "group_submission"
    REVIEW = "review"
    VOTE = "vote"
    REPORT = "report"
    PROFILE_UPDATE = "profile_update"
    BADGE_AWARDED = "badge_awarded"
    OTHER = "other"


class ReputationHistory(Base):
    """
    ReputationHistory model.

    Attributes:
        id: Primary key
        user_id: User receiving (or losing) the points
        points: Signed, nonzero point delta
        reason: Human-readable reason
        source_type: Kind of event (see ReputationSource)
        source_id: Optional id of the row that caused the award
        created_at: When the points were awarded
    """

    __tablename__ = "reputation_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    points: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    source_type: Mapped[str] = mapped_column(String(50), nullable=False)
    source_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
        index=True,
    )

    user = relationship("User", back_populates="reputation_history")

    def __repr__(self) -> str:
        return f"<ReputationHistory(id={self.id}, user_id={self.user_id}, points={self.points})>"
