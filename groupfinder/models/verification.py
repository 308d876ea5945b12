"""
Verification Log Model

Audit trail of moderation decisions. One row is appended for every
verification status change; rows are never updated or deleted by the
application.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from groupfinder.database import Base


class VerificationLog(Base):
    """
    VerificationLog model.

    Attributes:
        id: Primary key
        group_id: Group that was moderated
        user_id: Admin who took the action
        status: Verification status that was set
        notes: Sanitized moderator notes
        created_at: When the action happened
    """

    __tablename__ = "verification_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    group_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    status: Mapped[str] = mapped_column(String(20), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
        index=True,
    )

    group = relationship("Group", back_populates="verification_logs")
    user = relationship("User")

    def __repr__(self) -> str:
        return f"<VerificationLog(id={self.id}, group_id={self.group_id}, status={self.status})>"
