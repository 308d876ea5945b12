"""
Report Model

A user's complaint about a group (spam, dead link, wrong category...),
worked through by admins.

Business Rules:
- A user has at most one open (pending or in_review) report per group;
  once it is closed they may report the group again
- Closing a report as resolved or dismissed records who closed it and when
- Closed reports are final
"""

from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from groupfinder.database import Base


class ReportStatus(str, Enum):
    PENDING = "pending"
    IN_REVIEW = "in_review"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


OPEN_REPORT_STATUSES = (ReportStatus.PENDING.value, ReportStatus.IN_REVIEW.value)

_OPEN_CLAUSE = text("status IN ('pending', 'in_review')")


class Report(Base):
    """
    Report model.

    Attributes:
        id: Primary key
        group_id: Group being reported
        user_id: User who filed the report
        reason: Short reason, e.g. "Spam"
        comment: Optional details from the reporter
        status: pending, in_review, resolved or dismissed
        resolution_notes: Admin notes on the outcome
        resolved_by: Admin who closed the report
        resolved_at: When the report was closed
    """

    __tablename__ = "reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

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

    reason: Mapped[str] = mapped_column(String(200), nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        default=ReportStatus.PENDING.value,
        server_default=ReportStatus.PENDING.value,
        nullable=False,
        index=True,
    )
    resolution_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    resolved_by: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    group = relationship("Group", back_populates="reports")
    reporter = relationship("User", foreign_keys=[user_id])
    resolver = relationship("User", foreign_keys=[resolved_by])

    __table_args__ = (
        # One open report per user and group; closed reports don't count
        Index(
            "uq_report_open_group_user",
            "group_id",
            "user_id",
            unique=True,
            postgresql_where=_OPEN_CLAUSE,
            sqlite_where=_OPEN_CLAUSE,
        ),
    )

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_REPORT_STATUSES

    def __repr__(self) -> str:
        return f"<Report(id={self.id}, group_id={self.group_id}, status={self.status})>"
