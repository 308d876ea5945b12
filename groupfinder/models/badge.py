"""
Badge Models

Badge: a catalog entry an admin defines (name, icon, point value and an
optional rule that awards it automatically).

UserBadge: the association of a badge with a user. A user holds a badge
at most once; awarding it again bumps times_awarded on the existing row.

Badge rules are stored in `requirements` as a JSON object:
- {"action": "reputation", "minimum": 500}
    awarded once the holder reaches 500 reputation points
- {"action": "write_review", "count": 10}
    awarded once the holder has written 10 reviews
"""

from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from groupfinder.database import Base


class Badge(Base):
    """
    Badge catalog model.

    Table: badges
    """

    __tablename__ = "badges"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String(100), nullable=True)
    level: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    points: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="Reputation points granted on first award",
    )
    category: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        index=True,
        comment="reputation, contribution, ...",
    )
    requirements: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, default=999, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    holders = relationship(
        "UserBadge",
        back_populates="badge",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"Badge(id={self.id}, name='{self.name}', category='{self.category}')"


class UserBadge(Base):
    """
    UserBadge association model.

    Table: user_badges
    """

    __tablename__ = "user_badges"

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    badge_id: Mapped[int] = mapped_column(
        ForeignKey("badges.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    level: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    times_awarded: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    awarded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    user = relationship("User", back_populates="badges")
    badge = relationship("Badge", back_populates="holders")

    __table_args__ = (
        UniqueConstraint("user_id", "badge_id", name="uq_user_badge"),
    )

    def __repr__(self) -> str:
        return f"<UserBadge(id={self.id}, user_id={self.user_id}, badge_id={self.badge_id})>"
