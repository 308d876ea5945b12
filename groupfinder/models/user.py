"""
User Model

Registered users of the directory, with the cached reputation summary
fields maintained by the reputation ledger.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from groupfinder.database import Base

if TYPE_CHECKING:
    from groupfinder.models.badge import UserBadge
    from groupfinder.models.reputation import ReputationHistory
    from groupfinder.models.review import Review
    from groupfinder.models.vote import Vote


class UserRole(str, Enum):
    """
    Roles a user can hold.

    - USER: Regular member (submit, vote, review)
    - ADMIN: Moderator (verification, reputation and badge management)
    """
    USER = "user"
    ADMIN = "admin"


class User(Base):
    """
    User model representing registered members.

    Table: users

    Reputation summary fields:
    - reputation_points: sum of all ReputationHistory.points for the user
    - reputation_level: step function of reputation_points
    - badges_count: number of UserBadge rows held

    These are caches of the reputation_history and user_badges tables and
    are only written by groupfinder.services.reputation.
    """

    __tablename__ = "users"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Authentication Fields
    # -------------------------------------------------------------------------
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="User's email address (used for login)"
    )

    hashed_password: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Bcrypt hashed password"
    )

    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=False,
        comment="Unique username for profile URLs"
    )

    # -------------------------------------------------------------------------
    # Profile Fields
    # -------------------------------------------------------------------------
    display_name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Public display name"
    )

    avatar_url: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="URL to user's avatar image"
    )

    bio: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="User biography"
    )

    # -------------------------------------------------------------------------
    # Account Status
    # -------------------------------------------------------------------------
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        comment="Whether the account is active"
    )

    role: Mapped[str] = mapped_column(
        String(20),
        default=UserRole.USER.value,
        server_default=UserRole.USER.value,
        nullable=False,
        comment="Authorization role (user, admin)"
    )

    # -------------------------------------------------------------------------
    # Reputation Summary
    # -------------------------------------------------------------------------
    reputation_points: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
        index=True,
        comment="Sum of reputation_history.points"
    )

    reputation_level: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
        comment="Level derived from reputation_points"
    )

    badges_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
        comment="Number of badges held"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the user registered"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="When the user last logged in"
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    votes: Mapped[list["Vote"]] = relationship(
        "Vote",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    reputation_history: Mapped[list["ReputationHistory"]] = relationship(
        "ReputationHistory",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    badges: Mapped[list["UserBadge"]] = relationship(
        "UserBadge",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"User(id={self.id}, email='{self.email}', username='{self.username}')"
