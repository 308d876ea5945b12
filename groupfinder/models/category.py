"""
Category and Tag Models

Categories give every group a single primary topic; tags are free-form
labels attached many-to-many through the group_tags table.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from groupfinder.database import Base

if TYPE_CHECKING:
    from groupfinder.models.group import Group


class Category(Base):
    """
    Category model.

    Table: categories

    Example:
        category = Category(name="Photography", slug="photography")
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False,
        comment="Category name (e.g., 'Photography')"
    )

    slug: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False,
        comment="URL-safe identifier"
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    groups: Mapped[List["Group"]] = relationship(
        "Group",
        back_populates="category",
    )

    def __repr__(self) -> str:
        return f"Category(id={self.id}, name='{self.name}')"


class Tag(Base):
    """Free-form label attached to groups."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=False,
    )

    groups: Mapped[List["Group"]] = relationship(
        "Group",
        secondary="group_tags",
        back_populates="tags",
    )

    def __repr__(self) -> str:
        return f"Tag(id={self.id}, name='{self.name}')"
