"""
Badge Pydantic Schemas

Schemas:
- BadgeCreate / BadgeUpdate: Admin catalog management
- BadgeResponse: Catalog entry
- AwardBadgeRequest: Give a badge to a user
- UserBadgeResponse: A badge held by a user
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BadgeRequirements(BaseModel):
    """
    Automatic award rule.

    {"action": "reputation", "minimum": 500}  -> reputation badges
    {"action": "write_review", "count": 10}   -> contribution badges
    """

    action: str = Field(..., examples=["reputation", "write_review"])
    minimum: int | None = Field(default=None, ge=0)
    count: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def threshold_matches_action(self) -> "BadgeRequirements":
        if self.action == "reputation" and self.minimum is None:
            raise ValueError("Reputation badges need a 'minimum'")
        if self.action != "reputation" and self.count is None:
            raise ValueError("Contribution badges need a 'count'")
        return self


class BadgeCreate(BaseModel):
    """
    Example request body:
    {
        "name": "Critic",
        "description": "Wrote 10 reviews",
        "icon": "star",
        "points": 20,
        "category": "contribution",
        "requirements": {"action": "write_review", "count": 10}
    }
    """

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    icon: str | None = Field(default=None, max_length=100)
    level: int = Field(default=1, ge=1)
    points: int = Field(default=0, description="Reputation points granted on first award")
    category: str = Field(..., min_length=1, max_length=50, examples=["reputation", "contribution"])
    requirements: BadgeRequirements | None = None
    display_order: int = Field(default=999)


class BadgeUpdate(BaseModel):
    """All fields optional for PATCH-style updates."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    icon: str | None = Field(default=None, max_length=100)
    level: int | None = Field(default=None, ge=1)
    points: int | None = None
    category: str | None = Field(default=None, min_length=1, max_length=50)
    requirements: BadgeRequirements | None = None
    display_order: int | None = None


class BadgeResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    icon: str | None = None
    level: int
    points: int
    category: str
    requirements: dict[str, Any] | None = None
    display_order: int

    model_config = ConfigDict(from_attributes=True)


class AwardBadgeRequest(BaseModel):
    """
    Example request body:
    {"userId": 3, "badgeId": 7}
    """

    user_id: int = Field(..., alias="userId", gt=0)
    badge_id: int = Field(..., alias="badgeId", gt=0)

    model_config = ConfigDict(populate_by_name=True)


class UserBadgeResponse(BaseModel):
    id: int
    user_id: int
    badge: BadgeResponse
    level: int
    times_awarded: int
    awarded_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AwardBadgeResponse(BaseModel):
    success: bool
    message: str
    user_badge: UserBadgeResponse
