"""
Reputation Pydantic Schemas

Request bodies accept the camelCase names used by the web client
(userId, sourceType, sourceId) as well as snake_case.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AwardPointsRequest(BaseModel):
    """
    Example request body:
    {"userId": 3, "points": 25, "reason": "Helpful moderation", "sourceType": "other"}
    """

    user_id: int = Field(..., alias="userId", gt=0)
    points: int = Field(..., description="Nonzero signed point delta", examples=[25, -5])
    reason: str = Field(..., min_length=1, max_length=500)
    source_type: str = Field(
        ...,
        alias="sourceType",
        min_length=1,
        max_length=50,
        examples=["review", "badge_awarded", "other"],
    )
    source_id: str | None = Field(default=None, alias="sourceId", max_length=64)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("points")
    @classmethod
    def points_must_be_nonzero(cls, v: int) -> int:
        if v == 0:
            raise ValueError("Points must be a nonzero integer")
        return v

    @field_validator("reason")
    @classmethod
    def reason_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Reason cannot be empty")
        return v


class ReputationSummary(BaseModel):
    points: int
    level: int
    level_name: str
    badges_count: int
    progress: int = Field(..., description="Percent of the way to the next level")
    points_to_next_level: int


class ReputationHistoryResponse(BaseModel):
    id: int
    points: int
    reason: str
    source_type: str
    source_id: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReputationResponse(BaseModel):
    reputation: ReputationSummary
    history: list[ReputationHistoryResponse]


class AwardPointsResponse(BaseModel):
    success: bool
    reputation: ReputationSummary


class LeaderboardEntry(BaseModel):
    rank: int
    id: int
    username: str
    display_name: str | None = None
    avatar_url: str | None = None
    reputation_points: int
    reputation_level: int
    level_name: str
    badges_count: int
