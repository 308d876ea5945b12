"""
Review Pydantic Schemas

Schemas:
- ReviewCreate: Create or update the caller's review of a group
- ReviewSubmitResponse: Result of a submission
- ReviewResponse: Full review data for API responses
- ReviewListResponse: Paginated list of reviews

Business Rules:
- Rating must be 1-5 (validated at schema level and again in the service)
- One review per user per group; submitting again updates it
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from groupfinder.schemas.user import UserPublicResponse


class ReviewCreate(BaseModel):
    """
    Example request body:
    {"rating": 5, "comment": "Friendly admins and daily prompts."}
    """

    rating: int = Field(
        ...,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
        examples=[4, 5],
    )

    comment: str | None = Field(
        default=None,
        max_length=5000,
        description="Review text",
    )

    @field_validator("comment")
    @classmethod
    def blank_comment_is_none(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                return None
        return v


class ReviewSubmitResponse(BaseModel):
    message: str = Field(..., examples=["Review submitted successfully"])
    review_id: int
    average_rating: float
    review_count: int


class ReviewResponse(BaseModel):
    """
    Schema for review responses.

    Includes the author's public identity.
    """

    id: int
    group_id: int
    rating: int
    comment: str | None = None
    user: UserPublicResponse
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewListResponse(BaseModel):
    items: list[ReviewResponse]
    total: int
    page: int
    per_page: int
    pages: int
