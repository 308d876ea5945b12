"""
Group Pydantic Schemas

Schemas:
- GroupCreate: Submit a group to the directory
- GroupResponse: Full group data including vote/rating summary and
  verification state
- GroupListResponse: Paginated list of groups
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from groupfinder.models.group import ActivityLevel
from groupfinder.schemas.category import CategoryResponse, TagResponse


class GroupCreate(BaseModel):
    """
    Schema for submitting a group.

    Example request body:
    {
        "name": "Street Photography Worldwide",
        "url": "https://www.facebook.com/groups/streetphoto",
        "description": "Share your candid street shots.",
        "category_id": 1,
        "tags": ["street", "film"]
    }
    """

    name: str = Field(
        ...,
        min_length=3,
        max_length=200,
        description="Group name",
        examples=["Street Photography Worldwide"],
    )
    url: HttpUrl = Field(
        ...,
        description="Facebook URL of the group",
        examples=["https://www.facebook.com/groups/streetphoto"],
    )
    description: str = Field(
        ...,
        min_length=10,
        max_length=5000,
        description="What the group is about",
    )
    category_id: int = Field(..., gt=0, description="Category ID")
    size: int | None = Field(default=None, ge=0, description="Approximate member count")
    activity_level: ActivityLevel = Field(
        default=ActivityLevel.MEDIUM,
        description="How active the group is",
    )
    tags: list[str] = Field(
        default_factory=list,
        max_length=10,
        description="Tag names; unknown tags are created",
        examples=[["street", "film"]],
    )

    @field_validator("url")
    @classmethod
    def url_must_be_facebook_group(cls, v: HttpUrl) -> HttpUrl:
        host = (v.host or "").lower()
        if not (host == "facebook.com" or host.endswith(".facebook.com") or host == "fb.com"):
            raise ValueError("URL must point to a Facebook group")
        return v

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str]) -> list[str]:
        seen = []
        for tag in v:
            tag = tag.strip().lower()
            if tag and tag not in seen:
                seen.append(tag)
        return seen


class GroupResponse(BaseModel):
    """Group data returned by the API."""

    id: int = Field(..., description="Group ID")
    name: str
    url: str
    description: str
    size: int | None = None
    activity_level: str
    category: CategoryResponse
    tags: list[TagResponse] = Field(default_factory=list)
    submitted_by: int | None = Field(default=None, description="Submitting user ID")

    upvotes: int = Field(..., description="Number of up votes")
    downvotes: int = Field(..., description="Number of down votes")
    average_rating: float = Field(..., description="Mean review rating, 0 without reviews")
    review_count: int = Field(..., description="Number of reviews")

    verification_status: str = Field(..., description="Moderation state")
    is_verified: bool
    verification_date: datetime | None = None

    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupListResponse(BaseModel):
    """Paginated list of groups."""

    items: list[GroupResponse]
    total: int = Field(..., description="Total number of matching groups")
    page: int = Field(..., description="Current page number")
    per_page: int = Field(..., description="Items per page")
    pages: int = Field(..., description="Total number of pages")
