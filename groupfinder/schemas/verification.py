"""
Verification Pydantic Schemas
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from groupfinder.schemas.group import GroupResponse
from groupfinder.schemas.user import UserPublicResponse


class VerificationUpdate(BaseModel):
    """
    Example request body:
    {"verification_status": "verified", "notes": "Checked the group rules"}

    The status is validated by the verification service so that unknown
    values get a 400 with the `invalid_verification_status` code.
    """

    verification_status: str = Field(
        ...,
        description="pending, verified, rejected, needs_review or flagged",
        examples=["verified"],
    )
    notes: str | None = Field(default=None, max_length=2000)


class VerificationUpdateResponse(BaseModel):
    success: bool
    message: str


class GroupVerification(BaseModel):
    """Current verification fields of a group."""

    id: int
    verification_status: str
    verification_date: datetime | None = None
    verification_notes: str | None = None
    verified_by: int | None = None
    verified_user: UserPublicResponse | None = None

    model_config = ConfigDict(from_attributes=True)


class VerificationLogResponse(BaseModel):
    id: int
    group_id: int
    status: str
    notes: str | None = None
    created_at: datetime
    user: UserPublicResponse | None = None

    model_config = ConfigDict(from_attributes=True)


class VerificationHistoryResponse(BaseModel):
    verification: GroupVerification
    logs: list[VerificationLogResponse]


class ModerationQueueResponse(BaseModel):
    items: list[GroupResponse]
    total: int
    page: int
    per_page: int
    pages: int
