"""
Report Pydantic Schemas

Schemas:
- ReportCreate: File a report against a group
- ReportStatusUpdate: Admin moves a report through its lifecycle
- ReportResponse: Report data for API responses
- ReportListResponse: Paginated list of reports
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from groupfinder.schemas.user import UserPublicResponse


class ReportCreate(BaseModel):
    """
    Example request body:
    {"group_id": 12, "reason": "Spam", "comment": "Only posts crypto links"}
    """

    group_id: int = Field(..., gt=0)
    reason: str = Field(
        ...,
        min_length=3,
        max_length=200,
        examples=["Spam", "Dead link", "Wrong category"],
    )
    comment: str | None = Field(default=None, max_length=2000)


class ReportStatusUpdate(BaseModel):
    """
    Example request body:
    {"status": "resolved", "resolution_notes": "Group removed from listing"}

    The status is checked by the reports service so that unknown values
    get a 400 with the `invalid_report_status` code.
    """

    status: str = Field(
        ...,
        description="pending, in_review, resolved or dismissed",
        examples=["in_review", "resolved"],
    )
    resolution_notes: str | None = Field(default=None, max_length=2000)


class ReportResponse(BaseModel):
    id: int
    group_id: int
    reason: str
    comment: str | None = None
    status: str
    resolution_notes: str | None = None
    reporter: UserPublicResponse
    resolver: UserPublicResponse | None = None
    resolved_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReportListResponse(BaseModel):
    items: list[ReportResponse]
    total: int
    page: int
    per_page: int
    pages: int
