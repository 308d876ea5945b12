"""
Pydantic Schemas Package

Request/response models kept separate from the SQLAlchemy models so the
API controls exactly what is exposed.

Schema Naming Convention:
- XxxCreate: Fields required when creating a record
- XxxUpdate: Fields allowed when updating (all optional)
- XxxResponse: Fields returned in API responses
- XxxRequest: Bodies of action endpoints (vote, award)
"""

from groupfinder.schemas.badge import (
    AwardBadgeRequest,
    AwardBadgeResponse,
    BadgeCreate,
    BadgeResponse,
    BadgeUpdate,
    UserBadgeResponse,
)
from groupfinder.schemas.category import CategoryCreate, CategoryResponse, TagResponse
from groupfinder.schemas.group import GroupCreate, GroupListResponse, GroupResponse
from groupfinder.schemas.report import (
    ReportCreate,
    ReportListResponse,
    ReportResponse,
    ReportStatusUpdate,
)
from groupfinder.schemas.reputation import (
    AwardPointsRequest,
    AwardPointsResponse,
    LeaderboardEntry,
    ReputationResponse,
    ReputationSummary,
)
from groupfinder.schemas.review import (
    ReviewCreate,
    ReviewListResponse,
    ReviewResponse,
    ReviewSubmitResponse,
)
from groupfinder.schemas.user import (
    TokenResponse,
    UserCreate,
    UserPublicResponse,
    UserResponse,
)
from groupfinder.schemas.verification import (
    ModerationQueueResponse,
    VerificationHistoryResponse,
    VerificationUpdate,
    VerificationUpdateResponse,
)
from groupfinder.schemas.vote import UserVoteResponse, VoteRequest, VoteResponse

__all__ = [
    "AwardBadgeRequest",
    "AwardBadgeResponse",
    "BadgeCreate",
    "BadgeResponse",
    "BadgeUpdate",
    "UserBadgeResponse",
    "CategoryCreate",
    "CategoryResponse",
    "TagResponse",
    "GroupCreate",
    "GroupListResponse",
    "GroupResponse",
    "AwardPointsRequest",
    "AwardPointsResponse",
    "LeaderboardEntry",
    "ReputationResponse",
    "ReputationSummary",
    "ReportCreate",
    "ReportListResponse",
    "ReportResponse",
    "ReportStatusUpdate",
    "ReviewCreate",
    "ReviewListResponse",
    "ReviewResponse",
    "ReviewSubmitResponse",
    "TokenResponse",
    "UserCreate",
    "UserPublicResponse",
    "UserResponse",
    "ModerationQueueResponse",
    "VerificationHistoryResponse",
    "VerificationUpdate",
    "VerificationUpdateResponse",
    "UserVoteResponse",
    "VoteRequest",
    "VoteResponse",
]
