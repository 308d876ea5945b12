"""
SQLAlchemy Models Package

Model Relationships:
- Category -> Group: One-to-Many (every group has one category)
- Tag <-> Group: Many-to-Many through group_tags
- Group -> Vote, Review, VerificationLog, Report: One-to-Many (fact tables)
- User -> Vote, Review, ReputationHistory, UserBadge: One-to-Many
- Badge <-> User: Many-to-Many through the UserBadge model

Importing every model here registers it with Base.metadata, which is
what Alembic autogenerate and create_all() rely on.
"""

from groupfinder.models.user import User, UserRole
from groupfinder.models.category import Category, Tag
from groupfinder.models.group import ActivityLevel, Group, VerificationStatus, group_tags
from groupfinder.models.vote import Vote, VoteType
from groupfinder.models.review import Review
from groupfinder.models.verification import VerificationLog
from groupfinder.models.reputation import ReputationHistory, ReputationSource
from groupfinder.models.badge import Badge, UserBadge
from groupfinder.models.report import OPEN_REPORT_STATUSES, Report, ReportStatus

__all__ = [
    "User",
    "UserRole",
    "Category",
    "Tag",
    "Group",
    "ActivityLevel",
    "VerificationStatus",
    "group_tags",
    "Vote",
    "VoteType",
    "Review",
    "VerificationLog",
    "ReputationHistory",
    "ReputationSource",
    "Badge",
    "UserBadge",
    "Report",
    "ReportStatus",
    "OPEN_REPORT_STATUSES",
]
