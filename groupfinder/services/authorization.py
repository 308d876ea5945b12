"""
Authorization Service

The one place that decides whether a user holds a capability. Routers
and services ask here instead of checking roles themselves; the FastAPI
dependency built on top of it lives in groupfinder.dependencies.
"""

from groupfinder.models.report import ReportStatus
from groupfinder.models.user import User, UserRole


def is_admin(user: User | None) -> bool:
    """True when the user is an active administrator."""
    return bool(user and user.is_active and user.role == UserRole.ADMIN.value)


def can_view_user_data(viewer: User, user_id: int) -> bool:
    """Users may read their own reputation and badges; admins may read anyone's."""
    return viewer.id == user_id or is_admin(viewer)


def can_delete_review(user: User, review_user_id: int) -> bool:
    return user.id == review_user_id or is_admin(user)


def can_view_report(user: User, reporter_id: int) -> bool:
    return user.id == reporter_id or is_admin(user)


def can_delete_report(user: User, reporter_id: int, report_status: str) -> bool:
    """Reporters may withdraw their own report while it is still pending."""
    if is_admin(user):
        return True
    return user.id == reporter_id and report_status == ReportStatus.PENDING.value
