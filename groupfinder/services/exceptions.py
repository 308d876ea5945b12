"""
Domain Exceptions

Raised by the service layer and converted to JSON responses by a single
exception handler registered in main.py. Services stay HTTP-agnostic, so
the same functions can be called from scripts (see scripts/seed_data.py).

Every exception carries:
- message: human-readable explanation, returned as "detail"
- code: machine-readable reason, returned as "code"
- status_code: HTTP status the handler responds with
"""


class GroupFinderError(Exception):
    """Base class for all domain exceptions."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(self.message)


class ValidationError(GroupFinderError):
    """Raised when input fails a domain rule before anything is written."""

    status_code = 400
    code = "validation_error"


class NotFoundError(GroupFinderError):
    """Raised when a referenced resource does not exist."""

    status_code = 404
    code = "not_found"


class ConflictError(GroupFinderError):
    """Raised when a write collides with existing data."""

    status_code = 409
    code = "conflict"


class PermissionDeniedError(GroupFinderError):
    """Raised when the caller lacks the capability for an operation."""

    status_code = 403
    code = "permission_denied"


# Specific exceptions for domain entities


class GroupNotFoundError(NotFoundError):
    code = "group_not_found"

    def __init__(self, group_id: int):
        super().__init__(f"Group with ID {group_id} not found")


class UserNotFoundError(NotFoundError):
    code = "user_not_found"

    def __init__(self, user_id: int):
        super().__init__(f"User with ID {user_id} not found")


class BadgeNotFoundError(NotFoundError):
    code = "badge_not_found"

    def __init__(self, badge_id: int):
        super().__init__(f"Badge with ID {badge_id} not found")


class ReviewNotFoundError(NotFoundError):
    code = "review_not_found"

    def __init__(self, review_id: int):
        super().__init__(f"Review with ID {review_id} not found")


class ReportNotFoundError(NotFoundError):
    code = "report_not_found"

    def __init__(self, report_id: int):
        super().__init__(f"Report with ID {report_id} not found")
