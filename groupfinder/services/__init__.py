"""
Services Package

Business logic, separate from HTTP handling so it can be reused by
routers and scripts alike.

Current services:
- authorization.py: the single admin capability check
- exceptions.py: domain exception hierarchy
- levels.py: reputation level table and progress helpers
- rate_limiter.py: rate limiting with slowapi and Redis backend
- ratings.py: review upsert and group rating aggregation
- reputation.py: reputation ledger and badges
- security.py: password hashing and JWT utilities
- verification.py: group moderation state and audit log
- votes.py: vote transitions and atomic vote counters
"""
