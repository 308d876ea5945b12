"""
API Routers Package

Router Structure:
- auth.py: /api/v1/auth/* (registration, login, current user)
- categories.py: /api/v1/categories, /api/v1/tags
- groups.py: /api/v1/groups (listing, submission, detail)
- votes.py: /api/v1/groups/{id}/vote
- reviews.py: /api/v1/groups/{id}/review(s), /api/v1/reviews/{id}
- verification.py: /api/v1/groups/{id}/verification, /api/v1/admin/verification
- reputation.py: /api/v1/reputation/*
- badges.py: /api/v1/badges/*, /api/v1/user-badges/*
- reports.py: /api/v1/reports/*

Each router is imported and registered in main.py.
"""

from groupfinder.routers.auth import router as auth_router
from groupfinder.routers.badges import router as badges_router
from groupfinder.routers.categories import router as categories_router
from groupfinder.routers.groups import router as groups_router
from groupfinder.routers.reports import router as reports_router
from groupfinder.routers.reputation import router as reputation_router
from groupfinder.routers.reviews import router as reviews_router
from groupfinder.routers.verification import router as verification_router
from groupfinder.routers.votes import router as votes_router

__all__ = [
    "auth_router",
    "badges_router",
    "categories_router",
    "groups_router",
    "reports_router",
    "reputation_router",
    "reviews_router",
    "verification_router",
    "votes_router",
]
