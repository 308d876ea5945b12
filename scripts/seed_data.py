#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample data for development and testing.

USAGE:
    # Make sure you're in the project root with venv activated
    python scripts/seed_data.py

    # Or with Docker
    docker-compose exec api python scripts/seed_data.py

This script:
1. Connects to the database using app settings
2. Clears existing data (optional)
3. Creates categories, the badge catalog and sample users
4. Submits, verifies, votes on, reviews and reports sample groups through the
   service layer, so every summary field and ledger row is consistent
"""

import os
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from groupfinder.database import SessionLocal, create_tables
from groupfinder.models import (
    Badge,
    Category,
    Group,
    Report,
    ReputationHistory,
    Review,
    Tag,
    User,
    UserBadge,
    UserRole,
    VerificationLog,
    Vote,
)
from groupfinder.models.group import group_tags
from groupfinder.services.groups import create_group
from groupfinder.services.ratings import submit_review
from groupfinder.services.reports import submit_report, update_report_status
from groupfinder.services.security import hash_password
from groupfinder.services.verification import set_verification
from groupfinder.services.votes import cast_vote


def clear_data(db: Session) -> None:
    """Clear all existing data from the database."""
    print("Clearing existing data...")
    for table in (
        UserBadge.__table__,
        Report.__table__,
        ReputationHistory.__table__,
        VerificationLog.__table__,
        Review.__table__,
        Vote.__table__,
        group_tags,
        Group.__table__,
        Tag.__table__,
        Badge.__table__,
        Category.__table__,
        User.__table__,
    ):
        db.execute(delete(table))
    db.commit()
    print("Data cleared.")


def create_categories(db: Session) -> dict[str, Category]:
    """Create sample categories."""
    print("Creating categories...")
    categories_data = [
        {"name": "Photography", "slug": "photography", "description": "Cameras, techniques and critique."},
        {"name": "Cooking", "slug": "cooking", "description": "Recipes and kitchen talk."},
        {"name": "Gardening", "slug": "gardening", "description": "Plants, soil and seasons."},
        {"name": "Programming", "slug": "programming", "description": "Code, tools and careers."},
        {"name": "Local Community", "slug": "local-community", "description": "Neighbourhood groups."},
    ]

    categories = {}
    for data in categories_data:
        category = Category(**data)
        db.add(category)
        categories[data["name"]] = category

    db.commit()
    print(f"Created {len(categories)} categories.")
    return categories


def create_badges(db: Session) -> list[Badge]:
    """Create the badge catalog, including the automatic badges."""
    print("Creating badges...")
    badges_data = [
        {
            "name": "Rising Star",
            "description": "Reached 100 reputation points",
            "icon": "star",
            "category": "reputation",
            "requirements": {"action": "reputation", "minimum": 100},
            "display_order": 1,
        },
        {
            "name": "Regular",
            "description": "Reached 500 reputation points",
            "icon": "medal",
            "category": "reputation",
            "requirements": {"action": "reputation", "minimum": 500},
            "display_order": 2,
        },
        {
            "name": "Pillar of the Community",
            "description": "Reached 1000 reputation points",
            "icon": "trophy",
            "category": "reputation",
            "requirements": {"action": "reputation", "minimum": 1000},
            "display_order": 3,
        },
        {
            "name": "Scout",
            "description": "Submitted a first group",
            "icon": "compass",
            "points": 5,
            "category": "contribution",
            "requirements": {"action": "submit_group", "count": 1},
            "display_order": 10,
        },
        {
            "name": "Critic",
            "description": "Wrote 10 reviews",
            "icon": "pen",
            "points": 20,
            "category": "contribution",
            "requirements": {"action": "write_review", "count": 10},
            "display_order": 11,
        },
        {
            "name": "Voter",
            "description": "Voted on 25 groups",
            "icon": "thumbs-up",
            "points": 10,
            "category": "contribution",
            "requirements": {"action": "vote", "count": 25},
            "display_order": 12,
        },
        {
            "name": "Watchdog",
            "description": "Filed 5 reports",
            "icon": "eye",
            "points": 10,
            "category": "contribution",
            "requirements": {"action": "report", "count": 5},
            "display_order": 13,
        },
        {
            "name": "Helpful",
            "description": "Awarded by a moderator for going out of their way to help",
            "icon": "hand",
            "points": 25,
            "category": "special",
            "display_order": 20,
        },
    ]

    badges = [Badge(**data) for data in badges_data]
    db.add_all(badges)
    db.commit()
    print(f"Created {len(badges)} badges.")
    return badges


def create_users(db: Session) -> dict[str, User]:
    """Create an admin and a few members, all sharing one dev password."""
    print("Creating users...")
    password = os.environ.get("SEED_PASSWORD", "SecurePass123")
    users_data = [
        {"email": "admin@example.com", "username": "admin", "display_name": "Admin", "role": UserRole.ADMIN.value},
        {"email": "alice@example.com", "username": "alice", "display_name": "Alice"},
        {"email": "bob@example.com", "username": "bob", "display_name": "Bob"},
        {"email": "carol@example.com", "username": "carol", "display_name": "Carol"},
    ]

    users = {}
    for data in users_data:
        user = User(hashed_password=hash_password(password), is_active=True, **data)
        db.add(user)
        users[data["username"]] = user

    db.commit()
    print(f"Created {len(users)} users (password: {password!r}).")
    return users


def create_groups(
    db: Session,
    categories: dict[str, Category],
    users: dict[str, User],
) -> list[Group]:
    """Submit, moderate, vote on and review sample groups."""
    print("Creating groups...")
    groups_data = [
        {
            "name": "Street Photography Worldwide",
            "url": "https://www.facebook.com/groups/streetphoto",
            "description": "Share your candid street shots and get feedback.",
            "category": "Photography",
            "submitter": "alice",
            "tags": ["street", "candid"],
            "status": "verified",
        },
        {
            "name": "Film Shooters",
            "url": "https://www.facebook.com/groups/filmshooters",
            "description": "Analog cameras, film stocks and darkroom tips.",
            "category": "Photography",
            "submitter": "bob",
            "tags": ["film", "analog"],
            "status": "verified",
        },
        {
            "name": "Sourdough Bakers",
            "url": "https://www.facebook.com/groups/sourdoughbakers",
            "description": "Starters, crumb shots and baking schedules.",
            "category": "Cooking",
            "submitter": "carol",
            "tags": ["baking", "bread"],
            "status": "pending",
        },
        {
            "name": "Balcony Gardeners",
            "url": "https://www.facebook.com/groups/balconygardeners",
            "description": "Growing food and flowers in small spaces.",
            "category": "Gardening",
            "submitter": "alice",
            "tags": ["urban", "containers"],
            "status": "needs_review",
        },
        {
            "name": "Python Developers",
            "url": "https://www.facebook.com/groups/pythondevelopers",
            "description": "Questions, news and jobs for Python programmers.",
            "category": "Programming",
            "submitter": "bob",
            "tags": ["python", "careers"],
            "status": "verified",
        },
    ]

    admin = users["admin"]
    groups = []
    for data in groups_data:
        group = create_group(
            db,
            users[data["submitter"]],
            name=data["name"],
            url=data["url"],
            description=data["description"],
            category_id=categories[data["category"]].id,
            tags=data["tags"],
        )
        if data["status"] != "pending":
            set_verification(db, group.id, admin, data["status"], "Seeded")
        groups.append(group)

    votes = [("alice", 1, "up"), ("bob", 0, "up"), ("carol", 0, "up"), ("carol", 4, "down"), ("alice", 4, "up")]
    for username, index, vote_type in votes:
        cast_vote(db, groups[index].id, users[username].id, vote_type)

    reviews = [
        ("bob", 0, 5, "Friendly and active."),
        ("carol", 0, 4, "Great critiques."),
        ("alice", 1, 5, None),
        ("carol", 4, 3, "Lots of job spam lately."),
    ]
    for username, index, rating, comment in reviews:
        submit_review(db, groups[index].id, users[username].id, rating, comment)

    # Reports: one still open, one resolved by the admin
    submit_report(db, groups[4].id, users["carol"].id, "Spam", "Mostly job ads lately")
    resolved = submit_report(db, groups[3].id, users["bob"].id, "Wrong category")
    update_report_status(db, resolved.id, admin, "resolved", "Checked, category is fine")

    print(f"Created {len(groups)} groups, {len(votes)} votes, {len(reviews)} reviews, 2 reports.")
    return groups


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    # Create tables if they don't exist
    create_tables()

    # Create session
    db = SessionLocal()

    try:
        if clear_existing:
            clear_data(db)

        categories = create_categories(db)
        badges = create_badges(db)
        users = create_users(db)
        groups = create_groups(db, categories, users)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Categories: {len(categories)}")
        print(f"  - Badges: {len(badges)}")
        print(f"  - Users: {len(users)}")
        print(f"  - Groups: {len(groups)}")
        print("\nYou can now access the API at http://localhost:8001")
        print("API documentation at http://localhost:8001/docs")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
