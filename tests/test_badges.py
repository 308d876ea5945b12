"""
Tests for Badges

Tests the badge catalog and awarded badges:
- Catalog CRUD (admin)
- Awarding, re-awarding and removing badges
- Automatic contribution badges

Business Rules:
- A badge's points are granted once, on the first award
- Re-awarding a held badge increments times_awarded
- badges_count always equals the number of badges held
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from groupfinder.models import Badge, Group, User, UserBadge
from groupfinder.services import reputation
from groupfinder.services.reputation import (
    award_badge,
    check_contribution_badges,
    delete_badge,
    record_contribution,
    remove_badge,
)
from groupfinder.services.security import create_access_token
from groupfinder.services.votes import cast_vote


# =============================================================================
# Helper Functions
# =============================================================================


def get_auth_header(user: User) -> dict:
    """Create authorization header for a user."""
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


def held_count(db_session: Session, user_id: int) -> int:
    return db_session.scalar(select(func.count()).where(UserBadge.user_id == user_id))


# =============================================================================
# Badge Catalog
# =============================================================================


class TestBadgeCatalog:
    """Tests for /api/v1/badges"""

    def test_list_badges_ordered(
        self, client: TestClient, badge: Badge, reputation_badges: list[Badge]
    ):
        response = client.get("/api/v1/badges")

        assert response.status_code == status.HTTP_200_OK
        names = [b["name"] for b in response.json()]
        assert names == ["Rising Star", "Pillar", "Helpful"]

    def test_filter_by_category(
        self, client: TestClient, badge: Badge, reputation_badges: list[Badge]
    ):
        response = client.get("/api/v1/badges", params={"category": "special"})

        assert [b["name"] for b in response.json()] == ["Helpful"]

    def test_create_badge(self, client: TestClient, admin_user: User):
        response = client.post(
            "/api/v1/badges",
            json={
                "name": "Critic",
                "description": "Wrote 10 reviews",
                "icon": "star",
                "points": 20,
                "category": "contribution",
                "requirements": {"action": "write_review", "count": 10},
            },
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["name"] == "Critic"
        assert data["requirements"] == {"action": "write_review", "count": 10}
        assert data["display_order"] == 999

    def test_create_badge_requirements_validated(self, client: TestClient, admin_user: User):
        response = client.post(
            "/api/v1/badges",
            json={
                "name": "Broken",
                "category": "reputation",
                "requirements": {"action": "reputation"},
            },
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == 422

    def test_create_duplicate_name(self, client: TestClient, admin_user: User, badge: Badge):
        response = client.post(
            "/api/v1/badges",
            json={"name": "Helpful", "category": "special"},
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_create_badge_admin_only(self, client: TestClient, user: User):
        response = client.post(
            "/api/v1/badges",
            json={"name": "Sneaky", "category": "special"},
            headers=get_auth_header(user),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_update_badge(self, client: TestClient, admin_user: User, badge: Badge):
        response = client.patch(
            f"/api/v1/badges/{badge.id}",
            json={"points": 40, "icon": "heart"},
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["points"] == 40
        assert data["icon"] == "heart"
        assert data["name"] == "Helpful"

    def test_update_missing_badge(self, client: TestClient, admin_user: User):
        response = client.patch(
            "/api/v1/badges/99999",
            json={"points": 40},
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_badge_updates_holders(
        self,
        client: TestClient,
        db_session: Session,
        admin_user: User,
        user: User,
        badge: Badge,
    ):
        award_badge(db_session, user.id, badge.id)

        response = client.delete(
            f"/api/v1/badges/{badge.id}",
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_204_NO_CONTENT
        db_session.refresh(user)
        assert user.badges_count == 0
        assert held_count(db_session, user.id) == 0
        # Points earned with the badge stay
        assert user.reputation_points == 25

    def test_delete_missing_badge(self, client: TestClient, admin_user: User):
        response = client.delete(
            "/api/v1/badges/99999",
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["code"] == "badge_not_found"

    def test_delete_badge_is_all_or_nothing(
        self,
        db_session: Session,
        monkeypatch,
        user: User,
        second_user: User,
        badge: Badge,
    ):
        award_badge(db_session, user.id, badge.id)
        award_badge(db_session, second_user.id, badge.id)

        real_revoke = reputation._revoke_badge
        revoked = []

        def revoke_once_then_fail(db, user_badge):
            if revoked:
                raise SQLAlchemyError("database went away")
            revoked.append(user_badge.id)
            real_revoke(db, user_badge)

        monkeypatch.setattr(reputation, "_revoke_badge", revoke_once_then_fail)

        with pytest.raises(SQLAlchemyError):
            delete_badge(db_session, badge.id)
        db_session.rollback()

        # The first holder's revocation was rolled back with the rest
        assert revoked
        assert db_session.get(Badge, badge.id) is not None
        for holder in (user, second_user):
            db_session.refresh(holder)
            assert holder.badges_count == 1
            assert held_count(db_session, holder.id) == 1


# =============================================================================
# Awarding Badges
# =============================================================================


class TestAwardBadge:
    """Tests for POST /api/v1/user-badges"""

    def test_award_badge(
        self, client: TestClient, db_session: Session, admin_user: User, user: User, badge: Badge
    ):
        response = client.post(
            "/api/v1/user-badges",
            json={"userId": user.id, "badgeId": badge.id},
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["message"] == "Badge awarded successfully"
        assert data["user_badge"]["badge"]["name"] == "Helpful"
        assert data["user_badge"]["times_awarded"] == 1

        db_session.refresh(user)
        assert user.badges_count == 1
        assert user.reputation_points == 25

    def test_repeat_award(
        self, client: TestClient, db_session: Session, admin_user: User, user: User, badge: Badge
    ):
        """Second award: times_awarded 2, points granted only once"""
        for _ in range(2):
            response = client.post(
                "/api/v1/user-badges",
                json={"userId": user.id, "badgeId": badge.id},
                headers=get_auth_header(admin_user),
            )

        data = response.json()
        assert data["message"] == "Badge awarded again"
        assert data["user_badge"]["times_awarded"] == 2

        db_session.refresh(user)
        assert user.badges_count == 1
        assert user.reputation_points == 25
        assert held_count(db_session, user.id) == 1

    def test_badge_points_unlock_reputation_badges(
        self,
        db_session: Session,
        user: User,
        reputation_badges: list[Badge],
    ):
        big = Badge(name="Founder", points=120, category="special")
        db_session.add(big)
        db_session.commit()

        award_badge(db_session, user.id, big.id)

        db_session.refresh(user)
        assert user.reputation_points == 120
        assert user.badges_count == 2

    def test_unknown_badge(self, client: TestClient, admin_user: User, user: User):
        response = client.post(
            "/api/v1/user-badges",
            json={"userId": user.id, "badgeId": 99999},
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["code"] == "badge_not_found"

    def test_admin_only(self, client: TestClient, user: User, badge: Badge):
        response = client.post(
            "/api/v1/user-badges",
            json={"userId": user.id, "badgeId": badge.id},
            headers=get_auth_header(user),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestListUserBadges:
    """Tests for GET /api/v1/user-badges"""

    def test_own_badges(self, client: TestClient, db_session: Session, user: User, badge: Badge):
        award_badge(db_session, user.id, badge.id)

        response = client.get("/api/v1/user-badges", headers=get_auth_header(user))

        assert response.status_code == status.HTTP_200_OK
        assert [ub["badge"]["name"] for ub in response.json()] == ["Helpful"]

    def test_other_users_badges_forbidden(
        self, client: TestClient, user: User, second_user: User
    ):
        response = client.get(
            "/api/v1/user-badges",
            params={"userId": second_user.id},
            headers=get_auth_header(user),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestRemoveBadge:
    """Tests for DELETE /api/v1/user-badges/{user_badge_id}"""

    def test_remove_badge(
        self, client: TestClient, db_session: Session, admin_user: User, user: User, badge: Badge
    ):
        user_badge, _ = award_badge(db_session, user.id, badge.id)

        response = client.delete(
            f"/api/v1/user-badges/{user_badge.id}",
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_204_NO_CONTENT
        db_session.refresh(user)
        assert user.badges_count == 0
        assert user.reputation_points == 25

    def test_remove_missing(self, client: TestClient, admin_user: User):
        response = client.delete(
            "/api/v1/user-badges/99999",
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["code"] == "user_badge_not_found"

    def test_count_never_negative(self, db_session: Session, user: User, badge: Badge):
        user_badge, _ = award_badge(db_session, user.id, badge.id)
        user.badges_count = 0
        db_session.commit()

        remove_badge(db_session, user_badge.id)

        db_session.refresh(user)
        assert user.badges_count == 0


# =============================================================================
# Contribution Badges
# =============================================================================


class TestContributionBadges:
    def _voter_badge(self, db_session: Session) -> Badge:
        badge = Badge(
            name="Voter",
            points=5,
            category="contribution",
            requirements={"action": "vote", "count": 2},
        )
        db_session.add(badge)
        db_session.commit()
        return badge

    def test_awarded_after_enough_votes(
        self,
        db_session: Session,
        user: User,
        group: Group,
        second_group: Group,
    ):
        self._voter_badge(db_session)

        cast_vote(db_session, group.id, user.id, "up")
        db_session.refresh(user)
        assert user.badges_count == 0

        cast_vote(db_session, second_group.id, user.id, "down")
        db_session.refresh(user)
        assert user.badges_count == 1
        assert user.reputation_points == 5

    def test_not_awarded_twice(
        self,
        db_session: Session,
        user: User,
        group: Group,
        second_group: Group,
    ):
        self._voter_badge(db_session)
        cast_vote(db_session, group.id, user.id, "up")
        cast_vote(db_session, second_group.id, user.id, "up")

        assert check_contribution_badges(db_session, user.id, "vote") == []
        assert held_count(db_session, user.id) == 1

    def test_submission_points_and_badge(
        self, client: TestClient, db_session: Session, user: User, category
    ):
        db_session.add(
            Badge(
                name="Scout",
                points=0,
                category="contribution",
                requirements={"action": "submit_group", "count": 1},
            )
        )
        db_session.commit()

        response = client.post(
            "/api/v1/groups",
            json={
                "name": "Macro Lovers",
                "url": "https://www.facebook.com/groups/macrolovers",
                "description": "Tiny things, big pictures.",
                "category_id": category.id,
            },
            headers=get_auth_header(user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        db_session.refresh(user)
        assert user.reputation_points == 15
        assert user.badges_count == 1

    def test_unknown_action_is_contained(self, db_session: Session, user: User):
        # Logged and rolled back to the savepoint; nothing raised
        record_contribution(db_session, user.id, "teleport")
        db_session.commit()

        assert held_count(db_session, user.id) == 0
