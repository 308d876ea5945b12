"""
Tests for Groups

Tests the group directory:
- Submitting a group
- Listing with filters, sorting and pagination
- Group detail

Business Rules:
- New groups start as pending with zeroed summaries
- Only Facebook URLs are accepted, each URL once
- Rejected groups are hidden from the default public listing
"""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from groupfinder.models import Category, Group, User
from groupfinder.services.security import create_access_token
from groupfinder.services.verification import set_verification
from groupfinder.services.votes import cast_vote


def get_auth_header(user: User) -> dict:
    """Create authorization header for a user."""
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


def group_payload(category: Category, **overrides) -> dict:
    payload = {
        "name": "Macro Lovers",
        "url": "https://www.facebook.com/groups/macrolovers",
        "description": "Tiny things, big pictures.",
        "category_id": category.id,
    }
    payload.update(overrides)
    return payload


# =============================================================================
# Submit Group
# =============================================================================


class TestCreateGroup:
    """Tests for POST /api/v1/groups"""

    def test_create_group(self, client: TestClient, user: User, category: Category):
        response = client.post(
            "/api/v1/groups",
            json=group_payload(category, tags=["Macro", "insects", "macro"], size=1200),
            headers=get_auth_header(user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["name"] == "Macro Lovers"
        assert data["category"]["slug"] == "photography"
        assert sorted(tag["name"] for tag in data["tags"]) == ["insects", "macro"]
        assert data["submitted_by"] == user.id
        assert data["size"] == 1200
        assert data["activity_level"] == "medium"
        assert data["verification_status"] == "pending"
        assert data["is_verified"] is False
        assert (data["upvotes"], data["downvotes"]) == (0, 0)
        assert (data["average_rating"], data["review_count"]) == (0, 0)

    def test_existing_tags_reused(
        self, client: TestClient, db_session: Session, user: User, category: Category
    ):
        client.post(
            "/api/v1/groups",
            json=group_payload(category, tags=["macro"]),
            headers=get_auth_header(user),
        )
        client.post(
            "/api/v1/groups",
            json=group_payload(
                category,
                url="https://www.facebook.com/groups/macro2",
                tags=["macro"],
            ),
            headers=get_auth_header(user),
        )

        response = client.get("/api/v1/tags")
        assert [tag["name"] for tag in response.json()] == ["macro"]

    def test_submission_awards_points(
        self, client: TestClient, db_session: Session, user: User, category: Category
    ):
        client.post(
            "/api/v1/groups",
            json=group_payload(category),
            headers=get_auth_header(user),
        )

        db_session.refresh(user)
        assert user.reputation_points == 15

    def test_duplicate_url(self, client: TestClient, user: User, group: Group, category: Category):
        response = client.post(
            "/api/v1/groups",
            json=group_payload(category, url=group.url),
            headers=get_auth_header(user),
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["code"] == "duplicate_group"

    def test_non_facebook_url(self, client: TestClient, user: User, category: Category):
        response = client.post(
            "/api/v1/groups",
            json=group_payload(category, url="https://example.com/groups/macro"),
            headers=get_auth_header(user),
        )

        assert response.status_code == 422

    def test_unknown_category(self, client: TestClient, user: User, category: Category):
        response = client.post(
            "/api/v1/groups",
            json=group_payload(category, category_id=99999),
            headers=get_auth_header(user),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["code"] == "category_not_found"

    def test_requires_authentication(self, client: TestClient, category: Category):
        response = client.post("/api/v1/groups", json=group_payload(category))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# List Groups
# =============================================================================


class TestListGroups:
    """Tests for GET /api/v1/groups"""

    def test_list_groups(self, client: TestClient, group: Group, second_group: Group):
        response = client.get("/api/v1/groups")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total"] == 2
        assert data["page"] == 1
        assert data["pages"] == 1
        # Newest first
        assert [item["id"] for item in data["items"]] == [second_group.id, group.id]

    def test_pagination(self, client: TestClient, group: Group, second_group: Group):
        response = client.get("/api/v1/groups", params={"page": 2, "per_page": 1})

        data = response.json()
        assert data["total"] == 2
        assert data["pages"] == 2
        assert [item["id"] for item in data["items"]] == [group.id]

    def test_rejected_hidden_from_public(
        self,
        client: TestClient,
        db_session: Session,
        group: Group,
        second_group: Group,
        admin_user: User,
        user: User,
    ):
        set_verification(db_session, group.id, admin_user, "rejected")

        anonymous = client.get("/api/v1/groups").json()
        assert [item["id"] for item in anonymous["items"]] == [second_group.id]

        member = client.get("/api/v1/groups", headers=get_auth_header(user)).json()
        assert member["total"] == 1

        admin = client.get("/api/v1/groups", headers=get_auth_header(admin_user)).json()
        assert admin["total"] == 2

    def test_filter_by_verification_status(
        self,
        client: TestClient,
        db_session: Session,
        group: Group,
        second_group: Group,
        admin_user: User,
    ):
        set_verification(db_session, group.id, admin_user, "verified")

        response = client.get("/api/v1/groups", params={"verification_status": "verified"})

        data = response.json()
        assert [item["id"] for item in data["items"]] == [group.id]
        assert data["items"][0]["is_verified"] is True

    def test_filter_by_category(
        self, client: TestClient, db_session: Session, group: Group, user: User
    ):
        other = Category(name="Cooking", slug="cooking")
        db_session.add(other)
        db_session.commit()

        response = client.get("/api/v1/groups", params={"category_id": other.id})
        assert response.json()["total"] == 0

        response = client.get("/api/v1/groups", params={"category_id": group.category_id})
        assert response.json()["total"] == 1

    def test_filter_by_tag(self, client: TestClient, user: User, category: Category, group: Group):
        client.post(
            "/api/v1/groups",
            json=group_payload(category, tags=["insects"]),
            headers=get_auth_header(user),
        )

        response = client.get("/api/v1/groups", params={"tag": "Insects"})

        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["name"] == "Macro Lovers"

    def test_sort_popular(
        self,
        client: TestClient,
        db_session: Session,
        group: Group,
        second_group: Group,
        user: User,
        second_user: User,
    ):
        cast_vote(db_session, group.id, user.id, "up")
        cast_vote(db_session, group.id, second_user.id, "up")
        cast_vote(db_session, second_group.id, user.id, "down")

        response = client.get("/api/v1/groups", params={"sort": "popular"})

        assert [item["id"] for item in response.json()["items"]] == [group.id, second_group.id]

    def test_invalid_sort(self, client: TestClient):
        response = client.get("/api/v1/groups", params={"sort": "random"})

        assert response.status_code == 422


# =============================================================================
# Group Detail
# =============================================================================


class TestGetGroup:
    """Tests for GET /api/v1/groups/{group_id}"""

    def test_get_group(self, client: TestClient, group: Group):
        response = client.get(f"/api/v1/groups/{group.id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == group.id
        assert data["url"] == "https://www.facebook.com/groups/streetphoto"
        assert data["category"]["name"] == "Photography"

    def test_get_group_not_found(self, client: TestClient):
        response = client.get("/api/v1/groups/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
