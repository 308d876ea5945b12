"""
Tests for Reports

Tests the report workflow:
- Filing a report against a group
- Admin listing and status changes
- Reading and withdrawing reports

Business Rules:
- One open (pending or in_review) report per user per group
- Filing a report earns 5 points, best-effort
- Resolving earns the reporter 10 points, dismissing costs 5,
  committed together with the status change
- Closed reports are final
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from groupfinder.models import Badge, Group, Report, ReputationHistory, User, UserBadge
from groupfinder.services import reports as report_service
from groupfinder.services.exceptions import ValidationError
from groupfinder.services.reports import submit_report, update_report_status
from groupfinder.services.security import create_access_token


def get_auth_header(user: User) -> dict:
    """Create authorization header for a user."""
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


def ledger(db_session: Session, user_id: int) -> list[ReputationHistory]:
    return list(
        db_session.scalars(
            select(ReputationHistory)
            .where(ReputationHistory.user_id == user_id)
            .order_by(ReputationHistory.id)
        ).all()
    )


@pytest.fixture
def report(db_session: Session, group: Group, second_user: User) -> Report:
    """A pending report on `group` filed by `second_user` (5 points earned)."""
    return submit_report(db_session, group.id, second_user.id, "Spam", "Only crypto links")


# =============================================================================
# Filing Reports
# =============================================================================


class TestSubmitReport:
    """Tests for POST /api/v1/reports"""

    def test_submit_report(
        self, client: TestClient, db_session: Session, user: User, group: Group
    ):
        response = client.post(
            "/api/v1/reports",
            json={"group_id": group.id, "reason": "  <b>Dead link</b> ", "comment": "404 page"},
            headers=get_auth_header(user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["group_id"] == group.id
        assert data["reason"] == "Dead link"
        assert data["comment"] == "404 page"
        assert data["status"] == "pending"
        assert data["reporter"]["username"] == "alice"
        assert data["resolver"] is None
        assert data["resolved_at"] is None

    def test_submission_awards_points(
        self, client: TestClient, db_session: Session, user: User, group: Group
    ):
        response = client.post(
            "/api/v1/reports",
            json={"group_id": group.id, "reason": "Spam"},
            headers=get_auth_header(user),
        )

        db_session.refresh(user)
        assert user.reputation_points == 5
        [entry] = ledger(db_session, user.id)
        assert entry.source_type == "report"
        assert entry.source_id == str(response.json()["id"])

    def test_duplicate_open_report(
        self, client: TestClient, second_user: User, group: Group, report: Report
    ):
        response = client.post(
            "/api/v1/reports",
            json={"group_id": group.id, "reason": "Still spam"},
            headers=get_auth_header(second_user),
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["code"] == "duplicate_report"

    def test_duplicate_while_in_review(
        self,
        client: TestClient,
        db_session: Session,
        admin_user: User,
        second_user: User,
        group: Group,
        report: Report,
    ):
        update_report_status(db_session, report.id, admin_user, "in_review")

        response = client.post(
            "/api/v1/reports",
            json={"group_id": group.id, "reason": "Still spam"},
            headers=get_auth_header(second_user),
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_report_again_after_close(
        self,
        client: TestClient,
        db_session: Session,
        admin_user: User,
        second_user: User,
        group: Group,
        report: Report,
    ):
        update_report_status(db_session, report.id, admin_user, "dismissed")

        response = client.post(
            "/api/v1/reports",
            json={"group_id": group.id, "reason": "Spam is back"},
            headers=get_auth_header(second_user),
        )

        assert response.status_code == status.HTTP_201_CREATED

    def test_other_users_may_report_same_group(
        self, client: TestClient, user: User, group: Group, report: Report
    ):
        response = client.post(
            "/api/v1/reports",
            json={"group_id": group.id, "reason": "Spam"},
            headers=get_auth_header(user),
        )

        assert response.status_code == status.HTTP_201_CREATED

    def test_unknown_group(self, client: TestClient, user: User):
        response = client.post(
            "/api/v1/reports",
            json={"group_id": 99999, "reason": "Spam"},
            headers=get_auth_header(user),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["code"] == "group_not_found"

    def test_reason_too_short(self, client: TestClient, user: User, group: Group):
        response = client.post(
            "/api/v1/reports",
            json={"group_id": group.id, "reason": "no"},
            headers=get_auth_header(user),
        )

        assert response.status_code == 422

    def test_reason_only_markup(self, db_session: Session, user: User, group: Group):
        with pytest.raises(ValidationError) as exc_info:
            submit_report(db_session, group.id, user.id, "<br><br>")

        assert exc_info.value.code == "invalid_reason"

    def test_requires_authentication(self, client: TestClient, group: Group):
        response = client.post("/api/v1/reports", json={"group_id": group.id, "reason": "Spam"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_report_contribution_badge(
        self, client: TestClient, db_session: Session, user: User, group: Group
    ):
        watchdog = Badge(
            name="Watchdog",
            description="Filed a first report",
            icon="eye",
            points=0,
            category="contribution",
            requirements={"action": "report", "count": 1},
        )
        db_session.add(watchdog)
        db_session.commit()

        client.post(
            "/api/v1/reports",
            json={"group_id": group.id, "reason": "Spam"},
            headers=get_auth_header(user),
        )

        held = db_session.scalar(
            select(UserBadge).where(UserBadge.user_id == user.id, UserBadge.badge_id == watchdog.id)
        )
        assert held is not None

    def test_reputation_failure_keeps_report(
        self, client: TestClient, db_session: Session, monkeypatch, user: User, group: Group
    ):
        def broken(*args, **kwargs):
            raise SQLAlchemyError("ledger unavailable")

        monkeypatch.setattr("groupfinder.services.reputation._apply_points", broken)

        response = client.post(
            "/api/v1/reports",
            json={"group_id": group.id, "reason": "Spam"},
            headers=get_auth_header(user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert db_session.get(Report, response.json()["id"]) is not None
        db_session.refresh(user)
        assert user.reputation_points == 0


# =============================================================================
# Listing and Reading Reports
# =============================================================================


class TestListReports:
    """Tests for GET /api/v1/reports"""

    def test_list_newest_first(
        self,
        client: TestClient,
        db_session: Session,
        admin_user: User,
        user: User,
        group: Group,
        second_group: Group,
        report: Report,
    ):
        newer = submit_report(db_session, second_group.id, user.id, "Wrong category")

        response = client.get("/api/v1/reports", headers=get_auth_header(admin_user))

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total"] == 2
        assert [item["id"] for item in data["items"]] == [newer.id, report.id]

    def test_filter_by_status(
        self,
        client: TestClient,
        db_session: Session,
        admin_user: User,
        user: User,
        second_group: Group,
        report: Report,
    ):
        submit_report(db_session, second_group.id, user.id, "Wrong category")
        update_report_status(db_session, report.id, admin_user, "resolved")

        response = client.get(
            "/api/v1/reports",
            params={"status": "resolved"},
            headers=get_auth_header(admin_user),
        )

        data = response.json()
        assert [item["id"] for item in data["items"]] == [report.id]

    def test_filter_by_group(
        self,
        client: TestClient,
        db_session: Session,
        admin_user: User,
        user: User,
        second_group: Group,
        report: Report,
    ):
        other = submit_report(db_session, second_group.id, user.id, "Wrong category")

        response = client.get(
            "/api/v1/reports",
            params={"group_id": second_group.id},
            headers=get_auth_header(admin_user),
        )

        assert [item["id"] for item in response.json()["items"]] == [other.id]

    def test_unknown_status(self, client: TestClient, admin_user: User):
        response = client.get(
            "/api/v1/reports",
            params={"status": "archived"},
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == 422

    def test_admin_only(self, client: TestClient, user: User, report: Report):
        response = client.get("/api/v1/reports", headers=get_auth_header(user))

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestGetReport:
    """Tests for GET /api/v1/reports/{report_id}"""

    def test_reporter_can_read(self, client: TestClient, second_user: User, report: Report):
        response = client.get(f"/api/v1/reports/{report.id}", headers=get_auth_header(second_user))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["reason"] == "Spam"

    def test_admin_can_read(self, client: TestClient, admin_user: User, report: Report):
        response = client.get(f"/api/v1/reports/{report.id}", headers=get_auth_header(admin_user))

        assert response.status_code == status.HTTP_200_OK

    def test_other_user_forbidden(self, client: TestClient, user: User, report: Report):
        response = client.get(f"/api/v1/reports/{report.id}", headers=get_auth_header(user))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_not_found(self, client: TestClient, admin_user: User):
        response = client.get("/api/v1/reports/99999", headers=get_auth_header(admin_user))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["code"] == "report_not_found"


# =============================================================================
# Working Reports
# =============================================================================


class TestUpdateReport:
    """Tests for PUT /api/v1/reports/{report_id}"""

    def test_move_to_review(
        self,
        client: TestClient,
        db_session: Session,
        admin_user: User,
        second_user: User,
        report: Report,
    ):
        response = client.put(
            f"/api/v1/reports/{report.id}",
            json={"status": "in_review"},
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "in_review"
        assert data["resolver"] is None
        db_session.refresh(second_user)
        assert second_user.reputation_points == 5

    def test_resolve_rewards_reporter(
        self,
        client: TestClient,
        db_session: Session,
        admin_user: User,
        second_user: User,
        report: Report,
    ):
        response = client.put(
            f"/api/v1/reports/{report.id}",
            json={"status": "resolved", "resolution_notes": "<i>Group removed</i>"},
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "resolved"
        assert data["resolution_notes"] == "Group removed"
        assert data["resolver"]["username"] == "moderator"
        assert data["resolved_at"] is not None

        db_session.refresh(second_user)
        assert second_user.reputation_points == 15
        entry = ledger(db_session, second_user.id)[-1]
        assert (entry.points, entry.reason) == (10, "Report accepted")
        assert (entry.source_type, entry.source_id) == ("report", str(report.id))

    def test_dismiss_costs_reporter(
        self,
        client: TestClient,
        db_session: Session,
        admin_user: User,
        second_user: User,
        report: Report,
    ):
        client.put(
            f"/api/v1/reports/{report.id}",
            json={"status": "dismissed"},
            headers=get_auth_header(admin_user),
        )

        db_session.refresh(second_user)
        assert second_user.reputation_points == 0
        assert [e.points for e in ledger(db_session, second_user.id)] == [5, -5]

    def test_closed_report_is_final(
        self,
        client: TestClient,
        db_session: Session,
        admin_user: User,
        second_user: User,
        report: Report,
    ):
        update_report_status(db_session, report.id, admin_user, "resolved")

        response = client.put(
            f"/api/v1/reports/{report.id}",
            json={"status": "resolved"},
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["code"] == "report_closed"
        db_session.refresh(second_user)
        assert second_user.reputation_points == 15

    def test_invalid_status(self, client: TestClient, admin_user: User, report: Report):
        response = client.put(
            f"/api/v1/reports/{report.id}",
            json={"status": "archived"},
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["code"] == "invalid_report_status"

    def test_not_found(self, client: TestClient, admin_user: User):
        response = client.put(
            "/api/v1/reports/99999",
            json={"status": "resolved"},
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_admin_only(self, client: TestClient, second_user: User, report: Report):
        response = client.put(
            f"/api/v1/reports/{report.id}",
            json={"status": "resolved"},
            headers=get_auth_header(second_user),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_status_and_points_commit_together(
        self,
        db_session: Session,
        monkeypatch,
        admin_user: User,
        second_user: User,
        report: Report,
    ):
        def broken(*args, **kwargs):
            raise SQLAlchemyError("ledger unavailable")

        monkeypatch.setattr(report_service, "credit_points", broken)

        with pytest.raises(SQLAlchemyError):
            update_report_status(db_session, report.id, admin_user, "resolved")
        db_session.rollback()

        db_session.refresh(report)
        assert report.status == "pending"
        assert report.resolved_by is None


class TestDeleteReport:
    """Tests for DELETE /api/v1/reports/{report_id}"""

    def test_reporter_withdraws_pending(
        self,
        client: TestClient,
        db_session: Session,
        second_user: User,
        report: Report,
    ):
        report_id = report.id

        response = client.delete(
            f"/api/v1/reports/{report_id}",
            headers=get_auth_header(second_user),
        )

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert db_session.get(Report, report_id) is None
        # Points already earned stay in the ledger
        db_session.refresh(second_user)
        assert second_user.reputation_points == 5

    def test_reporter_cannot_withdraw_in_review(
        self,
        client: TestClient,
        db_session: Session,
        admin_user: User,
        second_user: User,
        report: Report,
    ):
        update_report_status(db_session, report.id, admin_user, "in_review")

        response = client.delete(
            f"/api/v1/reports/{report.id}",
            headers=get_auth_header(second_user),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_other_user_forbidden(self, client: TestClient, user: User, report: Report):
        response = client.delete(f"/api/v1/reports/{report.id}", headers=get_auth_header(user))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_deletes_closed_report(
        self,
        client: TestClient,
        db_session: Session,
        admin_user: User,
        report: Report,
    ):
        update_report_status(db_session, report.id, admin_user, "dismissed")

        response = client.delete(
            f"/api/v1/reports/{report.id}",
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_204_NO_CONTENT
