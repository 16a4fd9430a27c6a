"""
Tests des routes API (tableau coach, drapeaux athlete, check-in bien-etre).
"""
from datetime import timedelta
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, select

from app.main import app
from app.auth.jwt import jwt_manager
from app.core.clock import utc_now, utc_today
from app.core.database import get_session
from app.api.routers.urgency_router import get_urgency_checker
from app.domain.entities.calendar_event import CalendarEvent
from app.domain.entities.user import CoachTrainee, User, UserRole
from app.domain.entities.wellness_log import WellnessLog
from app.domain.services.urgency_checker import UrgencyChecker
from app.domain.services.urgency_repository import SqlUrgencyRepository


@pytest.fixture
def users(session):
    admin = User(email="admin@example.com", full_name="Admin", role=UserRole.ADMIN)
    coach = User(email="coach@example.com", full_name="Coach", role=UserRole.COACH)
    alice = User(email="alice@example.com", full_name="Alice", role=UserRole.USER)
    bob = User(email="bob@example.com", full_name="Bob", role=UserRole.USER)
    session.add_all([admin, coach, alice, bob])
    session.add(CoachTrainee(coach_email=coach.email, trainee_email=alice.email))
    today = utc_today()
    session.add(WellnessLog(email=alice.email, date=today, sleep_hours=8, vitality_level=8, pain_level=6))
    session.add(CalendarEvent(
        email=alice.email, title="Bloc", start_time=utc_now() - timedelta(days=1), completed=True,
    ))
    session.commit()
    for user in (admin, coach, alice, bob):
        session.refresh(user)
    return {"admin": admin, "coach": coach, "alice": alice, "bob": bob}


@pytest.fixture
def client(engine):
    def _session_override():
        with Session(engine) as db_session:
            yield db_session

    app.dependency_overrides[get_session] = _session_override
    app.dependency_overrides[get_urgency_checker] = lambda: UrgencyChecker(SqlUrgencyRepository(engine))
    yield TestClient(app)
    app.dependency_overrides.clear()


def _auth(user):
    token = jwt_manager.create_user_token(str(user.id), user.email)
    return {"Authorization": f"Bearer {token}"}


class TestUrgencyBoard:

    def test_requires_token(self, client):
        response = client.get("/api/v1/coach/urgency")
        assert response.status_code == 401

    def test_invalid_token(self, client):
        response = client.get("/api/v1/coach/urgency", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_athlete_is_forbidden(self, client, users):
        response = client.get("/api/v1/coach/urgency", headers=_auth(users["alice"]))
        assert response.status_code == 403

    def test_coach_sees_assigned_athletes(self, client, users):
        response = client.get("/api/v1/coach/urgency", headers=_auth(users["coach"]))
        assert response.status_code == 200
        body = response.json()
        assert [a["email"] for a in body["athletes"]] == ["alice@example.com"]
        alice = body["athletes"][0]
        assert alice["urgency_level"] == "critical"
        assert body["summary"]["total"] == 1
        assert body["summary"]["critical"] == 1

    def test_admin_sees_everyone_sorted(self, client, users):
        response = client.get("/api/v1/coach/urgency", headers=_auth(users["admin"]))
        assert response.status_code == 200
        emails = [a["email"] for a in response.json()["athletes"]]
        # alice : douleur critique ; bob : rouge (aucune seance)
        assert emails == ["alice@example.com", "bob@example.com"]

    def test_level_filter(self, client, users):
        response = client.get(
            "/api/v1/coach/urgency", params={"level": "critical"}, headers=_auth(users["admin"]),
        )
        body = response.json()
        assert [a["email"] for a in body["athletes"]] == ["alice@example.com"]
        assert body["summary"]["total"] == 2
        assert body["summary"]["high"] == 1

    def test_cookie_token_is_accepted(self, client, users):
        token = jwt_manager.create_user_token(str(users["coach"].id), users["coach"].email)
        client.cookies.set("access_token", token)
        response = client.get("/api/v1/coach/urgency")
        assert response.status_code == 200


class TestAthleteFlags:

    def test_self(self, client, users):
        response = client.get("/api/v1/athletes/alice@example.com/flags", headers=_auth(users["alice"]))
        assert response.status_code == 200
        categories = [f["category"] for f in response.json()]
        assert categories == ["sleep", "vitality", "pain"]

    def test_assigned_coach(self, client, users):
        response = client.get("/api/v1/athletes/alice@example.com/flags", headers=_auth(users["coach"]))
        assert response.status_code == 200

    def test_unassigned_coach_is_forbidden(self, client, users):
        response = client.get("/api/v1/athletes/bob@example.com/flags", headers=_auth(users["coach"]))
        assert response.status_code == 403

    def test_other_athlete_is_forbidden(self, client, users):
        response = client.get("/api/v1/athletes/alice@example.com/flags", headers=_auth(users["bob"]))
        assert response.status_code == 403

    def test_admin(self, client, users):
        response = client.get("/api/v1/athletes/bob@example.com/flags", headers=_auth(users["admin"]))
        assert response.status_code == 200
        flags = response.json()
        assert len(flags) == 1
        assert flags[0]["category"] == "activity"
        assert flags[0]["type"] == "red"


class TestWellness:

    def test_upsert_same_day_replaces_values(self, client, users, engine):
        headers = _auth(users["bob"])
        first = client.post("/api/v1/wellness", json={"sleep_hours": 6, "vitality_level": 5, "pain_level": 0},
                            headers=headers)
        assert first.status_code == 200
        second = client.post("/api/v1/wellness", json={"sleep_hours": 7.5, "pain_level": 2}, headers=headers)
        assert second.status_code == 200
        assert second.json()["id"] == first.json()["id"]
        assert second.json()["sleep_hours"] == 7.5
        assert second.json()["vitality_level"] is None

        with Session(engine) as db_session:
            rows = db_session.exec(select(WellnessLog).where(WellnessLog.email == "bob@example.com")).all()
        assert len(rows) == 1

    def test_future_date_is_rejected(self, client, users):
        tomorrow = (utc_today() + timedelta(days=1)).isoformat()
        response = client.post("/api/v1/wellness", json={"date": tomorrow, "sleep_hours": 8},
                               headers=_auth(users["bob"]))
        assert response.status_code == 400

    def test_out_of_range_values_are_rejected(self, client, users):
        response = client.post("/api/v1/wellness", json={"pain_level": 11}, headers=_auth(users["bob"]))
        assert response.status_code == 422

    def test_list_recent(self, client, users):
        headers = _auth(users["bob"])
        past = (utc_today() - timedelta(days=3)).isoformat()
        client.post("/api/v1/wellness", json={"date": past, "sleep_hours": 6}, headers=headers)
        client.post("/api/v1/wellness", json={"sleep_hours": 8}, headers=headers)

        response = client.get("/api/v1/wellness", params={"days": 7}, headers=headers)
        assert response.status_code == 200
        dates = [row["date"] for row in response.json()]
        assert dates == [utc_today().isoformat(), past]


class TestHealth:

    def test_degraded_when_database_is_down(self, client):
        with patch("app.main.check_database_health", return_value=False):
            response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["services"]["database"] == "disconnected"


class TestWellnessPermissions:

    def test_role_without_wellness_permission_is_forbidden(self, client, users):
        with patch("app.api.routers.wellness_router.has_permission", return_value=False):
            post = client.post("/api/v1/wellness", json={"sleep_hours": 8}, headers=_auth(users["bob"]))
            listing = client.get("/api/v1/wellness", headers=_auth(users["bob"]))
        assert post.status_code == 403
        assert listing.status_code == 403
