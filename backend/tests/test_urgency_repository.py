"""
Tests du repository SQLModel du moteur d'urgence (SQLite temporaire).
"""
import asyncio
from datetime import date, datetime, timedelta, timezone

import pytest

from app.domain.entities.calendar_event import CalendarEvent
from app.domain.entities.user import AssignmentStatus, CoachTrainee, User, UserRole
from app.domain.entities.wellness_log import WellnessLog
from app.domain.services.urgency_checker import UrgencyChecker
from app.domain.services.urgency_repository import SqlUrgencyRepository
from app.domain.entities.urgency import FlagCategory, FlagSeverity, UrgencyLevel

NOW = datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc)
COACH = "coach@example.com"


@pytest.fixture
def seeded(session):
    session.add_all([
        User(email="admin@example.com", full_name="Admin", role=UserRole.ADMIN),
        User(email=COACH, full_name="Coach", role=UserRole.COACH),
        User(email="alice@example.com", full_name="Alice", role=UserRole.USER),
        User(email="bob@example.com", full_name="Bob", role=UserRole.USER),
        User(email="carol@example.com", full_name="Carol", role=UserRole.USER),
        CoachTrainee(coach_email=COACH, trainee_email="alice@example.com"),
        CoachTrainee(coach_email=COACH, trainee_email="bob@example.com", active=False),
        CoachTrainee(coach_email=COACH, trainee_email="carol@example.com", status=AssignmentStatus.PENDING),
        WellnessLog(email="alice@example.com", date=date(2026, 3, 9), sleep_hours=5, vitality_level=8, pain_level=1),
        WellnessLog(email="alice@example.com", date=date(2026, 3, 10), sleep_hours=None, vitality_level=8, pain_level=0),
        WellnessLog(email="alice@example.com", date=date(2026, 2, 1), sleep_hours=2, vitality_level=1, pain_level=9),
        CalendarEvent(email="alice@example.com", title="Bloc", start_time=NOW - timedelta(days=1), completed=True),
        CalendarEvent(email="alice@example.com", title="Voie", start_time=NOW - timedelta(days=2), completed=False),
        CalendarEvent(email="alice@example.com", title="Force", start_time=NOW - timedelta(days=20), completed=True),
    ])
    session.commit()
    return session


class TestListAuthorizedAthletes:

    def test_admin_sees_all_athletes(self, engine, seeded):
        repo = SqlUrgencyRepository(engine)
        athletes = asyncio.run(repo.list_authorized_athletes("admin@example.com", UserRole.ADMIN))
        assert [a.name for a in athletes] == ["Alice", "Bob", "Carol"]

    def test_coach_sees_only_active_assignments(self, engine, seeded):
        repo = SqlUrgencyRepository(engine)
        athletes = asyncio.run(repo.list_authorized_athletes(COACH, UserRole.COACH))
        assert [a.email for a in athletes] == ["alice@example.com"]

    def test_coach_without_trainees(self, engine, seeded):
        repo = SqlUrgencyRepository(engine)
        assert asyncio.run(repo.list_authorized_athletes("nobody@example.com", UserRole.COACH)) == []

    def test_user_role_sees_nobody(self, engine, seeded):
        repo = SqlUrgencyRepository(engine)
        assert asyncio.run(repo.list_authorized_athletes("alice@example.com", UserRole.USER)) == []


class TestFetches:

    def test_wellness_since_is_inclusive_and_ordered(self, engine, seeded):
        repo = SqlUrgencyRepository(engine)
        records = asyncio.run(repo.fetch_wellness("alice@example.com", date(2026, 3, 9)))
        assert [r.date for r in records] == [date(2026, 3, 9), date(2026, 3, 10)]
        assert records[1].sleep_hours is None
        assert records[1].pain_level == 0

    def test_only_completed_activities_in_window(self, engine, seeded):
        repo = SqlUrgencyRepository(engine)
        records = asyncio.run(repo.fetch_completed_activities("alice@example.com", NOW - timedelta(days=7)))
        assert len(records) == 1
        assert records[0].completed is True
        assert records[0].start_time == NOW - timedelta(days=1)


class TestEndToEnd:

    def test_coach_board_from_database(self, engine, seeded):
        checker = UrgencyChecker(SqlUrgencyRepository(engine))
        result = asyncio.run(checker.get_athletes_by_urgency(COACH, UserRole.COACH, now=NOW))

        assert len(result) == 1
        alice = result[0]
        assert alice.urgency_level == UrgencyLevel.HIGH
        assert [(f.category, f.type) for f in alice.flags] == [
            (FlagCategory.SLEEP, FlagSeverity.RED),
            (FlagCategory.VITALITY, FlagSeverity.GREEN),
            (FlagCategory.PAIN, FlagSeverity.GREEN),
        ]
        assert alice.last_workout == NOW - timedelta(days=1)

    def test_athlete_without_sessions_gets_red_activity_flag(self, engine, seeded):
        """Fenetre en UTC aware : la lecture des seances ne doit pas echouer."""
        checker = UrgencyChecker(SqlUrgencyRepository(engine))
        flags = asyncio.run(checker.check_athlete_flags("bob@example.com", now=NOW))

        assert [(f.category, f.type) for f in flags] == [(FlagCategory.ACTIVITY, FlagSeverity.RED)]
        assert flags[0].data == {"days_without_workout": 7}


class TestTimestamps:

    def test_start_time_comes_back_as_utc(self, engine, seeded):
        repo = SqlUrgencyRepository(engine)
        records = asyncio.run(repo.fetch_completed_activities("alice@example.com", NOW - timedelta(days=30)))

        assert [r.start_time for r in records] == [NOW - timedelta(days=1), NOW - timedelta(days=20)]
        assert all(r.start_time.tzinfo is not None for r in records)

    def test_default_timestamps_are_aware(self):
        log = WellnessLog(email="dan@example.com", date=date(2026, 3, 10), sleep_hours=7)
        event = CalendarEvent(email="dan@example.com", start_time=NOW, completed=True)

        assert log.created_at.tzinfo is not None
        assert event.created_at.tzinfo is not None
