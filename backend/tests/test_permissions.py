"""
Tests des roles et permissions.
"""
from app.domain.entities.user import AssignmentStatus, CoachTrainee, UserRole
from app.domain.services.permissions import (
    AccessDecision,
    Permission,
    can_access_user,
    has_permission,
    is_assigned_trainee,
)


class TestHasPermission:

    def test_only_staff_sees_urgency_board(self):
        assert has_permission(UserRole.ADMIN, Permission.VIEW_URGENCY_BOARD)
        assert has_permission(UserRole.COACH, Permission.VIEW_URGENCY_BOARD)
        assert not has_permission(UserRole.USER, Permission.VIEW_URGENCY_BOARD)

    def test_everyone_edits_own_wellness(self):
        for role in UserRole:
            assert has_permission(role, Permission.EDIT_OWN_WELLNESS)

    def test_athletes_cannot_view_others(self):
        assert not has_permission(UserRole.USER, Permission.VIEW_OTHERS_FLAGS)
        assert has_permission(UserRole.COACH, Permission.VIEW_OTHERS_FLAGS)

    def test_unknown_role_has_nothing(self):
        assert not has_permission("guest", Permission.VIEW_OWN_WELLNESS)


class TestCanAccessUser:

    def test_self_is_case_insensitive(self):
        assert can_access_user(UserRole.USER, "Alice@Example.com", "alice@example.com") == AccessDecision.YES

    def test_roles(self):
        assert can_access_user(UserRole.ADMIN, "a@x.com", "b@x.com") == AccessDecision.YES
        assert can_access_user(UserRole.COACH, "a@x.com", "b@x.com") == AccessDecision.CHECK_ASSIGNMENT
        assert can_access_user(UserRole.USER, "a@x.com", "b@x.com") == AccessDecision.NO


class TestIsAssignedTrainee:

    def test_only_active_assignments_count(self, session):
        session.add_all([
            CoachTrainee(coach_email="coach@x.com", trainee_email="alice@x.com"),
            CoachTrainee(coach_email="coach@x.com", trainee_email="bob@x.com", status=AssignmentStatus.ENDED),
            CoachTrainee(coach_email="coach@x.com", trainee_email="carol@x.com", active=False),
        ])
        session.commit()

        assert is_assigned_trainee(session, "Coach@x.com", "alice@x.com") is True
        assert is_assigned_trainee(session, "coach@x.com", "bob@x.com") is False
        assert is_assigned_trainee(session, "coach@x.com", "carol@x.com") is False
        assert is_assigned_trainee(session, "other@x.com", "alice@x.com") is False
