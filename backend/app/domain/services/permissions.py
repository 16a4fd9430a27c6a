"""
Rôles et permissions.

Les permissions par rôle sont définies dans le code ; seule la relation
coach -> athlète nécessite une lecture en base (CoachTrainee).
"""
from enum import Enum
from typing import Dict, FrozenSet

from sqlmodel import Session, select

from app.domain.entities.user import AssignmentStatus, CoachTrainee, UserRole


class Permission(str, Enum):
    VIEW_OWN_WELLNESS = "view_own_wellness"
    EDIT_OWN_WELLNESS = "edit_own_wellness"
    VIEW_OTHERS_FLAGS = "view_others_flags"
    VIEW_URGENCY_BOARD = "view_urgency_board"


class AccessDecision(str, Enum):
    """Résultat de can_access_user"""
    YES = "yes"
    NO = "no"
    CHECK_ASSIGNMENT = "check_assignment"


_USER_PERMISSIONS = frozenset({
    Permission.VIEW_OWN_WELLNESS,
    Permission.EDIT_OWN_WELLNESS,
})

ROLE_PERMISSIONS: Dict[UserRole, FrozenSet[Permission]] = {
    UserRole.USER: _USER_PERMISSIONS,
    UserRole.COACH: _USER_PERMISSIONS | {
        Permission.VIEW_OTHERS_FLAGS,
        Permission.VIEW_URGENCY_BOARD,
    },
    UserRole.ADMIN: frozenset(Permission),
}


def has_permission(role: UserRole, permission: Permission) -> bool:
    """Vérifie qu'un rôle dispose d'une permission (admin : tout)."""
    if role == UserRole.ADMIN:
        return True
    return permission in ROLE_PERMISSIONS.get(role, frozenset())


def can_access_user(current_role: UserRole, current_email: str, target_email: str) -> AccessDecision:
    """
    Un utilisateur peut-il consulter les données d'un autre ?

    Soi-même et admin : oui. Rôle avec VIEW_OTHERS_FLAGS (coach) : dépend
    de l'affectation, à vérifier en base avec is_assigned_trainee. Sinon : non.
    """
    if current_email.lower() == target_email.lower():
        return AccessDecision.YES
    if current_role == UserRole.ADMIN:
        return AccessDecision.YES
    if has_permission(current_role, Permission.VIEW_OTHERS_FLAGS):
        return AccessDecision.CHECK_ASSIGNMENT
    return AccessDecision.NO


def is_assigned_trainee(session: Session, coach_email: str, trainee_email: str) -> bool:
    """True si l'athlète est affecté (actif) au coach."""
    assignment = session.exec(
        select(CoachTrainee)
        .where(CoachTrainee.coach_email == coach_email.lower())
        .where(CoachTrainee.trainee_email == trainee_email.lower())
        .where(CoachTrainee.active == True)  # noqa: E712
        .where(CoachTrainee.status == AssignmentStatus.ACTIVE)
    ).first()
    return assignment is not None
