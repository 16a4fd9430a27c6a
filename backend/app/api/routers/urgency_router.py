"""
Routes du tableau d'urgence coach : liste triee des athletes et drapeaux d'un athlete.
Routes = validation + delegation au service. Pas de logique metier ici.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlmodel import Session

from app.core.database import engine, get_session
from app.core.settings import get_settings
from app.domain.entities.urgency import UrgencyBoard, UrgencyFilter, UrgencyFlag
from app.domain.entities.user import User
from app.domain.services.permissions import (
    AccessDecision,
    Permission,
    can_access_user,
    has_permission,
    is_assigned_trainee,
)
from app.domain.services.urgency_checker import (
    UrgencyChecker,
    UrgencyPermissionError,
    build_urgency_board,
)
from app.domain.services.urgency_repository import SqlUrgencyRepository
from app.api.routers._shared import get_current_user, limiter

logger = logging.getLogger(__name__)

router = APIRouter()


def get_urgency_checker() -> UrgencyChecker:
    """Construit le moteur d'urgence a partir de la configuration."""
    settings = get_settings()
    return UrgencyChecker(
        SqlUrgencyRepository(engine),
        fetch_timeout_s=settings.URGENCY_FETCH_TIMEOUT_S,
        window_days=settings.URGENCY_WINDOW_DAYS,
        recent_days=settings.URGENCY_RECENT_ACTIVITY_DAYS,
        max_concurrent_fetches=settings.URGENCY_MAX_CONCURRENT_FETCHES,
    )


# ============ TABLEAU COACH ============

@router.get("/coach/urgency", response_model=UrgencyBoard)
@limiter.limit("30/minute")
async def get_urgency_board(
    request: Request,
    response: Response,
    level: UrgencyFilter = Query(default=UrgencyFilter.ALL),
    current_user: User = Depends(get_current_user),
    checker: UrgencyChecker = Depends(get_urgency_checker),
):
    """Athletes du coach (ou tous pour un admin) tries par urgence."""
    if not has_permission(current_user.role, Permission.VIEW_URGENCY_BOARD):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Vous n'avez pas l'autorisation de consulter cette page",
        )
    try:
        athletes = await checker.get_athletes_by_urgency(current_user.email, current_user.role)
    except UrgencyPermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return build_urgency_board(athletes, level)


# ============ DRAPEAUX D'UN ATHLETE ============

@router.get("/athletes/{email}/flags", response_model=List[UrgencyFlag])
async def get_athlete_flags(
    email: str,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
    checker: UrgencyChecker = Depends(get_urgency_checker),
):
    """Drapeaux d'urgence d'un athlete (soi-meme, admin, ou coach affecte)."""
    decision = can_access_user(current_user.role, current_user.email, email)
    if decision == AccessDecision.CHECK_ASSIGNMENT:
        allowed = is_assigned_trainee(session, current_user.email, email)
    else:
        allowed = decision == AccessDecision.YES

    if not allowed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Acces refuse aux donnees de cet athlete",
        )

    return await checker.check_athlete_flags(email.lower())
