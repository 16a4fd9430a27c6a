"""
Routes check-in bien-etre (sommeil, vitalite, douleur) de l'utilisateur courant.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session

from app.core.database import get_session
from app.domain.entities.user import User
from app.domain.entities.wellness_log import WellnessLogCreate, WellnessLogRead
from app.domain.services.permissions import Permission, has_permission
from app.domain.services.wellness_service import list_recent_wellness, upsert_wellness_entry
from app.api.routers._shared import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


def _require(user: User, permission: Permission) -> None:
    if not has_permission(user.role, permission):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Action non autorisee pour ce role",
        )


@router.post("/wellness", response_model=WellnessLogRead)
async def submit_wellness(
    body: WellnessLogCreate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Enregistre (ou remplace) le check-in du jour."""
    _require(current_user, Permission.EDIT_OWN_WELLNESS)
    try:
        return upsert_wellness_entry(session, current_user.email, body)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Erreur check-in bien-etre: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erreur lors de l'enregistrement du check-in",
        )


@router.get("/wellness", response_model=List[WellnessLogRead])
async def get_wellness(
    days: int = Query(default=7, ge=1, le=90),
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Check-ins des derniers jours, du plus recent au plus ancien."""
    _require(current_user, Permission.VIEW_OWN_WELLNESS)
    return list_recent_wellness(session, current_user.email, days)
