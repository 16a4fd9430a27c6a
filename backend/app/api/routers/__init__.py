"""
Routers API pour ClimbIQ.

Ce module regroupe tous les sous-routers et expose un router principal
a inclure dans l'application FastAPI.
"""
from fastapi import APIRouter

from app.api.routers.urgency_router import router as urgency_router
from app.api.routers.wellness_router import router as wellness_router
from app.api.routers._shared import limiter

router = APIRouter()

router.include_router(urgency_router)
router.include_router(wellness_router)

__all__ = ["router", "limiter"]
