"""
Application FastAPI principale pour ClimbIQ
Point d'entrée de l'API backend (tableau d'urgence coach, check-ins bien-être)
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from app.api.routers import router, limiter
from app.core.database import check_database_health, create_db_and_tables
from app.core.observability import configure_logging, init_sentry
from app.core.settings import get_settings

settings = get_settings()

APP_VERSION = "1.0.0"

init_sentry(settings)
configure_logging(settings)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Création des tables au démarrage ; l'API démarre même sans base."""
    logger.info(f"🚀 Démarrage de ClimbIQ API v{APP_VERSION} ({settings.ENVIRONMENT}, debug={settings.DEBUG})")

    create_db_and_tables()
    if check_database_health():
        logger.info("✅ Base de données initialisée")
    else:
        logger.warning("⚠️  Base de données non disponible : le tableau d'urgence sera vide")

    yield

    logger.info("🛑 Arrêt de ClimbIQ API")


app = FastAPI(
    title="ClimbIQ API",
    description="API de suivi des grimpeurs : check-ins bien-être et tableau d'urgence coach",
    version=APP_VERSION,
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
    lifespan=lifespan,
)

app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 avec Retry-After et X-RateLimit-*."""
    response = JSONResponse(
        status_code=429,
        content={"detail": "Trop de requetes", "message": f"Rate limit exceeded: {exc.detail}"},
    )
    return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api/v1")


@app.get("/health")
@limiter.exempt
async def health_check():
    """État de l'API et de la base."""
    db_ok = check_database_health()
    return {
        "status": "healthy" if db_ok else "degraded",
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "services": {"database": "connected" if db_ok else "disconnected"},
    }


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Erreur non gérée : 500 générique, détail seulement en DEBUG."""
    logger.error(f"Erreur non gérée: {type(exc).__name__}: {exc}", exc_info=True)
    content = {"detail": "Erreur interne du serveur"}
    if settings.DEBUG:
        content.update({"type": type(exc).__name__, "message": str(exc)})
    return JSONResponse(status_code=500, content=content)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
