"""
Configuration centralisée pour l'application ClimbIQ
Utilise pydantic-settings pour la gestion des variables d'environnement
"""
from pydantic_settings import BaseSettings
from pydantic import Field, model_validator
from typing import List


class Settings(BaseSettings):
    """Configuration de l'application"""

    # Database
    DATABASE_URL: str = Field(
        description="URL de la base de données (PostgreSQL en production, SQLite en local)"
    )

    # JWT Configuration
    JWT_SECRET_KEY: str = Field(
        description="Clé secrète pour vérifier les JWT (obligatoire, pas de valeur par défaut)"
    )
    JWT_ALGORITHM: str = Field(default="HS256")
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=30)

    # URLs de l'application
    FRONTEND_URL: str = Field(
        default="http://localhost:3000",
        description="URL du frontend (utilisée pour CORS)"
    )

    # CORS
    ALLOWED_ORIGINS: List[str] = Field(
        default=[],
        description="Origines autorisées pour CORS (configuré automatiquement selon ENVIRONMENT si vide)"
    )

    # Monitoring (Sentry)
    SENTRY_DSN: str = Field(
        default="",
        description="DSN Sentry pour le error tracking (vide = Sentry desactive)"
    )

    # Moteur d'urgence (tableau coach)
    URGENCY_FETCH_TIMEOUT_S: float = Field(
        default=5.0,
        gt=0,
        description="Timeout par lecture (bien-etre, activites, liste des athletes) en secondes"
    )
    URGENCY_WINDOW_DAYS: int = Field(
        default=7,
        ge=1,
        description="Fenetre glissante (jours) pour les moyennes de bien-etre et l'inactivite longue"
    )
    URGENCY_RECENT_ACTIVITY_DAYS: int = Field(
        default=4,
        ge=1,
        description="Fenetre courte (jours) pour l'alerte d'inactivite recente"
    )
    URGENCY_MAX_CONCURRENT_FETCHES: int = Field(
        default=4,
        ge=1,
        description="Lectures simultanees maximum lors du calcul du tableau (le timeout ne court qu'une fois la lecture lancee)"
    )

    # Application
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="development")
    LOG_LEVEL: str = Field(
        default="",
        description="Niveau de logging (auto-configuré selon ENVIRONMENT si vide)"
    )

    @model_validator(mode="after")
    def _configure_environment(self) -> "Settings":
        """Configure DEBUG et LOG_LEVEL selon ENVIRONMENT."""
        is_prod = self.ENVIRONMENT == "production"
        # En production, forcer DEBUG=False
        if is_prod:
            self.DEBUG = False
        # LOG_LEVEL par défaut selon ENVIRONMENT
        if not self.LOG_LEVEL:
            self.LOG_LEVEL = "WARNING" if is_prod else "INFO"
        return self

    @model_validator(mode="after")
    def _check_windows(self) -> "Settings":
        """La fenetre courte doit etre incluse dans la fenetre longue."""
        if self.URGENCY_RECENT_ACTIVITY_DAYS > self.URGENCY_WINDOW_DAYS:
            raise ValueError(
                "URGENCY_RECENT_ACTIVITY_DAYS doit etre <= URGENCY_WINDOW_DAYS"
            )
        return self

    @model_validator(mode="after")
    def _set_default_origins(self) -> "Settings":
        """Définit les origines CORS par défaut selon ENVIRONMENT si non configurées."""
        if not self.ALLOWED_ORIGINS:
            if self.ENVIRONMENT == "production":
                self.ALLOWED_ORIGINS = [
                    "https://climbiq.vercel.app",
                ]
            else:
                self.ALLOWED_ORIGINS = [
                    "http://localhost:3000",
                    "http://127.0.0.1:3000",
                ]
        # Toujours inclure FRONTEND_URL dans les origines autorisees
        frontend = self.FRONTEND_URL.rstrip("/")
        if frontend and frontend not in self.ALLOWED_ORIGINS:
            self.ALLOWED_ORIGINS.append(frontend)
        return self

    class Config:
        env_file = ".env"  # Utiliser le fichier .env principal
        case_sensitive = True


def get_settings() -> Settings:
    """Récupère la configuration"""
    return Settings()
