"""
Entité WellnessLog - Domain Layer
Check-in bien-être quotidien d'un athlète (sommeil, vitalité, douleur).
"""
from sqlmodel import SQLModel, Field, UniqueConstraint
from typing import Optional
from uuid import UUID, uuid4
from datetime import date as date_type, datetime

from app.core.clock import utc_now


class WellnessLog(SQLModel, table=True):
    """Check-in bien-être, une entrée par athlète par jour."""
    __table_args__ = (
        UniqueConstraint("email", "date", name="uq_wellness_log_email_date"),
    )

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(index=True, max_length=255)
    date: date_type = Field(index=True)

    # Métriques déclarées (None = non renseigné)
    sleep_hours: Optional[float] = None
    vitality_level: Optional[int] = None
    pain_level: Optional[int] = None
    pain_area: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class WellnessLogCreate(SQLModel):
    """Schéma pour enregistrer un check-in (date du jour si absente)."""
    date: Optional[date_type] = None
    sleep_hours: Optional[float] = Field(default=None, ge=0, le=24)
    vitality_level: Optional[int] = Field(default=None, ge=0, le=10)
    pain_level: Optional[int] = Field(default=None, ge=0, le=10)
    pain_area: Optional[str] = Field(default=None, max_length=255)


class WellnessLogRead(SQLModel):
    """Schéma pour lire un check-in (réponse API)."""
    id: UUID
    email: str
    date: date_type
    sleep_hours: Optional[float]
    vitality_level: Optional[int]
    pain_level: Optional[int]
    pain_area: Optional[str]
    created_at: datetime
    updated_at: datetime
