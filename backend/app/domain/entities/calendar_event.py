"""
Entité CalendarEvent - Domain Layer
Séance d'entraînement planifiée dans le calendrier d'un athlète.
Seules les séances marquées complétées comptent pour l'activité récente.
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from uuid import UUID, uuid4
from datetime import datetime

from app.core.clock import utc_now


class CalendarEvent(SQLModel, table=True):
    """Séance du calendrier"""
    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(index=True, max_length=255)
    title: str = Field(default="")
    start_time: datetime = Field(index=True)
    completed: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utc_now)
