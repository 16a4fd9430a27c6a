"""
Modèles du moteur d'urgence - Domain Layer
Enregistrements typés lus depuis la base et résultats transitoires
(drapeaux, urgence par athlète). Rien ici n'est persisté.
"""
from sqlmodel import SQLModel, Field
from pydantic import field_validator
from typing import Optional, List, Dict, Any
from datetime import date as date_type, datetime
from enum import Enum

from app.core.clock import ensure_utc


class FlagSeverity(str, Enum):
    """Gravité d'un drapeau (green < yellow < red < critical)"""
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CRITICAL = "critical"


class FlagCategory(str, Enum):
    """Signal à l'origine du drapeau"""
    SLEEP = "sleep"
    VITALITY = "vitality"
    PAIN = "pain"
    ACTIVITY = "activity"


class UrgencyLevel(str, Enum):
    """Niveau d'urgence global d'un athlète"""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class UrgencyFilter(str, Enum):
    """Filtres du tableau coach"""
    ALL = "all"
    CRITICAL = "critical"
    HIGH = "high"


# ============ ENREGISTREMENTS LUS ============

class WellnessRecord(SQLModel):
    """Check-in bien-être validé à la frontière du repository."""
    date: date_type
    sleep_hours: Optional[float] = None
    vitality_level: Optional[int] = None
    pain_level: Optional[int] = None

    @field_validator('sleep_hours', 'vitality_level', 'pain_level')
    @classmethod
    def reject_negative(cls, v):
        if v is not None and v < 0:
            raise ValueError('Wellness metrics cannot be negative')
        return v


class ActivityRecord(SQLModel):
    """Séance lue depuis le calendrier (start_time toujours en UTC aware)."""
    email: str
    completed: bool
    start_time: datetime

    @field_validator('start_time')
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)



class AthleteIdentity(SQLModel):
    """Athlète visible par le demandeur."""
    email: str
    name: str


# ============ RESULTATS ============

class UrgencyFlag(SQLModel):
    """Un signal classifié (gravité + catégorie + message)."""
    type: FlagSeverity
    category: FlagCategory
    message: str
    average: Optional[float] = None
    days_reported: Optional[int] = None
    data: Optional[Dict[str, Any]] = None


class AthleteUrgency(SQLModel):
    """Urgence calculée pour un athlète."""
    email: str
    name: str
    flags: List[UrgencyFlag] = Field(default_factory=list)
    urgency_score: int = 0
    urgency_level: UrgencyLevel = UrgencyLevel.LOW
    last_workout: Optional[datetime] = None


class UrgencySummary(SQLModel):
    """Compteurs par niveau pour l'en-tête du tableau coach."""
    total: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0


class UrgencyBoard(SQLModel):
    """Réponse du tableau coach : athlètes triés + compteurs."""
    athletes: List[AthleteUrgency] = Field(default_factory=list)
    summary: UrgencySummary = Field(default_factory=UrgencySummary)
