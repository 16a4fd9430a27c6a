"""
Entité User - Domain Layer
Représente un utilisateur de ClimbIQ (athlète, coach ou admin)
et les affectations coach -> athlète.
"""
from sqlmodel import SQLModel, Field, UniqueConstraint
from pydantic import field_validator
from typing import Optional
from datetime import datetime

from app.core.clock import utc_now
from uuid import UUID, uuid4
from enum import Enum
import re

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


class UserRole(str, Enum):
    """Rôles applicatifs"""
    ADMIN = "admin"
    COACH = "coach"
    USER = "user"


class AssignmentStatus(str, Enum):
    """Statut d'une affectation coach -> athlète"""
    ACTIVE = "active"
    PENDING = "pending"
    ENDED = "ended"


class UserBase(SQLModel):
    """Modèle de base pour User"""
    email: str = Field(unique=True, index=True, max_length=255)
    full_name: str
    role: UserRole = Field(default=UserRole.USER)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v: str) -> str:
        if not re.match(EMAIL_PATTERN, v):
            raise ValueError('Invalid email format')
        return v.lower()


class User(UserBase, table=True):
    """Entité User complète pour la base de données"""
    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)


class CoachTrainee(SQLModel, table=True):
    """Affectation d'un athlète à un coach"""
    __table_args__ = (
        UniqueConstraint("coach_email", "trainee_email", name="uq_coach_trainee"),
    )

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    coach_email: str = Field(index=True, max_length=255)
    trainee_email: str = Field(index=True, max_length=255)
    active: bool = Field(default=True)
    status: AssignmentStatus = Field(default=AssignmentStatus.ACTIVE)
    created_at: datetime = Field(default_factory=utc_now)
