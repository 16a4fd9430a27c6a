"""
Accès aux données du moteur d'urgence.

Lectures seules : check-ins bien-être, séances complétées et liste des
athlètes visibles par un coach/admin. Chaque lecture ouvre sa propre
Session dans un thread (asyncio.to_thread) pour que les lectures
concurrentes ne partagent jamais une session. Les lignes sont converties
en enregistrements typés dès la sortie de la base.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import List

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from app.domain.entities.calendar_event import CalendarEvent
from app.domain.entities.urgency import ActivityRecord, AthleteIdentity, WellnessRecord
from app.domain.entities.user import AssignmentStatus, CoachTrainee, User, UserRole
from app.domain.entities.wellness_log import WellnessLog

logger = logging.getLogger(__name__)


class UrgencyRepository(ABC):
    """Lectures consommées par UrgencyChecker."""

    @abstractmethod
    async def list_authorized_athletes(
        self, requester_email: str, requester_role: UserRole
    ) -> List[AthleteIdentity]:
        """Athlètes visibles par le demandeur, triés par nom."""

    @abstractmethod
    async def fetch_wellness(self, email: str, since: date) -> List[WellnessRecord]:
        """Check-ins de l'athlète depuis `since` (inclus), du plus ancien au plus récent."""

    @abstractmethod
    async def fetch_completed_activities(self, email: str, since: datetime) -> List[ActivityRecord]:
        """Séances complétées de l'athlète depuis `since` (inclus), les plus récentes d'abord."""


class SqlUrgencyRepository(UrgencyRepository):
    """Implémentation SQLModel."""

    def __init__(self, engine: Engine):
        self.engine = engine

    async def list_authorized_athletes(
        self, requester_email: str, requester_role: UserRole
    ) -> List[AthleteIdentity]:
        return await asyncio.to_thread(self._list_authorized_athletes, requester_email, requester_role)

    async def fetch_wellness(self, email: str, since: date) -> List[WellnessRecord]:
        return await asyncio.to_thread(self._fetch_wellness, email, since)

    async def fetch_completed_activities(self, email: str, since: datetime) -> List[ActivityRecord]:
        return await asyncio.to_thread(self._fetch_completed_activities, email, since)

    def _list_authorized_athletes(
        self, requester_email: str, requester_role: UserRole
    ) -> List[AthleteIdentity]:
        with Session(self.engine) as session:
            if requester_role == UserRole.ADMIN:
                query = (
                    select(User)
                    .where(User.role == UserRole.USER)
                    .order_by(User.full_name)
                )
            elif requester_role == UserRole.COACH:
                trainee_emails = session.exec(
                    select(CoachTrainee.trainee_email)
                    .where(CoachTrainee.coach_email == requester_email.lower())
                    .where(CoachTrainee.active == True)  # noqa: E712
                    .where(CoachTrainee.status == AssignmentStatus.ACTIVE)
                ).all()
                if not trainee_emails:
                    return []
                query = (
                    select(User)
                    .where(User.email.in_([e.lower() for e in trainee_emails]))
                    .order_by(User.full_name)
                )
            else:
                return []

            users = session.exec(query).all()
            logger.debug(f"{len(users)} athlètes visibles pour {requester_email} ({requester_role.value})")
            return [AthleteIdentity(email=u.email, name=u.full_name) for u in users]

    def _fetch_wellness(self, email: str, since: date) -> List[WellnessRecord]:
        with Session(self.engine) as session:
            rows = session.exec(
                select(WellnessLog)
                .where(WellnessLog.email == email.lower())
                .where(WellnessLog.date >= since)
                .order_by(WellnessLog.date)
            ).all()
            return [WellnessRecord.model_validate(row) for row in rows]

    def _fetch_completed_activities(self, email: str, since: datetime) -> List[ActivityRecord]:
        with Session(self.engine) as session:
            rows = session.exec(
                select(CalendarEvent)
                .where(CalendarEvent.email == email.lower())
                .where(CalendarEvent.completed == True)  # noqa: E712
                .where(CalendarEvent.start_time >= since)
                .order_by(CalendarEvent.start_time.desc())
            ).all()
            return [ActivityRecord.model_validate(row) for row in rows]
