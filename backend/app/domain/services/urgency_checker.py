"""
Moteur d'urgence - orchestration.

Pour un athlète : lit séances et check-ins en parallèle, calcule les
drapeaux (activité, sommeil, vitalité, douleur), le score et le niveau.
Pour un coach/admin : évalue tous ses athlètes en parallèle puis les trie
par priorité.

Une lecture en échec (erreur ou timeout) n'invalide que sa catégorie :
l'erreur est loggée et l'athlète reste dans la liste avec les drapeaux
qui ont pu être calculés.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, List, Optional, TypeVar, Union

from app.core.clock import ensure_utc, utc_now
from app.domain.entities.urgency import (
    AthleteIdentity,
    AthleteUrgency,
    UrgencyBoard,
    UrgencyFilter,
    UrgencyFlag,
    UrgencyLevel,
    UrgencySummary,
)
from app.domain.entities.user import UserRole
from app.domain.services.urgency_algorithms import (
    DEFAULT_RECENT_DAYS,
    DEFAULT_WINDOW_DAYS,
    URGENCY_LEVEL_RANK,
    build_wellness_flags,
    classify_activity,
    compute_urgency_score,
    count_severe_flags,
    count_yellow_flags,
    determine_urgency_level,
    latest_completed,
)
from app.domain.services.urgency_repository import UrgencyRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_FETCH_TIMEOUT_S = 5.0
# Inférieur au nombre minimal de workers de l'executor par défaut (min(32, cpu + 4))
DEFAULT_MAX_CONCURRENT_FETCHES = 4
ALLOWED_ROLES = (UserRole.ADMIN, UserRole.COACH)


class UrgencyPermissionError(PermissionError):
    """Le rôle du demandeur ne permet pas de consulter le tableau d'urgence."""


def _coerce_role(role: Union[UserRole, str]) -> Optional[UserRole]:
    try:
        return UserRole(role)
    except ValueError:
        return None


def sort_athletes_by_urgency(athletes: List[AthleteUrgency]) -> List[AthleteUrgency]:
    """
    Tri par priorité :
        1. plus de drapeaux critiques/rouges d'abord
        2. puis plus de drapeaux jaunes
        3. puis niveau (critical < high < medium < low)
        4. puis nom et email, pour un ordre total et déterministe
    """
    return sorted(
        athletes,
        key=lambda a: (
            -count_severe_flags(a.flags),
            -count_yellow_flags(a.flags),
            URGENCY_LEVEL_RANK[a.urgency_level],
            a.name.lower(),
            a.email,
        ),
    )


def filter_athletes_by_level(
    athletes: List[AthleteUrgency],
    level_filter: Union[UrgencyFilter, str] = UrgencyFilter.ALL,
) -> List[AthleteUrgency]:
    """Filtre du tableau : all | critical (critique seul) | high (critique ou high)."""
    level_filter = UrgencyFilter(level_filter)
    if level_filter == UrgencyFilter.CRITICAL:
        return [a for a in athletes if a.urgency_level == UrgencyLevel.CRITICAL]
    if level_filter == UrgencyFilter.HIGH:
        return [a for a in athletes if a.urgency_level in (UrgencyLevel.CRITICAL, UrgencyLevel.HIGH)]
    return list(athletes)


def build_urgency_board(
    athletes: List[AthleteUrgency],
    level_filter: Union[UrgencyFilter, str] = UrgencyFilter.ALL,
) -> UrgencyBoard:
    """Compteurs calculés sur tous les athlètes, liste filtrée selon level_filter."""
    summary = UrgencySummary(total=len(athletes))
    for athlete in athletes:
        field = athlete.urgency_level.value
        setattr(summary, field, getattr(summary, field) + 1)
    return UrgencyBoard(
        athletes=filter_athletes_by_level(athletes, level_filter),
        summary=summary,
    )


class UrgencyChecker:
    """
    Calcule les drapeaux d'urgence à partir d'un UrgencyRepository.

    Les lectures passent par un sémaphore (max_concurrent_fetches) : le
    timeout d'une lecture ne démarre qu'une fois sa place obtenue, le temps
    passé en file d'attente ne compte pas.
    """

    def __init__(
        self,
        repository: UrgencyRepository,
        fetch_timeout_s: float = DEFAULT_FETCH_TIMEOUT_S,
        window_days: int = DEFAULT_WINDOW_DAYS,
        recent_days: int = DEFAULT_RECENT_DAYS,
        max_concurrent_fetches: int = DEFAULT_MAX_CONCURRENT_FETCHES,
    ):
        self.repository = repository
        self.fetch_timeout_s = fetch_timeout_s
        self.window_days = window_days
        self.recent_days = recent_days
        self.max_concurrent_fetches = max_concurrent_fetches

    def _new_fetch_slots(self) -> asyncio.Semaphore:
        return asyncio.Semaphore(self.max_concurrent_fetches)

    async def _guarded(
        self,
        fetch: Callable[[], Awaitable[T]],
        slots: asyncio.Semaphore,
        email: str,
        category: str,
    ) -> Optional[T]:
        """Lance une lecture avec timeout ; None (et un warning) en cas d'échec."""
        async with slots:
            try:
                return await asyncio.wait_for(fetch(), timeout=self.fetch_timeout_s)
            except asyncio.TimeoutError:
                logger.warning(f"Timeout lecture {category} pour {email} ({self.fetch_timeout_s}s)")
            except Exception as e:
                logger.warning(f"Erreur lecture {category} pour {email}: {e}")
        return None

    async def evaluate_athlete(
        self,
        athlete: AthleteIdentity,
        now: Optional[datetime] = None,
        slots: Optional[asyncio.Semaphore] = None,
    ) -> AthleteUrgency:
        """Drapeaux, score, niveau et dernière séance d'un athlète."""
        now = ensure_utc(now) if now else utc_now()
        if slots is None:
            slots = self._new_fetch_slots()
        window_start = now - timedelta(days=self.window_days)

        activities, wellness = await asyncio.gather(
            self._guarded(
                lambda: self.repository.fetch_completed_activities(athlete.email, window_start),
                slots, athlete.email, "activity",
            ),
            self._guarded(
                lambda: self.repository.fetch_wellness(athlete.email, window_start.date()),
                slots, athlete.email, "wellness",
            ),
        )

        flags: List[UrgencyFlag] = []
        last_workout = None

        if activities is not None:
            activity_flag = classify_activity(
                activities, now,
                window_days=self.window_days,
                recent_days=self.recent_days,
            )
            if activity_flag is not None:
                flags.append(activity_flag)
            last_workout = latest_completed(activities)

        if wellness:
            flags.extend(build_wellness_flags(wellness))

        return AthleteUrgency(
            email=athlete.email,
            name=athlete.name,
            flags=flags,
            urgency_score=compute_urgency_score(flags),
            urgency_level=determine_urgency_level(flags),
            last_workout=last_workout,
        )

    async def check_athlete_flags(self, email: str, now: Optional[datetime] = None) -> List[UrgencyFlag]:
        """Liste ordonnée des drapeaux d'un athlète (éventuellement vide, jamais d'exception de lecture)."""
        result = await self.evaluate_athlete(AthleteIdentity(email=email, name=email), now)
        return result.flags

    async def get_athletes_by_urgency(
        self,
        requester_email: str,
        requester_role: Union[UserRole, str],
        now: Optional[datetime] = None,
    ) -> List[AthleteUrgency]:
        """
        Athlètes visibles par le demandeur, triés par urgence.

        Raises:
            UrgencyPermissionError: rôle autre que admin/coach (avant toute lecture)

        Returns:
            liste triée ; [] si la liste des athlètes ne peut pas être résolue
        """
        role = _coerce_role(requester_role)
        if role not in ALLOWED_ROLES:
            raise UrgencyPermissionError("Vous n'avez pas l'autorisation de consulter cette page")

        now = ensure_utc(now) if now else utc_now()

        try:
            athletes = await asyncio.wait_for(
                self.repository.list_authorized_athletes(requester_email, role),
                timeout=self.fetch_timeout_s,
            )
        except Exception as e:
            logger.error(f"❌ Impossible de résoudre les athlètes de {requester_email}: {e!r}")
            return []

        if not athletes:
            return []

        slots = self._new_fetch_slots()

        results = await asyncio.gather(
            *(self.evaluate_athlete(athlete, now, slots) for athlete in athletes),
            return_exceptions=True,
        )

        evaluated: List[AthleteUrgency] = []
        for athlete, result in zip(athletes, results):
            if isinstance(result, BaseException):
                logger.warning(f"Erreur évaluation urgence {athlete.email}: {result}")
                result = AthleteUrgency(email=athlete.email, name=athlete.name)
            evaluated.append(result)

        logger.info(f"Urgence calculée pour {len(evaluated)} athlètes ({requester_email})")
        return sort_athletes_by_urgency(evaluated)
