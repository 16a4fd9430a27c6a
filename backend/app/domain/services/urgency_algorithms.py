"""
Algorithmes purs du moteur d'urgence (aucun accès base de données).

- Moyennes "intelligentes" : les jours non renseignés sont exclus du
  numérateur ET du dénominateur.
- Classification de chaque moyenne en drapeau (seuils fixes par métrique).
- Détection d'inactivité (fenêtres 7 jours / 4 jours).
- Réduction d'une liste de drapeaux en niveau et score d'urgence.

Convention "non renseigné" :
    sommeil, vitalité : None ou 0 (0h de sommeil / vitalité 0 n'ont pas de sens)
    douleur           : None uniquement (0 = "pas de douleur", valeur légitime)
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional

from app.core.clock import ensure_utc
from app.domain.entities.urgency import (
    ActivityRecord,
    FlagCategory,
    FlagSeverity,
    UrgencyFlag,
    UrgencyLevel,
    WellnessRecord,
)

# Seuils
SLEEP_RED_BELOW = 6.0
SLEEP_GREEN_FROM = 8.0
VITALITY_RED_BELOW = 5.0
VITALITY_GREEN_FROM = 7.0
PAIN_CRITICAL_ABOVE = 4.0
PAIN_RED_ABOVE = 3.0
PAIN_YELLOW_ABOVE = 2.0

DEFAULT_WINDOW_DAYS = 7
DEFAULT_RECENT_DAYS = 4

URGENCY_SCORE_WEIGHTS: Dict[FlagSeverity, int] = {
    FlagSeverity.CRITICAL: 100,
    FlagSeverity.RED: 50,
    FlagSeverity.YELLOW: 25,
    FlagSeverity.GREEN: 0,
}

URGENCY_LEVEL_RANK: Dict[UrgencyLevel, int] = {
    UrgencyLevel.CRITICAL: 0,
    UrgencyLevel.HIGH: 1,
    UrgencyLevel.MEDIUM: 2,
    UrgencyLevel.LOW: 3,
}

FLAG_ICONS: Dict[FlagCategory, str] = {
    FlagCategory.SLEEP: "😴",
    FlagCategory.VITALITY: "⚡",
    FlagCategory.PAIN: "🤕",
    FlagCategory.ACTIVITY: "🚶",
}


@dataclass(frozen=True)
class AverageResult:
    """Moyenne calculée sur les seuls jours renseignés."""
    average: float
    days_reported: int


# ============ PREDICATS "RENSEIGNE" ============

def is_sleep_reported(value: Optional[float]) -> bool:
    return value is not None and value != 0


def is_vitality_reported(value: Optional[float]) -> bool:
    return value is not None and value != 0


def is_pain_reported(value: Optional[float]) -> bool:
    # 0 = pas de douleur, compte dans la moyenne
    return value is not None


# ============ MOYENNES INTELLIGENTES ============

def _smart_average(
    values: Iterable[Optional[float]],
    is_reported: Callable[[Optional[float]], bool],
) -> Optional[AverageResult]:
    reported = [v for v in values if is_reported(v)]
    if not reported:
        return None
    return AverageResult(average=sum(reported) / len(reported), days_reported=len(reported))


def calculate_sleep_average(wellness_data: List[WellnessRecord]) -> Optional[AverageResult]:
    """Moyenne des heures de sommeil, jours à None/0 exclus. None si aucun jour renseigné."""
    return _smart_average((day.sleep_hours for day in wellness_data), is_sleep_reported)


def calculate_vitality_average(wellness_data: List[WellnessRecord]) -> Optional[AverageResult]:
    """Moyenne de vitalité, jours à None/0 exclus. None si aucun jour renseigné."""
    return _smart_average((day.vitality_level for day in wellness_data), is_vitality_reported)


def calculate_pain_average(wellness_data: List[WellnessRecord]) -> Optional[AverageResult]:
    """Moyenne de douleur, seuls les jours à None sont exclus. None si aucun jour renseigné."""
    return _smart_average((day.pain_level for day in wellness_data), is_pain_reported)


# ============ DRAPEAUX PAR METRIQUE ============

def create_sleep_flag(avg_sleep: float, days_reported: int) -> UrgencyFlag:
    """Seuils : < 6 rouge | 6-8 jaune | >= 8 vert"""
    if avg_sleep < SLEEP_RED_BELOW:
        severity = FlagSeverity.RED
    elif avg_sleep < SLEEP_GREEN_FROM:
        severity = FlagSeverity.YELLOW
    else:
        severity = FlagSeverity.GREEN

    icon = FLAG_ICONS[FlagCategory.SLEEP]
    if severity == FlagSeverity.GREEN:
        message = f"{icon} Sommeil : {avg_sleep:.1f}h ✅"
    else:
        message = f"{icon} Sommeil : {avg_sleep:.1f}h ({days_reported} jours)"

    return UrgencyFlag(
        type=severity,
        category=FlagCategory.SLEEP,
        message=message,
        average=avg_sleep,
        days_reported=days_reported,
    )


def create_vitality_flag(avg_vitality: float, days_reported: int) -> UrgencyFlag:
    """Seuils : < 5 rouge | 5-7 jaune | >= 7 vert"""
    if avg_vitality < VITALITY_RED_BELOW:
        severity = FlagSeverity.RED
    elif avg_vitality < VITALITY_GREEN_FROM:
        severity = FlagSeverity.YELLOW
    else:
        severity = FlagSeverity.GREEN

    icon = FLAG_ICONS[FlagCategory.VITALITY]
    if severity == FlagSeverity.GREEN:
        message = f"{icon} Vitalité : {avg_vitality:.1f} ✅"
    else:
        message = f"{icon} Vitalité : {avg_vitality:.1f} ({days_reported} jours)"

    return UrgencyFlag(
        type=severity,
        category=FlagCategory.VITALITY,
        message=message,
        average=avg_vitality,
        days_reported=days_reported,
    )


def create_pain_flag(avg_pain: float, days_reported: int) -> UrgencyFlag:
    """Seuils : > 4 critique | > 3 rouge | > 2 jaune | <= 2 vert"""
    icon = FLAG_ICONS[FlagCategory.PAIN]
    if avg_pain > PAIN_CRITICAL_ABOVE:
        severity = FlagSeverity.CRITICAL
        message = f"{icon} Douleur : {avg_pain:.1f} - à traiter en priorité ! ({days_reported} jours)"
    elif avg_pain > PAIN_RED_ABOVE:
        severity = FlagSeverity.RED
        message = f"{icon} Douleur : {avg_pain:.1f} - sévère ({days_reported} jours)"
    elif avg_pain > PAIN_YELLOW_ABOVE:
        severity = FlagSeverity.YELLOW
        message = f"{icon} Douleur : {avg_pain:.1f} ({days_reported} jours)"
    else:
        severity = FlagSeverity.GREEN
        message = f"{icon} Douleur : {avg_pain:.1f} ✅"

    return UrgencyFlag(
        type=severity,
        category=FlagCategory.PAIN,
        message=message,
        average=avg_pain,
        days_reported=days_reported,
    )


def build_wellness_flags(wellness_data: List[WellnessRecord]) -> List[UrgencyFlag]:
    """Drapeaux sommeil, vitalité, douleur (dans cet ordre) ; une métrique sans donnée est ignorée."""
    flags: List[UrgencyFlag] = []

    sleep_avg = calculate_sleep_average(wellness_data)
    if sleep_avg is not None:
        flags.append(create_sleep_flag(sleep_avg.average, sleep_avg.days_reported))

    vitality_avg = calculate_vitality_average(wellness_data)
    if vitality_avg is not None:
        flags.append(create_vitality_flag(vitality_avg.average, vitality_avg.days_reported))

    pain_avg = calculate_pain_average(wellness_data)
    if pain_avg is not None:
        flags.append(create_pain_flag(pain_avg.average, pain_avg.days_reported))

    return flags


# ============ ACTIVITE RECENTE ============

def classify_activity(
    activities: List[ActivityRecord],
    now: datetime,
    window_days: int = DEFAULT_WINDOW_DAYS,
    recent_days: int = DEFAULT_RECENT_DAYS,
) -> Optional[UrgencyFlag]:
    """
    Drapeau d'inactivité à partir des séances complétées.

    Le compte court (recent_days) est un sous-filtre du compte long
    (window_days) sur le même jeu de données : les deux ne peuvent pas
    se contredire, et au plus un drapeau est émis.

    Returns:
        rouge si aucune séance sur window_days, jaune si aucune sur
        recent_days, None sinon
    """
    now = ensure_utc(now)
    window_start = now - timedelta(days=window_days)
    recent_start = now - timedelta(days=recent_days)

    in_window = [a for a in activities if a.completed and a.start_time >= window_start]
    in_recent = [a for a in in_window if a.start_time >= recent_start]

    if not in_window:
        return UrgencyFlag(
            type=FlagSeverity.RED,
            category=FlagCategory.ACTIVITY,
            message=f"🔴 Aucun entraînement depuis {window_days} jours !",
            data={"days_without_workout": window_days},
        )
    if not in_recent:
        return UrgencyFlag(
            type=FlagSeverity.YELLOW,
            category=FlagCategory.ACTIVITY,
            message=f"🟡 Aucun entraînement depuis {recent_days} jours",
            data={"days_without_workout": recent_days},
        )
    return None


def latest_completed(activities: List[ActivityRecord]) -> Optional[datetime]:
    """Date de la dernière séance complétée, None si aucune."""
    completed = [a.start_time for a in activities if a.completed]
    return max(completed) if completed else None


# ============ NIVEAU ET SCORE ============

def determine_urgency_level(flags: List[UrgencyFlag]) -> UrgencyLevel:
    """critique > rouge (high) > jaune (medium) > rien/vert (low)"""
    types = {flag.type for flag in flags}
    if FlagSeverity.CRITICAL in types:
        return UrgencyLevel.CRITICAL
    if FlagSeverity.RED in types:
        return UrgencyLevel.HIGH
    if FlagSeverity.YELLOW in types:
        return UrgencyLevel.MEDIUM
    return UrgencyLevel.LOW


def compute_urgency_score(flags: List[UrgencyFlag]) -> int:
    """Somme pondérée des drapeaux (critique 100, rouge 50, jaune 25, vert 0)."""
    return sum(URGENCY_SCORE_WEIGHTS.get(flag.type, 0) for flag in flags)


def count_severe_flags(flags: List[UrgencyFlag]) -> int:
    """Nombre de drapeaux critiques ou rouges."""
    return sum(1 for flag in flags if flag.type in (FlagSeverity.CRITICAL, FlagSeverity.RED))


def count_yellow_flags(flags: List[UrgencyFlag]) -> int:
    return sum(1 for flag in flags if flag.type == FlagSeverity.YELLOW)
