"""
Initialisation des entités du domaine
"""

from .user import User, UserRole, CoachTrainee, AssignmentStatus
from .wellness_log import WellnessLog, WellnessLogCreate, WellnessLogRead
from .calendar_event import CalendarEvent
from .urgency import (
    FlagSeverity, FlagCategory, UrgencyLevel, UrgencyFilter,
    WellnessRecord, ActivityRecord, AthleteIdentity,
    UrgencyFlag, AthleteUrgency, UrgencySummary, UrgencyBoard,
)

__all__ = [
    "User", "UserRole", "CoachTrainee", "AssignmentStatus",
    "WellnessLog", "WellnessLogCreate", "WellnessLogRead",
    "CalendarEvent",
    "FlagSeverity", "FlagCategory", "UrgencyLevel", "UrgencyFilter",
    "WellnessRecord", "ActivityRecord", "AthleteIdentity",
    "UrgencyFlag", "AthleteUrgency", "UrgencySummary", "UrgencyBoard",
]
