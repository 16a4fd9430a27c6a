"""
Service de check-in bien-être.
Un check-in par athlète et par jour : un nouvel envoi pour la même date
remplace les valeurs existantes.
"""
import logging
from datetime import date, timedelta
from typing import List, Optional

from sqlmodel import Session, select

from app.core.clock import utc_now, utc_today
from app.domain.entities.wellness_log import WellnessLog, WellnessLogCreate

logger = logging.getLogger(__name__)


def upsert_wellness_entry(
    session: Session,
    email: str,
    payload: WellnessLogCreate,
    today: Optional[date] = None,
) -> WellnessLog:
    """Upsert dans wellnesslog (email + date unique)."""
    today = today or utc_today()
    day = payload.date or today
    if day > today:
        raise ValueError("Impossible d'enregistrer un check-in dans le futur")

    data = payload.model_dump(exclude={"date"})
    email = email.lower()

    existing = session.exec(
        select(WellnessLog).where(
            WellnessLog.email == email,
            WellnessLog.date == day,
        )
    ).first()

    if existing:
        for key, value in data.items():
            setattr(existing, key, value)
        existing.updated_at = utc_now()
        record = existing
    else:
        record = WellnessLog(email=email, date=day, **data)

    session.add(record)
    session.commit()
    session.refresh(record)
    logger.info(f"Check-in bien-être enregistré pour {email} ({day})")
    return record


def list_recent_wellness(
    session: Session,
    email: str,
    days: int = 7,
    today: Optional[date] = None,
) -> List[WellnessLog]:
    """Check-ins des `days` derniers jours, du plus récent au plus ancien."""
    since = (today or utc_today()) - timedelta(days=days)
    return list(session.exec(
        select(WellnessLog)
        .where(WellnessLog.email == email.lower())
        .where(WellnessLog.date >= since)
        .order_by(WellnessLog.date.desc())
    ).all())
