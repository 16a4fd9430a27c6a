"""
Horloge UTC commune : timestamps des entités, fenêtres du moteur d'urgence
et date du check-in du jour. Tous les datetimes manipulés sont "aware".
"""
from datetime import date, datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_today() -> date:
    return utc_now().date()


def ensure_utc(value: datetime) -> datetime:
    """Un datetime naïf (relu depuis SQLite) est interprété comme UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
