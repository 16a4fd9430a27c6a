"""
Logs et error tracking.

- production : logs JSON sur stdout (python-json-logger), bruit uvicorn/sqlalchemy réduit
- dev : logs texte sur stdout + fichier tournant app.log
- test : stdout seulement
Sentry n'est initialisé que si SENTRY_DSN est renseigné.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import List

import sentry_sdk
from pythonjsonlogger import jsonlogger

from app.core.settings import Settings

TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
LOG_FILE = "app.log"
NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine")


def build_log_handlers(settings: Settings) -> List[logging.Handler]:
    """Handlers selon ENVIRONMENT."""
    stream = logging.StreamHandler(sys.stdout)
    if settings.ENVIRONMENT == "production":
        stream.setFormatter(jsonlogger.JsonFormatter(
            JSON_FORMAT,
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        ))
    else:
        stream.setFormatter(logging.Formatter(TEXT_FORMAT))

    handlers: List[logging.Handler] = [stream]
    if settings.ENVIRONMENT not in ("production", "test"):
        handlers.append(RotatingFileHandler(LOG_FILE, maxBytes=5_000_000, backupCount=3))
    return handlers


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        handlers=build_log_handlers(settings),
    )
    if settings.ENVIRONMENT == "production":
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def init_sentry(settings: Settings) -> bool:
    """Initialise Sentry ; False si aucun DSN n'est configuré."""
    if not settings.SENTRY_DSN:
        return False
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=0.2 if settings.ENVIRONMENT == "production" else 1.0,
        send_default_pii=False,
    )
    return True
