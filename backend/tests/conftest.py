"""
Configuration pytest et fixtures partagees.

Les variables d'environnement obligatoires sont posees avant tout import
de app.core.settings. Chaque test qui touche la base utilise un fichier
SQLite temporaire (les lectures du moteur d'urgence tournent dans des
threads, une base en memoire ne serait pas partagee).
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_climbiq.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from sqlmodel import SQLModel, Session, create_engine

import app.domain.entities  # noqa: F401,E402  (enregistre les tables)


@pytest.fixture
def engine(tmp_path):
    db_engine = create_engine(
        f"sqlite:///{tmp_path / 'climbiq_test.db'}",
        connect_args={"check_same_thread": False},
    )
    SQLModel.metadata.create_all(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as db_session:
        yield db_session
