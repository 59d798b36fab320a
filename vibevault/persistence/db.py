# vibevault/persistence/db.py
# -*- coding: utf-8 -*-
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from contextlib import contextmanager
import logging
import os

logger = logging.getLogger(__name__)

DB_URL = os.getenv("DB_URL", "sqlite:///vibevault.db")
DB_ECHO = os.getenv("DB_ECHO", "0").strip().lower() in ("1", "true", "yes")


def _engine_options(url: str) -> dict:
    # Streamlit relance le script dans des threads différents : SQLite doit l'accepter
    if make_url(url).get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {}


engine = create_engine(DB_URL, echo=DB_ECHO, future=True, **_engine_options(DB_URL))

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,  # les journaux sont convertis après la fermeture de session
    future=True,
)


@contextmanager
def get_session():
    """Une session par opération du repository : commit si tout passe, rollback sinon."""
    s = SessionLocal()
    try:
        yield s
        s.commit()
    except Exception:
        s.rollback()
        raise
    finally:
        s.close()


def init_db(Base, drop_and_recreate=False):
    """Crée la table des journaux (drop préalable si demandé, ex. seed --wipe)."""
    url = make_url(DB_URL).render_as_string(hide_password=True)
    if drop_and_recreate:
        logger.warning("Drop du schéma sur %s", url)
        Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    logger.info("Schéma prêt (%s) sur %s", ", ".join(sorted(Base.metadata.tables)), url)
