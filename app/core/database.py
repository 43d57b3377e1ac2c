# app/core/database.py

import logging
from contextlib import contextmanager

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


# ---------------------------------------------------
# ENGINE & SESSION FACTORY
# ---------------------------------------------------

def normalize_database_url(url: str) -> str:
    # Convert old-style "postgres://" URIs if necessary:
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def build_engine(url: str) -> Engine:
    url = normalize_database_url(url)
    if url.startswith("sqlite"):
        # One shared connection so an in-memory database survives across sessions
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        url,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


# ---------------------------------------------------
# CONTEXT MANAGER FOR SESSIONS (scripts)
# ---------------------------------------------------

@contextmanager
def session_scope(session_factory: sessionmaker):
    """
    Context-manager for SQLAlchemy sessions outside a request.
    Use like:
        with session_scope(factory) as db:
            ...
    """
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


# ---------------------------------------------------
# FASTAPI DEPENDENCY
# ---------------------------------------------------

def get_db(request: Request):
    """
    FastAPI dependency to yield a SQLAlchemy session bound to the
    engine that create_app stored on app.state.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
