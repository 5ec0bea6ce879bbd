# carit/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy; PostgreSQL in production, SQLite for local runs and tests.
All models are auto-imported here so create_tables() creates every table in one call.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from carit.config import settings


def build_engine(url: str):
    """Create an engine, applying pool settings only where the dialect supports them."""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False}, echo=False)
    return create_engine(
        url,
        pool_pre_ping=True,          # Auto-reconnect if DB connection drops
        pool_size=10,
        max_overflow=20,
        echo=False,                  # Set True to log all SQL queries (debug only)
    )


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency: yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory():
    """FastAPI dependency for handlers that open their own sessions (parallel reads)."""
    return SessionLocal


def create_tables(bind=None):
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from carit.models.user import User                         # noqa
    from carit.models.catalog_vehicle import CatalogVehicle    # noqa
    from carit.models.garage_vehicle import GarageVehicle      # noqa

    Base.metadata.create_all(bind=bind or engine)
