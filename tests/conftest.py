"""Shared fixtures: a fresh SQLite file database per test, sessions, and an API client."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before carit.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_TO_FILE"] = "false"
os.environ.pop("FLOWCHART_GENERATOR_URL", None)
os.environ.pop("QUESTION_GENERATOR_URL", None)

import pytest
from sqlalchemy.orm import sessionmaker
from carit.database import build_engine, create_tables
from carit.services.catalog_service import find_or_create
from carit.services.user_service import create_or_backfill



@pytest.fixture
def engine(tmp_path):
    # A file database so that separate sessions get separate connections
    engine = build_engine(f"sqlite:///{tmp_path / 'carit_test.db'}")
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_user(db):
    def _make(user_id="u1", name="Test User", email=None):
        create_or_backfill(db, user_id, name, email or f"{user_id}@example.com")
        return user_id
    return _make


@pytest.fixture
def seeded_catalog(db):
    rows = [
        (2020, "Toyota", "Camry", "LE"),
        (2020, "Toyota", "Camry", "SE"),
        (2020, "Toyota", "Corolla", ""),
        (2021, "Honda", "Civic", "EX"),
        (2020, "Honda", "Accord", "Sport"),
        (2019, "Ford", "F-150", "XLT"),
    ]
    for row in rows:
        find_or_create(db, *row)
    return rows


@pytest.fixture
def client(session_factory):
    from fastapi.testclient import TestClient
    from carit.main import app
    from carit.database import get_db, get_session_factory

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
