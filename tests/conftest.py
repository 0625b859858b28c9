"""Shared fixtures: an in-memory database and an API client bound to it."""

import os

# Must be set before journal.config is imported anywhere
os.environ.setdefault("JOURNAL_DATABASE_URL", "sqlite://")
os.environ.setdefault("JOURNAL_RESULT_DEBOUNCE_MS", "10")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from journal.database import create_db_and_tables, get_session
from journal.main import app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()
