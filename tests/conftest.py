# tests/conftest.py

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from smart_tasker.database import get_db
from smart_tasker.main import app
from smart_tasker.notifications import manager


@pytest.fixture()
def engine():
    """Fresh in-memory SQLite store per test, shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    manager.clear()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        manager.clear()


@pytest.fixture()
def make_task(client):
    """POST a valid task, overriding any fields, and return the JSON body."""
    def _make_task(**overrides):
        body = {
            "title": "Write report",
            "priority": "Medium",
            "category": "Work",
            "dueDate": "2024-03-01",
        }
        body.update(overrides)
        response = client.post("/api/tasks", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _make_task
