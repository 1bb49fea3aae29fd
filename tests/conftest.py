import os

# The app module builds its engine at import time; keep it off PostgreSQL.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy.pool import StaticPool

from foundation.main import app
from foundation.api.deps import get_db_session
from foundation.models.common import PersonStatus, TemporaryPersonType
from foundation.models.people import Athlete, Employee, TemporaryPerson


@pytest.fixture
def test_engine():
    """Fresh in-memory database per test, shared by every connection of the test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    try:
        yield engine
    finally:
        SQLModel.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def db_session(test_engine):
    with Session(test_engine) as session:
        yield session


@pytest.fixture
def client(db_session: Session):
    """Test client whose requests run against the test session."""

    def get_test_db():
        return db_session

    app.dependency_overrides[get_db_session] = get_test_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_athlete(db_session: Session):
    def _make(first_name="Ana", last_name="Gomez", category="Sub-15", **kwargs):
        athlete = Athlete(
            first_name=first_name, last_name=last_name, category=category, **kwargs
        )
        db_session.add(athlete)
        db_session.commit()
        db_session.refresh(athlete)
        return athlete

    return _make


@pytest.fixture
def make_employee(db_session: Session):
    def _make(first_name="Carlos", last_name="Ruiz", position="Entrenador", **kwargs):
        employee = Employee(
            first_name=first_name, last_name=last_name, position=position, **kwargs
        )
        db_session.add(employee)
        db_session.commit()
        db_session.refresh(employee)
        return employee

    return _make


@pytest.fixture
def make_temporary(db_session: Session):
    def _make(
        first_name="Luis",
        last_name="Perez",
        person_type=TemporaryPersonType.athlete,
        status=PersonStatus.active,
        **kwargs,
    ):
        person = TemporaryPerson(
            first_name=first_name,
            last_name=last_name,
            person_type=person_type,
            status=status,
            **kwargs,
        )
        db_session.add(person)
        db_session.commit()
        db_session.refresh(person)
        return person

    return _make
