"""Test configuration and fixtures."""

import itertools
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobboard.db import Base, get_db
from jobboard.main import app
from jobboard.models import Job
from jobboard.providers.locations import StaticLocationDirectory

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)

LOCATIONS = {
    "countries": [
        {
            "code": "CA",
            "name": "Canada",
            "states": [
                {"code": "ON", "name": "Ontario", "cities": ["Toronto", "Ottawa"]},
                {"code": "BC", "name": "British Columbia", "cities": ["Vancouver"]},
            ],
        },
        {
            "code": "US",
            "name": "United States",
            "states": [
                {"code": "NY", "name": "New York", "cities": ["New York City"]},
            ],
        },
    ]
}


@pytest.fixture
def engine():
    """In-memory database shared by every session of one test."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_job(db):
    """Insert a listing; each call is one minute newer than the previous one."""
    counter = itertools.count()

    def _make(**overrides):
        n = next(counter)
        fields = dict(
            user_id="alice",
            title=f"Job {n}",
            company_name="Acme",
            description="<p>Python developer</p>",
            job_type="Full-Time",
            location_country="CA",
            location_state="ON",
            location_city="Toronto",
            created_at=BASE_TIME + timedelta(minutes=n),
        )
        fields.update(overrides)
        job = Job(**fields)
        db.add(job)
        db.commit()
        return job.id

    return _make


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def locations():
    return StaticLocationDirectory(LOCATIONS)
