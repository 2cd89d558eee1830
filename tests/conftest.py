"""
Pytest fixtures for job application backend tests.

Provides an in-memory SQLite database, a FastAPI test client wired to it,
and factories for accounts, job roles and applications.
"""
import os

# Settings are read once at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SESSION_CLEANUP_INTERVAL_MINUTES"] = "0"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import timedelta
from typing import Optional
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import jobapp.auth.models  # noqa: F401
from jobapp.auth.passwords import hash_password
from jobapp.db.deps import get_db
from jobapp.db.engine import build_engine
from jobapp.main import create_app
from jobapp.models import (
    ApplicationStatus,
    Base,
    JobApplication,
    JobRole,
    Role,
    User,
)
from jobapp.utils.dates import utcnow
from tests.helpers import DEFAULT_PASSWORD, MockQuery, login


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = MagicMock()
    db.query = MagicMock(return_value=MockQuery())
    return db


@pytest.fixture
def engine():
    """In-memory SQLite engine shared by every connection of a test."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def app(db):
    app = create_app()

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_client(app):
    """Build an independent client (own cookie jar) for another identity."""

    def _make():
        return TestClient(app)

    return _make


@pytest.fixture
def user_factory(db):
    """Create accounts directly in the database."""

    def _create(
        email: str = "applicant@example.com",
        password: str = DEFAULT_PASSWORD,
        forename: str = "Ada",
        surname: str = "Lovelace",
        role: Role = Role.APPLICANT,
        is_active: bool = True,
    ) -> User:
        now = utcnow()
        user = User(
            email=email.lower(),
            password_hash=hash_password(password),
            forename=forename,
            surname=surname,
            role=role,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _create


@pytest.fixture
def job_role_factory(db):
    """Create job roles directly in the database."""

    def _create(**overrides) -> JobRole:
        now = utcnow()
        values = {
            "job_role_name": "Software Engineer",
            "description": "Build and maintain web services",
            "responsibilities": "Write code, review code",
            "job_spec_link": "https://example.com/specs/software-engineer",
            "location": "Belfast",
            "capability": "Engineering",
            "band": "Associate",
            "closing_date": now + timedelta(days=30),
            "status": "active",
            "number_of_open_positions": 2,
            "created_at": now,
            "updated_at": now,
        }
        values.update(overrides)
        job_role = JobRole(**values)
        db.add(job_role)
        db.commit()
        db.refresh(job_role)
        return job_role

    return _create


@pytest.fixture
def application_factory(db):
    """Create job applications directly in the database."""

    def _create(job_role: JobRole, applicant: Optional[User] = None, **overrides) -> JobApplication:
        now = utcnow()
        values = {
            "job_role_id": job_role.id,
            "applicant_user_id": applicant.id if applicant else None,
            "applicant_name": "Ada Lovelace",
            "applicant_email": applicant.email if applicant else "walkin@example.com",
            "cover_letter": "I would like to apply.",
            "resume_url": None,
            "cv_data": b"%PDF-1.4 test cv",
            "cv_file_name": "cv.pdf",
            "cv_mime_type": "application/pdf",
            "status": ApplicationStatus.PENDING.value,
            "submitted_at": now,
            "updated_at": now,
        }
        values.update(overrides)
        application = JobApplication(**values)
        db.add(application)
        db.commit()
        db.refresh(application)
        return application

    return _create


@pytest.fixture
def applicant(user_factory):
    return user_factory()


@pytest.fixture
def admin(user_factory):
    return user_factory(
        email="admin@example.com",
        forename="Grace",
        surname="Hopper",
        role=Role.ADMIN,
    )


@pytest.fixture
def applicant_client(client, applicant):
    response = login(client, applicant.email)
    assert response.status_code == 200
    return client


@pytest.fixture
def admin_client(make_client, admin):
    admin_client = make_client()
    response = login(admin_client, admin.email)
    assert response.status_code == 200
    return admin_client
