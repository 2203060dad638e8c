"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- A recording stand-in for the media host
- Users, jobs and auth headers
"""

import os

# Must be set before the app modules read their settings
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")
os.environ.setdefault("JSON_LOGS", "false")

import uuid
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.core.media import MediaAsset, MediaHost, MediaHostError, media_host_provider
from app.core.security import create_access_token
from app.models.job import Job
from app.models.user import User, UserRole
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingMediaHost(MediaHost):
    """
    In-memory media host that records every call.

    Uploaded assets get ids new1, new2, ... in upload order.
    """

    def __init__(self):
        self.uploads = []
        self.deleted = []
        self.fail_upload = False
        self.fail_delete = False

    def upload(self, data_uri: str) -> MediaAsset:
        if self.fail_upload:
            raise MediaHostError("media host unavailable")
        self.uploads.append(data_uri)
        asset_id = f"new{len(self.uploads)}"
        return MediaAsset(url=f"https://media.example.com/avatars/{asset_id}.png", asset_id=asset_id)

    def delete(self, asset_id: str) -> None:
        self.deleted.append(asset_id)
        if self.fail_delete:
            raise MediaHostError("media host unavailable")


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def media_host():
    return RecordingMediaHost()


@pytest.fixture
def client(db_session, media_host):
    """
    FastAPI test client with overridden database and media host dependencies.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[media_host_provider] = lambda: (lambda: media_host)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def create_user(db_session):
    """Factory for persisted users. Keyword arguments override the defaults."""
    def _create_user(**overrides):
        fields = {
            "id": uuid.uuid4(),
            "name": "John",
            "last_name": "Smith",
            "email": f"user-{uuid.uuid4().hex[:8]}@example.com",
            "location": "Chicago",
            "password": "$2b$12$storedhashedpasswordvalue",
            "role": UserRole.USER,
        }
        fields.update(overrides)
        user = User(**fields)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create_user


@pytest.fixture
def create_jobs(db_session):
    """Factory that inserts `count` jobs owned by `owner`."""
    def _create_jobs(owner, count):
        db_session.add_all([
            Job(company=f"Company {i}", position="Backend Developer", job_location="Remote", created_by=owner.id)
            for i in range(count)
        ])
        db_session.commit()

    return _create_jobs


@pytest.fixture
def auth_headers():
    """Build a Bearer header for a token whose subject is the given user id."""
    def _auth_headers(user_id) -> dict:
        token = create_access_token(data={"sub": str(user_id)})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
