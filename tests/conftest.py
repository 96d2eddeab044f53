"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- Local file storage in a temp directory
- FastAPI test client
"""

import base64
import os

# Keep the app's own engine on SQLite so importing it never needs Postgres
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")
os.environ.setdefault("JSON_LOGS", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.core.storage import LocalStorage, get_storage_backend
from app.models.translation_job import TranslationJob  # noqa: F401 - registers the table
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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
def storage_root(tmp_path):
    return tmp_path / "storage"


@pytest.fixture
def storage(storage_root):
    """Local storage backend rooted in a per-test temp directory"""
    return LocalStorage(str(storage_root), prefix="/uploads/videos")


@pytest.fixture
def client(db_session, storage):
    """
    FastAPI test client with overridden database and storage dependencies.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_backend] = lambda: storage

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def video_bytes():
    return b"\x00\x00\x00\x18ftypmp42 dummy video content for testing"


@pytest.fixture
def upload_payload(video_bytes):
    """Sample uploadVideo request body"""
    return {
        "filename": "clip.mp4",
        "file_data": base64.b64encode(video_bytes).decode("ascii"),
        "target_language": "es"
    }


@pytest.fixture
def sample_job_data():
    """Sample createTranslationJob request body"""
    return {
        "original_filename": "interview.mov",
        "original_file_path": "/uploads/videos/1700000000000_abc123_interview.mov",
        "target_language": "fr"
    }
