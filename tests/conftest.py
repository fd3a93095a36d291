"""
Pytest configuration and fixtures for vidshare tests.

The ``app`` fixture is parametrized over every storage backend, so any test
using it (directly or through ``client``/``store``) runs once per backend.
"""
import os
import uuid
from unittest.mock import patch

import pytest
import requests
from typer.testing import CliRunner

# Set testing environment before importing app
os.environ["TESTING"] = "true"

from vidshare.app import create_app
from vidshare.services import catalog
from vidshare.stores import get_store


def make_test_config(backend: str, tmp_path, **overrides) -> dict:
    test_config = {
        "TESTING": True,
        "STORE_BACKEND": backend,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "SQLALCHEMY_BINDS": {"auth": "sqlite:///:memory:"},
        "SECRET_KEY": "test-secret-key",
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        "SEED_DEFAULT_VIDEOS": False,
        "YOUTUBE_TIMEOUT": 1,
    }
    if backend == "mongo":
        mongomock = pytest.importorskip("mongomock")
        test_config["MONGO_CLIENT"] = mongomock.MongoClient()
        test_config["MONGO_DATABASE"] = f"vidshare_test_{uuid.uuid4().hex[:8]}"
    test_config.update(overrides)
    return test_config


@pytest.fixture(autouse=True)
def offline_youtube():
    """Every outbound YouTube request fails unless a test patches it otherwise."""
    with patch(
        "vidshare.services.youtube.requests.get",
        side_effect=requests.ConnectionError("network disabled in tests"),
    ) as mock_get:
        yield mock_get


@pytest.fixture(scope="function", params=["sql", "mongo"])
def backend(request):
    return request.param


@pytest.fixture(scope="function")
def app(backend, tmp_path):
    """Create and configure a test application instance for one backend."""
    app = create_app(test_config=make_test_config(backend, tmp_path))

    yield app

    # Cleanup
    if backend == "sql":
        from vidshare.models import db
        with app.app_context():
            db.session.remove()


@pytest.fixture(scope="function")
def make_app(tmp_path):
    """Factory for applications that need a configuration of their own."""
    def _make_app(backend="sql", **overrides):
        return create_app(test_config=make_test_config(backend, tmp_path, **overrides))
    return _make_app


@pytest.fixture(scope="function")
def client(app):
    """Create a test client."""
    return app.test_client()


@pytest.fixture(scope="function")
def runner():
    """Create a CLI runner for the maintenance commands."""
    return CliRunner()


@pytest.fixture(scope="function")
def store(app):
    """The application's store, used inside an application context."""
    with app.app_context():
        yield get_store()


@pytest.fixture(scope="function")
def sample_user(app):
    """Create a sample user for testing."""
    with app.app_context():
        user = catalog.register("Test User", "testuser@example.com", "TestPassword123!")

    return {"id": user.id, "name": "Test User", "email": "testuser@example.com", "password": "TestPassword123!"}


@pytest.fixture(scope="function")
def auth_headers(client, sample_user):
    """Authorization headers carrying a token for the sample user."""
    response = client.post('/login', json={
        'email': sample_user['email'],
        'password': sample_user['password'],
    })
    return {"Authorization": f"Bearer {response.get_json()['token']}"}


@pytest.fixture(scope="function")
def sample_video(app):
    """Create a sample (deletable) video for testing."""
    unique_id = uuid.uuid4().hex[:8]
    with app.app_context():
        video = get_store().create_video(
            title="Test Video",
            filename=f"testvideo_{unique_id}.mp4",
            category="Music",
            thumbnail=f"thumb_{unique_id}.jpg",
            description="A test video description",
        )

    return video


@pytest.fixture(scope="function")
def default_video(app):
    """Create a seeded default video for testing."""
    with app.app_context():
        video = get_store().create_video(
            title="Default Video",
            filename="KzXnXhekOz4",
            category="Trending",
            thumbnail="https://img.youtube.com/vi/KzXnXhekOz4/maxresdefault.jpg",
            video_url="https://www.youtube.com/embed/KzXnXhekOz4",
            is_default=True,
        )

    return video
