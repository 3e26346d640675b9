"""Pytest configuration: an isolated app per test on in-memory SQLite with a fake media host."""
import pytest

from api import create_app
from models import storage
from tests.helpers import FakeUploader


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def app(tmp_path, uploader):
    app = create_app(
        "testing",
        overrides={"UPLOAD_FOLDER": str(tmp_path / "uploads")},
        uploader=uploader,
    )
    yield app
    storage.close()


@pytest.fixture
def client(app):
    # cookies are asserted through headers; a jar would silently resend them
    return app.test_client(use_cookies=False)


@pytest.fixture
def sessions(app):
    return app.extensions["session_manager"]


@pytest.fixture
def profiles(app):
    return app.extensions["profile_service"]


@pytest.fixture
def make_file(tmp_path):
    def _make(name="avatar.png", content=b"\x89PNG fake image"):
        path = tmp_path / name
        path.write_bytes(content)
        return str(path)

    return _make


@pytest.fixture
def register_account(sessions, make_file):
    """Register through the session manager; returns the Account."""

    def _register(username="alice", email="a@x.com", password="p1", full_name="Alice Doe"):
        return sessions.register(
            full_name=full_name,
            email=email,
            username=username,
            password=password,
            avatar_path=make_file(f"{username}-avatar.png"),
        )

    return _register
