import pytest
from fastapi.testclient import TestClient

from gallery.config import SESSION_COOKIE_NAME
from gallery.core import auth as auth_core
from gallery.core.auth import create_session_token
from gallery.main import app
from gallery.storage import get_storage
from gallery.storage.local_storage import LocalStorage

ALLOWED_EMAILS = "curator@example.com, Second@Example.com"
CURATOR = "curator@example.com"


def png_bytes() -> bytes:
    return b"\x89PNG\r\n\x1a\n" + (b"\x00" * 64)


@pytest.fixture()
def allowed_emails(monkeypatch):
    monkeypatch.setattr(auth_core, "ALLOWED_EMAILS", ALLOWED_EMAILS)
    return ALLOWED_EMAILS


@pytest.fixture()
def storage(tmp_path):
    return LocalStorage(root=tmp_path / "artworks", base_url="")


@pytest.fixture()
def client(storage, allowed_emails):
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def signed_in(client):
    client.cookies.set(SESSION_COOKIE_NAME, create_session_token(CURATOR, name="Curator"))
    return client
