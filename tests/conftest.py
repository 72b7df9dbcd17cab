import mongomock
import pytest
from fastapi.testclient import TestClient
from mongoengine import connect, disconnect

from accounts.models.user import User
from accounts.utils.config import settings
from main import app


PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def mongo():
    disconnect(alias="default")
    connect(
        "accounts-test",
        host="mongodb://localhost",
        alias="default",
        mongo_client_class=mongomock.MongoClient,
    )
    yield
    User.drop_collection()
    disconnect(alias="default")


@pytest.fixture(autouse=True)
def storage(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "temp_dir", str(tmp_path / "temp"))
    monkeypatch.setattr(settings, "avatars_dir", str(tmp_path / "public" / "avatars"))
    return tmp_path


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    def _register(email="user@example.com", password=PASSWORD):
        res = client.post("/users/register", json={"email": email, "password": password})
        assert res.status_code == 201, res.text
        return res.json()

    return _register


@pytest.fixture
def auth_headers(register):
    def _headers(email="user@example.com", password=PASSWORD):
        token = register(email, password)["token"]
        return {"Authorization": f"Bearer {token}"}

    return _headers
