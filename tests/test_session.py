from datetime import timedelta

import pytest
from jose import jwt

from accounts.models.user import User
from accounts.services.auth import create_token
from accounts.utils.config import settings


PROTECTED = [
    ("get", "/users/current", {}),
    ("post", "/users/logout", {}),
    ("patch", "/users/", {"json": {"subscription": "pro"}}),
    ("patch", "/users/avatars", {"files": {"avatar": ("a.png", b"png", "image/png")}}),
]


def _bad_headers():
    foreign = jwt.encode({"sub": "x"}, "some-other-secret", algorithm="HS256")
    return [
        {},
        {"Authorization": ""},
        {"Authorization": "Bearer"},
        {"Authorization": "Bearer BOGUS"},
        {"Authorization": f"Bearer {foreign}"},
    ]


@pytest.mark.parametrize("method, path, kwargs", PROTECTED)
@pytest.mark.parametrize("headers", _bad_headers())
def test_protected_routes_reject_bad_tokens(client, method, path, kwargs, headers):
    res = getattr(client, method)(path, headers=headers, **kwargs)
    assert res.status_code == 401
    assert "message" in res.json()


@pytest.mark.parametrize("method, path, kwargs", PROTECTED)
def test_protected_routes_reject_expired_token(client, register, method, path, kwargs):
    register("expired@example.com")
    user = User.objects(email="expired@example.com").first()
    token = create_token(user, expires_delta=timedelta(seconds=-10))

    res = getattr(client, method)(path, headers={"Authorization": f"Bearer {token}"}, **kwargs)
    assert res.status_code == 401


def test_token_for_missing_user_is_rejected(client, register):
    token = register("gone@example.com")["token"]
    User.objects(email="gone@example.com").delete()

    headers = {"Authorization": f"Bearer {token}"}
    assert client.get("/users/current", headers=headers).status_code == 401
    assert client.post("/users/logout", headers=headers).status_code == 401


def test_token_with_non_id_subject_is_rejected(client):
    token = jwt.encode({"sub": "not-an-object-id"}, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    res = client.get("/users/current", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401


def test_current_user(client, register):
    token = register("me@example.com")["token"]
    res = client.get("/users/current", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 200
    body = res.json()
    assert body["token"] == token
    assert body["user"]["email"] == "me@example.com"
    assert body["user"]["subscription"] == "starter"
    assert "password" not in res.text


def test_logout(client, auth_headers):
    headers = auth_headers("bye@example.com")
    res = client.post("/users/logout", headers=headers)
    assert res.status_code == 204
    assert res.content == b""


def test_token_still_valid_after_logout_without_denylist(client, auth_headers):
    headers = auth_headers("stateless@example.com")
    assert client.post("/users/logout", headers=headers).status_code == 204
    assert client.get("/users/current", headers=headers).status_code == 200
