"""Users Route Group — register, login, current.

Invariants:
    - register/login return {"success": true, "token": "Bearer ..."}
    - Form-encoded and JSON bodies are accepted alike
    - Validation failures → 400 VALIDATION_ERROR with field details
    - /current requires a valid bearer token for an existing user
"""

from uuid import UUID, uuid4

import pytest

from app.core.domain_types import UserId
from app.core.errors import DuplicateUserError
from app.core.security import issue_token
from app.models.user import User
from app.schemas.user import RegisterInput
from app.services import accounts

from tests.api.helpers import register


async def test_users_test_route(client):
    res = await client.get("/api/users/test")
    assert res.status_code == 200
    assert res.json() == {"msg": "This is the users route"}


async def test_register_returns_bearer_token(client):
    res = await client.post("/api/users/register", json={
        "handle": "alice", "email": "Alice@Example.com",
        "password": "secret1", "password2": "secret1",
    })
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["token"].startswith("Bearer ")


async def test_register_accepts_form_encoded_body(client):
    res = await client.post("/api/users/register", data={
        "handle": "bob", "email": "bob@example.com",
        "password": "secret1", "password2": "secret1",
    })
    assert res.status_code == 200
    assert res.json()["success"] is True


async def test_register_password_mismatch(client):
    res = await client.post("/api/users/register", json={
        "handle": "alice", "email": "alice@example.com",
        "password": "secret1", "password2": "secret2",
    })
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert any("Passwords must match" in d["message"] for d in error["details"])


async def test_register_field_rules(client):
    res = await client.post("/api/users/register", json={
        "handle": "a", "email": "not-an-email",
        "password": "123", "password2": "123",
    })
    assert res.status_code == 400
    fields = {d["field"] for d in res.json()["error"]["details"]}
    assert {"handle", "email", "password"} <= fields


async def test_register_duplicate_email(client):
    await register(client)
    res = await client.post("/api/users/register", json={
        "handle": "alice2", "email": "alice@example.com",
        "password": "secret1", "password2": "secret1",
    })
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "USER_ALREADY_EXISTS"
    assert "email" in res.json()["error"]["message"]


async def test_register_duplicate_handle(client):
    await register(client)
    res = await client.post("/api/users/register", json={
        "handle": "alice", "email": "other@example.com",
        "password": "secret1", "password2": "secret1",
    })
    assert res.status_code == 400
    assert "handle" in res.json()["error"]["message"]


async def test_login_success(client):
    await register(client)
    res = await client.post("/api/users/login", json={
        "email": "ALICE@example.com", "password": "secret1",
    })
    assert res.status_code == 200
    assert res.json()["token"].startswith("Bearer ")


async def test_login_unknown_email(client):
    res = await client.post("/api/users/login", json={
        "email": "ghost@example.com", "password": "secret1",
    })
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_login_wrong_password(client):
    await register(client)
    res = await client.post("/api/users/login", json={
        "email": "alice@example.com", "password": "wrong-one",
    })
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_CREDENTIALS"


async def test_current_returns_authenticated_user(client, auth_header):
    res = await client.get("/api/users/current", headers=auth_header)
    assert res.status_code == 200
    body = res.json()
    assert body["handle"] == "alice"
    assert body["email"] == "alice@example.com"
    assert "password" not in body


async def test_current_without_token(client):
    res = await client.get("/api/users/current")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "AUTHENTICATION_FAILED"


async def test_current_with_garbage_token(client):
    res = await client.get(
        "/api/users/current", headers={"Authorization": "Bearer garbage"},
    )
    assert res.status_code == 401


async def test_current_with_token_for_missing_user(client, settings):
    token = issue_token(UserId(uuid4()), "ghost", settings.jwt_secret_key)
    res = await client.get(
        "/api/users/current", headers={"Authorization": f"Bearer {token}"},
    )
    assert res.status_code == 401


async def test_current_with_token_signed_by_other_secret(client):
    await register(client)
    login = await client.post("/api/users/login", json={
        "email": "alice@example.com", "password": "secret1",
    })
    user = await client.get(
        "/api/users/current", headers={"Authorization": login.json()["token"]},
    )
    forged = issue_token(UserId(uuid4()), "alice", "someone-elses-secret")
    res = await client.get(
        "/api/users/current", headers={"Authorization": f"Bearer {forged}"},
    )
    assert user.status_code == 200
    assert res.status_code == 401


async def test_current_with_token_naming_another_handle(client, settings, auth_header):
    me = (await client.get("/api/users/current", headers=auth_header)).json()
    token = issue_token(UserId(UUID(me["id"])), "mallory", settings.jwt_secret_key)
    res = await client.get(
        "/api/users/current", headers={"Authorization": f"Bearer {token}"},
    )
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "AUTHENTICATION_FAILED"


async def test_register_commit_race_reports_duplicate(app, monkeypatch):
    async with app.state.database.session() as db:
        def hash_after_rival_insert(password, rounds=10):
            # the rival row lands between the uniqueness check and the commit
            db.add(User(handle="alice2", email="alice@example.com", password="x"))
            return "hashed"

        monkeypatch.setattr(accounts, "hash_password", hash_after_rival_insert)
        with pytest.raises(DuplicateUserError) as exc:
            await accounts.register_user(db, RegisterInput(
                handle="alice", email="alice@example.com",
                password="secret1", password2="secret1",
            ))
    assert exc.value.code == "USER_ALREADY_EXISTS"
    assert exc.value.http_status == 400
