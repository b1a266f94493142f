"""Signup, admin recovery and /me over HTTP."""
import uuid

import pytest
from httpx import AsyncClient

from blueprintos.config import settings
from tests.conftest import auth_headers, signup_coach


@pytest.mark.asyncio
async def test_coach_signup_response_is_camel_case(client: AsyncClient):
    data = await signup_coach(client)

    assert data["success"] is True
    assert set(data) >= {"userId", "workspaceId", "profileId"}
    assert data["userId"] == data["profileId"]


@pytest.mark.asyncio
async def test_signup_missing_fields(client: AsyncClient, identity):
    resp = await client.post("/api/v1/auth/signup", json={"email": "a@b.com"})

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Missing required fields", "errorCode": "MISSING_FIELDS"}
    assert identity.users == {}


@pytest.mark.asyncio
async def test_signup_coach_without_workspace_name(client: AsyncClient):
    resp = await client.post("/api/v1/auth/signup", json={
        "email": "a@b.com", "password": "Passw0rd!", "fullName": "A", "role": "coach",
    })
    assert resp.status_code == 400
    body = resp.json()
    assert body["errorCode"] == "MISSING_WORKSPACE_NAME"
    assert body["step"] == "validation"


@pytest.mark.asyncio
async def test_duplicate_signup_fails_at_identity(client: AsyncClient):
    await signup_coach(client)
    resp = await client.post("/api/v1/auth/signup", json={
        "email": "coach@example.com", "password": "Passw0rd!", "fullName": "Jane Doe",
        "role": "coach", "workspaceName": "Again",
    })
    assert resp.status_code == 400
    assert resp.json()["errorCode"] == "AUTH_CREATION_FAILED"
    assert resp.json()["step"] == "auth_user"


@pytest.mark.asyncio
async def test_signup_setup_failure_is_500_with_step(client: AsyncClient, identity, monkeypatch):
    from blueprintos.crud import crud_workspace

    def _boom(*args, **kwargs):
        raise RuntimeError("insert failed")

    monkeypatch.setattr(crud_workspace, "create_subscription", _boom)
    resp = await client.post("/api/v1/auth/signup", json={
        "email": "a@b.com", "password": "Passw0rd!", "fullName": "A",
        "role": "coach", "workspaceName": "Acme",
    })

    assert resp.status_code == 500
    body = resp.json()
    assert body["errorCode"] == "SETUP_FAILED"
    assert body["step"] == "subscription"
    assert len(identity.deleted) == 1


@pytest.mark.asyncio
async def test_me_returns_profile_and_workspace(client: AsyncClient):
    coach = await signup_coach(client)

    resp = await client.get("/api/v1/me", headers=coach["headers"])
    assert resp.status_code == 200
    body = resp.json()
    assert body["profile"]["role"] == "coach"
    assert body["workspace"]["id"] == coach["workspaceId"]
    assert body["workspace"]["onboarding_steps"] == {f"step{i}": False for i in range(1, 7)}


@pytest.mark.asyncio
async def test_me_requires_token(client: AsyncClient):
    assert (await client.get("/api/v1/me")).status_code == 401
    bad = {"Authorization": "Bearer not-a-token"}
    assert (await client.get("/api/v1/me", headers=bad)).status_code == 401


@pytest.mark.asyncio
async def test_me_without_profile_offers_recovery(client: AsyncClient, identity):
    user = identity.add_user("orphan@example.com", {"full_name": "Orphan", "role": "coach"})

    resp = await client.get("/api/v1/me", headers=auth_headers(user.id))
    assert resp.status_code == 404
    body = resp.json()
    assert body["state"] == "failed"
    assert body["attempts"] == 6
    assert "force_create_profile" in body["actions"]


@pytest.mark.asyncio
async def test_admin_recovery_then_me(client: AsyncClient, identity):
    user = identity.add_user("orphan@example.com", {"full_name": "Orphan", "role": "coach"})

    resp = await client.post("/api/v1/auth/admin-recovery", json={"userId": user.id})
    assert resp.status_code == 200
    body = resp.json()
    assert body["profileCreated"] is True
    assert body["workspaceCreated"] is True

    again = await client.post("/api/v1/auth/admin-recovery", json={"userId": user.id})
    assert again.json()["message"] == "Profile already exists"
    assert again.json()["profileCreated"] is False

    me = await client.get("/api/v1/me", headers=auth_headers(user.id))
    assert me.json()["workspace"]["name"] == "Orphan's Workspace"


@pytest.mark.asyncio
async def test_admin_recovery_errors(client: AsyncClient, monkeypatch):
    missing = await client.post("/api/v1/auth/admin-recovery", json={})
    assert missing.status_code == 400
    assert missing.json()["error"] == "MISSING_USER_ID"

    unknown = await client.post("/api/v1/auth/admin-recovery", json={"userId": str(uuid.uuid4())})
    assert unknown.status_code == 404
    assert unknown.json()["error"] == "USER_NOT_FOUND"

    monkeypatch.setattr(settings, "APP_ENV", "production")
    refused = await client.post("/api/v1/auth/admin-recovery", json={"userId": str(uuid.uuid4())})
    assert refused.status_code == 403
    assert refused.json()["error"] == "PRODUCTION_DISABLED"
