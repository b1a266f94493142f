"""Pytest configuration and fixtures.

SQLite in memory stands in for PostgreSQL; a single shared connection
(StaticPool) lets the app's threadpool sessions and the test's own session
see the same data.
"""
import functools
import time
import uuid
from typing import Dict, Optional

import pytest
from httpx import AsyncClient, ASGITransport
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from blueprintos.config import settings
from blueprintos.db.base_class import Base
# Import all models so Base.metadata knows every table
import blueprintos.models  # noqa: F401
from blueprintos.services.identity_provider import IdentityProviderError, IdentityUser

TEST_JWT_SECRET = "test-secret-that-is-at-least-32-characters-long"


# --- Fakes ---

class FakeIdentityProvider:
    """In-memory stand-in for the identity provider admin API."""

    def __init__(self):
        self.users: Dict[str, IdentityUser] = {}
        self.deleted: list = []
        self.create_error: Optional[str] = None
        self.delete_error: Optional[str] = None

    def add_user(self, email: str, metadata: Optional[dict] = None) -> IdentityUser:
        user = IdentityUser(id=str(uuid.uuid4()), email=email, user_metadata=dict(metadata or {}))
        self.users[user.id] = user
        return user

    def create_user(self, email: str, password: str, metadata: dict) -> IdentityUser:
        if self.create_error:
            raise IdentityProviderError(self.create_error, 422)
        if any(u.email == email for u in self.users.values()):
            raise IdentityProviderError("A user with this email address has already been registered", 422)
        return self.add_user(email, metadata)

    def get_user(self, user_id: str) -> Optional[IdentityUser]:
        return self.users.get(user_id)

    def delete_user(self, user_id: str) -> None:
        if self.delete_error:
            raise IdentityProviderError(self.delete_error, 500)
        self.deleted.append(user_id)
        self.users.pop(user_id, None)


# --- Per-test fixtures ---

@pytest.fixture(autouse=True)
def _test_settings(monkeypatch):
    monkeypatch.setattr(settings, "APP_ENV", "development")
    monkeypatch.setattr(settings, "SUPABASE_JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "")


@pytest.fixture
def test_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture
async def client(session_factory, identity):
    """
    Async HTTP client against the app with:
      - get_db overridden to use the in-memory database
      - the fake identity provider
      - profile lookups retried without sleeping
    """
    from blueprintos.main import app as fastapi_app
    from blueprintos.api import deps
    from blueprintos.api.v1.endpoints import me
    from blueprintos.services.landing_page_generator import LandingPageGenerator
    from blueprintos.services.profile_loader import ProfileLoader

    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    fastapi_app.dependency_overrides[deps.get_db] = _override_get_db
    fastapi_app.dependency_overrides[deps.get_identity_provider] = lambda: identity
    fastapi_app.dependency_overrides[deps.get_generator] = lambda: LandingPageGenerator()
    fastapi_app.dependency_overrides[me.get_profile_loader] = (
        lambda: functools.partial(ProfileLoader, sleep=lambda seconds: False)
    )

    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Teardown
    fastapi_app.dependency_overrides.clear()


# --- Helpers ---

def make_token(user_id, audience: str = "authenticated", expires_in: int = 3600, secret: str = TEST_JWT_SECRET) -> str:
    payload = {
        "sub": str(user_id),
        "aud": audience,
        "role": "authenticated",
        "exp": int(time.time()) + expires_in,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_headers(user_id) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


async def signup_coach(
    client: AsyncClient,
    email: str = "coach@example.com",
    workspace_name: str = "Acme Coaching",
    full_name: str = "Jane Doe",
) -> dict:
    """Helper: sign a coach up via API and return the response JSON plus auth headers."""
    resp = await client.post("/api/v1/auth/signup", json={
        "email": email,
        "password": "Passw0rd!",
        "fullName": full_name,
        "role": "coach",
        "workspaceName": workspace_name,
    })
    assert resp.status_code == 200, f"Signup failed: {resp.text}"
    data = resp.json()
    data["headers"] = auth_headers(data["userId"])
    return data


def enable_custom_domains(db, workspace_id) -> None:
    """Helper: switch on the custom domain feature for a signed-up workspace."""
    from blueprintos.models.subscription import WorkspaceFeatures

    db.query(WorkspaceFeatures).filter(
        WorkspaceFeatures.workspace_id == uuid.UUID(str(workspace_id))
    ).update({"custom_domain_enabled": True})
    db.commit()
