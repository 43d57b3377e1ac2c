"""
Pytest configuration: an in-memory database seeded from data/catalog.json,
a FakeRedis standing in for the rate limiter backend, and helpers to sign
members up through the API.
"""
import dataclasses
import uuid
from typing import Dict, Iterable, Optional

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from app.core.config import Settings
from app.core.database import Base, build_engine, build_session_factory
from app.core.rate_limit import FixedWindowRateLimiter
from app.main import create_app
from scripts.init_database import DEFAULT_CATALOG, init_catalog

PASSWORD = "campfire123"


class FakeRedis:
    """The subset of redis.asyncio.Redis the rate limiter uses."""

    def __init__(self):
        self.counts: Dict[str, int] = {}
        self.ttls: Dict[str, int] = {}

    async def incr(self, key: str) -> int:
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    async def expire(self, key: str, seconds: int) -> bool:
        self.ttls[key] = seconds
        return True

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        pass


class BrokenRedis(FakeRedis):
    async def incr(self, key: str) -> int:
        raise RedisConnectionError("connection refused")


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        jwt_secret_key="test-secret-key",
        log_level="WARNING",
        rate_limit_requests=1000,
    )


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def make_client(fake_redis):
    """Build a TestClient for a fresh app with its own seeded database."""

    def _make(settings: Settings, redis=None) -> TestClient:
        app = create_app(settings)
        app.state.rate_limiter = FixedWindowRateLimiter(
            redis or fake_redis,
            limit=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window_seconds,
        )
        Base.metadata.create_all(bind=app.state.engine)
        db = app.state.session_factory()
        try:
            init_catalog(DEFAULT_CATALOG, db)
        finally:
            db.close()
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client, settings) -> TestClient:
    return make_client(settings)


@pytest.fixture
def db():
    """A standalone seeded session for data-access tests (no HTTP app)."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = build_session_factory(engine)()
    init_catalog(DEFAULT_CATALOG, session)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


# ============================================================================
# Helpers
# ============================================================================

def unique_email() -> str:
    return f"member-{uuid.uuid4().hex[:10]}@scouts.org.uk"


def signup_body(**overrides) -> dict:
    body = {
        "firstName": "Robert",
        "lastName": "Baden-Powell",
        "email": unique_email(),
        "membershipNumber": "0001907",
    }
    body.update(overrides)
    return body


def sign_up(client: TestClient, **overrides) -> dict:
    response = client.post("/auth/signup", json=signup_body(**overrides))
    assert response.status_code == 201, response.text
    return response.json()["user"]


def complete_signup(
    client: TestClient,
    user_id: str,
    username: Optional[str] = None,
    password: str = PASSWORD,
    earned: Iterable[int] = (1, 6),
    required: Iterable[int] = (2,),
) -> dict:
    response = client.post("/auth/signup-secondary", json={
        "userId": user_id,
        "username": username or f"scout-{uuid.uuid4().hex[:8]}",
        "password": password,
        "earnedBadges": list(earned),
        "requiredBadges": list(required),
    })
    assert response.status_code == 200, response.text
    # Keep auth explicit per request; drop the cookie the response set
    client.cookies.clear()
    return response.json()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def member(client) -> dict:
    """A fully registered member holding badges 1 and 6, requiring badge 2."""
    user = sign_up(client)
    registered = complete_signup(client, user["id"])
    return {
        "id": user["id"],
        "username": registered["user"]["username"],
        "token": registered["token"],
        "headers": auth_headers(registered["token"]),
    }


def with_limit(settings: Settings, limit: int) -> Settings:
    return dataclasses.replace(settings, rate_limit_requests=limit)
