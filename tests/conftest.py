"""
Shared test fixtures.

- In-memory SQLite database (aiosqlite + StaticPool)
- FakeStrava: httpx.MockTransport standing in for the Strava API
- API client running the FastAPI app over ASGITransport
"""

from datetime import timedelta

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from runlog.config import settings
from runlog.models.base import Base
from runlog.features.activities import models as _activities  # noqa
from runlog.features.strava import (
    StravaClient,
    StravaCredentialsRepository,
    StravaOAuth,
)
from runlog.shared.timeutils import utcnow

ADMIN_KEY = "test-admin-key"
ATHLETE_ID = 4242


# =============================================================================
# Fake Strava API
# =============================================================================

class FakeStrava:
    """
    In-memory Strava API.

    details maps activity id -> detail dict, an error status code,
    or an exception instance to raise. Missing ids return a detail
    with a null description.
    """

    def __init__(self):
        self.activities: list[dict] = []
        self.details: dict = {}
        self.list_status = 200
        self.token_status = 200
        self.token_body = {
            "token_type": "Bearer",
            "access_token": "new-access",
            "refresh_token": "new-refresh",
            "expires_at": int((utcnow() + timedelta(hours=6)).timestamp()),
            "expires_in": 21600,
            "athlete": {
                "id": ATHLETE_ID,
                "username": "runner",
                "firstname": "Test",
                "lastname": "Runner",
            },
        }
        self.athlete_status = 200
        self.athlete = {"id": ATHLETE_ID, "firstname": "Test"}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/api/v3/oauth/token":
            if self.token_status != 200:
                return httpx.Response(self.token_status, text="bad token request")
            return httpx.Response(200, json=self.token_body)

        if path == "/api/v3/athlete/activities":
            if self.list_status != 200:
                return httpx.Response(self.list_status, text="list failed")
            return httpx.Response(200, json=self.activities)

        if path.startswith("/api/v3/activities/"):
            activity_id = int(path.rsplit("/", 1)[1])
            detail = self.details.get(activity_id, {"id": activity_id, "description": None})
            if isinstance(detail, Exception):
                raise detail
            if isinstance(detail, int):
                return httpx.Response(detail, text="detail failed")
            return httpx.Response(200, json=detail)

        if path == "/api/v3/athlete":
            if self.athlete_status != 200:
                return httpx.Response(self.athlete_status, text="athlete failed")
            return httpx.Response(200, json=self.athlete)

        return httpx.Response(404, text="not found")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


def make_activity(activity_id: int, **overrides) -> dict:
    """Strava activity summary as returned by /athlete/activities."""
    activity = {
        "id": activity_id,
        "name": f"Morning Run {activity_id}",
        "description": None,
        "start_date": f"2024-03-{activity_id % 28 + 1:02d}T07:15:30Z",
        "distance": 8046.7,
        "moving_time": 2400,
        "total_elevation_gain": 42.4,
        "average_heartrate": 151.6,
        "type": "Run",
        "sport_type": "Run",
    }
    activity.update(overrides)
    return activity


# =============================================================================
# Settings
# =============================================================================

@pytest.fixture(autouse=True)
def app_settings(monkeypatch):
    """Configure Strava and admin settings for every test."""
    monkeypatch.setattr(settings, "admin_key", ADMIN_KEY)
    monkeypatch.setattr(settings, "strava_client_id", "12345")
    monkeypatch.setattr(settings, "strava_client_secret", "secret")
    monkeypatch.setattr(settings, "strava_redirect_uri", "http://localhost:8000/api/strava/callback")
    monkeypatch.setattr(settings, "strava_oauth_state", "runlog")
    monkeypatch.setattr(settings, "environment", "development")
    return settings


# =============================================================================
# Database
# =============================================================================

@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


async def store_credentials(db: AsyncSession, expires_in: timedelta = timedelta(hours=1), **overrides):
    """Store a credential row and return it freshly loaded."""
    fields = dict(
        athlete_id=ATHLETE_ID,
        access_token="stored-access",
        refresh_token="stored-refresh",
        token_type="Bearer",
        scope="read,activity:read_all",
        expires_at=utcnow() + expires_in,
    )
    fields.update(overrides)
    repo = StravaCredentialsRepository(db)
    await repo.save(**fields)
    await db.commit()
    return await repo.load()


# =============================================================================
# Strava
# =============================================================================

@pytest.fixture
def fake_strava():
    return FakeStrava()


@pytest.fixture
def oauth(fake_strava):
    return StravaOAuth(transport=fake_strava.transport)


@pytest.fixture
def strava_client(fake_strava):
    return StravaClient(transport=fake_strava.transport)


# =============================================================================
# API
# =============================================================================

@pytest.fixture
async def api(session_factory, fake_strava):
    """HTTP client for the app with the test database and fake Strava."""
    from runlog.api.deps import get_strava_client, get_strava_oauth
    from runlog.db.session import get_async_db
    from runlog.main import app

    async def override_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_db] = override_db
    app.dependency_overrides[get_strava_oauth] = lambda: StravaOAuth(transport=fake_strava.transport)
    app.dependency_overrides[get_strava_client] = lambda: StravaClient(transport=fake_strava.transport)

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_KEY}"}


@pytest.fixture
def activity_factory():
    return make_activity


@pytest.fixture
def credentials_factory(db):
    async def _store(**overrides):
        return await store_credentials(db, **overrides)
    return _store
