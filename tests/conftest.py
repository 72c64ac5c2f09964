"""Shared fixtures: in-memory store, a controllable clock, HTTP client."""
import os

# Before any app import reads settings.
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from api.main import app
from core.config import DatabaseConfig
from core.database import build_engine, build_session_factory, get_session, init_db
from verticals.accounts.repository import UserRepository
from verticals.tasks.repository import TaskRepository
from verticals.tasks.service import TaskService

PASSWORD = "Secret123"


class FrozenClock:
    """Callable clock for TaskService; advance() moves time forward."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> None:
        self.now = self.now + timedelta(**delta)


@pytest_asyncio.fixture
async def engine():
    engine = build_engine(DatabaseConfig(url="sqlite+aiosqlite://"), poolclass=StaticPool)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine):
    factory = build_session_factory(engine)
    async with factory() as session:
        yield session


@pytest.fixture
def clock():
    return FrozenClock(datetime.now(timezone.utc))


@pytest.fixture
def service(session, clock):
    return TaskService(TaskRepository(session), clock=clock)


@pytest_asyncio.fixture
async def alice(session):
    return await UserRepository(session).create("Alice", "alice@example.com", "x")


@pytest_asyncio.fixture
async def bob(session):
    return await UserRepository(session).create("Bob", "bob@example.com", "x")


@pytest_asyncio.fixture
async def client(engine):
    factory = build_session_factory(engine)

    async def override_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register a user and return bearer headers for them.

    The token cookie is dropped so each request authenticates only through
    the headers it is given.
    """

    async def _register(email: str = "ada@example.com", name: str = "Ada") -> dict:
        resp = await client.post(
            "/api/register",
            json={"name": name, "email": email, "password": PASSWORD},
        )
        assert resp.status_code == 201, resp.text
        client.cookies.clear()
        return {"Authorization": f"Bearer {resp.json()['token']}"}

    return _register
