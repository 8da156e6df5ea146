"""Shared test fixtures.

Tests run against an in-memory SQLite database built from the ORM metadata,
so no Postgres or Redis is needed. Redis stays uninitialized and the rate
limiter lets every request through.
"""

from __future__ import annotations

import os

os.environ["RMCE_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RMCE_JWT_SECRET"] = "test-secret-" + "x" * 52
os.environ["RMCE_LOG_FORMAT"] = "console"
os.environ["RMCE_LOG_LEVEL"] = "WARNING"

from collections.abc import AsyncGenerator  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from rmce.config import get_settings  # noqa: E402

get_settings.cache_clear()

from rmce.database import close_db, create_schema, get_session, init_db  # noqa: E402
from rmce.main import create_app  # noqa: E402

TEST_PASSWORD = "Secret123"


@pytest_asyncio.fixture
async def app():
    """Application with a fresh database. Lifespan does not run under ASGITransport."""
    application = create_app()
    await init_db(get_settings().database_url)
    await create_schema()
    yield application
    await close_db()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP test client bound to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db_session(app) -> AsyncGenerator[AsyncSession, None]:
    """A session on the same database the client talks to."""
    async for session in get_session():
        yield session


async def register_and_login(client: AsyncClient, username: str) -> tuple[int, dict[str, str]]:
    """Create an account and return (user_id, Authorization headers)."""
    email = f"{username}@example.com"
    resp = await client.post(
        "/auth/register",
        json={"username": username, "email": email, "password": TEST_PASSWORD},
    )
    assert resp.status_code == 200, resp.text
    user_id = resp.json()["id"]

    resp = await client.post("/auth/login", json={"email": email, "password": TEST_PASSWORD})
    assert resp.status_code == 200, resp.text
    return user_id, {"Authorization": f"Bearer {resp.json()['token']}"}


async def create_route(client: AsyncClient, headers: dict[str, str], name: str = "Loop", **extra) -> dict:
    payload = {"name": name, "path_data": [[52.37, 4.89], [52.38, 4.90]], **extra}
    resp = await client.post("/routes", json=payload, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


async def submit_score(client: AsyncClient, headers: dict[str, str], route_id: int, time_seconds: float, **extra) -> dict:
    resp = await client.post(
        f"/routes/{route_id}/score",
        json={"time_seconds": time_seconds, **extra},
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    return resp.json()
