"""
Pytest configuration and fixtures for Task Blaster API tests
"""
import os

# Settings are read at import time; point them at an in-memory database first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENABLE_JSON_LOGGING"] = "false"
os.environ["ENABLE_OTEL_EXPORTER"] = "false"
os.environ["ENVIRONMENT"] = "test"

import pytest
from typing import AsyncGenerator, Callable, Awaitable
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession

from app.main import app
from app.db.database import get_db, Base, engine, AsyncSessionLocal
from app.db.seed import seed_database, USERS
from app.core.token_cache import token_cache
from app.core.translation_cache import translation_cache

ALICE_TOKEN = USERS[0]["access_token"]  # leads WEBRED
BOB_TOKEN = USERS[1]["access_token"]    # leads MOBDEV


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh seeded database for each test; yields a session for direct setup"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        await seed_database(session, with_sample_tasks=False)
        await token_cache.initialize(session)
        await translation_cache.initialize(session)
        yield session

    token_cache.clear()
    translation_cache.clear()
    # In-memory database goes away with its connection
    await engine.dispose()


@pytest.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client; every request gets its own session"""

    async def override_get_db():
        async with AsyncSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict:
    """Headers of the WEBRED project leader"""
    return {"TB_TOKEN": ALICE_TOKEN}


@pytest.fixture
def other_user_headers() -> dict:
    """Headers of a user who does not lead WEBRED"""
    return {"TB_TOKEN": BOB_TOKEN}


@pytest.fixture
async def webred(client: AsyncClient, auth_headers) -> dict:
    response = await client.get("/projects/WEBRED", headers=auth_headers)
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def create_task(client: AsyncClient, auth_headers) -> Callable[..., Awaitable[dict]]:
    """Factory creating tasks through the API"""

    async def _create(project_id: int, title: str = "Test Task", **fields) -> dict:
        response = await client.post(
            "/tasks",
            json={"projectId": project_id, "title": title, **fields},
            headers=auth_headers
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def set_positions(client: AsyncClient, auth_headers):
    """Write exact positions into a column through the bulk endpoint"""

    async def _set(project_code: str, status: str, positions: dict) -> list:
        response = await client.patch(
            f"/projects/{project_code}/kanban/tasks/column/{status}/positions",
            json={"positionUpdates": [
                {"taskId": task_id, "newPosition": position} for task_id, position in positions.items()
            ]},
            headers=auth_headers
        )
        assert response.status_code == 200, response.text
        return response.json()

    return _set
