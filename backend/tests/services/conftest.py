"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe hits the test engine
    - seed_users inserts ids 5 (user), 7 (user), 9 (admin) with old timestamps

Design Decisions:
    - SQLite in-memory + StaticPool: every session shares one connection, so data
      seeded through test_db is visible to requests made through client
    - auth_headers signs real tokens: the actor dependency is exercised, not mocked
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from users_api.api.actor import create_access_token
from users_api.config import get_settings
from users_api.core.domain_types import Actor, Role
from users_api.db.base import Base
from users_api.infrastructure.database import get_db, DatabaseSessionManager
from users_api.models.user import User
import users_api.infrastructure.database as db_module
from users_api.main import app

OLD_TIMESTAMP = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def seed_users(test_db):
    """Insert three users directly into the test DB."""
    users = [
        User(
            id=5, name="Sam Self", email="sam@example.com",
            password_hash="hashed-secret", role="user",
            created_at=OLD_TIMESTAMP, updated_at=OLD_TIMESTAMP,
        ),
        User(
            id=7, name="Olga Other", email="olga@example.com",
            password_hash="hashed-secret", role="user",
            created_at=OLD_TIMESTAMP, updated_at=OLD_TIMESTAMP,
        ),
        User(
            id=9, name="Ada Admin", email="ada@example.com",
            password_hash="hashed-secret", role="admin",
            created_at=OLD_TIMESTAMP, updated_at=OLD_TIMESTAMP,
        ),
    ]
    test_db.add_all(users)
    await test_db.commit()
    return {u.id: u for u in users}


@pytest.fixture
def auth_headers():
    """Build an Authorization header for an actor id/role."""
    def _headers(actor_id: int, role: str = "user") -> dict:
        token = create_access_token(Actor(id=actor_id, role=Role(role)), get_settings())
        return {"Authorization": f"Bearer {token}"}
    return _headers
