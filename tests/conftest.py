import os
from pathlib import Path

from dotenv import load_dotenv

env_file = Path(__file__).parent.parent / ".env.test"
load_dotenv(env_file)
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core import redis as redis_module  # noqa: E402
from app.core.config import settings  # noqa: E402
from app.core.rate_limit import limiter  # noqa: E402
from app.core.security import (  # noqa: E402
    create_access_token,
    create_refresh_token,
    hash_token,
)
from app.db.session import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.sla.registry import SlaRegistry  # noqa: E402
from tests.utils.factories import create_user_factory  # noqa: E402

limiter.enabled = False


@pytest.fixture
def test_engine():
    """In-memory SQLite shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(test_engine):
    session = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)()

    session.commit = session.flush

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def redis_client():
    """Stand-in for redis.asyncio.Redis backed by a dict."""
    store: dict[str, str] = {}
    client = AsyncMock()

    async def setex(key, ttl, value):
        store[key] = value

    async def get(key):
        return store.get(key)

    async def delete(key):
        store.pop(key, None)

    client.setex.side_effect = setex
    client.get.side_effect = get
    client.delete.side_effect = delete
    client.store = store
    return client


@pytest.fixture
def sla_registry():
    return SlaRegistry.with_defaults()


@pytest.fixture
async def test_app(db_session, redis_client, sla_registry):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.state.sla_registry = sla_registry

    redis_module.redis_client = redis_client

    yield app

    app.dependency_overrides.clear()
    redis_module.redis_client = None


@pytest.fixture
async def test_client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        yield client


@pytest.fixture
def test_client_user(db_session):
    return create_user_factory(
        db_session, email="client@example.com", password="clientpass123", role="client"
    )


@pytest.fixture
def test_other_client(db_session):
    return create_user_factory(db_session, email="other@example.com", role="client")


@pytest.fixture
def test_agent(db_session):
    return create_user_factory(
        db_session, email="agent@example.com", full_name="Alice Agent", role="agent"
    )


@pytest.fixture
def test_manager(db_session):
    return create_user_factory(
        db_session, email="manager@example.com", full_name="Max Manager", role="manager"
    )


def _token_for(user) -> str:
    return create_access_token({"sub": str(user.id), "email": user.email, "role": user.role})


@pytest.fixture
def test_client_token(test_client_user):
    return _token_for(test_client_user)


@pytest.fixture
def test_other_client_token(test_other_client):
    return _token_for(test_other_client)


@pytest.fixture
def test_agent_token(test_agent):
    return _token_for(test_agent)


@pytest.fixture
def test_manager_token(test_manager):
    return _token_for(test_manager)


@pytest.fixture
async def test_refresh_token(test_client_user, test_app):
    token = create_refresh_token(
        {
            "sub": str(test_client_user.id),
            "email": test_client_user.email,
            "role": test_client_user.role,
        }
    )

    token_hash = hash_token(token)
    ttl_seconds = settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60
    await redis_module.store_refresh_token(token_hash, str(test_client_user.id), ttl_seconds)

    return token
