"""Shared test fixtures.

Environment defaults are set before any application import: settings are read
once at import time and JWT_SECRET has no default.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-do-not-use-in-production")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("CACHE_BACKEND", "memory")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.fv_cache.infrastructure.memory_cache import MemoryCache  # noqa: E402
from src.fv_cache.provider import get_cache  # noqa: E402
from src.fv_common.database import get_db_session  # noqa: E402
from src.fv_feature.api.router import get_feature_repository  # noqa: E402
from src.fv_gateway.auth.dependencies import get_user_repository  # noqa: E402
from src.fv_vote.api.router import get_vote_repository  # noqa: E402
from src.main import app  # noqa: E402
from tests.fakes import (  # noqa: E402
    FakeFeatureRepository,
    FakeSession,
    FakeUserRepository,
    FakeVoteRepository,
    InMemoryStore,
)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def db() -> FakeSession:
    return FakeSession()


@pytest.fixture
def cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def user_repo(store: InMemoryStore) -> FakeUserRepository:
    return FakeUserRepository(store)


@pytest.fixture
def feature_repo(store: InMemoryStore) -> FakeFeatureRepository:
    return FakeFeatureRepository(store)


@pytest.fixture
def vote_repo(store: InMemoryStore) -> FakeVoteRepository:
    return FakeVoteRepository(store)


@pytest.fixture
async def client(store, db, cache, user_repo, feature_repo, vote_repo) -> AsyncClient:
    """Async HTTP client against the app, backed by the in-memory store.

    ASGITransport does not run the lifespan, so no database is contacted.
    """

    async def _db_session():
        yield db

    app.dependency_overrides[get_db_session] = _db_session
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_user_repository] = lambda: user_repo
    app.dependency_overrides[get_feature_repository] = lambda: feature_repo
    app.dependency_overrides[get_vote_repository] = lambda: vote_repo

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
