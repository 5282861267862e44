"""Shared fixtures and utilities for tests."""

import os

# Settings are read at import time, so the environment has to be in place
# before any application module is imported.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LATENCY_MIN_MS", "0")
os.environ.setdefault("LATENCY_MAX_MS", "0")
os.environ.setdefault("FAILURE_RATE", "0")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import pytest
import pytest_asyncio

from api.client import ApiClient
from core.simulation import SimulatedNetwork
from database.engine import build_engine, build_sessionmaker, close_db, init_db
from database.store import RecordStore
from tests.factories import make_assessment, make_candidate, make_job

MEMORY_URL = "sqlite+aiosqlite://"


async def _noop_sleep(seconds: float) -> None:
    return None


@pytest_asyncio.fixture
async def engine():
    """A fresh in-memory database with all tables created."""
    engine = build_engine(MEMORY_URL)
    await init_db(engine)
    yield engine
    await close_db(engine)


@pytest.fixture
def store(engine):
    return RecordStore(build_sessionmaker(engine))


@pytest.fixture
def network():
    """Zero latency, never fails."""
    return SimulatedNetwork(0, 0, 0.0, sleep=_noop_sleep)


@pytest.fixture
def failing_network():
    """Zero latency, always fails."""
    return SimulatedNetwork(0, 0, 1.0, sleep=_noop_sleep)


@pytest.fixture
def api(store, network):
    return ApiClient(store, network)


@pytest.fixture
def failing_api(store, failing_network):
    return ApiClient(store, failing_network)


@pytest_asyncio.fixture
async def seeded_store(store):
    """Three jobs, three candidates and one assessment."""
    await store.bulk_put("jobs", [
        make_job("job-1", title="Senior Frontend Developer", order=0,
                 createdAt="2024-01-15T10:00:00.000Z"),
        make_job("job-2", title="backend engineer", slug="backend-engineer", status="draft",
                 tags=["Python", "Go"], order=1, createdAt="2024-02-01T10:00:00.000Z"),
        make_job("job-3", title="Product Designer", slug="product-designer", status="archived",
                 tags=["Figma"], order=2, createdAt="2023-12-01T10:00:00.000Z"),
    ])
    await store.bulk_put("candidates", [
        make_candidate("candidate-1"),
        make_candidate("candidate-2", name="Bob Smith", email="bob@example.com", stage="tech"),
        make_candidate("candidate-3", name="Carol White", email="carol@test.org", jobId="job-2"),
    ])
    await store.put("assessments", make_assessment())
    return store
