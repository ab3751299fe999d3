"""
Pytest configuration and shared fixtures.

This configuration sets up:
- Project root on sys.path so tests run without installation
- fakeredis-backed Redis clients (each test gets an isolated FakeServer)
- A SessionStore over fakeredis
- A full application TestClient wired to fakeredis

fakeredis needs its ``lua`` extra (lupa) because the store's mutations are
Lua scripts.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import fakeredis
import fakeredis.aioredis
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Add project root to Python path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Make every test read settings fresh from its environment."""
    from chat_sessions.core.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings():
    """
    Create test settings with safe defaults.

    Returns:
        Settings: Development settings pointing at a local Redis URL
    """
    from chat_sessions.core.config import Settings

    return Settings(
        service_name="chat-sessions-test",
        environment="development",
        redis_url="redis://localhost:6379/15",
        redis_pool_size=5,
        redis_key_prefix="test_chat_sessions:",
        default_list_limit=50,
        log_level="DEBUG",
    )


# =============================================================================
# FakeRedis Fixtures
# =============================================================================


@pytest.fixture
def fake_server():
    """An isolated in-memory Redis server."""
    return fakeredis.FakeServer()


@pytest_asyncio.fixture
async def fake_redis(fake_server):
    """
    Async fake Redis client with decode_responses=True.

    Pattern: FakeRepository - test doubles without complex mocking
    """
    client = fakeredis.aioredis.FakeRedis(server=fake_server, decode_responses=True)
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def session_store(fake_redis):
    """SessionStore over fakeredis with the default page size of 50."""
    from chat_sessions.sessions.store import SessionStore

    return SessionStore(
        redis_client=fake_redis,
        key_prefix="test_chat_sessions:",
        default_limit=50,
    )


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def app(test_settings, fake_server):
    """
    Full application wired to fakeredis.

    The Redis client is created here but first used inside the TestClient's
    event loop, where the lifespan handler pings it.
    """
    from chat_sessions.main import create_app

    client = fakeredis.aioredis.FakeRedis(server=fake_server, decode_responses=True)
    return create_app(settings=test_settings, redis_client=client)


@pytest.fixture
def client(app):
    """
    TestClient for the full application with lifespan events running.

    Returns:
        TestClient: Synchronous test client
    """
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# Sample Data
# =============================================================================


@pytest.fixture
def sample_messages():
    """Three messages in conversation order, wire shape."""
    return [
        {"role": "user", "text": "Plan a trip to Lisbon", "ts": "2024-05-01T10:00:00Z"},
        {"role": "assistant", "text": "Sure, for how many days?", "ts": "2024-05-01T10:00:05Z"},
        {"role": "user", "text": "Four days", "ts": "2024-05-01T10:00:30Z"},
    ]


@pytest.fixture
def utc_now():
    """Callable returning the current aware UTC time."""
    return lambda: datetime.now(timezone.utc)
