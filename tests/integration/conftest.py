"""Integration test fixtures.

API tests run the real FastAPI app with the store and the Gemini client
replaced through dependency overrides. Redis tests are skipped if Redis is
not running.
"""

import pytest
from fastapi.testclient import TestClient
from redis import Redis

from gemini_gateway.api.dependencies import get_llm_client, get_settings, get_store
from gemini_gateway.main import app


@pytest.fixture(scope="session")
def check_redis():
    """Check if Redis is available at localhost:6379.
    
    Skips tests if Redis is not reachable.
    """
    try:
        client = Redis.from_url("redis://localhost:6379/15", socket_connect_timeout=1)
        client.ping()
        client.close()
    except Exception as e:
        pytest.skip(f"Redis not available: {e}")


@pytest.fixture
def api_client(test_settings, memory_store, scripted_llm):
    """Factory fixture returning (TestClient, ScriptedLLMClient).
    
    Usage:
        def test_something(api_client):
            client, llm = api_client(["#87CEEB"], EXPOSE_POOL_STATUS=True)
    """
    def _create(replies=None, **settings_overrides):
        settings = test_settings.model_copy(update=settings_overrides)
        llm = scripted_llm(replies)
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_store] = lambda: memory_store
        app.dependency_overrides[get_llm_client] = lambda: llm
        return TestClient(app, raise_server_exceptions=False), llm
    
    yield _create
    app.dependency_overrides.clear()
