"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

from typing import Any

import pytest

from gemini_gateway.config import Settings
from gemini_gateway.llm.base_client import BaseLLMClient
from gemini_gateway.persistence.store import MemoryKeyValueStore
from gemini_gateway.pool.manager import CredentialPool

DAY = 24 * 60 * 60


class FakeClock:
    """Settable time source (epoch seconds)."""
    
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now
    
    def __call__(self) -> float:
        return self.now
    
    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedLLMClient(BaseLLMClient):
    """LLM client double that replays scripted replies or raises scripted errors."""
    
    def __init__(self, replies: list[Any] | None = None):
        super().__init__(base_url="http://scripted.test", timeout=15.0)
        self.replies = list(replies or [])
        self.calls: list[dict[str, Any]] = []
    
    async def generate(self, api_key, parts, operation="generate"):
        self.calls.append({"api_key": api_key, "parts": parts, "operation": operation})
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def credentials() -> list[str]:
    return ["key-alpha-000001", "key-bravo-000002", "key-charlie-0003"]


@pytest.fixture
def memory_store(fake_clock: FakeClock) -> MemoryKeyValueStore:
    return MemoryKeyValueStore(clock=fake_clock)


@pytest.fixture
def credential_pool(memory_store, credentials, fake_clock) -> CredentialPool:
    return CredentialPool(
        store=memory_store,
        credentials=credentials,
        cooldown_seconds=30 * DAY,
        clock=fake_clock,
    )


@pytest.fixture
def scripted_llm():
    """Factory fixture for ScriptedLLMClient.
    
    Usage:
        def test_something(scripted_llm):
            client = scripted_llm(["#FFFFFF", UpstreamHTTPError("quota", 429)])
    """
    def _create(replies: list[Any] | None = None) -> ScriptedLLMClient:
        return ScriptedLLMClient(replies)
    
    return _create


@pytest.fixture
def test_settings(credentials) -> Settings:
    """Test settings with safe defaults for local testing."""
    return Settings(
        APP_NAME="Gemini Gateway (Test)",
        APP_VERSION="0.1.0",
        ENVIRONMENT="development",
        LOG_LEVEL="DEBUG",
        GEMINI_KEYS=credentials,
        GEMINI_BASE_URL="http://gemini.test/v1beta",
        STORE_BACKEND="memory",
        REDIS_URL="redis://localhost:6379/15",
        PROMETHEUS_ENABLED=False,
        EXPOSE_POOL_STATUS=False,
    )
