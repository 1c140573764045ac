"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - relay_config: Relay configuration with a dummy API key
    - provider: Scripted model provider with a fixed reply
    - store: Fresh session store per test
    - relay: ChatRelay wired to the store and scripted provider
    - async_client: HTTPX client for API testing
    - mock_session_id: Consistent session ID for tests
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from chat_relay.api.app import create_app
from chat_relay.relay.config import RelayConfig
from chat_relay.relay.service import ChatRelay
from chat_relay.store.session_store import SessionStore
from tests.fakes import ScriptedProvider


@pytest.fixture
def mock_session_id() -> str:
    """Generate consistent session ID for testing.

    Returns:
        Predictable session ID for test assertions.
    """
    return "test-session-12345"


@pytest.fixture
def relay_config() -> RelayConfig:
    """Relay configuration that needs no real credentials."""
    return RelayConfig(
        api_key="sk-test-key",
        system_prompt="You are a helpful assistant.",
        max_turns=30,
        max_sessions=None,
        session_ttl_seconds=None,
    )


@pytest.fixture
def provider() -> ScriptedProvider:
    """Provider replying "Hello, world" in three fragments."""
    return ScriptedProvider()


@pytest.fixture
def store() -> SessionStore:
    """Fresh, unbounded session store."""
    return SessionStore()


@pytest.fixture
def relay(store: SessionStore, provider: ScriptedProvider, relay_config: RelayConfig) -> ChatRelay:
    """Relay wired to the test store and scripted provider."""
    return ChatRelay(store=store, provider=provider, config=relay_config)


@pytest.fixture
async def async_client(relay: ChatRelay) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=create_app(relay=relay))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
