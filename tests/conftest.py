"""
Pytest configuration and shared fixtures for client tests.

WHAT: Markers, client fixtures, fake WebSocket plumbing, live-server skip logic
WHY: Keep unit tests offline and deterministic, live tests opt-in
HOW: Register markers, build clients with tiny backoff, expose fakes as fixtures
"""

import os

import httpx
import pytest

from anythingllm_client import AnythingLLMClient, ClientConfig
from fixtures.fake_websocket import FakeConnector, FakeSocket, SleepRecorder

BASE_URL = "http://localhost:3001"
API_URL = f"{BASE_URL}/api/v1"
API_KEY = "test-key"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (isolated component tests)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (multiple components)"
    )
    config.addinivalue_line(
        "markers", "requires_anythingllm: Tests that require a running AnythingLLM server"
    )


@pytest.fixture
def config() -> ClientConfig:
    """
    Client configuration for tests.

    WHAT: Local base URL, fixed key, millisecond backoff
    WHY: Retry tests should not wait seconds between attempts
    HOW: Shrink retry_min_delay/retry_max_delay
    """
    return ClientConfig(
        base_url=BASE_URL,
        api_key=API_KEY,
        retries=3,
        retry_min_delay=0.001,
        retry_max_delay=0.005,
    )


@pytest.fixture
def client(config) -> AnythingLLMClient:
    """Client wired to the test config (mock HTTP with respx)."""
    return AnythingLLMClient(config)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_connector():
    """Factory for scripted WebSocket connectors."""
    def factory(*sessions) -> FakeConnector:
        return FakeConnector(list(sessions))
    return factory


@pytest.fixture
def make_socket():
    """Factory for fake sockets."""
    def factory(frames=(), *, error=None, hold_open=False) -> FakeSocket:
        return FakeSocket(frames, error=error, hold_open=hold_open)
    return factory


# Skip logic for live server tests
async def check_anythingllm_available() -> bool:
    """
    Check if an AnythingLLM server is available for testing.

    WHAT: Verify live tests are enabled and the server answers
    WHY: Skip tests if server not running
    HOW: Check RUN_LIVE_TESTS and attempt an HTTP connection
    """
    run_live = os.getenv("RUN_LIVE_TESTS", "false").lower() == "true"
    if not run_live:
        return False

    base_url = os.getenv("ANYTHINGLLM_BASE_URL", BASE_URL)
    try:
        async with httpx.AsyncClient() as probe:
            await probe.get(f"{base_url}/api/ping", timeout=2.0)
            return True
    except httpx.HTTPError:
        return False
