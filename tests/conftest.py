"""Pytest configuration and shared fixtures."""
import os

import httpx
import pytest
import pytest_asyncio
from helpers import FakeSurface, RecordingSleep

from colloquy.chat import ProviderOptions, RetryingTransport


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {"gemini": os.getenv("GEMINI_API_KEY")}


@pytest.fixture
def provider_options():
    """Options with grounding disabled so request bodies stay minimal."""
    return ProviderOptions(api_key="test-key", google_search=False)


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest_asyncio.fixture
async def make_client():
    """Build AsyncClients answered by handler(request); all are closed on teardown."""
    clients: list[httpx.AsyncClient] = []

    def _make(handler) -> httpx.AsyncClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.aclose()


@pytest.fixture
def make_transport(make_client):
    """Build RetryingTransports over mock clients, recording backoff by default."""
    def _make(handler, sleep: RecordingSleep | None = None, **kwargs) -> RetryingTransport:
        return RetryingTransport(
            client=make_client(handler),
            sleep=sleep or RecordingSleep(),
            **kwargs
        )

    return _make
