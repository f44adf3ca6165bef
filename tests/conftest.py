"""Shared pytest fixtures for all test suites."""

from collections.abc import AsyncGenerator, Generator

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from backend.app.db.engine import get_store
from backend.app.db.inmemory import InMemoryStore
from backend.app.db.seed_dev import seed_demo_user
from backend.app.llm.client import SimulatedAnswerClient, get_answer_client
from backend.app.main import app
from ui.client import ChatApiClient

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n"


@pytest.fixture
def store() -> InMemoryStore:
    """Fresh in-memory store per test."""
    return InMemoryStore()


@pytest.fixture
def answer_client() -> SimulatedAnswerClient:
    """Instant, seeded answer client."""
    return SimulatedAnswerClient(delay_ms=0, seed=7)


@pytest.fixture
def override_dependencies(
    store: InMemoryStore, answer_client: SimulatedAnswerClient
) -> Generator[None, None, None]:
    """Point the app at the per-test store and answer client."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_answer_client] = lambda: answer_client
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client(override_dependencies: None) -> Generator[TestClient, None, None]:
    """Test client with lifespan (seeds the demo user into the per-test store)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def api_client(
    override_dependencies: None, store: InMemoryStore
) -> AsyncGenerator[ChatApiClient, None]:
    """UI client talking to the app in-process over ASGI."""
    await seed_demo_user(store)
    transport = httpx.ASGITransport(app=app)
    chat_client = ChatApiClient(
        api_url="http://testserver", backend_url="http://testserver", transport=transport
    )
    yield chat_client
    await chat_client.aclose()


@pytest.fixture
def pdf_bytes() -> bytes:
    """Minimal PDF payload."""
    return PDF_BYTES
