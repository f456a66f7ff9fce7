"""Shared test fixtures for the internal tools backend."""

import json
from collections.abc import AsyncGenerator, Callable
from typing import Any, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.dependencies import (
    CHAT_DEFAULT_TITLE,
    CODEGEN_DEFAULT_TITLE,
    get_chat_store,
    get_codegen_store,
    get_http_client,
    get_integration_registry,
)
from app.integrations.registry import IntegrationRegistry
from app.main import app
from app.models.integrations import Integration
from app.storage.backends import MemoryBackend
from app.storage.session_store import SessionStore

LOCAL_ENDPOINT = "http://ollama.test"
PROXIED_ENDPOINT = "https://ai.example.test/"
CHAT_COMPLETIONS_URL = "https://ai.example.test/api/v1/chat/completions"
GENERATE_URL = "http://ollama.test/api/generate"


class FakeUpstream:
    """Stands in for inference backends behind ``httpx.MockTransport``.

    Routes are keyed by full URL; every request is recorded. A route may be a
    canned response or a callable taking the request (to raise transport errors).
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def route(
        self,
        url: str,
        status: int = 200,
        text: Optional[str] = None,
        payload: Any = None,
    ) -> None:
        if payload is not None:
            self._routes[url] = lambda request: httpx.Response(status, json=payload)
        else:
            self._routes[url] = lambda request: httpx.Response(status, text=text or "")

    def route_handler(
        self, url: str, handler: Callable[[httpx.Request], httpx.Response]
    ) -> None:
        self._routes[url] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self._routes.get(str(request.url))
        if handler is None:
            return httpx.Response(404, text=f"no route for {request.url}")
        return handler(request)


def ollama_stream(*parts: str) -> str:
    """Build a newline-delimited generate stream from partial responses."""
    lines = [json.dumps({"response": p, "done": False}) for p in parts]
    lines.append(json.dumps({"response": "", "done": True}))
    return "\n".join(lines)


def chat_completion(content: str) -> dict[str, Any]:
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def registry() -> IntegrationRegistry:
    return IntegrationRegistry(MemoryBackend())


@pytest.fixture
def chat_store() -> SessionStore:
    return SessionStore(MemoryBackend(), "chat", CHAT_DEFAULT_TITLE)


@pytest.fixture
def codegen_store() -> SessionStore:
    return SessionStore(MemoryBackend(), "codegen", CODEGEN_DEFAULT_TITLE)


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest_asyncio.fixture
async def upstream_client(upstream: FakeUpstream) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client whose requests are answered by ``upstream``."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(upstream)) as client:
        yield client


@pytest_asyncio.fixture
async def client(
    registry: IntegrationRegistry,
    chat_store: SessionStore,
    codegen_store: SessionStore,
    upstream_client: httpx.AsyncClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints against in-memory stores."""
    app.dependency_overrides[get_integration_registry] = lambda: registry
    app.dependency_overrides[get_chat_store] = lambda: chat_store
    app.dependency_overrides[get_codegen_store] = lambda: codegen_store
    app.dependency_overrides[get_http_client] = lambda: upstream_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def local_integration(registry: IntegrationRegistry) -> Integration:
    return registry.create("Local", "local", LOCAL_ENDPOINT)


@pytest.fixture
def proxied_integration(registry: IntegrationRegistry) -> Integration:
    return registry.create("Nutanix", "proxied", PROXIED_ENDPOINT, "secret-key")
