"""Dependency injection providers for FastAPI."""

import httpx
from fastapi import Depends

from app.config import Settings, get_settings, settings
from app.conversation.controller import ConversationController
from app.inference.adapter import (
    InferenceAdapter,
    LocalGenerateAdapter,
    ProxiedChatAdapter,
)
from app.inference.proxy import ProxyForwarder
from app.integrations.registry import IntegrationRegistry
from app.storage.backends import JsonFileBackend
from app.storage.session_store import SessionStore

CHAT_DEFAULT_TITLE = "New Chat"
CODEGEN_DEFAULT_TITLE = "New CodeGen Session"

# Global singleton instances
_registry: IntegrationRegistry | None = None
_chat_store: SessionStore | None = None
_codegen_store: SessionStore | None = None
_http_client: httpx.AsyncClient | None = None


def get_integration_registry() -> IntegrationRegistry:
    """Return singleton IntegrationRegistry instance."""
    global _registry
    if _registry is None:
        _registry = IntegrationRegistry(JsonFileBackend(settings.integrations_path))
    return _registry


def get_chat_store() -> SessionStore:
    """Return singleton SessionStore for chat sessions."""
    global _chat_store
    if _chat_store is None:
        _chat_store = SessionStore(
            JsonFileBackend(settings.chat_store_path), "chat", CHAT_DEFAULT_TITLE
        )
    return _chat_store


def get_codegen_store() -> SessionStore:
    """Return singleton SessionStore for code-generation sessions."""
    global _codegen_store
    if _codegen_store is None:
        _codegen_store = SessionStore(
            JsonFileBackend(settings.codegen_store_path),
            "codegen",
            CODEGEN_DEFAULT_TITLE,
        )
    return _codegen_store


def get_http_client() -> httpx.AsyncClient:
    """Return the shared upstream HTTP client (no timeout unless configured)."""
    global _http_client
    if _http_client is None or _http_client.is_closed:
        _http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.upstream_timeout)
        )
    return _http_client


async def close_http_client() -> None:
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


def get_proxy_forwarder(
    registry: IntegrationRegistry = Depends(get_integration_registry),
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> ProxyForwarder:
    return ProxyForwarder(registry, client, settings.proxy_backends)


def get_inference_adapter(
    forwarder: ProxyForwarder = Depends(get_proxy_forwarder),
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> InferenceAdapter:
    return InferenceAdapter(
        [
            LocalGenerateAdapter(client, settings.local_model),
            ProxiedChatAdapter(
                forwarder, settings.proxied_backend, settings.proxied_model
            ),
        ]
    )


def get_conversation_controller(
    registry: IntegrationRegistry = Depends(get_integration_registry),
    adapter: InferenceAdapter = Depends(get_inference_adapter),
) -> ConversationController:
    return ConversationController(registry, adapter)
