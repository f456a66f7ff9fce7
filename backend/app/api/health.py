"""Health check endpoint for infrastructure monitoring."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends

from app.dependencies import get_chat_store, get_codegen_store, get_integration_registry
from app.integrations.registry import IntegrationRegistry
from app.storage.session_store import SessionStore

logger = logging.getLogger(__name__)
router = APIRouter()


def _check_store(store: SessionStore) -> dict[str, Any]:
    """Read the collection and report its size."""
    try:
        return {
            "status": "healthy",
            "sessions": len(store.list()),
            **store.backend.describe(),
        }
    except Exception as exc:
        logger.warning("Session store %s health check failed: %s", store.name, exc)
        return {"status": "unhealthy", "error": str(exc)}


def _check_integrations(registry: IntegrationRegistry) -> dict[str, Any]:
    """Report registered and active integrations."""
    try:
        integrations = registry.list()
        return {
            "status": "healthy",
            "registered": len(integrations),
            "active": [i.name for i in integrations if i.active],
        }
    except Exception as exc:
        logger.warning("Integration registry health check failed: %s", exc)
        return {"status": "unhealthy", "error": str(exc)}


@router.get("")
def health_check(
    chat_store: SessionStore = Depends(get_chat_store),
    codegen_store: SessionStore = Depends(get_codegen_store),
    registry: IntegrationRegistry = Depends(get_integration_registry),
) -> dict[str, Any]:
    """Return aggregate health of the JSON stores."""
    services = {
        "chat_sessions": _check_store(chat_store),
        "codegen_sessions": _check_store(codegen_store),
        "integrations": _check_integrations(registry),
    }

    overall = (
        "healthy"
        if all(s["status"] == "healthy" for s in services.values())
        else "degraded"
    )

    return {
        "status": overall,
        "services": services,
    }
