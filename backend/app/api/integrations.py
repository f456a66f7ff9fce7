"""Integration management endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from app.dependencies import get_integration_registry
from app.errors import ValidationError
from app.integrations.registry import IntegrationRegistry
from app.models.integrations import (
    ActiveFlagUpdate,
    ActiveSelection,
    Integration,
    IntegrationCreate,
    IntegrationUpdate,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=list[Integration])
def list_integrations(
    registry: IntegrationRegistry = Depends(get_integration_registry),
) -> list[Integration]:
    return registry.list()


@router.post("", response_model=Integration, status_code=201)
def create_integration(
    body: IntegrationCreate,
    registry: IntegrationRegistry = Depends(get_integration_registry),
) -> Integration:
    """Register an integration. It starts inactive."""
    return registry.create(body.name, body.type, body.endpoint, body.apiKey)


# Declared before the "/{integration_id}" routes so "active" is not read as an id.
@router.patch("/active")
def activate_integration(
    body: ActiveSelection,
    registry: IntegrationRegistry = Depends(get_integration_registry),
) -> dict[str, str]:
    """Make one integration active and deactivate all others."""
    if not body.id:
        raise ValidationError("Missing integration id")
    registry.activate_exclusively(body.id)
    return {"message": "Active integration updated"}


@router.get("/{integration_id}", response_model=Integration)
def get_integration(
    integration_id: str,
    registry: IntegrationRegistry = Depends(get_integration_registry),
) -> Integration:
    return registry.get(integration_id)


@router.patch("/{integration_id}")
def set_integration_active(
    integration_id: str,
    body: ActiveFlagUpdate,
    registry: IntegrationRegistry = Depends(get_integration_registry),
) -> dict[str, str]:
    """Set this integration's active flag; other integrations are untouched."""
    if body.active is None:
        raise ValidationError("Missing active flag")
    registry.set_active_flag(integration_id, body.active)
    return {"message": "Integration updated"}


@router.put("/{integration_id}", response_model=Integration)
def update_integration(
    integration_id: str,
    body: IntegrationUpdate,
    registry: IntegrationRegistry = Depends(get_integration_registry),
) -> Integration:
    return registry.update(
        integration_id,
        name=body.name,
        endpoint=body.endpoint,
        credential=body.apiKey,
    )


@router.delete("/{integration_id}")
def delete_integration(
    integration_id: str,
    registry: IntegrationRegistry = Depends(get_integration_registry),
) -> dict[str, str]:
    registry.delete(integration_id)
    return {"message": "Integration deleted"}
