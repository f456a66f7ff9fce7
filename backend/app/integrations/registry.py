"""Integration registry backed by ``{"integrations": [...]}``."""

from __future__ import annotations

import logging
from typing import Any, Optional

from app.errors import NotFoundError, ValidationError
from app.models.integrations import (
    KIND_ALIASES,
    Integration,
    IntegrationKind,
    resolve_kind,
)
from app.storage.backends import DocumentBackend, valid_entries
from app.storage.ids import new_id

logger = logging.getLogger(__name__)

_EMPTY: dict[str, Any] = {"integrations": []}

MISSING_FIELDS_MESSAGE = (
    "Missing required fields: name, type, and endpoint are required, "
    "and apiKey is required for non-local integrations."
)


def _dump(integration: Integration) -> dict[str, Any]:
    return integration.model_dump(mode="json", by_alias=True)


def _parse_kind(value: Optional[str]) -> IntegrationKind:
    try:
        return IntegrationKind(resolve_kind(value))
    except ValueError:
        allowed = ", ".join([k.value for k in IntegrationKind] + list(KIND_ALIASES))
        raise ValidationError(
            f"Unknown integration type {value!r} (expected one of: {allowed})"
        ) from None


def _checked_credential(kind: IntegrationKind, credential: Optional[str]) -> str:
    if kind is IntegrationKind.LOCAL:
        return ""
    if not credential:
        raise ValidationError(MISSING_FIELDS_MESSAGE)
    return credential


class IntegrationRegistry:
    """Single source of truth for which backends a conversation may talk to."""

    def __init__(self, backend: DocumentBackend) -> None:
        self.backend = backend

    def list(self) -> list[Integration]:
        """Return all integrations in storage order."""
        document = self.backend.read(_EMPTY)
        return [
            Integration.model_validate(raw)
            for raw in valid_entries(document, "integrations", Integration)
        ]

    def get(self, integration_id: str) -> Integration:
        for integration in self.list():
            if integration.id == integration_id:
                return integration
        raise NotFoundError("Integration not found")

    def active(self, kind: IntegrationKind) -> Integration:
        """Return the first active integration of ``kind``."""
        for integration in self.list():
            if integration.kind is kind and integration.active:
                return integration
        raise NotFoundError(f"No active {kind.value} integration found")

    def create(
        self,
        name: Optional[str],
        kind: Optional[str],
        endpoint: Optional[str],
        credential: Optional[str] = None,
    ) -> Integration:
        """Register a new, inactive integration.

        Local integrations never store a credential; every other kind requires one.
        """
        if not name or not kind or not endpoint:
            raise ValidationError(MISSING_FIELDS_MESSAGE)
        parsed = _parse_kind(kind)
        credential = _checked_credential(parsed, credential)

        with self.backend.transaction(_EMPTY) as document:
            integrations = valid_entries(document, "integrations", Integration)
            integration = Integration(
                id=new_id({raw.get("id") for raw in integrations}),
                name=name,
                kind=parsed,
                endpoint=endpoint,
                credential=credential,
                active=False,
            )
            integrations.append(_dump(integration))

        logger.info(
            "Registered %s integration %s (%s)", parsed.value, integration.id, name
        )
        return integration

    def update(
        self,
        integration_id: str,
        name: Optional[str] = None,
        endpoint: Optional[str] = None,
        credential: Optional[str] = None,
    ) -> Integration:
        """Edit fields in place; omitted fields keep their stored value."""
        with self.backend.transaction(_EMPTY) as document:
            integrations = valid_entries(document, "integrations", Integration)
            index = _find(integrations, integration_id)
            current = Integration.model_validate(integrations[index])
            updated = current.model_copy(
                update={
                    "name": name or current.name,
                    "endpoint": endpoint or current.endpoint,
                    "credential": _checked_credential(
                        current.kind, credential or current.credential
                    ),
                }
            )
            integrations[index] = _dump(updated)
        return updated

    def set_active_flag(self, integration_id: str, active: bool) -> None:
        """Set one integration's flag without touching the others."""
        with self.backend.transaction(_EMPTY) as document:
            integrations = valid_entries(document, "integrations", Integration)
            index = _find(integrations, integration_id)
            integrations[index]["active"] = active

    def activate_exclusively(self, integration_id: str) -> None:
        """Make ``integration_id`` the only active integration, in one rewrite."""
        with self.backend.transaction(_EMPTY) as document:
            integrations = valid_entries(document, "integrations", Integration)
            _find(integrations, integration_id)
            for raw in integrations:
                raw["active"] = raw.get("id") == integration_id
        logger.info("Integration %s is now the active integration", integration_id)

    def delete(self, integration_id: str) -> None:
        with self.backend.transaction(_EMPTY) as document:
            integrations = valid_entries(document, "integrations", Integration)
            index = _find(integrations, integration_id)
            del integrations[index]
        logger.info("Deleted integration %s", integration_id)


def _find(integrations: list[dict[str, Any]], integration_id: str) -> int:
    for index, raw in enumerate(integrations):
        if raw.get("id") == integration_id:
            return index
    raise NotFoundError("Integration not found")
