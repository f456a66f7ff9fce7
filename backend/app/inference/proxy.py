"""Same-origin relay that keeps integration credentials off the browser."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from app.errors import InferenceError, NotFoundError
from app.integrations.registry import IntegrationRegistry
from app.models.integrations import Integration, IntegrationKind

logger = logging.getLogger(__name__)


class ProxyForwarder:
    """Forwards an opaque request body to a proxied integration.

    The body is never inspected or rewritten; the upstream status and body
    come back verbatim. There are no retries.
    """

    def __init__(
        self,
        registry: IntegrationRegistry,
        client: httpx.AsyncClient,
        backends: dict[str, str],
    ) -> None:
        self._registry = registry
        self._client = client
        self._backends = backends

    def target_url(self, backend: str, integration: Integration) -> str:
        try:
            suffix = self._backends[backend]
        except KeyError:
            raise NotFoundError(f"Unknown proxy backend: {backend}") from None
        return integration.endpoint.removesuffix("/") + suffix

    async def forward(
        self,
        backend: str,
        body: bytes,
        integration: Optional[Integration] = None,
    ) -> tuple[int, bytes]:
        """POST ``body`` to ``backend`` and return ``(status, body)``.

        Without an explicit ``integration`` the active proxied integration is
        used; ``NotFoundError`` if there is none.
        """
        if backend not in self._backends:
            raise NotFoundError(f"Unknown proxy backend: {backend}")
        if integration is None:
            integration = self._registry.active(IntegrationKind.PROXIED)

        url = self.target_url(backend, integration)
        logger.info("Proxying %d bytes to %s", len(body), url)

        try:
            response = await self._client.post(
                url,
                content=body,
                headers={
                    "Authorization": f"Bearer {integration.credential}",
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                },
            )
        except httpx.HTTPError as exc:
            logger.error("Proxy request to %s failed: %s", url, exc)
            raise InferenceError(f"Proxy request failed: {exc}") from exc

        logger.info("Proxy response status %d from %s", response.status_code, url)
        return response.status_code, response.content
