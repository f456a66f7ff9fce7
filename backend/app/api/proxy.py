"""Pass-through proxy to credentialed inference backends."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response

from app.dependencies import get_proxy_forwarder
from app.inference.proxy import ProxyForwarder

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/{backend}")
async def proxy_request(
    backend: str,
    request: Request,
    forwarder: ProxyForwarder = Depends(get_proxy_forwarder),
) -> Response:
    """Forward the raw body to the active proxied integration.

    The upstream status and body are returned unchanged; 404 when the backend
    name is unknown or no proxied integration is active.
    """
    body = await request.body()
    status, content = await forwarder.forward(backend, body)
    return Response(content=content, status_code=status, media_type="application/json")
