"""Inference adapter: one prompt in, one plain-text reply out.

Two backend shapes are normalized to a string:

- **local** backends expose ``/api/generate`` and answer with newline-delimited
  JSON records, each carrying a partial ``response`` field.
- **proxied** backends speak the chat-completions format and are reached
  through the ``ProxyForwarder`` so the credential stays server side.

A new backend kind is added by writing one ``BackendAdapter`` subclass and
registering it with ``InferenceAdapter``.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterable, Optional

import httpx

from app.errors import InferenceError
from app.inference.proxy import ProxyForwarder
from app.models.integrations import Integration, IntegrationKind

logger = logging.getLogger(__name__)

UNSUPPORTED_MESSAGE = "Unsupported integration type."

# "1. ", "12. " etc. are pushed onto their own line.
_NUMBERED_ITEM = re.compile(r"(\d+\.\s)")


def _is_success(status: int) -> bool:
    return 200 <= status < 300


def combine_stream(raw: str) -> str:
    """Join the ``response`` fields of a newline-delimited JSON stream.

    Lines that are not valid JSON are logged and skipped. Returns an empty
    string when nothing usable was found.
    """
    combined = []
    for line in raw.split("\n"):
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as exc:
            logger.warning("Skipping unparseable stream line %r: %s", line[:200], exc)
            continue
        if isinstance(record, dict):
            partial = record.get("response")
            if isinstance(partial, str):
                combined.append(partial)

    return _NUMBERED_ITEM.sub(r"\n\1", "".join(combined)).strip()


def extract_chat_content(data: Any) -> Optional[str]:
    """Return ``choices[0].message.content`` from a chat completion, if present."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


class BackendAdapter:
    """Inference capability for one ``IntegrationKind``."""

    kind: IntegrationKind
    label: str

    async def infer(
        self,
        integration: Integration,
        prompt: str,
        max_tokens: Optional[int] = None,
    ) -> str:
        raise NotImplementedError

    @property
    def fallback(self) -> str:
        return f"No response from {self.label} API."


class LocalGenerateAdapter(BackendAdapter):
    """Calls ``{endpoint}/api/generate`` directly and joins the streamed parts.

    The token budget is not forwarded; local backends decide reply length.
    """

    kind = IntegrationKind.LOCAL
    label = "Ollama"

    def __init__(self, client: httpx.AsyncClient, model: str) -> None:
        self._client = client
        self._model = model

    async def infer(
        self,
        integration: Integration,
        prompt: str,
        max_tokens: Optional[int] = None,
    ) -> str:
        url = integration.endpoint.removesuffix("/") + "/api/generate"
        payload = {"model": self._model, "prompt": prompt}
        logger.info("%s API request: %s (model=%s)", self.label, url, self._model)

        try:
            response = await self._client.post(url, json=payload)
        except httpx.HTTPError as exc:
            logger.error("%s API request to %s failed: %s", self.label, url, exc)
            raise InferenceError(f"{self.label} API request failed: {exc}") from exc

        text = response.text
        logger.info("%s API response status: %d", self.label, response.status_code)
        logger.debug("%s API raw response: %s", self.label, text[:500])

        if not _is_success(response.status_code):
            raise InferenceError(
                f"{self.label} API error: HTTP {response.status_code}: {text}",
                upstream_status=response.status_code,
                body=text,
            )

        return combine_stream(text) or self.fallback


class ProxiedChatAdapter(BackendAdapter):
    """Sends a single-turn chat completion through the proxy forwarder."""

    kind = IntegrationKind.PROXIED
    label = "Nutanix"

    def __init__(self, forwarder: ProxyForwarder, backend: str, model: str) -> None:
        self._forwarder = forwarder
        self._backend = backend
        self._model = model

    async def infer(
        self,
        integration: Integration,
        prompt: str,
        max_tokens: Optional[int] = None,
    ) -> str:
        payload: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
        }
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        payload["stream"] = False

        logger.info(
            "%s API request via proxy/%s (model=%s, max_tokens=%s)",
            self.label,
            self._backend,
            self._model,
            max_tokens,
        )
        status, raw = await self._forwarder.forward(
            self._backend,
            json.dumps(payload).encode("utf-8"),
            integration=integration,
        )
        text = raw.decode("utf-8", errors="replace")
        logger.debug("%s API raw response: %s", self.label, text[:500])

        if not _is_success(status):
            raise InferenceError(
                f"{self.label} API error: HTTP {status}: {text}",
                upstream_status=status,
                body=text,
            )

        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InferenceError(
                f"Failed to parse {self.label} JSON: {exc}",
                upstream_status=status,
                body=text,
            ) from exc

        return extract_chat_content(data) or self.fallback


class InferenceAdapter:
    """Dispatches ``infer`` to the adapter registered for the integration's kind."""

    def __init__(self, adapters: Iterable[BackendAdapter]) -> None:
        self._adapters = {adapter.kind: adapter for adapter in adapters}

    @property
    def kinds(self) -> list[IntegrationKind]:
        return list(self._adapters)

    async def infer(
        self,
        integration: Integration,
        prompt: str,
        max_tokens: Optional[int] = None,
    ) -> str:
        adapter = self._adapters.get(integration.kind)
        if adapter is None:
            raise InferenceError(UNSUPPORTED_MESSAGE)
        return await adapter.infer(integration, prompt, max_tokens)
