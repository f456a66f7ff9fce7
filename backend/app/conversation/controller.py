"""Per-page orchestration of prompt, inference call and transcript.

All tasks share one skeleton: validate the selection, render the task
prompt, call the inference adapter, and surface failures as text instead
of raising. Session-based tasks additionally persist the user turn before
the call and the assistant turn after it, so the user's message survives a
failed inference.
"""

from __future__ import annotations

import logging
from typing import Optional

from app.conversation.parsing import split_code_segments, split_ticket
from app.errors import AppError, ValidationError
from app.inference.adapter import InferenceAdapter
from app.integrations.registry import IntegrationRegistry
from app.models.integrations import Integration
from app.models.sessions import Session, Turn, TurnRole
from app.models.tasks import (
    CodegenReply,
    TOKEN_BUDGETS,
    TicketPreview,
    TokenSize,
    TranslationDirection,
)
from app.prompts.templates import TaskKind, render_prompt
from app.storage.session_store import SessionStore

logger = logging.getLogger(__name__)

# Fixed budgets for the single-shot pages.
POLICY_MAX_TOKENS = 512
TRANSLATE_MAX_TOKENS = 512
TICKET_SUGGESTIONS_MAX_TOKENS = 256
TICKET_PREVIEW_MAX_TOKENS = 512

SUGGESTIONS_UNAVAILABLE = "Unable to generate suggestions at this time."


def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"Missing required field: {field}")
    return value


class ConversationController:
    """Runs the chat, code-generation, policy, translation and ticket tasks."""

    def __init__(
        self,
        registry: IntegrationRegistry,
        adapter: InferenceAdapter,
    ) -> None:
        self._registry = registry
        self._adapter = adapter

    def _integration(self, integration_id: Optional[str]) -> Integration:
        if not integration_id:
            raise ValidationError("No integration selected")
        return self._registry.get(integration_id)

    async def _ask(
        self,
        integration: Integration,
        prompt: str,
        max_tokens: Optional[int],
    ) -> tuple[str, bool]:
        """Return ``(reply, ok)``; on failure the reply is the error message."""
        try:
            return await self._adapter.infer(integration, prompt, max_tokens), True
        except AppError as exc:
            logger.warning(
                "Inference via integration %s failed: %s", integration.id, exc.message
            )
            return exc.message, False

    # ------------------------------------------------------------------
    # Session-based tasks
    # ------------------------------------------------------------------

    async def send_message(
        self,
        store: SessionStore,
        session_id: str,
        integration_id: Optional[str],
        text: str,
        token_size: TokenSize = TokenSize.MEDIUM,
        kind: TaskKind = TaskKind.CHAT,
    ) -> Session:
        """Append the user's message and the model's reply to a session.

        Nothing is stored and no upstream call is made if the message is
        empty or the integration or session cannot be resolved.
        """
        _require_text(text, "message")
        integration = self._integration(integration_id)
        store.get(session_id)

        store.append(session_id, Turn(role=TurnRole.USER, text=text))

        prompt = render_prompt(kind, text=text)
        reply, _ = await self._ask(integration, prompt, TOKEN_BUDGETS[token_size])

        return store.append(session_id, Turn(role=TurnRole.ASSISTANT, text=reply))

    async def send_codegen_message(
        self,
        store: SessionStore,
        session_id: str,
        integration_id: Optional[str],
        text: str,
        token_size: TokenSize = TokenSize.MEDIUM,
    ) -> CodegenReply:
        session = await self.send_message(
            store,
            session_id,
            integration_id,
            text,
            token_size=token_size,
            kind=TaskKind.CODEGEN,
        )
        return CodegenReply(
            **session.model_dump(),
            segments=split_code_segments(session.turns[-1].text),
        )

    # ------------------------------------------------------------------
    # Single-shot tasks
    # ------------------------------------------------------------------

    async def simplify_policy(self, integration_id: Optional[str], text: str) -> str:
        _require_text(text, "text")
        integration = self._integration(integration_id)
        prompt = render_prompt(TaskKind.POLICY, text=text)
        reply, _ = await self._ask(integration, prompt, POLICY_MAX_TOKENS)
        return reply

    async def translate(
        self,
        integration_id: Optional[str],
        text: str,
        direction: TranslationDirection,
    ) -> str:
        _require_text(text, "text")
        integration = self._integration(integration_id)
        prompt = render_prompt(TaskKind.TRANSLATE, text=text, direction=direction)
        reply, _ = await self._ask(integration, prompt, TRANSLATE_MAX_TOKENS)
        return reply

    async def suggest_ticket_details(
        self, integration_id: Optional[str], description: str
    ) -> str:
        _require_text(description, "description")
        integration = self._integration(integration_id)
        prompt = render_prompt(TaskKind.TICKET_SUGGESTIONS, description=description)
        reply, ok = await self._ask(integration, prompt, TICKET_SUGGESTIONS_MAX_TOKENS)
        return reply.strip() if ok else SUGGESTIONS_UNAVAILABLE

    async def draft_ticket(
        self,
        integration_id: Optional[str],
        issue_type: str,
        urgency: int,
        description: str,
    ) -> TicketPreview:
        _require_text(description, "description")
        integration = self._integration(integration_id)
        prompt = render_prompt(
            TaskKind.TICKET_PREVIEW,
            issue_type=issue_type,
            urgency=urgency,
            description=description,
        )
        reply, ok = await self._ask(integration, prompt, TICKET_PREVIEW_MAX_TOKENS)
        if not ok:
            return TicketPreview(final_ticket=reply, recommendations="")
        return split_ticket(reply)
