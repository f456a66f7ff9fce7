"""Single-shot AI task endpoints: policy simplifier, translator, ticket wizard."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from app.conversation.controller import ConversationController
from app.dependencies import get_conversation_controller
from app.models.tasks import (
    PolicyRequest,
    PolicySamples,
    TaskOutput,
    TicketPreview,
    TicketPreviewRequest,
    TicketSuggestions,
    TicketSuggestionsRequest,
    TranslateRequest,
)
from app.prompts.loader import sample_policies

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/policy/samples", response_model=PolicySamples)
async def list_policy_samples() -> PolicySamples:
    """Return demo policy texts for the simplifier page."""
    return PolicySamples(samples=list(sample_policies()))


@router.post("/policy", response_model=TaskOutput)
async def simplify_policy(
    body: PolicyRequest,
    controller: ConversationController = Depends(get_conversation_controller),
) -> TaskOutput:
    output = await controller.simplify_policy(body.integration_id, body.text)
    return TaskOutput(output=output)


@router.post("/translate", response_model=TaskOutput)
async def translate(
    body: TranslateRequest,
    controller: ConversationController = Depends(get_conversation_controller),
) -> TaskOutput:
    output = await controller.translate(body.integration_id, body.text, body.direction)
    return TaskOutput(output=output)


@router.post("/ticket/suggestions", response_model=TicketSuggestions)
async def suggest_ticket_details(
    body: TicketSuggestionsRequest,
    controller: ConversationController = Depends(get_conversation_controller),
) -> TicketSuggestions:
    """Ask for details that would make the ticket description more complete."""
    suggestions = await controller.suggest_ticket_details(
        body.integration_id, body.description
    )
    return TicketSuggestions(suggestions=suggestions)


@router.post("/ticket/preview", response_model=TicketPreview)
async def preview_ticket(
    body: TicketPreviewRequest,
    controller: ConversationController = Depends(get_conversation_controller),
) -> TicketPreview:
    """Draft the final ticket and the reporter recommendations."""
    return await controller.draft_ticket(
        body.integration_id, body.issue_type, body.urgency, body.description
    )
