"""Tests for the single-shot task endpoints."""

import pytest
from httpx import AsyncClient

from app.conversation.parsing import NO_RECOMMENDATIONS
from app.models.integrations import Integration

from conftest import (
    CHAT_COMPLETIONS_URL,
    GENERATE_URL,
    FakeUpstream,
    chat_completion,
    ollama_stream,
)


@pytest.mark.asyncio
async def test_policy_samples(client: AsyncClient) -> None:
    response = await client.get("/api/tasks/policy/samples")

    assert response.status_code == 200
    assert len(response.json()["samples"]) == 3


@pytest.mark.asyncio
async def test_simplify_policy(
    client: AsyncClient, upstream: FakeUpstream, local_integration: Integration
) -> None:
    upstream.route(GENERATE_URL, text=ollama_stream("Wear pants."))

    response = await client.post(
        "/api/tasks/policy",
        json={"integrationId": local_integration.id, "text": "Dress code applies."},
    )

    assert response.status_code == 200
    assert response.json() == {"output": "Wear pants."}


@pytest.mark.asyncio
async def test_translate(
    client: AsyncClient, upstream: FakeUpstream, proxied_integration: Integration
) -> None:
    upstream.route(CHAT_COMPLETIONS_URL, payload=chat_completion("Let's circle back."))

    response = await client.post(
        "/api/tasks/translate",
        json={
            "integrationId": proxied_integration.id,
            "text": "Talk later",
            "direction": "NormalToCorporate",
        },
    )

    assert response.json() == {"output": "Let's circle back."}


@pytest.mark.asyncio
async def test_task_without_integration_is_400(
    client: AsyncClient, upstream: FakeUpstream
) -> None:
    response = await client.post("/api/tasks/translate", json={"text": "hi"})

    assert response.status_code == 400
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_task_with_unknown_integration_is_404(client: AsyncClient) -> None:
    response = await client.post(
        "/api/tasks/policy", json={"integrationId": "nope", "text": "x"}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_ticket_suggestions(
    client: AsyncClient, upstream: FakeUpstream, local_integration: Integration
) -> None:
    upstream.route(GENERATE_URL, text=ollama_stream("  Add the error message.  "))

    response = await client.post(
        "/api/tasks/ticket/suggestions",
        json={"integrationId": local_integration.id, "description": "App crashes"},
    )

    assert response.json() == {"suggestions": "Add the error message."}


@pytest.mark.asyncio
async def test_ticket_preview_without_recommendations(
    client: AsyncClient, upstream: FakeUpstream, proxied_integration: Integration
) -> None:
    upstream.route(
        CHAT_COMPLETIONS_URL,
        payload=chat_completion("---FINAL SUPPORT TICKET---\nTicket Summary: Crash"),
    )

    response = await client.post(
        "/api/tasks/ticket/preview",
        json={
            "integrationId": proxied_integration.id,
            "issueType": "Bug",
            "urgency": 4,
            "description": "App crashes on start",
        },
    )

    assert response.status_code == 200
    assert response.json() == {
        "finalTicket": "Ticket Summary: Crash",
        "recommendations": NO_RECOMMENDATIONS,
    }


@pytest.mark.asyncio
async def test_ticket_preview_rejects_out_of_range_urgency(
    client: AsyncClient, proxied_integration: Integration
) -> None:
    response = await client.post(
        "/api/tasks/ticket/preview",
        json={
            "integrationId": proxied_integration.id,
            "urgency": 9,
            "description": "x",
        },
    )
    assert response.status_code == 400
