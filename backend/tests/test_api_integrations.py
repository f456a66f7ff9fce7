"""Tests for the integration endpoints."""

import pytest
from httpx import AsyncClient


async def _create(client: AsyncClient, **body: str) -> dict:
    response = await client.post("/api/integrations", json=body)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_register_local_integration(client: AsyncClient) -> None:
    created = await _create(
        client, name="Local", type="local", endpoint="http://x", apiKey=""
    )

    assert created["active"] is False
    assert created["apiKey"] == ""
    assert created["type"] == "local"

    listing = await client.get("/api/integrations")
    assert listing.json() == [created]


@pytest.mark.asyncio
async def test_register_legacy_ollama_type_ignores_key(client: AsyncClient) -> None:
    created = await _create(
        client, name="Ollama", type="ollama", endpoint="http://x", apiKey="leaked"
    )
    assert created["type"] == "local"
    assert created["apiKey"] == ""


@pytest.mark.asyncio
async def test_register_proxied_integration_keeps_key(client: AsyncClient) -> None:
    created = await _create(
        client, name="Hosted", type="nutanix", endpoint="https://ai", apiKey="k"
    )
    assert created["type"] == "proxied"
    assert created["apiKey"] == "k"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"type": "local", "endpoint": "http://x"},
        {"name": "n", "endpoint": "http://x"},
        {"name": "n", "type": "local"},
        {"name": "n", "type": "proxied", "endpoint": "https://ai"},
    ],
)
async def test_register_missing_fields_is_400(client: AsyncClient, body: dict) -> None:
    response = await client.post("/api/integrations", json=body)

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Missing required fields")
    assert (await client.get("/api/integrations")).json() == []


@pytest.mark.asyncio
async def test_get_integration(client: AsyncClient) -> None:
    created = await _create(client, name="L", type="local", endpoint="http://x")

    assert (await client.get(f"/api/integrations/{created['id']}")).json() == created
    assert (await client.get("/api/integrations/unknown")).status_code == 404


@pytest.mark.asyncio
async def test_patch_sets_only_that_flag(client: AsyncClient) -> None:
    first = await _create(client, name="A", type="local", endpoint="http://a")
    second = await _create(client, name="B", type="local", endpoint="http://b")

    for integration in (first, second):
        response = await client.patch(
            f"/api/integrations/{integration['id']}", json={"active": True}
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Integration updated"}

    flags = [i["active"] for i in (await client.get("/api/integrations")).json()]
    assert flags == [True, True]


@pytest.mark.asyncio
async def test_patch_unknown_or_missing_flag(client: AsyncClient) -> None:
    created = await _create(client, name="A", type="local", endpoint="http://a")

    assert (await client.patch("/api/integrations/nope", json={"active": True})).status_code == 404
    assert (await client.patch(f"/api/integrations/{created['id']}", json={})).status_code == 400


@pytest.mark.asyncio
async def test_activate_exclusively(client: AsyncClient) -> None:
    ids = [
        (await _create(client, name=n, type="local", endpoint=f"http://{n}"))["id"]
        for n in ("a", "b", "c")
    ]
    await client.patch(f"/api/integrations/{ids[0]}", json={"active": True})

    response = await client.patch("/api/integrations/active", json={"id": ids[2]})

    assert response.status_code == 200
    assert response.json() == {"message": "Active integration updated"}
    listing = (await client.get("/api/integrations")).json()
    assert [i["id"] for i in listing if i["active"]] == [ids[2]]


@pytest.mark.asyncio
async def test_activate_exclusively_errors(client: AsyncClient) -> None:
    assert (await client.patch("/api/integrations/active", json={})).status_code == 400
    missing = await client.patch("/api/integrations/active", json={"id": "nope"})
    assert missing.status_code == 404
    assert missing.json() == {"detail": "Integration not found"}


@pytest.mark.asyncio
async def test_put_edits_fields(client: AsyncClient) -> None:
    created = await _create(
        client, name="Hosted", type="proxied", endpoint="https://ai", apiKey="k"
    )

    response = await client.put(
        f"/api/integrations/{created['id']}", json={"endpoint": "https://ai2"}
    )

    assert response.status_code == 200
    assert response.json() == {**created, "endpoint": "https://ai2"}


@pytest.mark.asyncio
async def test_delete_integration(client: AsyncClient) -> None:
    created = await _create(client, name="A", type="local", endpoint="http://a")

    response = await client.delete(f"/api/integrations/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Integration deleted"}

    assert (await client.delete(f"/api/integrations/{created['id']}")).status_code == 404
