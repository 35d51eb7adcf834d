"""Tests for search, suggestions and the regional map"""

import pytest

from conftest import make_event, make_story


@pytest.fixture
async def fado_content(test_db, test_user, test_restaurant):
    await make_event(test_db, test_user, "Noite de Fado", restaurant=test_restaurant)
    await make_story(test_db, "Fado no Algarve", content="O fado chegou tarde a Faro, mas ficou.")
    await make_story(test_db, "Domingos de cataplana")


@pytest.mark.asyncio
async def test_search_across_types(client, fado_content):
    response = await client.get("/search", params={"q": "FADO"})

    assert response.status_code == 200
    data = response.json()
    assert [r["slug"] for r in data["restaurants"]] == ["tasca-do-chico"]
    assert [e["slug"] for e in data["events"]] == ["noite-de-fado"]
    assert [s["slug"] for s in data["stories"]] == ["fado-no-algarve"]
    assert data["total"] == 3
    assert data["query"] == "FADO"


@pytest.mark.asyncio
async def test_search_single_type(client, fado_content):
    response = await client.get("/search", params={"q": "fado", "type": "events"})

    data = response.json()
    assert data["total"] == 1
    assert data["restaurants"] is None
    assert data["stories"] is None
    assert len(data["events"]) == 1


@pytest.mark.asyncio
async def test_search_by_region(client, fado_content):
    response = await client.get("/search", params={"q": "fado", "region": "algarve"})

    data = response.json()
    assert data["total"] == 1
    assert data["restaurants"] == []
    assert [s["slug"] for s in data["stories"]] == ["fado-no-algarve"]


@pytest.mark.asyncio
async def test_search_skips_hidden_content(client, test_db, test_user):
    await make_event(test_db, test_user, "Fado Cancelado", is_active=False)
    await make_story(test_db, "Fado Rascunho", is_published=False)

    response = await client.get("/search", params={"q": "fado"})

    assert response.json()["total"] == 0


@pytest.mark.asyncio
async def test_search_requires_query(client):
    response = await client.get("/search")

    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


@pytest.mark.asyncio
async def test_suggestions(client, fado_content):
    response = await client.get("/search/suggestions", params={"q": "fado"})

    assert response.status_code == 200
    assert response.json() == [
        {"type": "restaurant", "text": "Tasca do Chico", "slug": "tasca-do-chico"},
        {"type": "event", "text": "Noite de Fado", "slug": "noite-de-fado"},
        {"type": "story", "text": "Fado no Algarve", "slug": "fado-no-algarve"},
    ]

    stories = await client.get("/search/suggestions", params={"q": "fado", "type": "stories"})
    assert [s["type"] for s in stories.json()] == ["story"]


@pytest.mark.asyncio
async def test_suggestions_are_capped(client, test_db, test_user):
    for n in range(6):
        await make_event(test_db, test_user, f"Fado {n}", days=n + 1)
        await make_story(test_db, f"Historia de fado {n}")

    response = await client.get("/search/suggestions", params={"q": "fado"})

    types = [s["type"] for s in response.json()]
    assert types == ["event"] * 5 + ["story"] * 5

    events = await client.get("/search/suggestions", params={"q": "fado", "type": "events"})
    assert [s["slug"] for s in events.json()] == [f"fado-{n}" for n in range(5)]


@pytest.mark.asyncio
async def test_region_counts(client, test_db, test_user, test_restaurant, walk_in_restaurant, fado_content):
    await make_story(test_db, "Rascunho", is_published=False)

    response = await client.get("/map/regions")

    assert response.status_code == 200
    counts = {r["name"]: r for r in response.json()}
    assert counts["lisboa"] == {"name": "lisboa", "restaurants": 1, "events": 1, "stories": 0}
    assert counts["algarve"] == {"name": "algarve", "restaurants": 1, "events": 0, "stories": 2}
    assert counts["acores"]["restaurants"] == 0


@pytest.mark.asyncio
async def test_region_content(client, test_db, test_user, test_restaurant, fado_content):
    await make_event(test_db, test_user, "Magusto de Outono", days=-10)

    response = await client.get("/map/region/lisboa")

    assert response.status_code == 200
    data = response.json()
    assert data["region"] == "lisboa"
    assert [r["slug"] for r in data["restaurants"]] == ["tasca-do-chico"]
    assert [e["slug"] for e in data["events"]] == ["noite-de-fado"]
    assert data["stories"] == []

    only_events = await client.get("/map/region/lisboa", params={"type": "events"})
    assert only_events.json()["restaurants"] is None
    assert len(only_events.json()["events"]) == 1


@pytest.mark.asyncio
async def test_unknown_region(client):
    response = await client.get("/map/region/atlantida")

    assert response.status_code == 400
