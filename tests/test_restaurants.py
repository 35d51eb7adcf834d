"""Tests for restaurant endpoints"""

import pytest

from conftest import auth_headers

NEW_RESTAURANT = {
    "name": "Adega Tia Matilde",
    "description": "Home cooking from Ribatejo since 1926.",
    "region": "lisboa",
    "cuisine_type": "tradicional",
    "price_range": "€€",
    "accepts_reservations": True,
}


@pytest.mark.asyncio
async def test_operator_creates_restaurant(client, test_owner):
    response = await client.post(
        "/restaurants", json=NEW_RESTAURANT, headers=auth_headers(test_owner)
    )

    assert response.status_code == 201
    data = response.json()
    assert data["slug"] == "adega-tia-matilde"
    assert data["owner_id"] == str(test_owner.id)
    assert data["rating_count"] == 0


@pytest.mark.asyncio
async def test_slug_is_made_unique(client, test_owner, test_restaurant):
    payload = dict(NEW_RESTAURANT, name="Tasca do Chico")

    response = await client.post("/restaurants", json=payload, headers=auth_headers(test_owner))

    assert response.json()["slug"] == "tasca-do-chico-2"


@pytest.mark.asyncio
async def test_diner_cannot_create_restaurant(client, test_user):
    response = await client.post(
        "/restaurants", json=NEW_RESTAURANT, headers=auth_headers(test_user)
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_list_filters(client, test_restaurant, walk_in_restaurant):
    everything = await client.get("/restaurants")
    assert everything.json()["total"] == 2

    bookable = await client.get("/restaurants", params={"accepts_reservations": True})
    assert [r["slug"] for r in bookable.json()["items"]] == ["tasca-do-chico"]

    algarve = await client.get("/restaurants", params={"region": "algarve"})
    assert [r["slug"] for r in algarve.json()["items"]] == ["o-pescador"]

    search = await client.get("/restaurants", params={"search": "fado"})
    assert [r["slug"] for r in search.json()["items"]] == ["tasca-do-chico"]


@pytest.mark.asyncio
async def test_only_operator_updates(client, test_owner, other_owner, test_admin, test_restaurant):
    foreign = await client.put(
        "/restaurants/tasca-do-chico",
        json={"price_range": "€€€"},
        headers=auth_headers(other_owner),
    )
    assert foreign.status_code == 403

    own = await client.put(
        "/restaurants/tasca-do-chico",
        json={"price_range": "€€€"},
        headers=auth_headers(test_owner),
    )
    assert own.status_code == 200
    assert own.json()["price_range"] == "€€€"

    renamed = await client.put(
        "/restaurants/tasca-do-chico",
        json={"name": "Tasca do Chico Bairro Alto"},
        headers=auth_headers(test_admin),
    )
    assert renamed.json()["slug"] == "tasca-do-chico-bairro-alto"


@pytest.mark.asyncio
async def test_deleted_restaurant_hidden(client, test_owner, test_restaurant):
    response = await client.delete("/restaurants/tasca-do-chico", headers=auth_headers(test_owner))
    assert response.status_code == 204

    missing = await client.get("/restaurants/tasca-do-chico")
    assert missing.status_code == 404
    assert missing.json()["error"] == "not_found"


@pytest.mark.asyncio
async def test_unknown_restaurant_reviews_not_found(client):
    response = await client.get("/restaurants/nao-existe/reviews")

    assert response.status_code == 404
    assert response.json() == {"detail": "Restaurant not found", "error": "not_found"}


@pytest.mark.asyncio
async def test_slug_folds_accents(client, test_owner):
    payload = dict(NEW_RESTAURANT, name="Tasquinha do Zé & Conceição")

    response = await client.post("/restaurants", json=payload, headers=auth_headers(test_owner))

    assert response.json()["slug"] == "tasquinha-do-ze-conceicao"


@pytest.mark.asyncio
async def test_only_admin_features_restaurants(client, test_owner, test_admin, test_restaurant, walk_in_restaurant):
    refused = await client.put(
        "/restaurants/tasca-do-chico", json={"is_featured": True}, headers=auth_headers(test_owner)
    )
    assert refused.status_code == 403

    featured = await client.put(
        "/restaurants/o-pescador", json={"is_featured": True}, headers=auth_headers(test_admin)
    )
    assert featured.status_code == 200
    assert featured.json()["is_featured"] is True

    response = await client.get("/restaurants/featured")
    assert [r["slug"] for r in response.json()] == ["o-pescador"]

    # Featured restaurants lead the default listing
    listing = await client.get("/restaurants")
    assert listing.json()["items"][0]["slug"] == "o-pescador"


@pytest.mark.asyncio
async def test_restaurants_by_region(client, test_restaurant, walk_in_restaurant):
    response = await client.get("/restaurants/region/algarve")

    assert response.status_code == 200
    assert response.json()["total"] == 1
    assert [r["slug"] for r in response.json()["items"]] == ["o-pescador"]

    unknown = await client.get("/restaurants/region/galiza")
    assert unknown.status_code == 400
