"""Tests for event endpoints"""

from datetime import datetime, timedelta

import pytest

from conftest import auth_headers, make_event


def event_payload(days: int = 14, hours: int = 3, **overrides) -> dict:
    start = datetime.utcnow() + timedelta(days=days)
    payload = {
        "title": "Noite de Fado e Petiscos",
        "description": "Fado ao vivo com petiscos da casa e vinho da região.",
        "type": "dinner_experience",
        "category": "experiences",
        "region": "lisboa",
        "start_date": start.isoformat(),
        "end_date": (start + timedelta(hours=hours)).isoformat(),
        "pricing_type": "fixed",
        "price": 35.0,
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_operator_hosts_event_at_own_restaurant(client, test_owner, test_restaurant):
    response = await client.post(
        "/events",
        json=event_payload(restaurant_id=str(test_restaurant.id)),
        headers=auth_headers(test_owner),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["slug"] == "noite-de-fado-e-petiscos"
    assert data["organizer_type"] == "restaurant"
    assert data["organizer_name"] == "Francisco Silva"
    assert data["status"] == "upcoming"
    assert data["currency"] == "EUR"


@pytest.mark.asyncio
async def test_cannot_host_at_someone_elses_restaurant(client, other_owner, test_restaurant):
    response = await client.post(
        "/events",
        json=event_payload(restaurant_id=str(test_restaurant.id)),
        headers=auth_headers(other_owner),
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_diner_organizes_individual_event(client, test_user):
    response = await client.post(
        "/events",
        json=event_payload(type="food_tour", category="tours"),
        headers=auth_headers(test_user),
    )

    assert response.status_code == 201
    assert response.json()["organizer_type"] == "individual"
    assert response.json()["organizer_name"] == "Ana Costa"


@pytest.mark.asyncio
async def test_anonymous_cannot_create_event(client):
    response = await client.post("/events", json=event_payload())

    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides,field",
    [
        ({"hours": 0}, "end_date"),
        ({"hours": -2}, "end_date"),
        ({"days": -1}, "start_date"),
    ],
)
async def test_schedule_is_validated(client, test_user, overrides, field):
    response = await client.post(
        "/events", json=event_payload(**overrides), headers=auth_headers(test_user)
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "validation_error"
    assert body["errors"][0]["field"] == field


@pytest.mark.asyncio
async def test_timezone_aware_dates_are_accepted(client, test_user):
    start = datetime.utcnow() + timedelta(days=3)
    payload = event_payload(
        start_date=start.strftime("%Y-%m-%dT%H:%M:%S+01:00"),
        end_date=(start + timedelta(hours=2)).strftime("%Y-%m-%dT%H:%M:%S+01:00"),
    )

    response = await client.post("/events", json=payload, headers=auth_headers(test_user))

    assert response.status_code == 201
    assert response.json()["start_date"] == (start - timedelta(hours=1)).strftime("%Y-%m-%dT%H:%M:%S")


@pytest.mark.asyncio
async def test_status_filters(client, test_db, test_user):
    await make_event(test_db, test_user, "Magusto de Outono", days=-10)
    await make_event(test_db, test_user, "Feira do Queijo", days=-1, hours=72)
    await make_event(test_db, test_user, "Festa das Vindimas", days=20)

    async def slugs(**params):
        response = await client.get("/events", params=params)
        assert response.status_code == 200
        return [e["slug"] for e in response.json()["items"]]

    assert await slugs(status="past") == ["magusto-de-outono"]
    assert await slugs(status="ongoing") == ["feira-do-queijo"]
    assert await slugs(status="upcoming") == ["festa-das-vindimas"]
    assert await slugs() == ["magusto-de-outono", "feira-do-queijo", "festa-das-vindimas"]
    assert await slugs(sort="title") == ["feira-do-queijo", "festa-das-vindimas", "magusto-de-outono"]


@pytest.mark.asyncio
async def test_date_filter_matches_running_events(client, test_db, test_user):
    await make_event(test_db, test_user, "Semana do Marisco", days=5, hours=24 * 6)
    await make_event(test_db, test_user, "Prova de Vinhos", days=30)

    day = (datetime.utcnow() + timedelta(days=8)).date().isoformat()
    response = await client.get("/events", params={"date": day})

    assert [e["slug"] for e in response.json()["items"]] == ["semana-do-marisco"]


@pytest.mark.asyncio
async def test_upcoming_region_and_type_views(client, test_db, test_user):
    await make_event(test_db, test_user, "Magusto de Outono", days=-10)
    await make_event(test_db, test_user, "Aula de Pasteis", days=3, type="cooking_class", category="classes")
    await make_event(test_db, test_user, "Festa da Ria", days=6, region="algarve")

    upcoming = await client.get("/events/upcoming", params={"limit": 5})
    assert [e["slug"] for e in upcoming.json()] == ["aula-de-pasteis", "festa-da-ria"]

    algarve = await client.get("/events/region/algarve")
    assert [e["slug"] for e in algarve.json()["items"]] == ["festa-da-ria"]

    classes = await client.get("/events/type/cooking_class")
    assert classes.json()["total"] == 1

    unknown = await client.get("/events/type/rave")
    assert unknown.status_code == 400


@pytest.mark.asyncio
async def test_only_admin_features_events(client, test_db, test_user, test_admin):
    event = await make_event(test_db, test_user)

    refused = await client.put(
        f"/events/{event.id}", json={"is_featured": True}, headers=auth_headers(test_user)
    )
    assert refused.status_code == 403

    featured = await client.put(
        f"/events/{event.id}", json={"is_featured": True}, headers=auth_headers(test_admin)
    )
    assert featured.status_code == 200

    response = await client.get("/events/featured")
    assert [e["id"] for e in response.json()] == [str(event.id)]


@pytest.mark.asyncio
async def test_edit_rights(client, test_db, test_user, other_user, test_owner, test_admin, test_restaurant):
    hosted = await make_event(test_db, test_admin, "Jantar Vinicola", restaurant=test_restaurant)

    stranger = await client.put(
        f"/events/{hosted.id}", json={"capacity": 40}, headers=auth_headers(other_user)
    )
    assert stranger.status_code == 403

    operator = await client.put(
        f"/events/{hosted.id}",
        json={"capacity": 40, "title": "Jantar Vinicola do Douro"},
        headers=auth_headers(test_owner),
    )
    assert operator.status_code == 200
    assert operator.json()["capacity"] == 40
    assert operator.json()["slug"] == "jantar-vinicola-do-douro"


@pytest.mark.asyncio
async def test_update_rejects_bad_values(client, test_db, test_user):
    event = await make_event(test_db, test_user)

    cleared = await client.put(f"/events/{event.id}", json={"title": None}, headers=auth_headers(test_user))
    assert cleared.status_code == 400
    assert cleared.json()["errors"][0]["field"] == "title"

    before_start = (event.start_date - timedelta(hours=1)).isoformat()
    reversed_dates = await client.put(
        f"/events/{event.id}", json={"end_date": before_start}, headers=auth_headers(test_user)
    )
    assert reversed_dates.status_code == 400
    assert reversed_dates.json()["errors"][0]["field"] == "end_date"


@pytest.mark.asyncio
async def test_running_event_end_can_move(client, test_db, test_user):
    running = await make_event(test_db, test_user, days=-1, hours=48)
    later = (running.end_date + timedelta(hours=5)).isoformat()

    response = await client.put(
        f"/events/{running.id}", json={"end_date": later}, headers=auth_headers(test_user)
    )

    assert response.status_code == 200
    assert response.json()["status"] == "ongoing"


@pytest.mark.asyncio
async def test_delete_hides_event(client, test_db, test_user, other_user):
    event = await make_event(test_db, test_user)

    forbidden = await client.delete(f"/events/{event.id}", headers=auth_headers(other_user))
    assert forbidden.status_code == 403

    deleted = await client.delete(f"/events/{event.id}", headers=auth_headers(test_user))
    assert deleted.status_code == 204

    missing = await client.get(f"/events/{event.slug}")
    assert missing.status_code == 404
    assert missing.json()["error"] == "not_found"
