"""Tests for reviews and restaurant rating aggregation"""

import pytest

from app.services.ratings import RatingSummary, compute_rating

from conftest import auth_headers


@pytest.mark.parametrize(
    "ratings,expected",
    [
        ([], RatingSummary(average=0.0, count=0)),
        ([5], RatingSummary(average=5.0, count=1)),
        ([4, 5], RatingSummary(average=4.5, count=2)),
        ([5, 4, 4], RatingSummary(average=4.3, count=3)),
        ([1, 2, 2], RatingSummary(average=1.7, count=3)),
    ],
)
def test_compute_rating(ratings, expected):
    assert compute_rating(ratings) == expected


async def post_review(client, user, rating, slug="tasca-do-chico"):
    return await client.post(
        f"/restaurants/{slug}/reviews",
        json={"rating": rating, "title": "Jantar", "content": "Bacalhau à Brás excelente."},
        headers=auth_headers(user),
    )


async def restaurant_rating(client, slug="tasca-do-chico"):
    response = await client.get(f"/restaurants/{slug}")
    assert response.status_code == 200
    data = response.json()
    return data["rating_average"], data["rating_count"]


@pytest.mark.asyncio
async def test_reviews_update_restaurant_rating(client, test_user, other_user, test_restaurant):
    assert (await post_review(client, test_user, 5)).status_code == 201
    assert (await post_review(client, other_user, 4)).status_code == 201

    assert await restaurant_rating(client) == (4.5, 2)


@pytest.mark.asyncio
async def test_one_review_per_user(client, test_user, test_restaurant):
    await post_review(client, test_user, 5)

    response = await post_review(client, test_user, 3)

    assert response.status_code == 400
    assert response.json()["error"] == "conflict"


@pytest.mark.asyncio
async def test_edit_and_delete_recompute(client, test_user, other_user, test_restaurant):
    first = (await post_review(client, test_user, 5)).json()
    await post_review(client, other_user, 3)

    edited = await client.put(
        f"/reviews/{first['id']}", json={"rating": 1}, headers=auth_headers(test_user)
    )
    assert edited.status_code == 200
    assert await restaurant_rating(client) == (2.0, 2)

    deleted = await client.delete(f"/reviews/{first['id']}", headers=auth_headers(test_user))
    assert deleted.status_code == 204
    assert await restaurant_rating(client) == (3.0, 1)


@pytest.mark.asyncio
async def test_only_author_edits_review(client, test_user, other_user, test_admin, test_restaurant):
    review = (await post_review(client, test_user, 4)).json()

    forbidden = await client.put(
        f"/reviews/{review['id']}", json={"rating": 1}, headers=auth_headers(other_user)
    )
    assert forbidden.status_code == 403

    removed = await client.delete(f"/reviews/{review['id']}", headers=auth_headers(test_admin))
    assert removed.status_code == 204
    assert await restaurant_rating(client) == (0.0, 0)


@pytest.mark.asyncio
async def test_list_reviews(client, test_user, other_user, test_restaurant):
    await post_review(client, test_user, 5)
    await post_review(client, other_user, 2)

    response = await client.get("/restaurants/tasca-do-chico/reviews")

    assert response.status_code == 200
    assert sorted(r["rating"] for r in response.json()) == [2, 5]


@pytest.mark.asyncio
async def test_null_rating_rejected(client, test_user, test_restaurant):
    review = (await post_review(client, test_user, 4)).json()

    response = await client.put(
        f"/reviews/{review['id']}", json={"rating": None}, headers=auth_headers(test_user)
    )

    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"
    assert await restaurant_rating(client) == (4.0, 1)


@pytest.mark.asyncio
async def test_partial_review_update_keeps_rating(client, test_user, test_restaurant):
    review = (await post_review(client, test_user, 4)).json()

    response = await client.put(
        f"/reviews/{review['id']}", json={"title": "Revisitado"}, headers=auth_headers(test_user)
    )

    assert response.status_code == 200
    assert response.json()["rating"] == 4
    assert response.json()["title"] == "Revisitado"


@pytest.mark.asyncio
async def test_deleted_review_not_found(client, test_user, test_restaurant):
    review = (await post_review(client, test_user, 4)).json()
    await client.delete(f"/reviews/{review['id']}", headers=auth_headers(test_user))

    response = await client.put(
        f"/reviews/{review['id']}", json={"rating": 2}, headers=auth_headers(test_user)
    )

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"
