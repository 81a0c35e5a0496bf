"""Tests for wish list API endpoints."""

from httpx import AsyncClient

from movie_catalog.models.user import User

HEAT = {
    "tmdb_id": 949,
    "imdb_id": "tt0113277",
    "title": "Heat",
    "poster": "https://image.tmdb.org/t/p/w342/heat.jpg",
}


async def test_add_and_list(client: AsyncClient, user: User, auth_headers: dict[str, str]) -> None:
    response = await client.post("/api/wish-list", json=HEAT, headers=auth_headers)
    assert response.json() == {"success": True, "message": "Movie wished for User."}

    listing = await client.get("/api/wish-list", headers=auth_headers)

    data = listing.json()
    assert data["user_id"] == user.id
    assert [item["movie"]["imdb_id"] for item in data["wish_list"]] == ["tt0113277"]


async def test_add_twice(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    await client.post("/api/wish-list", json=HEAT, headers=auth_headers)

    response = await client.post("/api/wish-list", json=HEAT, headers=auth_headers)

    assert response.json() == {
        "success": False,
        "message": "Movie has already been wished for user.",
    }


async def test_add_requires_auth(client: AsyncClient) -> None:
    response = await client.post("/api/wish-list", json=HEAT)
    assert response.status_code == 401


async def test_remove(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    await client.post("/api/wish-list", json=HEAT, headers=auth_headers)

    response = await client.delete("/api/wish-list/949", headers=auth_headers)

    assert response.json() == {"success": True, "message": "Movie removed from user's wish list."}
    listing = await client.get("/api/wish-list", headers=auth_headers)
    assert listing.json()["wish_list"] == []


async def test_remove_when_not_wished(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    await client.post("/api/wish-list", json=HEAT, headers=auth_headers)
    await client.delete("/api/wish-list/949", headers=auth_headers)

    response = await client.delete("/api/wish-list/949", headers=auth_headers)

    assert response.json() == {"success": False, "message": "Movie is not in user's wish list."}


async def test_visit_wish_list(client: AsyncClient, user: User, auth_headers: dict[str, str]) -> None:
    await client.post("/api/wish-list", json=HEAT, headers=auth_headers)

    response = await client.get(f"/api/wish-list/users/{user.id}")

    data = response.json()
    assert data["success"] is True
    assert data["wish_list"][0]["movie"]["title"] == "Heat"
