"""Tests for catalog API endpoints."""

import pytest
from httpx import AsyncClient

from movie_catalog.models.user import User

FIGHT_CLUB = {
    "tmdb_id": 550,
    "imdb_id": "tt0137523",
    "title": "Fight Club",
    "poster": "https://image.tmdb.org/t/p/w342/poster.jpg",
    "release_date": "1999-10-15",
}
HEAT = {
    "tmdb_id": 949,
    "imdb_id": "tt0113277",
    "title": "Heat",
    "poster": "https://image.tmdb.org/t/p/w342/heat.jpg",
}


class TestAddToCatalog:
    """Tests for adding movies to the catalog."""

    async def test_requires_auth(self, client: AsyncClient) -> None:
        response = await client.post("/api/catalog", json=FIGHT_CLUB)
        assert response.status_code == 401

    async def test_add_new_movie(self, client: AsyncClient, auth_headers: dict[str, str]) -> None:
        response = await client.post(
            "/api/catalog", json={**FIGHT_CLUB, "copies": 2}, headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Movie added to the user's catalog."
        assert data["previous_state"] == "absent"
        assert data["copies"] == 2
        assert data["movie"]["tmdb_id"] == 550
        assert data["movie"]["release_date"] == "1999-10-15"

    async def test_add_moves_from_wish_list(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        await client.post("/api/wish-list", json=HEAT, headers=auth_headers)

        response = await client.post("/api/catalog", json={"tmdb_id": 949}, headers=auth_headers)

        data = response.json()
        assert data["success"] is True
        assert data["previous_state"] == "in_wish_list"
        wish_list = await client.get("/api/wish-list", headers=auth_headers)
        assert wish_list.json()["wish_list"] == []

    async def test_add_twice(self, client: AsyncClient, auth_headers: dict[str, str]) -> None:
        await client.post("/api/catalog", json=FIGHT_CLUB, headers=auth_headers)

        response = await client.post("/api/catalog", json=FIGHT_CLUB, headers=auth_headers)

        assert response.json()["success"] is False
        assert response.json()["message"] == "Movie is already in the user's catalog."

    async def test_new_movie_missing_details(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        response = await client.post(
            "/api/catalog", json={"tmdb_id": 680, "title": "Pulp Fiction"}, headers=auth_headers
        )

        data = response.json()
        assert data["success"] is False
        assert data["message"].startswith("Missing parameter(s) for a new movie")

    async def test_missing_tmdb_id_is_structural(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        response = await client.post(
            "/api/catalog", json={"title": "Fight Club"}, headers=auth_headers
        )
        assert response.status_code == 422

    @pytest.mark.parametrize("copies", [0, -2])
    async def test_non_positive_copies(
        self, client: AsyncClient, auth_headers: dict[str, str], copies: int
    ) -> None:
        response = await client.post(
            "/api/catalog", json={**FIGHT_CLUB, "copies": copies}, headers=auth_headers
        )

        assert response.json() == {
            "success": False,
            "message": "Copies must be a positive whole number.",
            "movie": None,
            "copies": None,
            "previous_state": None,
        }

    @pytest.mark.parametrize("copies", [True, "2", 1.5])
    async def test_copies_must_be_a_json_integer(
        self, client: AsyncClient, auth_headers: dict[str, str], copies: object
    ) -> None:
        response = await client.post(
            "/api/catalog", json={**FIGHT_CLUB, "copies": copies}, headers=auth_headers
        )

        assert response.status_code == 422
        catalog = await client.get("/api/catalog", headers=auth_headers)
        assert catalog.json()["catalog"] == []


class TestGetCatalog:
    """Tests for reading catalogs."""

    async def test_own_catalog_sorted_by_title(
        self, client: AsyncClient, user: User, auth_headers: dict[str, str]
    ) -> None:
        await client.post("/api/catalog", json=HEAT, headers=auth_headers)
        await client.post("/api/catalog", json=FIGHT_CLUB, headers=auth_headers)

        response = await client.get("/api/catalog", headers=auth_headers)

        data = response.json()
        assert data["success"] is True
        assert data["user_id"] == user.id
        assert [item["movie"]["title"] for item in data["catalog"]] == ["Fight Club", "Heat"]

    async def test_own_catalog_requires_auth(self, client: AsyncClient) -> None:
        response = await client.get("/api/catalog")
        assert response.status_code == 401

    async def test_visit_another_users_catalog(
        self, client: AsyncClient, make_user, bearer
    ) -> None:
        owner = await make_user("collector", "collector@example.com")
        await client.post("/api/catalog", json={**HEAT, "copies": 3}, headers=bearer(owner))

        response = await client.get(f"/api/catalog/users/{owner.id}")

        data = response.json()
        assert data["success"] is True
        assert data["catalog"][0]["copies"] == 3

    async def test_visit_unknown_user(self, client: AsyncClient) -> None:
        response = await client.get("/api/catalog/users/424242")

        data = response.json()
        assert data["success"] is False
        assert data["catalog"] == []


class TestChangeCatalog:
    """Tests for removing and updating catalog entries."""

    async def test_update_copies(self, client: AsyncClient, auth_headers: dict[str, str]) -> None:
        await client.post("/api/catalog", json=FIGHT_CLUB, headers=auth_headers)

        response = await client.put(
            "/api/catalog/550/copies", json={"copies": 4}, headers=auth_headers
        )

        assert response.json() == {"success": True, "message": "Copies updated to 4."}
        catalog = await client.get("/api/catalog", headers=auth_headers)
        assert catalog.json()["catalog"][0]["copies"] == 4

    async def test_update_copies_rejects_zero(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        await client.post("/api/catalog", json=FIGHT_CLUB, headers=auth_headers)

        response = await client.put(
            "/api/catalog/550/copies", json={"copies": 0}, headers=auth_headers
        )

        assert response.json()["success"] is False
        catalog = await client.get("/api/catalog", headers=auth_headers)
        assert catalog.json()["catalog"][0]["copies"] == 1

    async def test_update_copies_rejects_boolean(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        await client.post("/api/catalog", json=FIGHT_CLUB, headers=auth_headers)

        response = await client.put(
            "/api/catalog/550/copies", json={"copies": True}, headers=auth_headers
        )

        assert response.status_code == 422
        catalog = await client.get("/api/catalog", headers=auth_headers)
        assert catalog.json()["catalog"][0]["copies"] == 1

    async def test_update_copies_unknown_movie(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        response = await client.put(
            "/api/catalog/1/copies", json={"copies": 2}, headers=auth_headers
        )
        assert response.json() == {"success": False, "message": "No match for movie found."}

    async def test_remove(self, client: AsyncClient, auth_headers: dict[str, str]) -> None:
        await client.post("/api/catalog", json=FIGHT_CLUB, headers=auth_headers)

        response = await client.delete("/api/catalog/550", headers=auth_headers)

        assert response.json()["success"] is True
        catalog = await client.get("/api/catalog", headers=auth_headers)
        assert catalog.json()["catalog"] == []


class TestFightClubScenario:
    """Catalog, wish list, remove, wish list again."""

    async def test_scenario(self, client: AsyncClient, auth_headers: dict[str, str]) -> None:
        added = await client.post(
            "/api/catalog", json={**FIGHT_CLUB, "copies": 2}, headers=auth_headers
        )
        assert added.json()["success"] is True

        catalog = (await client.get("/api/catalog", headers=auth_headers)).json()["catalog"]
        assert len(catalog) == 1
        assert catalog[0]["copies"] == 2

        wished = await client.post("/api/wish-list", json={"tmdb_id": 550}, headers=auth_headers)
        assert wished.json() == {"success": False, "message": "Movie is in user's catalog."}

        removed = await client.delete("/api/catalog/550", headers=auth_headers)
        assert removed.json()["success"] is True
        catalog = (await client.get("/api/catalog", headers=auth_headers)).json()["catalog"]
        assert catalog == []

        wished = await client.post("/api/wish-list", json={"tmdb_id": 550}, headers=auth_headers)
        assert wished.json() == {"success": True, "message": "Movie wished for User."}
