"""Route CRUD, ownership enforcement and score submission."""

from httpx import AsyncClient

from tests.conftest import create_route, register_and_login, submit_score


class TestRouteCrud:
    async def test_create_and_get(self, client: AsyncClient):
        user_id, headers = await register_and_login(client, "alice")
        route = await create_route(client, headers, description="by the river", distance_meters=4200)
        assert route["user_id"] == user_id
        assert route["is_public"] is True

        resp = await client.get(f"/routes/{route['id']}", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["description"] == "by the river"

    async def test_get_unknown_route(self, client: AsyncClient):
        _, headers = await register_and_login(client, "alice")
        resp = await client.get("/routes/999", headers=headers)
        assert resp.status_code == 404

    async def test_list_filters(self, client: AsyncClient):
        alice_id, alice = await register_and_login(client, "alice")
        bob_id, bob = await register_and_login(client, "bob")
        await create_route(client, alice, "A public")
        await create_route(client, alice, "A private", is_public=False)
        await create_route(client, bob, "B public")

        resp = await client.get("/routes", params={"user_id": alice_id}, headers=bob)
        assert {r["name"] for r in resp.json()} == {"A public", "A private"}

        resp = await client.get("/routes/public", headers=bob)
        assert {r["name"] for r in resp.json()} == {"A public", "B public"}

        resp = await client.get(f"/routes/user/{bob_id}", headers=alice)
        assert [r["name"] for r in resp.json()] == ["B public"]

        resp = await client.get("/routes", params={"is_public": False}, headers=alice)
        assert [r["name"] for r in resp.json()] == ["A private"]

    async def test_newest_first(self, client: AsyncClient):
        _, headers = await register_and_login(client, "alice")
        first = await create_route(client, headers, "first")
        second = await create_route(client, headers, "second")
        resp = await client.get("/routes", headers=headers)
        assert [r["id"] for r in resp.json()] == [second["id"], first["id"]]


class TestOwnership:
    async def test_owner_can_update(self, client: AsyncClient):
        _, headers = await register_and_login(client, "alice")
        route = await create_route(client, headers, description="keep me")
        resp = await client.put(f"/routes/{route['id']}", json={"name": "Renamed", "description": None}, headers=headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["name"] == "Renamed"
        assert data["description"] == "keep me"
        assert data["path_data"] == route["path_data"]

    async def test_other_user_cannot_update(self, client: AsyncClient):
        _, alice = await register_and_login(client, "alice")
        _, bob = await register_and_login(client, "bob")
        route = await create_route(client, alice)
        resp = await client.put(f"/routes/{route['id']}", json={"name": "Hijacked"}, headers=bob)
        assert resp.status_code == 403

        resp = await client.get(f"/routes/{route['id']}", headers=alice)
        assert resp.json()["name"] == "Loop"

    async def test_other_user_cannot_delete(self, client: AsyncClient):
        _, alice = await register_and_login(client, "alice")
        _, bob = await register_and_login(client, "bob")
        route = await create_route(client, alice)
        resp = await client.delete(f"/routes/{route['id']}", headers=bob)
        assert resp.status_code == 403

    async def test_missing_route_is_404_not_403(self, client: AsyncClient):
        _, headers = await register_and_login(client, "alice")
        resp = await client.put("/routes/12345", json={"name": "x"}, headers=headers)
        assert resp.status_code == 404
        resp = await client.delete("/routes/12345", headers=headers)
        assert resp.status_code == 404

    async def test_owner_can_delete(self, client: AsyncClient):
        _, headers = await register_and_login(client, "alice")
        route = await create_route(client, headers)
        resp = await client.delete(f"/routes/{route['id']}", headers=headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Route deleted successfully"}
        assert (await client.get(f"/routes/{route['id']}", headers=headers)).status_code == 404


class TestScores:
    async def test_submit_score(self, client: AsyncClient):
        user_id, headers = await register_and_login(client, "alice")
        route = await create_route(client, headers)
        score = await submit_score(client, headers, route["id"], 95.5, max_speed_kmh=31.2)
        assert score["user_id"] == user_id
        assert score["route_id"] == route["id"]
        assert score["time_seconds"] == 95.5
        assert score["max_speed_kmh"] == 31.2

    async def test_any_user_may_score_any_route(self, client: AsyncClient):
        _, alice = await register_and_login(client, "alice")
        bob_id, bob = await register_and_login(client, "bob")
        route = await create_route(client, alice)
        score = await submit_score(client, bob, route["id"], 120)
        assert score["user_id"] == bob_id

    async def test_score_on_unknown_route(self, client: AsyncClient):
        _, headers = await register_and_login(client, "alice")
        resp = await client.post("/routes/999/score", json={"time_seconds": 10}, headers=headers)
        assert resp.status_code == 404

    async def test_non_positive_time_rejected(self, client: AsyncClient):
        _, headers = await register_and_login(client, "alice")
        route = await create_route(client, headers)
        resp = await client.post(f"/routes/{route['id']}/score", json={"time_seconds": 0}, headers=headers)
        assert resp.status_code == 422
