"""A full session from sign-up to the leaderboard."""

from httpx import AsyncClient

from tests.conftest import TEST_PASSWORD


async def test_register_login_route_score_leaderboard(client: AsyncClient):
    resp = await client.post(
        "/auth/register",
        json={"username": "alice", "email": "alice@example.com", "password": TEST_PASSWORD},
    )
    assert resp.status_code == 200

    resp = await client.post("/auth/login", json={"email": "alice@example.com", "password": TEST_PASSWORD})
    assert resp.status_code == 200
    headers = {"Authorization": f"Bearer {resp.json()['token']}"}

    resp = await client.post("/routes", json={"name": "Loop", "path_data": {"type": "LineString"}}, headers=headers)
    assert resp.status_code == 200
    route_id = resp.json()["id"]

    resp = await client.post(f"/routes/{route_id}/score", json={"time_seconds": 100}, headers=headers)
    assert resp.status_code == 200

    resp = await client.get(f"/leaderboard/route/{route_id}", headers=headers)
    assert resp.status_code == 200
    entries = resp.json()
    assert len(entries) == 1
    assert entries[0]["username"] == "alice"
    assert entries[0]["time_seconds"] == 100


async def test_head_to_head(client: AsyncClient):
    ids = {}
    headers = {}
    for name in ("alice", "bob"):
        resp = await client.post(
            "/auth/register",
            json={"username": name, "email": f"{name}@example.com", "password": TEST_PASSWORD},
        )
        ids[name] = resp.json()["id"]
        resp = await client.post("/auth/login", json={"email": f"{name}@example.com", "password": TEST_PASSWORD})
        headers[name] = {"Authorization": f"Bearer {resp.json()['token']}"}

    route_id = (
        await client.post("/routes", json={"name": "Loop", "path_data": []}, headers=headers["alice"])
    ).json()["id"]
    challenge = (
        await client.post(
            "/challenges", json={"route_id": route_id, "challenged_id": ids["bob"]}, headers=headers["alice"]
        )
    ).json()

    resp = await client.post(f"/challenges/{challenge['id']}/accept", headers=headers["bob"])
    assert resp.json()["status"] == "active"

    resp = await client.post(
        f"/challenges/{challenge['id']}/complete",
        json={"status": "completed", "challenger_time": 98.0, "challenged_time": 97.5},
        headers=headers["bob"],
    )
    result = resp.json()
    assert result["status"] == "completed"
    assert result["winner_id"] == ids["bob"]
