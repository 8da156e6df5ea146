"""Friend requests and answers."""

from httpx import AsyncClient

from tests.conftest import register_and_login


class TestFriendRequests:
    async def test_request_accept_flow(self, client: AsyncClient):
        alice_id, alice = await register_and_login(client, "alice")
        bob_id, bob = await register_and_login(client, "bob")

        resp = await client.post(f"/friends/add/{bob_id}", headers=alice)
        assert resp.status_code == 200
        friendship = resp.json()
        assert friendship["status"] == "pending"
        assert friendship["user_id"] == alice_id

        pending = (await client.get("/friends/pending", headers=bob)).json()
        assert [p["username"] for p in pending] == ["alice"]

        resp = await client.put(f"/friends/accept/{friendship['id']}", headers=bob)
        assert resp.status_code == 200
        assert resp.json()["status"] == "accepted"

        friends = (await client.get("/friends", headers=alice)).json()
        assert [(f["user_id"], f["username"]) for f in friends] == [(bob_id, "bob")]

    async def test_acceptance_is_not_reciprocal(self, client: AsyncClient):
        _, alice = await register_and_login(client, "alice")
        bob_id, bob = await register_and_login(client, "bob")
        friendship = (await client.post(f"/friends/add/{bob_id}", headers=alice)).json()
        await client.put(f"/friends/accept/{friendship['id']}", headers=bob)

        assert (await client.get("/friends", headers=bob)).json() == []

    async def test_only_recipient_may_answer(self, client: AsyncClient):
        _, alice = await register_and_login(client, "alice")
        bob_id, _ = await register_and_login(client, "bob")
        _, carol = await register_and_login(client, "carol")
        friendship = (await client.post(f"/friends/add/{bob_id}", headers=alice)).json()

        assert (await client.put(f"/friends/accept/{friendship['id']}", headers=alice)).status_code == 403
        assert (await client.put(f"/friends/reject/{friendship['id']}", headers=carol)).status_code == 403

    async def test_reject(self, client: AsyncClient):
        _, alice = await register_and_login(client, "alice")
        bob_id, bob = await register_and_login(client, "bob")
        friendship = (await client.post(f"/friends/add/{bob_id}", headers=alice)).json()

        resp = await client.put(f"/friends/reject/{friendship['id']}", headers=bob)
        assert resp.json()["status"] == "rejected"
        assert (await client.get("/friends/pending", headers=bob)).json() == []

    async def test_resend_resets_to_pending(self, client: AsyncClient):
        _, alice = await register_and_login(client, "alice")
        bob_id, bob = await register_and_login(client, "bob")
        first = (await client.post(f"/friends/add/{bob_id}", headers=alice)).json()
        await client.put(f"/friends/reject/{first['id']}", headers=bob)

        again = (await client.post(f"/friends/add/{bob_id}", headers=alice)).json()
        assert again["id"] == first["id"]
        assert again["status"] == "pending"

    async def test_unknown_friend_and_self(self, client: AsyncClient):
        alice_id, alice = await register_and_login(client, "alice")
        assert (await client.post("/friends/add/999", headers=alice)).status_code == 404
        assert (await client.post(f"/friends/add/{alice_id}", headers=alice)).status_code == 422

    async def test_unknown_request(self, client: AsyncClient):
        _, alice = await register_and_login(client, "alice")
        assert (await client.put("/friends/accept/999", headers=alice)).status_code == 404
