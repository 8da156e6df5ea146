"""Registration, login and the identity dependency over HTTP."""

from httpx import AsyncClient

from tests.conftest import TEST_PASSWORD, register_and_login


class TestRegister:
    async def test_register_returns_user_without_hash(self, client: AsyncClient):
        resp = await client.post(
            "/auth/register",
            json={"username": "alice", "email": "Alice@Example.com", "password": TEST_PASSWORD},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["username"] == "alice"
        assert data["email"] == "alice@example.com"
        assert "password_hash" not in data
        assert "password" not in data

    async def test_duplicate_email_conflicts(self, client: AsyncClient):
        await register_and_login(client, "alice")
        resp = await client.post(
            "/auth/register",
            json={"username": "alice2", "email": "alice@example.com", "password": TEST_PASSWORD},
        )
        assert resp.status_code == 409

    async def test_duplicate_username_conflicts(self, client: AsyncClient):
        await register_and_login(client, "alice")
        resp = await client.post(
            "/auth/register",
            json={"username": "alice", "email": "other@example.com", "password": TEST_PASSWORD},
        )
        assert resp.status_code == 409

    async def test_weak_password_rejected(self, client: AsyncClient):
        resp = await client.post(
            "/auth/register",
            json={"username": "bob", "email": "bob@example.com", "password": "short"},
        )
        assert resp.status_code == 422
        assert resp.json()["code"] == "VALIDATION_ERROR"

    async def test_invalid_email_rejected(self, client: AsyncClient):
        resp = await client.post(
            "/auth/register",
            json={"username": "bob", "email": "not-an-email", "password": TEST_PASSWORD},
        )
        assert resp.status_code == 422


class TestLogin:
    async def test_token_identifies_registered_user(self, app, client: AsyncClient):
        user_id, headers = await register_and_login(client, "alice")
        token = headers["Authorization"].removeprefix("Bearer ")
        claims = app.state.token_service.verify(token)
        assert claims.user_id == user_id
        assert claims.username == "alice"

    async def test_login_response_shape(self, client: AsyncClient):
        await register_and_login(client, "alice")
        resp = await client.post("/auth/login", json={"email": "alice@example.com", "password": TEST_PASSWORD})
        data = resp.json()
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == 7 * 86400
        assert data["user"]["username"] == "alice"

    async def test_wrong_password(self, client: AsyncClient):
        await register_and_login(client, "alice")
        resp = await client.post("/auth/login", json={"email": "alice@example.com", "password": "Wrong1234"})
        assert resp.status_code == 401

    async def test_unknown_email(self, client: AsyncClient):
        resp = await client.post("/auth/login", json={"email": "ghost@example.com", "password": TEST_PASSWORD})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid email or password"


class TestIdentity:
    async def test_protected_route_requires_token(self, client: AsyncClient):
        resp = await client.get("/routes")
        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "Bearer"

    async def test_wrong_scheme_rejected(self, client: AsyncClient):
        resp = await client.get("/routes", headers={"Authorization": "Basic YWxpY2U6cHc="})
        assert resp.status_code == 401

    async def test_invalid_token_rejected(self, client: AsyncClient):
        resp = await client.get("/routes", headers={"Authorization": "Bearer not.a.token"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Not authenticated"

    async def test_expired_token_looks_like_invalid(self, app, client: AsyncClient):
        from datetime import datetime, timedelta, timezone

        from rmce.auth.jwt import TokenService
        from rmce.config import get_settings

        issued = datetime.now(timezone.utc) - timedelta(days=8)
        stale = TokenService(get_settings().jwt_secret, clock=lambda: issued).issue(1, "a", "a@example.com")
        resp = await client.get("/routes", headers={"Authorization": f"Bearer {stale}"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Not authenticated"

    async def test_valid_token_reaches_handler(self, client: AsyncClient):
        _, headers = await register_and_login(client, "alice")
        resp = await client.get("/routes", headers=headers)
        assert resp.status_code == 200
        assert resp.json() == []

    async def test_public_endpoints_need_no_token(self, client: AsyncClient):
        for path in ("/", "/health", "/posts", "/users"):
            resp = await client.get(path)
            assert resp.status_code == 200, path
