"""Sensor telemetry uploads."""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from rmce.db.models import Route, Score, SensorData, User
from rmce.errors import InternalError, NotFoundError
from rmce.sensor_data.service import bulk_insert
from tests.conftest import create_route, register_and_login, submit_score


async def _score(client: AsyncClient) -> tuple[int, dict]:
    _, headers = await register_and_login(client, "alice")
    route = await create_route(client, headers)
    score = await submit_score(client, headers, route["id"], 100)
    return score["id"], headers


class TestBulkUpload:
    async def test_bulk_insert_and_read_back(self, client: AsyncClient):
        score_id, headers = await _score(client)
        samples = [
            {"timestamp_offset_ms": 200, "speed_kmh": 12.5, "latitude": 52.37, "longitude": 4.89},
            {"timestamp_offset_ms": 0, "accel_x": 0.1, "nearby_devices": 3},
            {"timestamp_offset_ms": 100, "g_force": 1.02},
        ]
        resp = await client.post("/sensor-data/bulk", json={"score_id": score_id, "data": samples}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["inserted_count"] == 3

        resp = await client.get(f"/sensor-data/score/{score_id}", headers=headers)
        rows = resp.json()
        assert [r["timestamp_offset_ms"] for r in rows] == [0, 100, 200]
        assert rows[0]["nearby_devices"] == 3
        assert rows[2]["speed_kmh"] == 12.5

    async def test_unknown_score(self, client: AsyncClient):
        _, headers = await register_and_login(client, "alice")
        resp = await client.post(
            "/sensor-data/bulk",
            json={"score_id": 999, "data": [{"timestamp_offset_ms": 0}]},
            headers=headers,
        )
        assert resp.status_code == 404

    async def test_malformed_row_rejects_whole_batch(self, client: AsyncClient):
        score_id, headers = await _score(client)
        samples = [{"timestamp_offset_ms": 0}, {"speed_kmh": "fast"}, {"timestamp_offset_ms": 200}]
        resp = await client.post("/sensor-data/bulk", json={"score_id": score_id, "data": samples}, headers=headers)
        assert resp.status_code == 422

        resp = await client.get(f"/sensor-data/score/{score_id}", headers=headers)
        assert resp.json() == []

    async def test_batch_size_capped(self, client: AsyncClient, monkeypatch):
        from rmce.config import get_settings

        monkeypatch.setattr(get_settings(), "sensor_bulk_max_rows", 2)
        score_id, headers = await _score(client)
        samples = [{"timestamp_offset_ms": i} for i in range(3)]
        resp = await client.post("/sensor-data/bulk", json={"score_id": score_id, "data": samples}, headers=headers)
        assert resp.status_code == 422

    async def test_requires_token(self, client: AsyncClient):
        resp = await client.post("/sensor-data/bulk", json={"score_id": 1, "data": []})
        assert resp.status_code == 401


class TestSingleSample:
    async def test_upload_one(self, client: AsyncClient):
        score_id, headers = await _score(client)
        resp = await client.post(
            f"/sensor-data/score/{score_id}",
            json={"timestamp_offset_ms": 50, "sound_db": 71.0},
            headers=headers,
        )
        assert resp.status_code == 200
        assert resp.json()["score_id"] == score_id
        assert resp.json()["sound_db"] == 71.0

    async def test_upload_to_unknown_score(self, client: AsyncClient):
        _, headers = await register_and_login(client, "alice")
        resp = await client.post("/sensor-data/score/999", json={"timestamp_offset_ms": 0}, headers=headers)
        assert resp.status_code == 404


class TestAtomicity:
    """Store-level failures inside a batch leave nothing behind."""

    async def _seed(self, db) -> int:
        from datetime import datetime, timezone

        now = datetime.now(timezone.utc)
        user = User(username="alice", email="alice@example.com", password_hash="x", created_at=now)
        db.add(user)
        await db.flush()
        route = Route(user_id=user.id, name="Loop", path_data=[], is_public=True, created_at=now, updated_at=now)
        db.add(route)
        await db.flush()
        score = Score(route_id=route.id, user_id=user.id, time_seconds=100, created_at=now)
        db.add(score)
        await db.commit()
        return score.id

    async def test_failing_row_rolls_back_batch(self, db_session):
        score_id = await self._seed(db_session)
        rows = [
            {"timestamp_offset_ms": 0, "speed_kmh": 1.0},
            {"timestamp_offset_ms": None, "speed_kmh": 2.0},
            {"timestamp_offset_ms": 200, "speed_kmh": 3.0},
        ]
        with pytest.raises(InternalError):
            await bulk_insert(db_session, score_id, rows)

        count = await db_session.scalar(
            select(func.count()).select_from(SensorData).where(SensorData.score_id == score_id)
        )
        assert count == 0

    async def test_unknown_score_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await bulk_insert(db_session, 12345, [{"timestamp_offset_ms": 0}])
