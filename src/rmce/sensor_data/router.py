"""Sensor data API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rmce.database import get_session
from rmce.sensor_data.schemas import (
    BulkSensorRequest,
    BulkSensorResponse,
    SensorDataResponse,
    SensorSample,
)
from rmce.sensor_data.service import bulk_insert, insert_sample, list_for_score

router = APIRouter(prefix="/sensor-data", tags=["Sensor Data"])


@router.post("/bulk", response_model=BulkSensorResponse)
async def upload_bulk(body: BulkSensorRequest, db: AsyncSession = Depends(get_session)):
    """Store a whole run's telemetry. Either every sample is stored or none."""
    count = await bulk_insert(db, body.score_id, (s.model_dump() for s in body.data))
    await db.commit()
    return BulkSensorResponse(message="Sensor data uploaded successfully", inserted_count=count)


@router.post("/score/{score_id}", response_model=SensorDataResponse)
async def upload_sample(score_id: int, body: SensorSample, db: AsyncSession = Depends(get_session)):
    row = await insert_sample(db, score_id, body.model_dump())
    await db.commit()
    return SensorDataResponse.model_validate(row)


@router.get("/score/{score_id}", response_model=list[SensorDataResponse])
async def get_score_samples(score_id: int, db: AsyncSession = Depends(get_session)):
    rows = await list_for_score(db, score_id)
    return [SensorDataResponse.model_validate(r) for r in rows]
