"""Sensor telemetry schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SensorSample(BaseModel):
    """One sample. Every channel is optional; the offset is not."""

    timestamp_offset_ms: int = Field(..., ge=0)
    accel_x: float | None = None
    accel_y: float | None = None
    accel_z: float | None = None
    gyro_x: float | None = None
    gyro_y: float | None = None
    gyro_z: float | None = None
    orientation_azimuth: float | None = None
    orientation_pitch: float | None = None
    orientation_roll: float | None = None
    speed_kmh: float | None = None
    g_force: float | None = None
    inclination_degrees: float | None = None
    sound_db: float | None = None
    nearby_devices: int | None = Field(None, ge=0)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    altitude: float | None = None


class BulkSensorRequest(BaseModel):
    score_id: int
    data: list[SensorSample]


class BulkSensorResponse(BaseModel):
    message: str
    inserted_count: int


class SensorDataResponse(SensorSample):
    model_config = ConfigDict(from_attributes=True)

    id: int
    score_id: int
