"""Sensor telemetry ingestion and retrieval.

A bulk upload is all-or-nothing: the parent score is checked first, then
every sample is inserted in one transaction. If any row fails, none persist.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from rmce.config import get_settings
from rmce.db.models import SENSOR_CHANNELS, SensorData
from rmce.errors import InternalError, NotFoundError, PayloadValidationError
from rmce.routes.service import score_exists

logger = logging.getLogger(__name__)

_COLUMNS = ("timestamp_offset_ms", *SENSOR_CHANNELS)


def _to_row(score_id: int, sample: Mapping[str, Any]) -> SensorData:
    return SensorData(score_id=score_id, **{k: sample.get(k) for k in _COLUMNS})


async def bulk_insert(db: AsyncSession, score_id: int, samples: Iterable[Mapping[str, Any]]) -> int:
    """Insert every sample for ``score_id`` atomically. Returns the row count."""
    samples = list(samples)
    max_rows = get_settings().sensor_bulk_max_rows
    if len(samples) > max_rows:
        raise PayloadValidationError(
            f"Too many samples in one upload (max {max_rows})",
            details={"field": "data", "count": len(samples)},
        )

    if not await score_exists(db, score_id):
        raise NotFoundError("Score", score_id)

    try:
        db.add_all([_to_row(score_id, s) for s in samples])
        await db.flush()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Bulk sensor insert for score %d failed, rolled back: %s", score_id, e)
        raise InternalError("Failed to store sensor data") from e

    logger.info("Inserted %d sensor samples for score %d", len(samples), score_id)
    return len(samples)


async def insert_sample(db: AsyncSession, score_id: int, sample: Mapping[str, Any]) -> SensorData:
    """Insert a single sample for an existing score."""
    if not await score_exists(db, score_id):
        raise NotFoundError("Score", score_id)

    row = _to_row(score_id, sample)
    db.add(row)
    await db.flush()
    return row


async def list_for_score(db: AsyncSession, score_id: int) -> list[SensorData]:
    """All samples for a score in time order."""
    result = await db.execute(
        select(SensorData)
        .where(SensorData.score_id == score_id)
        .order_by(SensorData.timestamp_offset_ms.asc(), SensorData.id.asc())
    )
    return list(result.scalars().all())
