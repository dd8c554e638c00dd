"""Map and air-quality heatmap routes."""

import sqlite3
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from dashboard.heatmap import HEATMAP_COLUMNS, public_heatmap, user_air_quality_points
from dashboard.map_points import MAP_COLUMNS, map_statistics, project_points
from dashboard.ranges import DEFAULT_MAP_RANGE, is_average_range, resolve_time_range, to_db_timestamp
from journal.store import JournalStore
from observability import metrics
from web.auth import get_optional_user
from web.deps import get_config, get_store

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["map"])

TIME_RANGE_QUERY = Query(None, alias="timeRange", description="today, 7days or 30days")


def _bounds(time_range: Optional[str]) -> tuple[str, str]:
    now = datetime.now(timezone.utc)
    return to_db_timestamp(resolve_time_range(time_range, now)), to_db_timestamp(now)


@router.get("/map/data")
async def get_map_data(
    time_range: str | None = TIME_RANGE_QUERY,
    store: JournalStore = Depends(get_store),
):
    """Community map: located entries from all users plus summary statistics."""
    time_range = time_range or DEFAULT_MAP_RANGE
    since, until = _bounds(time_range)
    try:
        rows = store.fetch_entries(
            None,
            MAP_COLUMNS,
            since=since,
            until=until,
            ascending=False,
            require_coordinates=True,
            limit=get_config().dashboard.map_max_points,
        )
        emotion_map = store.emotion_lookup()
    except sqlite3.Error as e:
        logger.error("map.data_error", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    with metrics.timer("dashboard.map_points"):
        points = project_points(rows, emotion_map)
    return {"points": points, "statistics": map_statistics(points, time_range)}


@router.get("/air-quality")
async def get_air_quality(
    time_range: str | None = TIME_RANGE_QUERY,
    user: Optional[dict] = Depends(get_optional_user),
    store: JournalStore = Depends(get_store),
):
    """The user's own air-quality readings.

    Anonymous visitors get 200 with empty data rather than 401 so the public
    landing page can render the widget.
    """
    time_range = time_range or DEFAULT_MAP_RANGE
    if user is None:
        return {"data": [], "timeRange": time_range, "message": "No authenticated session found"}

    since, until = _bounds(time_range)
    try:
        rows = store.fetch_entries(
            user["id"],
            HEATMAP_COLUMNS,
            since=since,
            until=until,
            ascending=False,
            require_weather=True,
        )
    except sqlite3.Error as e:
        logger.error("map.air_quality_error", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))
    return {"data": user_air_quality_points(rows), "timeRange": time_range}


@router.get("/public/air-quality")
async def get_public_air_quality(
    time_range: str | None = TIME_RANGE_QUERY,
    store: JournalStore = Depends(get_store),
):
    """Community heatmap; 7days/30days average per location."""
    time_range = time_range or DEFAULT_MAP_RANGE
    since, until = _bounds(time_range)
    try:
        rows = store.fetch_entries(
            None,
            HEATMAP_COLUMNS,
            since=since,
            until=until,
            ascending=False,
            require_weather=True,
            limit=get_config().dashboard.heatmap_max_rows,
        )
        emotion_map = store.emotion_lookup()
    except sqlite3.Error as e:
        logger.error("map.public_air_quality_error", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    with metrics.timer("dashboard.public_heatmap"):
        return public_heatmap(rows, emotion_map, time_range, average=is_average_range(time_range))
