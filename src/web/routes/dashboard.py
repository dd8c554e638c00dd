"""Dashboard aggregation routes: mood trend, emotions, word cloud, mood vs air."""

import sqlite3

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from dashboard import (
    emotion_composition,
    mood_air_correlation,
    mood_trend,
    resolve_range,
    word_cloud,
)
from dashboard.aggregates import STOPWORDS
from journal.store import JournalStore
from observability import metrics
from web.auth import get_current_user
from web.deps import get_config, get_store

logger = structlog.get_logger()

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

RANGE_QUERY = Query(None, alias="range", description="7, 30 or all")


def _store_fault(event: str, e: sqlite3.Error) -> HTTPException:
    logger.error(event, error=str(e))
    return HTTPException(status_code=500, detail=str(e))


@router.get("/mood-trend")
async def get_mood_trend(
    range_token: str | None = RANGE_QUERY,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    """Average mood per day, oldest first."""
    try:
        rows = store.fetch_entries(
            user["id"],
            ("created_at", "mood_score"),
            since=resolve_range(range_token),
            ascending=True,
        )
    except sqlite3.Error as e:
        raise _store_fault("dashboard.mood_trend_error", e)
    with metrics.timer("dashboard.mood_trend"):
        data = mood_trend(rows)
    return {"data": data}


@router.get("/emotion-composition")
async def get_emotion_composition(
    range_token: str | None = RANGE_QUERY,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    try:
        rows = store.fetch_emotion_labels(user["id"], since=resolve_range(range_token))
    except sqlite3.Error as e:
        raise _store_fault("dashboard.emotion_composition_error", e)
    with metrics.timer("dashboard.emotion_composition"):
        data = emotion_composition(rows)
    return {"data": data}


@router.get("/word-cloud")
async def get_word_cloud(
    range_token: str | None = RANGE_QUERY,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    """Top words across the user's entries."""
    cfg = get_config().dashboard
    stopwords = STOPWORDS | {w.lower() for w in cfg.extra_stopwords}
    try:
        rows = store.fetch_entries(user["id"], ("content",), since=resolve_range(range_token))
    except sqlite3.Error as e:
        raise _store_fault("dashboard.word_cloud_error", e)
    with metrics.timer("dashboard.word_cloud"):
        data = word_cloud(rows, limit=cfg.word_cloud_limit, stopwords=stopwords)
    return {"data": data}


@router.get("/mood-air-correlation")
async def get_mood_air_correlation(
    range_token: str | None = RANGE_QUERY,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    """Daily mood and US-EPA index, outer-joined on date."""
    try:
        rows = store.fetch_entries(
            user["id"],
            ("created_at", "mood_score", "weather_data"),
            since=resolve_range(range_token),
            ascending=True,
        )
    except sqlite3.Error as e:
        raise _store_fault("dashboard.mood_air_correlation_error", e)
    with metrics.timer("dashboard.mood_air_correlation"):
        data = mood_air_correlation(rows)
    return {"data": data}
