"""Journaling rewards: record an entry's points and streak, read the profile."""

import sqlite3
from datetime import date

import structlog
from fastapi import APIRouter, Depends, HTTPException

from dashboard.aggregates import day_key
from journal.gamification import GamificationStore
from web.auth import get_current_user
from web.deps import get_gamification
from web.models import EntryProgressRequest

logger = structlog.get_logger()

router = APIRouter(prefix="/api/gamification", tags=["gamification"])


@router.post("/update-on-entry")
async def update_on_entry(
    body: EntryProgressRequest,
    user: dict = Depends(get_current_user),
    game: GamificationStore = Depends(get_gamification),
):
    """Called once after an entry is saved; ``journalDate`` is bucketed to its UTC day."""
    if not body.journal_date:
        raise HTTPException(status_code=400, detail="journalDate is required")
    try:
        entry_day = date.fromisoformat(day_key(body.journal_date))
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid journalDate")

    try:
        return game.record_entry(user["id"], entry_day)
    except sqlite3.Error as e:
        logger.error("gamification.update_error", user_id=user["id"], error=str(e))
        raise HTTPException(status_code=500, detail="Failed to update gamification progress")


@router.get("/profile")
async def read_profile(
    user: dict = Depends(get_current_user),
    game: GamificationStore = Depends(get_gamification),
):
    try:
        return game.get_profile(user["id"])
    except sqlite3.Error as e:
        logger.error("gamification.profile_error", user_id=user["id"], error=str(e))
        raise HTTPException(status_code=500, detail=str(e))
