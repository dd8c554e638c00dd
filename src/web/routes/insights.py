"""LLM-written extras: indicator fun facts, per-entry daily insights, writing inspiration."""

import sqlite3

import structlog
from fastapi import APIRouter, Depends, HTTPException

from cli.retry import llm_retry
from dashboard.air_quality import parse_weather_payload
from journal.prompts import (
    PromptTemplates,
    build_daily_insight_prompt,
    build_fun_fact_prompt,
    build_inspire_prompt,
)
from journal.store import JournalStore
from llm import LLMError, LLMRateLimitError
from web.auth import get_current_user
from web.deps import get_cheap_llm, get_config, get_store
from web.models import DailyInsightRequest, FunFactRequest, InspireRequest
from web.user_store import log_event

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["insights"])


@llm_retry(exceptions=(LLMRateLimitError,))
def _generate(prompt: str) -> str:
    return get_cheap_llm().generate(
        [{"role": "user", "content": prompt}],
        max_tokens=get_config().llm.cheap_max_tokens,
    )


@router.post("/funfact")
def fun_fact(body: FunFactRequest):
    if not body.indicator_type or body.value is None:
        raise HTTPException(status_code=400, detail="Indicator type and value are required")

    prompt = build_fun_fact_prompt(
        body.indicator_type,
        body.value,
        unit=body.unit,
        location_name=body.location_name,
        general_context=body.general_context,
        journal_date=body.journal_date,
    )
    try:
        text = _generate(prompt)
    except LLMError as e:
        logger.error("funfact.generate_error", indicator=body.indicator_type, error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    return {"fact": text.strip() or PromptTemplates.NO_FACT}


@router.post("/gemini-daily-insight")
def daily_insight(
    body: DailyInsightRequest,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    """Empathetic note linking an entry's emotion to the weather it was written in.

    Fields missing from the body fall back to the stored entry. The insight is
    saved per entry; a failed save still returns the text with ``error_db``.
    """
    entry = store.get_entry(body.journal_id, user["id"])
    if entry is None:
        raise HTTPException(status_code=404, detail="Entry not found")

    content = body.journal_content or entry["content"]
    emotion = body.emotion or store.emotion_lookup().get(entry["emotion_id"])
    weather = parse_weather_payload(body.weather_data or entry["weather_data"])
    if not content or not emotion or weather is None:
        raise HTTPException(
            status_code=400, detail="Journal content, emotion and weather data are required"
        )

    try:
        prompt = build_daily_insight_prompt(
            content,
            emotion,
            weather,
            body.journal_created_at or entry["created_at"],
            location_name=body.location_name or entry["location_name"],
        )
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid journalCreatedAt")

    try:
        text = _generate(prompt).strip()
    except LLMError as e:
        logger.error("insight.generate_error", entry_id=entry["id"], error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    if not text:
        logger.warning("insight.empty_response", entry_id=entry["id"])
        return {"insight": None, "error": PromptTemplates.NO_INSIGHT}

    try:
        store.save_insight(entry["id"], user["id"], text)
    except sqlite3.Error as e:
        logger.error("insight.save_error", entry_id=entry["id"], error=str(e))
        return {"insight": text, "error_db": "Insight generated but could not be saved"}

    log_event("daily_insight_generated", user["id"], {"journal_id": entry["id"]})
    return {"insight": text}


@router.get("/gemini-daily-insight/{journal_id}")
async def read_daily_insight(
    journal_id: str,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    insight = store.get_insight(journal_id, user["id"])
    if insight is None:
        raise HTTPException(status_code=404, detail="Insight not found")
    return {"insight": insight["insight_text"], "generatedAt": insight["generated_at"]}


@router.post("/gemini-inspire")
def inspire(body: InspireRequest):
    """Reflective questions to start an entry, from a raw prompt or the draft so far."""
    if body.prompt and body.prompt.strip():
        prompt = body.prompt
    elif body.content or body.weather_data:
        prompt = build_inspire_prompt(body.content, body.weather_data)
    else:
        raise HTTPException(status_code=400, detail="Prompt is required")

    try:
        text = _generate(prompt)
    except LLMError as e:
        logger.error("inspire.generate_error", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    return {"suggestion": text.strip() or PromptTemplates.NO_SUGGESTION}
