"""Journal CRUD routes over JournalStore (owner-scoped)."""

import sqlite3

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from dashboard.air_quality import parse_weather_payload
from journal.sentiment import analyze_sentiment
from journal.store import JournalStore
from web.auth import get_current_user
from web.deps import get_embeddings, get_store
from web.models import JournalCreate, JournalEntry, JournalUpdate
from web.user_store import log_event

logger = structlog.get_logger()

router = APIRouter(prefix="/api/journal", tags=["journal"])

# Fields that feed the rich context embedded for chat retrieval
_INDEXED_FIELDS = {"title", "content", "mood_score", "emotion_id", "location_name"}


def _drop_vectors(entry_id: str, user_id: str) -> None:
    try:
        get_embeddings().delete_entry(entry_id, user_id)
    except Exception as e:
        logger.warning("journal.embeddings_cleanup_failed", entry_id=entry_id, error=str(e))


def _to_model(entry: dict, emotions: dict[int, str]) -> JournalEntry:
    return JournalEntry(
        id=entry["id"],
        title=entry["title"],
        content=entry["content"],
        created_at=entry["created_at"],
        updated_at=entry["updated_at"],
        mood_score=entry["mood_score"],
        emotion=emotions.get(entry["emotion_id"]),
        emotion_source=entry["emotion_source"],
        weather_data=parse_weather_payload(entry["weather_data"]),
        latitude=entry["latitude"],
        longitude=entry["longitude"],
        location_name=entry["location_name"],
    )


def _resolve_emotion(store: JournalStore, name: str | None) -> int | None:
    if not name:
        return None
    emotion_id = store.emotion_id_for(name)
    if emotion_id is None:
        raise HTTPException(status_code=400, detail=f"Unknown emotion '{name}'")
    return emotion_id


@router.get("", response_model=list[JournalEntry])
async def list_entries(
    limit: int = 50,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    emotions = store.emotion_lookup()
    return [_to_model(e, emotions) for e in store.list_entries(user["id"], limit=limit)]


@router.post("", response_model=JournalEntry, status_code=status.HTTP_201_CREATED)
async def create_entry(
    body: JournalCreate,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    """Create an entry; mood is scored from the text when not supplied."""
    mood_score = body.mood_score
    if mood_score is None:
        mood_score = analyze_sentiment(body.content)["score"]

    emotion_id = _resolve_emotion(store, body.emotion)
    emotion_source = body.emotion_source or ("manual" if emotion_id is not None else None)

    try:
        entry = store.create_entry(
            user_id=user["id"],
            content=body.content,
            title=body.title,
            mood_score=mood_score,
            weather_data=body.weather_data,
            latitude=body.latitude,
            longitude=body.longitude,
            location_name=body.location_name,
            emotion_id=emotion_id,
            emotion_analysis=body.emotion_analysis,
            emotion_source=emotion_source,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except sqlite3.Error as e:
        logger.error("journal.create_error", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    log_event("journal_entry_created", user["id"])
    return _to_model(entry, store.emotion_lookup())


@router.get("/{entry_id}", response_model=JournalEntry)
async def read_entry(
    entry_id: str,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    entry = store.get_entry(entry_id, user["id"])
    if entry is None:
        raise HTTPException(status_code=404, detail="Entry not found")
    return _to_model(entry, store.emotion_lookup())


@router.put("/{entry_id}", response_model=JournalEntry)
async def update_entry(
    entry_id: str,
    body: JournalUpdate,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    fields = body.model_dump(exclude_unset=True)
    if "emotion" in fields:
        fields["emotion_id"] = _resolve_emotion(store, fields.pop("emotion"))
    if "content" in fields and "mood_score" not in fields:
        fields["mood_score"] = analyze_sentiment(fields["content"])["score"]

    try:
        entry = store.update_entry(entry_id, user["id"], **fields)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if entry is None:
        raise HTTPException(status_code=404, detail="Entry not found")

    # Indexed chunks no longer match the entry; generate-embeddings rebuilds them
    if _INDEXED_FIELDS & fields.keys():
        _drop_vectors(entry_id, user["id"])
    return _to_model(entry, store.emotion_lookup())


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: str,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    if not store.delete_entry(entry_id, user["id"]):
        raise HTTPException(status_code=404, detail="Entry not found")

    _drop_vectors(entry_id, user["id"])
