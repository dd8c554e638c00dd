"""Pydantic request/response schemas for the web API."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from journal.store import MAX_CONTENT_LENGTH

# --- Journal ---


class JournalCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=MAX_CONTENT_LENGTH)
    title: Optional[str] = Field(None, max_length=200)
    mood_score: Optional[float] = Field(None, ge=-1, le=1)
    emotion: Optional[str] = None
    emotion_analysis: Optional[dict] = None
    emotion_source: Optional[Literal["ai", "manual"]] = None
    weather_data: Optional[dict] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    location_name: Optional[str] = None


class JournalUpdate(BaseModel):
    content: Optional[str] = Field(None, min_length=1, max_length=MAX_CONTENT_LENGTH)
    title: Optional[str] = Field(None, max_length=200)
    mood_score: Optional[float] = Field(None, ge=-1, le=1)
    emotion: Optional[str] = None
    emotion_source: Optional[Literal["ai", "manual"]] = None
    location_name: Optional[str] = None


class JournalEntry(BaseModel):
    id: str
    title: Optional[str] = None
    content: Optional[str] = None
    created_at: str
    updated_at: Optional[str] = None
    mood_score: Optional[float] = None
    emotion: Optional[str] = None
    emotion_source: Optional[str] = None
    weather_data: Optional[Any] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location_name: Optional[str] = None


# --- Chat ---


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=5000)
    conversation_id: Optional[str] = Field(None, alias="conversationId")

    model_config = {"populate_by_name": True}


class GenerateEmbeddingsRequest(BaseModel):
    journal_id: Optional[str] = Field(None, alias="journalId")
    force: bool = False

    model_config = {"populate_by_name": True}


# --- Weather / education ---


class WeatherRequest(BaseModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class FunFactRequest(BaseModel):
    indicator_type: Optional[str] = Field(None, alias="indicatorType")
    value: Optional[Any] = None
    unit: Optional[str] = None
    location_name: Optional[str] = Field(None, alias="locationName")
    general_context: Optional[str] = Field(None, alias="generalContext")
    journal_date: Optional[str] = Field(None, alias="journalDate")

    model_config = {"populate_by_name": True}


class DailyInsightRequest(BaseModel):
    """Only journalId is required; the rest override what the stored entry holds."""

    journal_id: str = Field(..., min_length=1, alias="journalId")
    journal_content: Optional[str] = Field(None, alias="journalContent")
    emotion: Optional[str] = None
    weather_data: Optional[Any] = Field(None, alias="weatherData")
    location_name: Optional[str] = Field(None, alias="locationName")
    journal_created_at: Optional[str] = Field(None, alias="journalCreatedAt")

    model_config = {"populate_by_name": True}


class InspireRequest(BaseModel):
    prompt: Optional[str] = None
    content: Optional[str] = None
    weather_data: Optional[Any] = Field(None, alias="weatherData")

    model_config = {"populate_by_name": True}


# --- Gamification ---


class EntryProgressRequest(BaseModel):
    journal_date: Optional[str] = Field(None, alias="journalDate")

    model_config = {"populate_by_name": True}
