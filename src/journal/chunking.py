"""Rich-context text building and chunking for journal embeddings."""

import re
from datetime import datetime
from typing import Optional

from dashboard.air_quality import (
    EPA_INDEX_KEY,
    classify_epa_index,
    extract_air_quality,
    extract_condition,
    extract_location,
    extract_temperature,
    parse_weather_payload,
    to_number,
)
from journal.sentiment import mood_label

DEFAULT_CHUNK_CHARS = 1000
DEFAULT_CHUNK_OVERLAP = 100

_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")


def _format_date(created_at: Optional[str]) -> Optional[str]:
    if not created_at:
        return None
    try:
        dt = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
    except ValueError:
        return None
    return dt.strftime("%A, %d %B %Y")


def _weather_lines(weather_data) -> list[str]:
    if parse_weather_payload(weather_data) is None:
        return []
    lines = []
    temperature = extract_temperature(weather_data)
    condition = extract_condition(weather_data)
    if temperature is not None or condition:
        parts = [p for p in (condition, f"{temperature}°C" if temperature is not None else None) if p]
        lines.append(f"Weather: {', '.join(parts)}")

    air_quality = extract_air_quality(weather_data)
    if air_quality:
        parts = []
        epa = to_number(air_quality.get(EPA_INDEX_KEY))
        if epa is not None:
            band = classify_epa_index(epa)
            label = f" ({band.description})" if band else ""
            parts.append(f"US EPA index {epa:g}{label}")
        for key, name in (("pm2_5", "PM2.5"), ("pm10", "PM10"), ("no2", "NO2"), ("o3", "O3")):
            value = to_number(air_quality.get(key))
            if value is not None:
                parts.append(f"{name} {value:g} µg/m³")
        if parts:
            lines.append(f"Air quality: {', '.join(parts)}")
    return lines


def create_rich_context(entry: dict, emotion_name: Optional[str] = None) -> str:
    """Text used for embedding: entry text plus its mood/place/weather context."""
    lines = []
    if entry.get("title"):
        lines.append(f"Title: {entry['title']}")
    if entry.get("content"):
        lines.append(entry["content"].strip())

    date = _format_date(entry.get("created_at"))
    if date:
        lines.append(f"Date: {date}")

    mood = entry.get("mood_score")
    if isinstance(mood, (int, float)) and not isinstance(mood, bool):
        lines.append(f"Mood: {mood:+.2f} ({mood_label(mood)})")
    if emotion_name:
        lines.append(f"Emotion: {emotion_name}")

    location = entry.get("location_name")
    if not location:
        location = (extract_location(entry.get("weather_data")) or {}).get("name")
    if location:
        lines.append(f"Location: {location}")

    lines.extend(_weather_lines(entry.get("weather_data")))
    return "\n".join(line for line in lines if line)


def _split_long(piece: str, max_chars: int) -> list[str]:
    """Split a single oversized sentence on word boundaries."""
    parts, current = [], ""
    for word in piece.split():
        candidate = f"{current} {word}".strip()
        if current and len(candidate) > max_chars:
            parts.append(current)
            current = word
        else:
            current = candidate
    if current:
        parts.append(current)
    return parts


def chunk_text(
    text: str,
    max_chars: int = DEFAULT_CHUNK_CHARS,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[str]:
    """Sentence-aware chunks of at most ``max_chars``.

    Consecutive chunks share up to ``overlap`` trailing characters (cut at a
    word boundary). A single word longer than ``max_chars`` becomes its own
    chunk.
    """
    if overlap >= max_chars:
        raise ValueError("overlap must be smaller than max_chars")
    text = text.strip()
    if not text:
        return []
    if len(text) <= max_chars:
        return [text]

    pieces = []
    for paragraph in re.split(r"\n\s*\n|\n", text):
        for sentence in _SENTENCE_END.split(paragraph.strip()):
            if not sentence:
                continue
            if len(sentence) > max_chars:
                pieces.extend(_split_long(sentence, max_chars))
            else:
                pieces.append(sentence)

    chunks, current = [], ""
    for piece in pieces:
        candidate = f"{current} {piece}".strip()
        if current and len(candidate) > max_chars:
            chunks.append(current)
            tail = current[-overlap:] if overlap else ""
            if " " in tail:
                tail = tail.split(" ", 1)[1]
            current = f"{tail} {piece}".strip()
            if len(current) > max_chars:
                current = piece
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks
