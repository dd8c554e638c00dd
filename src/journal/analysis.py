"""Journal analysis summary used as chat context.

Condensed statistics over all of a user's entries: mood distribution, top
emotions, and how mood moves with air quality and season.
"""

import json
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from dashboard.aggregates import day_key, mood_value, to_fixed
from dashboard.air_quality import (
    DEFRA_INDEX_KEY,
    EPA_INDEX_KEY,
    extract_air_quality,
    extract_condition,
    extract_temperature,
    parse_weather_payload,
    to_number,
)
from journal.sentiment import NEGATIVE_THRESHOLD, POSITIVE_THRESHOLD

ANALYSIS_COLUMNS = (
    "id",
    "title",
    "created_at",
    "mood_score",
    "emotion_id",
    "emotion_analysis",
    "weather_data",
    "location_name",
)

# WHO PM2.5 guideline bands (µg/m³)
PM25_HIGH = 35
PM25_LOW = 15

MIN_CORRELATION_POINTS = 3
SEASONS = ("spring", "summer", "autumn", "winter")
RAW_SAMPLE_SIZE = 10
WORST_DAYS = 5
TOP_EMOTIONS = 3


def _parse_ts(value) -> datetime:
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def season_for(dt: datetime) -> str:
    """Meteorological season (northern hemisphere) for a date."""
    month = dt.month
    if 3 <= month <= 5:
        return "spring"
    if 6 <= month <= 8:
        return "summer"
    if 9 <= month <= 11:
        return "autumn"
    return "winter"


def _avg(values: list[float], ndigits: int) -> Optional[float]:
    if not values:
        return None
    return to_fixed(sum(values) / len(values), ndigits)


def _positive(value) -> Optional[float]:
    # Zero readings are treated as "not measured"
    number = to_number(value)
    return number if number else None


def environmental_point(row) -> Optional[dict]:
    """Per-entry environment record, or None when the entry has no usable weather."""
    mood = mood_value(row)
    if mood is None or parse_weather_payload(row["weather_data"]) is None:
        return None
    created = _parse_ts(row["created_at"])
    air_quality = extract_air_quality(row["weather_data"]) or {}
    return {
        "date": created.date().isoformat(),
        "dateFormatted": f"{created.day}/{created.month}/{created.year}",
        "mood": mood,
        "temperature": extract_temperature(row["weather_data"]),
        "condition": extract_condition(row["weather_data"]),
        "aqi": _positive(air_quality.get(EPA_INDEX_KEY)),
        "aqiDefra": _positive(air_quality.get(DEFRA_INDEX_KEY)),
        "pm25": _positive(air_quality.get("pm2_5")),
        "pm10": _positive(air_quality.get("pm10")),
        "no2": _positive(air_quality.get("no2")),
        "o3": _positive(air_quality.get("o3")),
        "so2": _positive(air_quality.get("so2")),
        "co": _positive(air_quality.get("co")),
        "season": season_for(created),
        "journalId": row["id"],
        "title": row["title"],
    }


def environmental_correlations(points: list[dict]) -> Optional[dict]:
    """Mood on clean-air vs polluted days, by PM2.5 and by EPA index."""
    if len(points) < MIN_CORRELATION_POINTS:
        return None

    correlations = {}
    pm25 = [p for p in points if p["pm25"] is not None]
    if len(pm25) >= MIN_CORRELATION_POINTS:
        high = [p["mood"] for p in pm25 if p["pm25"] > PM25_HIGH]
        low = [p["mood"] for p in pm25 if p["pm25"] <= PM25_LOW]
        if high and low:
            high_mood, low_mood = _avg(high, 3), _avg(low, 3)
            correlations["pm25"] = {
                "highPM25Mood": high_mood,
                "lowPM25Mood": low_mood,
                "impact": to_fixed(sum(low) / len(low) - sum(high) / len(high), 3),
                "highPM25Days": len(high),
                "lowPM25Days": len(low),
                "totalDays": len(pm25),
                "highPM25Percentage": to_fixed(len(high) / len(pm25) * 100, 1),
            }

    aqi = [p for p in points if p["aqi"] is not None]
    if len(aqi) >= MIN_CORRELATION_POINTS:
        good = [p["mood"] for p in aqi if p["aqi"] <= 2]
        bad = [p["mood"] for p in aqi if p["aqi"] >= 4]
        if good and bad:
            correlations["aqi"] = {
                "goodAQIMood": _avg(good, 3),
                "badAQIMood": _avg(bad, 3),
                "goodDays": len(good),
                "badDays": len(bad),
                "totalDays": len(aqi),
            }
    return correlations


def seasonal_moods(points: list[dict]) -> dict:
    seasonal = {}
    for season in SEASONS:
        group = [p for p in points if p["season"] == season]
        if not group:
            continue
        seasonal[season] = {
            "avgMood": _avg([p["mood"] for p in group], 3),
            "count": len(group),
            "avgPM25": _avg([p["pm25"] for p in group if p["pm25"] is not None], 1),
            "avgAQI": _avg([p["aqi"] for p in group if p["aqi"] is not None], 1),
        }
    return seasonal


def aqi_impact(points: list[dict]) -> Optional[dict]:
    """Mood per EPA band; bands 4-6 are merged into ``unhealthy``."""
    aqi = [p for p in points if p["aqi"] is not None]
    if len(aqi) < MIN_CORRELATION_POINTS:
        return None

    categories = {
        "good": [p for p in aqi if p["aqi"] == 1],
        "moderate": [p for p in aqi if p["aqi"] == 2],
        "sensitive": [p for p in aqi if p["aqi"] == 3],
        "unhealthy": [p for p in aqi if p["aqi"] >= 4],
    }
    impact = {}
    for category, group in categories.items():
        if group:
            impact[category] = {
                "avgMood": _avg([p["mood"] for p in group], 3),
                "count": len(group),
                "percentage": to_fixed(len(group) / len(aqi) * 100, 1),
            }
    return impact


def _emotion_label(row, emotion_map: dict) -> Optional[str]:
    raw = row["emotion_analysis"]
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            raw = None
    if isinstance(raw, dict):
        label = raw.get("dominant_emotion") or (raw.get("top_prediction") or {}).get("label")
        if label:
            return label
    if row["emotion_id"] is not None:
        return emotion_map.get(row["emotion_id"])
    return None


def analyze_journals(
    rows: Iterable, now: Optional[datetime] = None, emotion_map: Optional[dict] = None
) -> dict:
    """Summary and environmental analysis for a user's journal rows."""
    rows = list(rows)
    now = now or datetime.now(timezone.utc)
    emotion_map = emotion_map or {}

    moods = [(row, mood_value(row)) for row in rows]
    scored = [(row, m) for row, m in moods if m is not None]
    week_ago = now - timedelta(days=7)
    recent = [m for row, m in scored if _parse_ts(row["created_at"]) >= week_ago]

    emotion_counts = Counter(
        label for label in (_emotion_label(row, emotion_map) for row in rows) if label
    )

    points = [p for p in (environmental_point(row) for row in rows) if p is not None]
    worst = sorted(
        (p for p in points if p["pm25"] is not None), key=lambda p: p["pm25"], reverse=True
    )[:WORST_DAYS]

    return {
        "summary": {
            "total": len(rows),
            "days": len({day_key(row["created_at"]) for row in rows}),
            "avgMood": _avg([m for _, m in scored], 2) or 0,
            "recentMood": _avg(recent, 2) or 0,
            "moodCounts": {
                "positive": sum(1 for _, m in scored if m > POSITIVE_THRESHOLD),
                "neutral": sum(
                    1 for _, m in scored if NEGATIVE_THRESHOLD <= m <= POSITIVE_THRESHOLD
                ),
                "negative": sum(1 for _, m in scored if m < NEGATIVE_THRESHOLD),
            },
            "topEmotions": [
                {"emotion": emotion, "count": count}
                for emotion, count in emotion_counts.most_common(TOP_EMOTIONS)
            ],
        },
        "environmental": {
            "correlations": environmental_correlations(points),
            "seasonal": seasonal_moods(points),
            "aqiImpact": aqi_impact(points),
            "dataPoints": len(points),
            "worstAQIDays": [
                {
                    "date": p["dateFormatted"],
                    "mood": p["mood"],
                    "pm25": p["pm25"],
                    "aqi": p["aqi"],
                    "title": p["title"],
                }
                for p in worst
            ],
            "rawData": points[:RAW_SAMPLE_SIZE],
        },
    }
