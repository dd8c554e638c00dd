"""Project journal rows onto map points plus summary statistics."""

import math
from collections import Counter
from typing import Iterable, Optional

from dashboard.aggregates import UNKNOWN_EMOTION
from dashboard.air_quality import (
    DEFRA_INDEX_KEY,
    EPA_INDEX_KEY,
    POLLUTANT_KEYS,
    extract_air_quality,
    extract_condition,
    extract_temperature,
    to_number,
)

MAX_MAP_POINTS = 500

MAP_COLUMNS = (
    "id",
    "latitude",
    "longitude",
    "weather_data",
    "emotion_id",
    "mood_score",
    "created_at",
)


def _air_quality_details(air_quality: Optional[dict]) -> Optional[dict]:
    if air_quality is None:
        return None
    details = {key: air_quality.get(key) for key in POLLUTANT_KEYS}
    details[EPA_INDEX_KEY] = air_quality.get(EPA_INDEX_KEY)
    details[DEFRA_INDEX_KEY] = air_quality.get(DEFRA_INDEX_KEY)
    return details


def project_point(row, emotion_map: dict) -> Optional[dict]:
    """Flat map point for a row, or None when it has no coordinates."""
    lat, lng = row["latitude"], row["longitude"]
    if lat is None or lng is None:
        return None

    air_quality = extract_air_quality(row["weather_data"])
    aqi = to_number(air_quality.get(EPA_INDEX_KEY)) if air_quality else None
    return {
        "id": row["id"],
        "lat": lat,
        "lng": lng,
        "emotion": emotion_map.get(row["emotion_id"], UNKNOWN_EMOTION),
        "moodScore": row["mood_score"],
        # EPA bands start at 1; a zero index means "not reported"
        "aqi": aqi or None,
        "airQualityDetails": _air_quality_details(air_quality),
        "temperature": extract_temperature(row["weather_data"]),
        "condition": extract_condition(row["weather_data"]),
        "timestamp": row["created_at"],
    }


def project_points(rows: Iterable, emotion_map: dict) -> list[dict]:
    points = []
    for row in rows:
        point = project_point(row, emotion_map)
        if point is not None:
            points.append(point)
    return points


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def average_aqi(points: list[dict]) -> int:
    """Rounded mean AQI over points that report one; 0 when none do."""
    values = [p["aqi"] for p in points if p["aqi"] is not None]
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def dominant_emotion(points: list[dict]) -> str:
    """Most frequent emotion label; ties go to the first one seen."""
    counts = Counter(p["emotion"] for p in points)
    if not counts:
        return UNKNOWN_EMOTION
    return counts.most_common(1)[0][0]


def map_statistics(points: list[dict], time_range: str) -> dict:
    return {
        "avgAqi": average_aqi(points),
        "dominantMood": dominant_emotion(points),
        "totalEntries": len(points),
        "timeRange": time_range,
    }
