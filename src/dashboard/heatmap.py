"""Air-quality heatmap projections (per-user and community)."""

import json
from datetime import datetime
from typing import Iterable, Optional

from dashboard.aggregates import UNKNOWN_EMOTION, to_fixed
from dashboard.air_quality import (
    EPA_INDEX_KEY,
    POLLUTANT_KEYS,
    extract_air_quality,
    extract_location,
    is_number,
    to_number,
)
from dashboard.map_points import round_half_up

MAX_HEATMAP_ROWS = 200
UNKNOWN_LOCATION = "Unknown Location"

HEATMAP_COLUMNS = (
    "weather_data",
    "created_at",
    "latitude",
    "longitude",
    "emotion_analysis",
    "emotion_id",
    "mood_score",
)


def _air_quality_values(air_quality: dict) -> dict:
    values = {"aqi": to_number(air_quality.get(EPA_INDEX_KEY)) or 0}
    for key in POLLUTANT_KEYS:
        values[key] = to_number(air_quality.get(key)) or 0
    return values


def user_air_quality_points(rows: Iterable) -> list[dict]:
    """Heatmap points for one user's entries that carry air-quality data.

    Entry coordinates win over the weather payload's location.
    """
    points = []
    for row in rows:
        air_quality = extract_air_quality(row["weather_data"])
        if air_quality is None:
            continue
        location = extract_location(row["weather_data"]) or {}
        points.append(
            {
                "location": {
                    "lat": row["latitude"] or location.get("lat"),
                    "lon": row["longitude"] or location.get("lon"),
                    "name": location.get("name"),
                },
                "timestamp": row["created_at"],
                "airQuality": _air_quality_values(air_quality),
            }
        )
    return points


def _parse_analysis(raw) -> Optional[dict]:
    if raw is None:
        return None
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except (ValueError, TypeError):
            return None
    return raw if isinstance(raw, dict) else None


def resolve_emotion(row, emotion_map: dict) -> Optional[dict]:
    """Emotion for a heatmap entry: AI analysis first, then the manual pick."""
    analysis = _parse_analysis(row["emotion_analysis"])
    if analysis is not None:
        top = analysis.get("top_prediction") or {}
        return {
            "primaryEmotion": top.get("label") or UNKNOWN_EMOTION,
            "confidence": top.get("confidence") or 0,
            "allEmotions": analysis.get("all_predictions") or {},
        }
    if row["emotion_id"] is not None:
        label = emotion_map.get(row["emotion_id"], UNKNOWN_EMOTION)
        return {"primaryEmotion": label, "confidence": 100, "allEmotions": {label: 100}}
    return None


def _weather_point(row, air_quality: dict) -> Optional[dict]:
    location = extract_location(row["weather_data"]) or {}
    lat, lon = location.get("lat"), location.get("lon")
    if not lat or not lon:
        return None
    return {
        "location": {"lat": lat, "lon": lon, "name": location.get("name") or UNKNOWN_LOCATION},
        "timestamp": row["created_at"],
        "airQuality": air_quality,
        "source": "api",
    }


def _latest(timestamps: list[str]) -> str:
    return max(timestamps, key=lambda ts: datetime.fromisoformat(ts.replace("Z", "+00:00")))


def _average_weather(points: list[dict], time_range: str) -> list[dict]:
    groups: dict[str, list[dict]] = {}
    for point in points:
        groups.setdefault(point["location"]["name"], []).append(point)

    averaged = []
    for group in groups.values():
        count = len(group)
        sums = {"aqi": 0.0, **{key: 0.0 for key in POLLUTANT_KEYS}}
        for point in group:
            for key, value in _air_quality_values(point["airQuality"]).items():
                sums[key] += value
        air_quality = {"aqi": round_half_up(sums.pop("aqi") / count)}
        for key, total in sums.items():
            air_quality[key] = to_fixed(total / count)
        averaged.append(
            {
                "location": group[0]["location"],
                "timestamp": _latest([p["timestamp"] for p in group]),
                "airQuality": air_quality,
                "source": "api",
                "sampleCount": count,
                "timeRange": time_range,
            }
        )
    return averaged


def _dominant(counts: dict[str, int]) -> str:
    dominant, best = UNKNOWN_EMOTION, 0
    for emotion, count in counts.items():
        if count > best:
            dominant, best = emotion, count
    return dominant


def _cluster_journal(rows: list, emotion_map: dict) -> list[dict]:
    clusters: dict[str, list] = {}
    for row in rows:
        key = f"{float(row['latitude']):.3f},{float(row['longitude']):.3f}"
        clusters.setdefault(key, []).append(row)

    result = []
    for members in clusters.values():
        count = len(members)
        emotion_counts: dict[str, int] = {}
        for row in members:
            emotion = resolve_emotion(row, emotion_map)
            if emotion and emotion["primaryEmotion"]:
                label = emotion["primaryEmotion"]
                emotion_counts[label] = emotion_counts.get(label, 0) + 1
        moods = [row["mood_score"] for row in members if is_number(row["mood_score"])]
        result.append(
            {
                "location": {
                    "lat": sum(float(r["latitude"]) for r in members) / count,
                    "lon": sum(float(r["longitude"]) for r in members) / count,
                },
                "intensity": count,
                "dominantEmotion": _dominant(emotion_counts),
                "emotionCounts": emotion_counts,
                "entryCount": count,
                "source": "journal",
                "averageMoodScore": sum(moods) / len(moods) if moods else None,
            }
        )
    return result


def _journal_point(row, emotion_map: dict) -> dict:
    emotion = resolve_emotion(row, emotion_map)
    if emotion is None:
        dominant, counts = UNKNOWN_EMOTION, {}
    else:
        dominant, counts = emotion["primaryEmotion"], emotion["allEmotions"]
    return {
        "location": {"lat": row["latitude"], "lon": row["longitude"]},
        "intensity": 1,
        "dominantEmotion": dominant,
        "emotionCounts": counts,
        "entryCount": 1,
        "timestamp": row["created_at"],
        "source": "journal",
        "moodScore": row["mood_score"],
    }


def public_heatmap(rows: Iterable, emotion_map: dict, time_range: str, average: bool) -> dict:
    """Community heatmap: weather samples plus located journal emotions.

    With ``average`` set, weather samples are averaged per location name and
    journal entries are clustered on coordinates rounded to 3 decimals.
    """
    rows = list(rows)

    weather_points = []
    for row in rows:
        air_quality = extract_air_quality(row["weather_data"])
        if air_quality is None:
            continue
        point = _weather_point(row, air_quality)
        if point is not None:
            weather_points.append(point)

    located = [row for row in rows if row["latitude"] and row["longitude"]]

    if average:
        weather_data = _average_weather(weather_points, time_range)
        journal_data = _cluster_journal(located, emotion_map)
    else:
        weather_data = [
            {**p, "airQuality": _air_quality_values(p["airQuality"])} for p in weather_points
        ]
        journal_data = [_journal_point(row, emotion_map) for row in located]

    return {
        "weatherData": weather_data,
        "journalData": journal_data,
        "timeRange": time_range,
        "isAverage": average,
    }

