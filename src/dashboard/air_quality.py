"""Tolerant access to the weather/air-quality payload stored on journal entries.

The ``weather_data`` column holds the WeatherAPI ``current.json?aqi=yes``
response, either already decoded or as a JSON string. Accessors here never
raise on a malformed payload; they report the value as absent instead.
"""

import json
import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional

EPA_INDEX_KEY = "us-epa-index"
DEFRA_INDEX_KEY = "gb-defra-index"
POLLUTANT_KEYS = ("co", "no2", "o3", "so2", "pm2_5", "pm10")


class AqiLevel(IntEnum):
    GOOD = 1
    MODERATE = 2
    UNHEALTHY_SENSITIVE = 3
    UNHEALTHY = 4
    VERY_UNHEALTHY = 5
    HAZARDOUS = 6


@dataclass(frozen=True)
class AqiColor:
    level: AqiLevel
    color: str
    range: tuple[int, int]
    description: str

    def contains(self, index: float) -> bool:
        lo, hi = self.range
        return lo <= index <= hi

    def to_dict(self) -> dict:
        return {
            "level": int(self.level),
            "color": self.color,
            "range": list(self.range),
            "description": self.description,
        }


AQI_COLOR_MAPPING: tuple[AqiColor, ...] = (
    AqiColor(AqiLevel.GOOD, "#00E400", (1, 1), "Good"),
    AqiColor(AqiLevel.MODERATE, "#FFFF00", (2, 2), "Moderate"),
    AqiColor(AqiLevel.UNHEALTHY_SENSITIVE, "#FF7E00", (3, 3), "Unhealthy for Sensitive Groups"),
    AqiColor(AqiLevel.UNHEALTHY, "#FF0000", (4, 4), "Unhealthy"),
    AqiColor(AqiLevel.VERY_UNHEALTHY, "#99004C", (5, 5), "Very Unhealthy"),
    AqiColor(AqiLevel.HAZARDOUS, "#7E0023", (6, 6), "Hazardous"),
)


def classify_epa_index(index: Optional[float]) -> Optional[AqiColor]:
    """Band for a US-EPA index, or None when out of range or absent."""
    if index is None:
        return None
    rounded = round(index)
    for band in AQI_COLOR_MAPPING:
        if band.contains(rounded):
            return band
    return None


def is_number(value: Any) -> bool:
    """True for finite ints/floats (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def parse_weather_payload(raw: Any) -> Optional[dict]:
    """Decode a weather payload that may be a dict or a JSON string."""
    if raw is None:
        return None
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except (ValueError, TypeError):
            return None
    return raw if isinstance(raw, dict) else None


def _current(raw: Any) -> Optional[dict]:
    payload = parse_weather_payload(raw)
    if payload is None:
        return None
    current = payload.get("current")
    return current if isinstance(current, dict) else None


def extract_air_quality(raw: Any) -> Optional[dict]:
    """``current.air_quality`` block, or None."""
    current = _current(raw)
    if current is None:
        return None
    air_quality = current.get("air_quality")
    if isinstance(air_quality, dict) and air_quality:
        return air_quality
    return None


def to_number(value: Any) -> Optional[float]:
    """Numeric value, parsing numeric strings; None otherwise."""
    if is_number(value):
        return value
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


def extract_epa_index(raw: Any) -> Optional[float]:
    """US-EPA index from a weather payload, or None on any shape mismatch."""
    air_quality = extract_air_quality(raw)
    if air_quality is None:
        return None
    return to_number(air_quality.get(EPA_INDEX_KEY))


def extract_location(raw: Any) -> Optional[dict]:
    payload = parse_weather_payload(raw)
    if payload is None:
        return None
    location = payload.get("location")
    return location if isinstance(location, dict) else None


def extract_temperature(raw: Any) -> Optional[float]:
    current = _current(raw)
    if current is None:
        return None
    return to_number(current.get("temp_c"))


def extract_condition(raw: Any) -> Optional[str]:
    current = _current(raw)
    if current is None:
        return None
    condition = current.get("condition")
    if isinstance(condition, dict):
        return condition.get("text")
    if isinstance(condition, str):
        return condition
    return None


# Upper PM2.5 bounds (µg/m³) per EPA band, used when a payload lacks the index
PM25_BREAKPOINTS = (12.0, 35.4, 55.4, 150.4, 250.4)


def aqi_status(raw: Any) -> str:
    """Human-readable air quality for a weather payload.

    Prefers the US-EPA index and falls back to the PM2.5 breakpoints.
    Returns ``"unknown"`` without an air-quality block and ``"undetermined"``
    when it carries neither reading.
    """
    air_quality = extract_air_quality(raw)
    if air_quality is None:
        return "unknown"

    epa = to_number(air_quality.get(EPA_INDEX_KEY))
    if epa:
        for band in AQI_COLOR_MAPPING[:-1]:
            if epa <= band.level:
                return f"{band.description} (US EPA Index: {epa:g})"
        return f"{AQI_COLOR_MAPPING[-1].description} (US EPA Index: {epa:g})"

    pm25 = to_number(air_quality.get("pm2_5"))
    if pm25 is not None:
        for band, upper in zip(AQI_COLOR_MAPPING, PM25_BREAKPOINTS):
            if pm25 <= upper:
                return f"{band.description} (PM2.5: {pm25:.1f} µg/m³)"
        return f"{AQI_COLOR_MAPPING[-1].description} (PM2.5: {pm25:.1f} µg/m³)"
    return "undetermined"
