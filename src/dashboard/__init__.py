from .aggregates import emotion_composition, mood_air_correlation, mood_trend, word_cloud
from .map_points import map_statistics, project_points
from .ranges import resolve_range, resolve_time_range

__all__ = [
    "mood_trend",
    "mood_air_correlation",
    "emotion_composition",
    "word_cloud",
    "project_points",
    "map_statistics",
    "resolve_range",
    "resolve_time_range",
]
