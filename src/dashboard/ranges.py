"""Range tokens -> lower date bounds for dashboard queries.

Two token families exist. Dashboard charts take ``range`` in
{``7``, ``30``, ``all``} and bound by calendar date; the map and heatmap
endpoints take ``timeRange`` in {``today``, ``7days``, ``30days``} and bound
by instant.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

DASHBOARD_RANGES = {"7": 7, "30": 30}
MAP_RANGES = {"7days": 7, "30days": 30}
DEFAULT_MAP_RANGE = "today"


def _now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.astimezone()
    return now


def to_db_timestamp(dt: datetime) -> str:
    """Canonical UTC timestamp string, comparable with stored created_at."""
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt.astimezone(timezone.utc).isoformat(timespec="seconds")


def resolve_range(token: Optional[str], now: Optional[datetime] = None) -> Optional[str]:
    """Lower bound for a dashboard ``range`` token.

    Returns the UTC calendar date (``YYYY-MM-DD``) N days back, or None for
    ``all``, absent or unrecognized tokens (no filtering).
    """
    days = DASHBOARD_RANGES.get(token or "")
    if days is None:
        return None
    start = _now(now) - timedelta(days=days)
    return start.astimezone(timezone.utc).date().isoformat()


def normalize_time_range(token: Optional[str]) -> str:
    return token if token in MAP_RANGES else DEFAULT_MAP_RANGE


def resolve_time_range(token: Optional[str], now: Optional[datetime] = None) -> datetime:
    """Lower bound instant for a map/heatmap ``timeRange`` token.

    ``7days``/``30days`` keep the time of day; ``today`` (and anything
    unrecognized) is midnight of the current local day.
    """
    current = _now(now)
    days = MAP_RANGES.get(token or "")
    if days is not None:
        return current - timedelta(days=days)
    local = current.astimezone()
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


def is_average_range(token: Optional[str]) -> bool:
    return token in MAP_RANGES
