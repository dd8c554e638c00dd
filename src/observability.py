"""Observability: in-process counters and timers for indexing and dashboard work."""

import time
from contextlib import contextmanager
from typing import Any

import structlog

logger = structlog.get_logger().bind(source="observability")


class Metrics:
    """Dict-based metrics collector.

    Counters track pipeline outcomes (``embeddings.chunks_indexed``,
    ``embeddings.chunks_failed``); timers track aggregation latency
    (``dashboard.mood_trend``).
    """

    def __init__(self):
        self._counters: dict[str, int] = {}
        self._timers: dict[str, list[float]] = {}

    def counter(self, name: str, value: int = 1):
        self._counters[name] = self._counters.get(name, 0) + value

    def get(self, name: str) -> int:
        return self._counters.get(name, 0)

    @contextmanager
    def timer(self, name: str):
        """Time the enclosed block; the duration is recorded even when it raises."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self._timers.setdefault(name, []).append(time.perf_counter() - start)

    def summary(self) -> dict[str, Any]:
        timers = {
            name: {
                "count": len(durations),
                "total": round(sum(durations), 4),
                "avg": round(sum(durations) / len(durations), 4),
                "max": round(max(durations), 4),
            }
            for name, durations in self._timers.items()
            if durations
        }
        return {"counters": dict(self._counters), "timers": timers}

    def reset(self):
        self._counters.clear()
        self._timers.clear()


# Module-level singleton
metrics = Metrics()


def log_run_summary(event: str = "run_summary"):
    """Log the current metrics summary via structlog."""
    logger.info(event, **metrics.summary())
