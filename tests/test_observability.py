"""Tests for in-process metrics."""

import pytest

from observability import Metrics, log_run_summary, metrics


def test_counters():
    m = Metrics()
    m.counter("embeddings.chunks_indexed")
    m.counter("embeddings.chunks_indexed", 4)
    assert m.get("embeddings.chunks_indexed") == 5
    assert m.get("missing") == 0


def test_timer_records_on_error():
    m = Metrics()
    with pytest.raises(RuntimeError):
        with m.timer("dashboard.word_cloud"):
            raise RuntimeError("boom")
    assert m.summary()["timers"]["dashboard.word_cloud"]["count"] == 1


def test_summary_and_reset():
    m = Metrics()
    m.counter("a", 2)
    with m.timer("t"):
        pass
    with m.timer("t"):
        pass
    summary = m.summary()
    assert summary["counters"] == {"a": 2}
    assert summary["timers"]["t"]["count"] == 2
    assert summary["timers"]["t"]["max"] >= summary["timers"]["t"]["avg"]

    m.reset()
    assert m.summary() == {"counters": {}, "timers": {}}


def test_log_run_summary():
    metrics.reset()
    metrics.counter("embeddings.chunks_failed")
    log_run_summary("embed.summary")
    metrics.reset()
