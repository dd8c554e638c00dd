"""Tests for dashboard aggregation routes."""

import sqlite3
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from web.app import app
from web.deps import get_store


@pytest.fixture
def broken_store():
    store = MagicMock()
    store.fetch_entries.side_effect = sqlite3.OperationalError("database is locked")
    store.fetch_emotion_labels.side_effect = sqlite3.OperationalError("database is locked")
    return store


@pytest.fixture
def old_entry(populated_store):
    created = (datetime.now(timezone.utc) - timedelta(days=45)).isoformat(timespec="seconds")
    return populated_store["store"].create_entry(
        "user-123", "Archived harvest notes", mood_score=-0.9, created_at=created
    )


DASHBOARD_PATHS = [
    "/api/dashboard/mood-trend",
    "/api/dashboard/emotion-composition",
    "/api/dashboard/word-cloud",
    "/api/dashboard/mood-air-correlation",
]


@pytest.mark.parametrize("path", DASHBOARD_PATHS)
def test_requires_auth(client, path):
    res = client.get(path)
    assert res.status_code == 401
    assert res.json() == {"error": "Unauthorized"}


def test_mood_trend(client, auth_headers, populated_store, sample_entries):
    res = client.get("/api/dashboard/mood-trend?range=7", headers=auth_headers)
    assert res.status_code == 200
    data = res.json()["data"]
    assert [d["avgMood"] for d in data] == [0.8, -0.6, 0.1]
    assert data[0]["date"] == sample_entries[0]["created_at"][:10]


def test_mood_trend_empty(client, auth_headers):
    res = client.get("/api/dashboard/mood-trend", headers=auth_headers)
    assert res.json() == {"data": []}


def test_emotion_composition(client, auth_headers, populated_store):
    res = client.get("/api/dashboard/emotion-composition?range=all", headers=auth_headers)
    data = res.json()["data"]
    assert {d["emotion"] for d in data} == {"Joy", "Sadness", "Unknown"}
    assert all(d["count"] == 1 for d in data)
    assert all(d["percent"] == 33.33 for d in data)


def test_word_cloud(client, auth_headers, populated_store):
    res = client.get("/api/dashboard/word-cloud", headers=auth_headers)
    words = {d["word"]: d["count"] for d in res.json()["data"]}
    assert words["smog"] == 1
    assert "saya" not in words
    assert "the" not in words


def test_mood_air_correlation(client, auth_headers, populated_store):
    res = client.get("/api/dashboard/mood-air-correlation?range=30", headers=auth_headers)
    data = res.json()["data"]
    assert [d["avgEpaIndex"] for d in data] == [1, 4, None]
    assert [d["avgMood"] for d in data] == [0.8, -0.6, 0.1]


def test_other_users_rows_excluded(client, auth_headers_b, populated_store):
    res = client.get("/api/dashboard/mood-trend", headers=auth_headers_b)
    assert res.json() == {"data": []}


def test_store_fault(client, auth_headers, broken_store):
    app.dependency_overrides[get_store] = lambda: broken_store
    res = client.get("/api/dashboard/mood-trend", headers=auth_headers)
    assert res.status_code == 500
    assert res.json() == {"error": "database is locked"}

    res = client.get("/api/dashboard/emotion-composition", headers=auth_headers)
    assert res.status_code == 500


@pytest.mark.parametrize(
    "token,included",
    [("7", False), ("30", False), ("all", True), ("bogus", True), (None, True)],
)
def test_range_window(client, auth_headers, old_entry, token, included):
    url = "/api/dashboard/mood-trend" + (f"?range={token}" if token else "")
    dates = {d["date"] for d in client.get(url, headers=auth_headers).json()["data"]}
    assert (old_entry["created_at"][:10] in dates) is included
    assert len(dates) == (4 if included else 3)


def test_all_is_superset_of_thirty_days(client, auth_headers, old_entry):
    def words(token):
        res = client.get(f"/api/dashboard/word-cloud?range={token}", headers=auth_headers)
        return {d["word"] for d in res.json()["data"]}

    recent, everything = words("30"), words("all")
    assert recent < everything
    assert "harvest" in everything - recent

    res = client.get("/api/dashboard/emotion-composition?range=all", headers=auth_headers)
    assert sum(d["count"] for d in res.json()["data"]) == 4


@pytest.mark.parametrize("path", DASHBOARD_PATHS)
def test_repeated_requests_identical(client, auth_headers, old_entry, path):
    first = client.get(f"{path}?range=all", headers=auth_headers)
    second = client.get(f"{path}?range=all", headers=auth_headers)
    assert first.status_code == 200
    assert first.content == second.content
