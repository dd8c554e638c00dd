"""Tests for the journal analysis summary."""

import json
from datetime import datetime, timezone

import pytest

from journal.analysis import analyze_journals, environmental_point, season_for

NOW = datetime(2024, 7, 5, 12, 0, tzinfo=timezone.utc)
EMOTIONS = {1: "Joy", 5: "Sadness"}


def _weather(epa, pm25):
    return json.dumps({
        "current": {
            "temp_c": 30.0,
            "condition": {"text": "Haze"},
            "air_quality": {"us-epa-index": epa, "pm2_5": pm25, "so2": 0},
        }
    })


def _row(id_, created_at, mood, weather=None, emotion_id=None, analysis=None):
    return {
        "id": id_,
        "title": f"Entry {id_}",
        "created_at": created_at,
        "mood_score": mood,
        "emotion_id": emotion_id,
        "emotion_analysis": analysis,
        "weather_data": weather,
        "location_name": None,
    }


@pytest.fixture
def rows():
    return [
        _row("a", "2024-01-10T08:00:00+00:00", 0.8, _weather(1, 10.0), analysis={"dominant_emotion": "Joy"}),
        _row("b", "2024-01-11T08:00:00+00:00", 0.4, _weather(2, 12.0),
             analysis=json.dumps({"top_prediction": {"label": "Joy"}})),
        _row("c", "2024-07-01T08:00:00+00:00", -0.6, _weather(4, 50.0), emotion_id=5),
        _row("d", "2024-07-02T08:00:00+00:00", -0.2, _weather(5, 40.0), emotion_id=5),
        _row("e", "2024-07-03T08:00:00+00:00", 0.0),
    ]


@pytest.mark.parametrize(
    "month,season",
    [(3, "spring"), (5, "spring"), (6, "summer"), (9, "autumn"), (11, "autumn"), (12, "winter"), (2, "winter")],
)
def test_season_for(month, season):
    assert season_for(datetime(2024, month, 15)) == season


class TestSummary:
    def test_summary(self, rows):
        summary = analyze_journals(rows, now=NOW, emotion_map=EMOTIONS)["summary"]
        assert summary["total"] == 5
        assert summary["days"] == 5
        assert summary["avgMood"] == 0.08
        assert summary["recentMood"] == -0.27
        assert summary["moodCounts"] == {"positive": 2, "neutral": 2, "negative": 1}
        assert summary["topEmotions"] == [
            {"emotion": "Joy", "count": 2},
            {"emotion": "Sadness", "count": 2},
        ]

    def test_empty(self):
        result = analyze_journals([], now=NOW)
        assert result["summary"]["total"] == 0
        assert result["summary"]["avgMood"] == 0
        assert result["environmental"]["correlations"] is None
        assert result["environmental"]["aqiImpact"] is None
        assert result["environmental"]["dataPoints"] == 0


class TestEnvironmental:
    def test_correlations(self, rows):
        env = analyze_journals(rows, now=NOW, emotion_map=EMOTIONS)["environmental"]
        assert env["dataPoints"] == 4
        assert env["correlations"]["pm25"] == {
            "highPM25Mood": -0.4,
            "lowPM25Mood": 0.6,
            "impact": 1.0,
            "highPM25Days": 2,
            "lowPM25Days": 2,
            "totalDays": 4,
            "highPM25Percentage": 50.0,
        }
        assert env["correlations"]["aqi"] == {
            "goodAQIMood": 0.6,
            "badAQIMood": -0.4,
            "goodDays": 2,
            "badDays": 2,
            "totalDays": 4,
        }

    def test_seasonal(self, rows):
        seasonal = analyze_journals(rows, now=NOW)["environmental"]["seasonal"]
        assert list(seasonal) == ["summer", "winter"]
        assert seasonal["winter"] == {"avgMood": 0.6, "count": 2, "avgPM25": 11.0, "avgAQI": 1.5}
        assert seasonal["summer"]["avgPM25"] == 45.0

    def test_aqi_impact(self, rows):
        impact = analyze_journals(rows, now=NOW)["environmental"]["aqiImpact"]
        assert impact["good"] == {"avgMood": 0.8, "count": 1, "percentage": 25.0}
        assert impact["unhealthy"]["count"] == 2
        assert impact["unhealthy"]["percentage"] == 50.0
        assert "sensitive" not in impact

    def test_worst_days(self, rows):
        worst = analyze_journals(rows, now=NOW)["environmental"]["worstAQIDays"]
        assert [w["pm25"] for w in worst] == [50.0, 40.0, 12.0, 10.0]
        assert worst[0] == {"date": "1/7/2024", "mood": -0.6, "pm25": 50.0, "aqi": 4, "title": "Entry c"}

    def test_too_few_points(self, rows):
        env = analyze_journals(rows[:2], now=NOW)["environmental"]
        assert env["correlations"] is None
        assert env["aqiImpact"] is None
        assert env["dataPoints"] == 2


def test_environmental_point_zero_is_missing():
    point = environmental_point(_row("a", "2024-01-10T08:00:00+00:00", 0.5, _weather(0, 0)))
    assert point["aqi"] is None
    assert point["pm25"] is None
    assert point["so2"] is None
    assert point["temperature"] == 30.0
    assert point["season"] == "winter"
    assert point["dateFormatted"] == "10/1/2024"


def test_environmental_point_requires_mood_and_weather():
    assert environmental_point(_row("a", "2024-01-10T08:00:00+00:00", None, _weather(1, 5))) is None
    assert environmental_point(_row("a", "2024-01-10T08:00:00+00:00", 0.1)) is None
