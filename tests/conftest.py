"""Shared test fixtures for EcoJournal."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def _make_weather(epa=None, pm25=None, pm10=None, temp_c=28.5, name="Bandung", lat=-6.9, lon=107.6):
    """WeatherAPI current.json?aqi=yes shaped payload."""
    air_quality = {}
    if epa is not None:
        air_quality["us-epa-index"] = epa
    if pm25 is not None:
        air_quality["pm2_5"] = pm25
    if pm10 is not None:
        air_quality["pm10"] = pm10
    return {
        "location": {"name": name, "lat": lat, "lon": lon},
        "current": {
            "temp_c": temp_c,
            "condition": {"text": "Partly cloudy"},
            "air_quality": air_quality,
        },
    }


@pytest.fixture
def temp_dirs(tmp_path):
    """Create temp paths for the journal db and chroma."""
    chroma_dir = tmp_path / "chroma"
    chroma_dir.mkdir()
    return {
        "journal_db": tmp_path / "journal.db",
        "users_db": tmp_path / "users.db",
        "chroma_dir": chroma_dir,
    }


@pytest.fixture
def store(temp_dirs):
    """Empty journal store with the default emotions seeded."""
    from journal.store import JournalStore

    return JournalStore(temp_dirs["journal_db"])


@pytest.fixture
def sample_entries():
    """Three days of entries for one user, oldest first."""
    now = datetime.now(timezone.utc).replace(microsecond=0)
    return [
        {
            "content": "Udara pagi segar, saya senang jalan di taman.",
            "title": "Morning walk",
            "mood_score": 0.8,
            "emotion": "Joy",
            "weather_data": _make_weather(epa=1, pm25=8.0, pm10=12.0),
            "latitude": -6.9,
            "longitude": 107.6,
            "location_name": "Bandung",
            "created_at": (now - timedelta(days=2)).isoformat(),
        },
        {
            "content": "Smog again. Tired and stressed after the commute.",
            "title": "Hazy commute",
            "mood_score": -0.6,
            "emotion": "Sadness",
            "weather_data": _make_weather(epa=4, pm25=55.0, pm10=80.0, name="Jakarta", lat=-6.2, lon=106.8),
            "latitude": -6.2,
            "longitude": 106.8,
            "location_name": "Jakarta",
            "created_at": (now - timedelta(days=1)).isoformat(),
        },
        {
            "content": "Quiet day at home reading.",
            "title": None,
            "mood_score": 0.1,
            "emotion": None,
            "weather_data": None,
            "latitude": None,
            "longitude": None,
            "location_name": None,
            "created_at": now.isoformat(),
        },
    ]


@pytest.fixture
def populated_store(store, sample_entries):
    """Store holding ``sample_entries`` for user-123."""
    ids = []
    for entry in sample_entries:
        data = dict(entry)
        emotion = data.pop("emotion")
        created = store.create_entry(
            user_id="user-123",
            emotion_id=store.emotion_id_for(emotion),
            emotion_source="manual" if emotion else None,
            **data,
        )
        ids.append(created["id"])
    return {"store": store, "ids": ids}


@pytest.fixture
def mock_anthropic(monkeypatch):
    """Mock Claude API responses."""
    mock_client = MagicMock()
    mock_response = MagicMock()
    mock_response.content = [MagicMock(text="This is a mocked AI response.")]
    mock_client.messages.create.return_value = mock_response

    monkeypatch.setattr("anthropic.Anthropic", lambda **kwargs: mock_client)
    return mock_client


@pytest.fixture
def weather_payload():
    """Factory for WeatherAPI payloads."""
    return _make_weather
