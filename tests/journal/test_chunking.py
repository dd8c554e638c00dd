"""Tests for rich context building and chunking."""

import pytest

from journal.chunking import chunk_text, create_rich_context


class TestRichContext:
    def test_full_entry(self, weather_payload):
        entry = {
            "title": "Hazy commute",
            "content": "Smog again.",
            "created_at": "2024-05-03T08:00:00+00:00",
            "mood_score": -0.6,
            "location_name": None,
            "weather_data": weather_payload(epa=4, pm25=55.0, name="Jakarta"),
        }
        context = create_rich_context(entry, "Sadness")
        lines = context.split("\n")
        assert lines[0] == "Title: Hazy commute"
        assert lines[1] == "Smog again."
        assert "Date: Friday, 03 May 2024" in lines
        assert "Mood: -0.60 (negative)" in lines
        assert "Emotion: Sadness" in lines
        assert "Location: Jakarta" in lines
        assert "Weather: Partly cloudy, 28.5°C" in lines
        assert "Air quality: US EPA index 4 (Unhealthy), PM2.5 55 µg/m³" in lines

    def test_location_name_wins(self, weather_payload):
        entry = {"content": "x", "location_name": "Bogor", "weather_data": weather_payload()}
        assert "Location: Bogor" in create_rich_context(entry)

    def test_bare_entry(self):
        assert create_rich_context({"content": "  Just text  "}) == "Just text"

    def test_empty_entry(self):
        assert create_rich_context({"content": "", "title": None}) == ""

    def test_malformed_weather_ignored(self):
        context = create_rich_context({"content": "x", "weather_data": "{oops"})
        assert context == "x"


class TestChunkText:
    def test_short_text_single_chunk(self):
        assert chunk_text("Short entry.", max_chars=100, overlap=10) == ["Short entry."]

    def test_empty(self):
        assert chunk_text("   ") == []

    def test_chunks_respect_limit(self):
        text = " ".join(f"Sentence number {i} is here." for i in range(60))
        chunks = chunk_text(text, max_chars=200, overlap=30)
        assert len(chunks) > 1
        assert all(len(c) <= 200 for c in chunks)

    def test_overlap_carries_tail(self):
        text = " ".join(f"Sentence number {i} is here." for i in range(20))
        chunks = chunk_text(text, max_chars=120, overlap=40)
        assert chunks[1].startswith(chunks[0][-40:].split(" ", 1)[1])

    def test_no_overlap(self):
        text = "First sentence here. Second sentence here. Third sentence here."
        chunks = chunk_text(text, max_chars=30, overlap=0)
        assert chunks == ["First sentence here.", "Second sentence here.", "Third sentence here."]

    def test_long_sentence_split_on_words(self):
        text = "word " * 100
        chunks = chunk_text(text, max_chars=50, overlap=0)
        assert all(len(c) <= 50 for c in chunks)
        assert " ".join(chunks).split() == ["word"] * 100

    def test_overlap_must_be_smaller(self):
        with pytest.raises(ValueError):
            chunk_text("x", max_chars=10, overlap=10)
