"""Tests for the journal embedding pipeline."""

from unittest.mock import MagicMock

import pytest

from journal.indexer import PREVIEW_CHARS, EmptyContentError, IndexingError, JournalIndexer
from observability import metrics


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def vectors():
    manager = MagicMock()
    manager.has_entry.return_value = False
    manager.add_chunks.side_effect = lambda journal_id, user_id, chunks: len(chunks)
    return manager


@pytest.fixture
def long_entry():
    sentences = " ".join(f"Today the air in sentence {i} felt heavy and grey." for i in range(40))
    return {"id": "j1", "title": "Long day", "content": sentences, "mood_score": -0.3}


def _indexer(vectors, embed_fn, sleeps=None, **kwargs):
    sleeps = sleeps if sleeps is not None else []
    return JournalIndexer(vectors, embed_fn, delay=0.2, sleep=sleeps.append, **kwargs)


def test_indexes_short_entry(vectors):
    embed = MagicMock(return_value=[0.1, 0.2])
    sleeps = []
    result = _indexer(vectors, embed, sleeps).index_entry({"id": "j1", "content": "Clear skies."}, "u1")

    assert result.chunks_processed == 1
    assert result.chunks_failed == 0
    assert result.total_content == len("Clear skies.")
    assert result.preview == "Clear skies...."
    assert sleeps == []
    vectors.add_chunks.assert_called_once_with(
        "j1", "u1", [{"chunk_index": 0, "content": "Clear skies.", "embedding": [0.1, 0.2]}]
    )


def test_chunks_embedded_in_order_with_delay(vectors, long_entry):
    seen = []

    def embed(text):
        seen.append(text)
        return [1.0]

    sleeps = []
    result = _indexer(vectors, embed, sleeps, max_chars=300, overlap=50).index_entry(long_entry, "u1")

    stored = vectors.add_chunks.call_args[0][2]
    assert [c["chunk_index"] for c in stored] == list(range(len(seen)))
    assert [c["content"] for c in stored] == seen
    # Pause between calls, none after the last
    assert sleeps == [0.2] * (len(seen) - 1)
    assert result.chunks_processed == len(seen)
    assert len(result.preview) == PREVIEW_CHARS + 3


def test_failed_chunks_skipped(vectors, long_entry):
    calls = {"n": 0}

    def flaky(text):
        calls["n"] += 1
        if calls["n"] == 2:
            raise RuntimeError("rate limited")
        if calls["n"] == 3:
            return []
        return [0.5]

    result = _indexer(vectors, flaky, max_chars=300, overlap=50).index_entry(long_entry, "u1")

    stored = vectors.add_chunks.call_args[0][2]
    assert 1 not in [c["chunk_index"] for c in stored]
    assert 2 not in [c["chunk_index"] for c in stored]
    assert result.chunks_failed == 2
    assert metrics.get("embeddings.chunks_failed") == 2
    assert metrics.get("embeddings.chunks_indexed") == result.chunks_processed


def test_all_chunks_fail(vectors):
    embed = MagicMock(side_effect=RuntimeError("down"))
    with pytest.raises(IndexingError, match="Failed to generate any embeddings"):
        _indexer(vectors, embed).index_entry({"id": "j1", "content": "text"}, "u1")
    vectors.add_chunks.assert_not_called()


def test_empty_content(vectors):
    embed = MagicMock()
    with pytest.raises(EmptyContentError):
        _indexer(vectors, embed).index_entry({"id": "j1", "content": "   "}, "u1")
    embed.assert_not_called()


def test_skips_existing(vectors):
    vectors.has_entry.return_value = True
    embed = MagicMock()
    result = _indexer(vectors, embed).index_entry({"id": "j1", "content": "x"}, "u1")
    assert result.skipped
    embed.assert_not_called()


def test_force_reindexes(vectors):
    vectors.has_entry.return_value = True
    embed = MagicMock(return_value=[0.3])
    result = _indexer(vectors, embed).index_entry({"id": "j1", "content": "x"}, "u1", force=True)
    assert not result.skipped
    vectors.delete_entry.assert_called_once_with("j1", "u1")
    assert result.chunks_processed == 1


def test_emotion_in_context(vectors):
    embed = MagicMock(return_value=[0.3])
    _indexer(vectors, embed).index_entry({"id": "j1", "content": "x"}, "u1", emotion_name="Fear")
    assert "Emotion: Fear" in embed.call_args[0][0]
