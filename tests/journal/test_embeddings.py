"""Tests for journal chunk embeddings in ChromaDB."""


def _chunks(*vectors):
    return [
        {"chunk_index": i, "content": f"chunk {i}", "embedding": v} for i, v in enumerate(vectors)
    ]


class TestEmbeddingManager:
    """Test EmbeddingManager vector operations."""

    def test_init_creates_collection(self, temp_dirs):
        """Test that initialization creates ChromaDB collection."""
        from journal.embeddings import EmbeddingManager

        manager = EmbeddingManager(temp_dirs["chroma_dir"])

        assert manager.collection is not None
        assert manager.count() == 0

    def test_add_chunks(self, temp_dirs):
        from journal.embeddings import EmbeddingManager

        manager = EmbeddingManager(temp_dirs["chroma_dir"])
        stored = manager.add_chunks("j1", "u1", _chunks([1.0, 0.0, 0.0], [0.0, 1.0, 0.0]))

        assert stored == 2
        assert manager.count() == 2
        assert manager.has_entry("j1", "u1")
        assert not manager.has_entry("j1", "u2")

    def test_add_chunks_upsert(self, temp_dirs):
        """Re-adding the same chunk index replaces it."""
        from journal.embeddings import EmbeddingManager

        manager = EmbeddingManager(temp_dirs["chroma_dir"])
        manager.add_chunks("j1", "u1", _chunks([1.0, 0.0, 0.0]))
        manager.add_chunks("j1", "u1", _chunks([0.0, 1.0, 0.0]))

        assert manager.count() == 1

    def test_add_no_chunks(self, temp_dirs):
        from journal.embeddings import EmbeddingManager

        manager = EmbeddingManager(temp_dirs["chroma_dir"])
        assert manager.add_chunks("j1", "u1", []) == 0

    def test_delete_entry(self, temp_dirs):
        from journal.embeddings import EmbeddingManager

        manager = EmbeddingManager(temp_dirs["chroma_dir"])
        manager.add_chunks("j1", "u1", _chunks([1.0, 0.0, 0.0], [0.0, 1.0, 0.0]))
        manager.add_chunks("j2", "u1", _chunks([0.0, 0.0, 1.0]))

        manager.delete_entry("j1", "u1")

        assert manager.count() == 1
        assert not manager.has_entry("j1", "u1")
        assert manager.has_entry("j2", "u1")

    def test_delete_nonexistent_no_error(self, temp_dirs):
        from journal.embeddings import EmbeddingManager

        manager = EmbeddingManager(temp_dirs["chroma_dir"])
        manager.delete_entry("nonexistent-id", "u1")

    def test_query_closest_first(self, temp_dirs):
        from journal.embeddings import EmbeddingManager

        manager = EmbeddingManager(temp_dirs["chroma_dir"])
        manager.add_chunks("j1", "u1", _chunks([1.0, 0.0, 0.0]))
        manager.add_chunks("j2", "u1", _chunks([0.7, 0.7, 0.0]))

        matches = manager.query([1.0, 0.1, 0.0], "u1", n_results=5)

        assert [m["journal_id"] for m in matches] == ["j1", "j2"]
        assert matches[0]["content"] == "chunk 0"
        assert matches[0]["chunk_index"] == 0
        assert matches[0]["distance"] < matches[1]["distance"]

    def test_query_scoped_to_user(self, temp_dirs):
        from journal.embeddings import EmbeddingManager

        manager = EmbeddingManager(temp_dirs["chroma_dir"])
        manager.add_chunks("j1", "u1", _chunks([1.0, 0.0, 0.0]))
        manager.add_chunks("j2", "u2", _chunks([1.0, 0.0, 0.0]))

        matches = manager.query([1.0, 0.0, 0.0], "u2", n_results=5)

        assert [m["journal_id"] for m in matches] == ["j2"]

    def test_query_max_distance(self, temp_dirs):
        """Orthogonal vectors (cosine distance 1) fall outside the threshold."""
        from journal.embeddings import EmbeddingManager

        manager = EmbeddingManager(temp_dirs["chroma_dir"])
        manager.add_chunks("near", "u1", _chunks([1.0, 0.0, 0.0]))
        manager.add_chunks("far", "u1", _chunks([0.0, 1.0, 0.0]))

        matches = manager.query([1.0, 0.0, 0.0], "u1", n_results=5, max_distance=0.8)

        assert [m["journal_id"] for m in matches] == ["near"]
