"""Chunk-level journal embeddings stored in ChromaDB."""

from pathlib import Path
from typing import Optional

import chromadb
import structlog
from chromadb.config import Settings

logger = structlog.get_logger()

DEFAULT_COLLECTION = "journal_embeddings"


def chunk_id(journal_id: str, chunk_index: int) -> str:
    return f"{journal_id}:{chunk_index}"


def _owner_filter(journal_id: str, user_id: str) -> dict:
    return {"$and": [{"journal_id": journal_id}, {"user_id": user_id}]}


class EmbeddingManager:
    """Stores precomputed chunk vectors; similarity is cosine distance."""

    def __init__(self, chroma_dir: str | Path, collection_name: str = DEFAULT_COLLECTION):
        self.chroma_dir = Path(chroma_dir).expanduser()
        self.chroma_dir.mkdir(parents=True, exist_ok=True)
        self.collection_name = collection_name

        self.client = chromadb.PersistentClient(
            path=str(self.chroma_dir),
            settings=Settings(anonymized_telemetry=False),
        )
        self.collection = self._get_collection()

    def _get_collection(self):
        # Vectors come from the LLM provider, never from a local model
        return self.client.get_or_create_collection(
            name=self.collection_name,
            metadata={"hnsw:space": "cosine"},
            embedding_function=None,
        )

    def has_entry(self, journal_id: str, user_id: str) -> bool:
        result = self.collection.get(where=_owner_filter(journal_id, user_id), limit=1)
        return bool(result["ids"])

    def delete_entry(self, journal_id: str, user_id: str) -> None:
        """Remove all chunks of a journal entry."""
        try:
            self.collection.delete(where=_owner_filter(journal_id, user_id))
        except Exception as e:
            logger.warning("embeddings.delete_failed", journal_id=journal_id, error=str(e))

    def add_chunks(self, journal_id: str, user_id: str, chunks: list[dict]) -> int:
        """Upsert chunk vectors.

        Args:
            chunks: dicts with ``chunk_index``, ``content`` and ``embedding``.

        Returns:
            Number of chunks stored.
        """
        if not chunks:
            return 0
        self.collection.upsert(
            ids=[chunk_id(journal_id, c["chunk_index"]) for c in chunks],
            embeddings=[c["embedding"] for c in chunks],
            documents=[c["content"] for c in chunks],
            metadatas=[
                {"journal_id": journal_id, "user_id": user_id, "chunk_index": c["chunk_index"]}
                for c in chunks
            ],
        )
        return len(chunks)

    def query(
        self,
        embedding: list[float],
        user_id: str,
        n_results: int = 5,
        max_distance: Optional[float] = None,
    ) -> list[dict]:
        """Nearest chunks for a user, closest first.

        Args:
            embedding: Query vector
            user_id: Only this user's chunks are searched
            n_results: Max chunks to return
            max_distance: Drop matches farther than this cosine distance
        """
        results = self.collection.query(
            query_embeddings=[embedding],
            n_results=n_results,
            where={"user_id": user_id},
            include=["documents", "metadatas", "distances"],
        )

        matches = []
        if results["ids"] and results["ids"][0]:
            for i, match_id in enumerate(results["ids"][0]):
                distance = results["distances"][0][i] if results["distances"] else 0
                if max_distance is not None and distance > max_distance:
                    continue
                metadata = results["metadatas"][0][i] if results["metadatas"] else {}
                matches.append(
                    {
                        "id": match_id,
                        "journal_id": metadata.get("journal_id"),
                        "chunk_index": metadata.get("chunk_index"),
                        "content": results["documents"][0][i] if results["documents"] else "",
                        "distance": distance,
                    }
                )
        return matches

    def count(self) -> int:
        return self.collection.count()

