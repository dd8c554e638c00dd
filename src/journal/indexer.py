"""Embedding pipeline: rich context -> chunks -> vectors -> ChromaDB."""

import time
from dataclasses import dataclass
from typing import Callable, Optional

import structlog

from observability import metrics

from .chunking import DEFAULT_CHUNK_CHARS, DEFAULT_CHUNK_OVERLAP, chunk_text, create_rich_context
from .embeddings import EmbeddingManager

logger = structlog.get_logger()

DEFAULT_EMBED_DELAY = 0.2
PREVIEW_CHARS = 200


class IndexingError(Exception):
    """No chunk of an entry could be embedded."""


class EmptyContentError(IndexingError):
    """Entry has no text to embed."""


@dataclass
class IndexResult:
    journal_id: str
    skipped: bool = False
    chunks_processed: int = 0
    chunks_failed: int = 0
    total_content: int = 0
    preview: str = ""


class JournalIndexer:
    """Embeds journal entries chunk by chunk.

    Chunks are embedded strictly in order, one call at a time, with a fixed
    pause between calls. A chunk whose embedding fails is logged and skipped.
    """

    def __init__(
        self,
        embeddings: EmbeddingManager,
        embed_fn: Callable[[str], list[float]],
        delay: float = DEFAULT_EMBED_DELAY,
        max_chars: int = DEFAULT_CHUNK_CHARS,
        overlap: int = DEFAULT_CHUNK_OVERLAP,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.embeddings = embeddings
        self.embed_fn = embed_fn
        self.delay = delay
        self.max_chars = max_chars
        self.overlap = overlap
        self._sleep = sleep

    def index_entry(
        self,
        entry: dict,
        user_id: str,
        emotion_name: Optional[str] = None,
        force: bool = False,
    ) -> IndexResult:
        journal_id = str(entry["id"])

        if not force and self.embeddings.has_entry(journal_id, user_id):
            logger.info("embeddings.skip_existing", journal_id=journal_id)
            return IndexResult(journal_id=journal_id, skipped=True)

        context = create_rich_context(entry, emotion_name)
        if not context.strip():
            raise EmptyContentError("No content to embed")

        if force:
            self.embeddings.delete_entry(journal_id, user_id)

        chunks = chunk_text(context, self.max_chars, self.overlap)
        embedded, failed = [], 0
        for i, chunk in enumerate(chunks):
            try:
                vector = self.embed_fn(chunk)
            except Exception as e:
                vector = None
                logger.warning(
                    "embeddings.chunk_failed", journal_id=journal_id, chunk_index=i, error=str(e)
                )
            if vector:
                embedded.append({"chunk_index": i, "content": chunk, "embedding": vector})
            else:
                failed += 1
            if i < len(chunks) - 1:
                self._sleep(self.delay)

        metrics.counter("embeddings.chunks_failed", failed)
        if not embedded:
            raise IndexingError("Failed to generate any embeddings")

        stored = self.embeddings.add_chunks(journal_id, user_id, embedded)
        metrics.counter("embeddings.chunks_indexed", stored)
        logger.info(
            "embeddings.indexed", journal_id=journal_id, chunks=stored, failed=failed
        )
        return IndexResult(
            journal_id=journal_id,
            chunks_processed=stored,
            chunks_failed=failed,
            total_content=len(context),
            preview=context[:PREVIEW_CHARS] + "...",
        )
