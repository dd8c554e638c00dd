from .embeddings import EmbeddingManager
from .gamification import GamificationStore
from .indexer import IndexingError, JournalIndexer
from .store import JournalStore

__all__ = [
    "JournalStore",
    "GamificationStore",
    "EmbeddingManager",
    "JournalIndexer",
    "IndexingError",
]
