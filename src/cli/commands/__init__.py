"""CLI command modules."""

from .dashboard import correlation, emotions, words
from .embed import embed
from .init import init
from .mood import mood
from .serve import serve

__all__ = ["init", "mood", "words", "emotions", "correlation", "embed", "serve"]
