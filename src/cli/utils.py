"""Shared CLI utilities."""

import sys

import structlog
from rich.console import Console

console = Console()
logger = structlog.get_logger()


def get_components(with_embeddings: bool = False):
    """Initialize store (and optionally the vector store) from config.

    Args:
        with_embeddings: Also open ChromaDB; only ``embed`` needs it.
    """
    from cli.config import load_config_model
    from journal import EmbeddingManager, JournalStore

    try:
        config = load_config_model()
    except ValueError as e:
        console.print(f"[red]Config error:[/] {e}")
        sys.exit(1)

    store = JournalStore(config.paths.journal_db)

    embeddings = None
    if with_embeddings:
        try:
            embeddings = EmbeddingManager(config.paths.chroma_dir)
        except Exception as e:
            err = str(e).lower()
            if "dimension" in err or "mismatch" in err:
                console.print(
                    "[red]ChromaDB dimension mismatch; embedding model may have changed.[/]\n"
                    "Re-run [bold]ecojournal embed --force[/] after clearing the chroma directory."
                )
                sys.exit(1)
            raise

    return {
        "config": config,
        "store": store,
        "embeddings": embeddings,
    }
