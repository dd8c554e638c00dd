"""Embedding CLI command."""

import sys

import click
from rich.console import Console

from cli.utils import get_components

console = Console()


@click.command()
@click.option("-u", "--user", "user_id", required=True, help="User id")
@click.option("--force", is_flag=True, help="Re-embed entries that are already indexed")
@click.option("-n", "--limit", default=100, help="Max entries (newest first)")
def embed(user_id: str, force: bool, limit: int):
    """Index a user's entries for chat retrieval."""
    from journal.indexer import IndexingError, JournalIndexer
    from llm import LLMError, create_embedding_provider
    from observability import log_run_summary

    c = get_components(with_embeddings=True)
    cfg = c["config"].embeddings
    try:
        provider = create_embedding_provider(
            provider=cfg.provider, api_key=cfg.api_key or None, model=cfg.model
        )
    except LLMError as e:
        console.print(f"[red]Config error:[/] {e}")
        sys.exit(1)

    indexer = JournalIndexer(
        c["embeddings"],
        provider.embed,
        delay=cfg.delay_seconds,
        max_chars=cfg.chunk_chars,
        overlap=cfg.chunk_overlap,
    )
    emotions = c["store"].emotion_lookup()
    entries = c["store"].list_entries(user_id, limit=limit)

    indexed = skipped = failed = 0
    with console.status(f"Embedding {len(entries)} entries..."):
        for entry in entries:
            try:
                result = indexer.index_entry(
                    entry, user_id, emotion_name=emotions.get(entry["emotion_id"]), force=force
                )
            except IndexingError as e:
                failed += 1
                console.print(f"[red]✗[/] {entry['id']}: {e}")
                continue
            if result.skipped:
                skipped += 1
            else:
                indexed += 1

    console.print(
        f"[green]Indexed {indexed}[/]  |  skipped {skipped}  |  failed {failed}"
        f"  |  vectors stored: {c['embeddings'].count()}"
    )
    log_run_summary("embed.summary")
