"""Dashboard CLI commands: word cloud, emotion composition, mood/air correlation."""

import click
from rich.console import Console
from rich.table import Table

from cli.commands.mood import RANGE_CHOICE
from cli.utils import get_components

console = Console()


@click.command()
@click.option("-u", "--user", "user_id", required=True, help="User id")
@click.option("-r", "--range", "range_token", default="30", type=RANGE_CHOICE)
@click.option("-n", "--limit", default=20, help="Number of words")
def words(user_id: str, range_token: str, limit: int):
    """Most frequent journal words."""
    from dashboard import resolve_range, word_cloud

    c = get_components()
    rows = c["store"].fetch_entries(user_id, ("content",), since=resolve_range(range_token))
    stopwords = _stopwords(c["config"].dashboard.extra_stopwords)
    cloud = word_cloud(rows, limit=limit, stopwords=stopwords)

    if not cloud:
        console.print("[yellow]No words found in this range.[/]")
        return

    table = Table(title=f"Top words - range {range_token}", show_header=True)
    table.add_column("Word")
    table.add_column("Count", justify="right")
    for item in cloud:
        table.add_row(item["word"], str(item["count"]))
    console.print(table)


def _stopwords(extra: list[str]) -> frozenset:
    from dashboard.aggregates import STOPWORDS

    return STOPWORDS | {w.lower() for w in extra}


@click.command()
@click.option("-u", "--user", "user_id", required=True, help="User id")
@click.option("-r", "--range", "range_token", default="30", type=RANGE_CHOICE)
def emotions(user_id: str, range_token: str):
    """Share of each emotion."""
    from dashboard import emotion_composition, resolve_range

    c = get_components()
    rows = c["store"].fetch_emotion_labels(user_id, since=resolve_range(range_token))
    composition = emotion_composition(rows)

    if not composition:
        console.print("[yellow]No entries in this range.[/]")
        return

    table = Table(title=f"Emotions - range {range_token}", show_header=True)
    table.add_column("Emotion")
    table.add_column("Count", justify="right")
    table.add_column("Percent", justify="right")
    for item in composition:
        table.add_row(item["emotion"], str(item["count"]), f"{item['percent']:.2f}%")
    console.print(table)


def _fmt(value) -> str:
    return "[dim]-[/]" if value is None else f"{value:.2f}"


@click.command()
@click.option("-u", "--user", "user_id", required=True, help="User id")
@click.option("-r", "--range", "range_token", default="30", type=RANGE_CHOICE)
def correlation(user_id: str, range_token: str):
    """Daily mood next to the daily US-EPA air-quality index."""
    from dashboard import mood_air_correlation, resolve_range

    c = get_components()
    rows = c["store"].fetch_entries(
        user_id,
        ("created_at", "mood_score", "weather_data"),
        since=resolve_range(range_token),
        ascending=True,
    )
    series = mood_air_correlation(rows)

    if not series:
        console.print("[yellow]No entries in this range.[/]")
        return

    table = Table(title=f"Mood vs air quality - range {range_token}", show_header=True)
    table.add_column("Date", style="dim")
    table.add_column("Avg mood", justify="right")
    table.add_column("Avg EPA index", justify="right")
    for day in series:
        table.add_row(day["date"], _fmt(day["avgMood"]), _fmt(day["avgEpaIndex"]))
    console.print(table)
