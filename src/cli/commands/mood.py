"""Mood trend CLI command."""

import click
from rich.console import Console
from rich.table import Table

from cli.utils import get_components

console = Console()

MOOD_BAR = {
    "positive": "[green]██[/]",
    "neutral": "[dim]██[/]",
    "negative": "[red]██[/]",
}

RANGE_CHOICE = click.Choice(["7", "30", "all"])


@click.command()
@click.option("-u", "--user", "user_id", required=True, help="User id")
@click.option("-r", "--range", "range_token", default="30", type=RANGE_CHOICE)
def mood(user_id: str, range_token: str):
    """Show average mood per day."""
    from dashboard import mood_trend, resolve_range
    from journal.sentiment import mood_label

    c = get_components()
    rows = c["store"].fetch_entries(
        user_id, ("created_at", "mood_score"), since=resolve_range(range_token), ascending=True
    )
    timeline = mood_trend(rows)

    if not timeline:
        console.print("[yellow]No entries with a mood score in this range.[/]")
        return

    table = Table(show_header=True, title=f"Mood - range {range_token}")
    table.add_column("Date", style="dim")
    table.add_column("Mood")
    table.add_column("Average", justify="right")

    for day in timeline:
        label = mood_label(day["avgMood"])
        table.add_row(day["date"], f"{MOOD_BAR[label]} {label}", f"{day['avgMood']:+.2f}")

    console.print(table)

    avg = sum(d["avgMood"] for d in timeline) / len(timeline)
    console.print(f"\n[bold]Average:[/] {avg:+.2f}  |  Days: {len(timeline)}")
