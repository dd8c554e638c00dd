"""Init CLI command."""

from pathlib import Path

import click
import yaml
from rich.console import Console

from cli.config import load_config_model

console = Console()

SAMPLE_ENTRIES = [
    {
        "title": "Morning walk by the river",
        "content": "Walked along the river before work. The air felt fresh and the sky was clear. "
        "Feeling calm and grateful for a slow start to the day.",
        "emotion": "Joy",
        "weather_data": {
            "location": {"name": "Bandung", "lat": -6.91, "lon": 107.61},
            "current": {
                "temp_c": 23.0,
                "condition": {"text": "Sunny"},
                "air_quality": {"us-epa-index": 1, "pm2_5": 8.4, "pm10": 12.1},
            },
        },
        "latitude": -6.91,
        "longitude": 107.61,
    },
    {
        "title": "Smoggy commute",
        "content": "Traffic was terrible and the haze made my eyes sting. Tired and irritated "
        "by the time I got to the office.",
        "emotion": "Anger",
        "weather_data": {
            "location": {"name": "Jakarta", "lat": -6.2, "lon": 106.82},
            "current": {
                "temp_c": 31.5,
                "condition": {"text": "Haze"},
                "air_quality": {"us-epa-index": 4, "pm2_5": 62.3, "pm10": 88.0},
            },
        },
        "latitude": -6.2,
        "longitude": 106.82,
    },
]

MINIMAL_CONFIG = {
    "llm": {"provider": "auto"},
    "embeddings": {"provider": "auto"},
    "weather": {"api_key": "${WEATHER_API_KEY}"},
    "logging": {"level": "INFO"},
}


@click.command()
@click.option("--samples", is_flag=True, help="Create sample entries for the given user")
@click.option("-u", "--user", "user_id", default="demo", help="Owner of sample entries")
def init(samples: bool, user_id: str):
    """Initialize EcoJournal directories, databases and config."""
    from journal.sentiment import analyze_sentiment
    from journal.store import JournalStore
    from web.user_store import init_db as init_user_db

    config = load_config_model()
    paths = config.paths

    paths.home.mkdir(parents=True, exist_ok=True)
    paths.chroma_dir.mkdir(parents=True, exist_ok=True)
    console.print(f"[green]✓[/] home: {paths.home}")
    console.print(f"[green]✓[/] chroma_dir: {paths.chroma_dir}")

    store = JournalStore(paths.journal_db)
    console.print(f"[green]✓[/] journal_db: {paths.journal_db}")
    init_user_db(paths.users_db)
    console.print(f"[green]✓[/] users_db: {paths.users_db}")

    config_path = paths.home / "config.yaml"
    if not config_path.exists():
        with open(config_path, "w") as f:
            yaml.dump(MINIMAL_CONFIG, f, default_flow_style=False)
        console.print(f"[green]✓[/] Created config: {config_path}")

    if samples:
        for sample in SAMPLE_ENTRIES:
            entry = store.create_entry(
                user_id=user_id,
                title=sample["title"],
                content=sample["content"],
                mood_score=analyze_sentiment(sample["content"])["score"],
                weather_data=sample["weather_data"],
                latitude=sample["latitude"],
                longitude=sample["longitude"],
                location_name=sample["weather_data"]["location"]["name"],
                emotion_id=store.emotion_id_for(sample["emotion"]),
                emotion_source="manual",
            )
            console.print(f"[green]✓[/] Sample: {entry['title']}")

    console.print("\n[bold]Minimal setup:[/]")
    console.print("  1. Set NEXTAUTH_SECRET (shared with the frontend)")
    console.print("  2. Set WEATHER_API_KEY and GEMINI_API_KEY (or OPENAI_API_KEY)")
    console.print("  3. Run [cyan]ecojournal serve[/]")
