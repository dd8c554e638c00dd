"""EcoJournal command-line interface."""

import sys
from pathlib import Path

import click

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cli.commands import correlation, embed, emotions, init, mood, serve, words
from cli.config import load_config_model
from cli.logging_config import setup_logging


@click.group()
@click.version_option(version="0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """EcoJournal - mood, emotion and air-quality journaling."""
    try:
        level = load_config_model().logging.level
    except ValueError:
        level = "INFO"
    setup_logging(json_mode=False, level="DEBUG" if verbose else level)


for command in (init, mood, words, emotions, correlation, embed, serve):
    cli.add_command(command)


if __name__ == "__main__":
    cli()
