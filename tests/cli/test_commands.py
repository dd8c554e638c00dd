"""CLI command tests using Click CliRunner.

Strategy: mock get_components at each command module's import point to avoid
touching real config/DB/API. Each test patches exactly what it needs.
"""

from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from cli.config_models import EcoJournalConfig
from cli.main import cli
from journal.indexer import IndexResult


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def components(populated_store):
    return {
        "config": EcoJournalConfig(),
        "store": populated_store["store"],
        "embeddings": MagicMock(count=MagicMock(return_value=3)),
    }


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("ECOJOURNAL_HOME", str(tmp_path / "eco"))
    monkeypatch.delenv("ECOJOURNAL_DB", raising=False)
    return tmp_path / "eco"


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_help_lists_commands(runner):
    result = runner.invoke(cli, ["--help"])
    for name in ("init", "mood", "words", "emotions", "correlation", "embed", "serve"):
        assert name in result.output


class TestInit:
    def test_creates_layout(self, runner, isolated_home):
        result = runner.invoke(cli, ["init"])
        assert result.exit_code == 0, result.output
        assert (isolated_home / "journal.db").exists()
        assert (isolated_home / "users.db").exists()
        assert (isolated_home / "chroma").is_dir()
        assert "WEATHER_API_KEY" in (isolated_home / "config.yaml").read_text()

    def test_samples(self, runner, isolated_home):
        from journal.store import JournalStore

        result = runner.invoke(cli, ["init", "--samples", "-u", "alice"])
        assert result.exit_code == 0, result.output
        entries = JournalStore(isolated_home / "journal.db").list_entries("alice")
        assert len(entries) == 2
        assert all(e["emotion_source"] == "manual" for e in entries)

    def test_keeps_existing_config(self, runner, isolated_home):
        isolated_home.mkdir(parents=True)
        (isolated_home / "config.yaml").write_text("llm:\n  provider: openai\n")
        runner.invoke(cli, ["init"])
        assert "openai" in (isolated_home / "config.yaml").read_text()


class TestDashboardCommands:
    def test_mood(self, runner, components):
        with patch("cli.commands.mood.get_components", return_value=components):
            result = runner.invoke(cli, ["mood", "-u", "user-123", "-r", "all"])
        assert result.exit_code == 0, result.output
        assert "Days: 3" in result.output

    def test_mood_empty(self, runner, components):
        with patch("cli.commands.mood.get_components", return_value=components):
            result = runner.invoke(cli, ["mood", "-u", "nobody"])
        assert "No entries with a mood score" in result.output

    def test_mood_rejects_bad_range(self, runner):
        result = runner.invoke(cli, ["mood", "-u", "x", "-r", "90"])
        assert result.exit_code != 0

    def test_words(self, runner, components):
        with patch("cli.commands.dashboard.get_components", return_value=components):
            result = runner.invoke(cli, ["words", "-u", "user-123", "-n", "5"])
        assert result.exit_code == 0, result.output
        assert "smog" in result.output

    def test_emotions(self, runner, components):
        with patch("cli.commands.dashboard.get_components", return_value=components):
            result = runner.invoke(cli, ["emotions", "-u", "user-123"])
        assert result.exit_code == 0, result.output
        assert "Sadness" in result.output
        assert "33.33%" in result.output

    def test_correlation(self, runner, components):
        with patch("cli.commands.dashboard.get_components", return_value=components):
            result = runner.invoke(cli, ["correlation", "-u", "user-123"])
        assert result.exit_code == 0, result.output
        assert "4.00" in result.output


class TestEmbed:
    def test_indexes_entries(self, runner, components):
        fake_indexer = MagicMock()
        fake_indexer.index_entry.side_effect = [
            IndexResult(journal_id="a", chunks_processed=1),
            IndexResult(journal_id="b", skipped=True),
            IndexResult(journal_id="c", chunks_processed=2),
        ]
        with (
            patch("cli.commands.embed.get_components", return_value=components),
            patch("llm.create_embedding_provider", return_value=MagicMock()),
            patch("journal.indexer.JournalIndexer", return_value=fake_indexer),
        ):
            result = runner.invoke(cli, ["embed", "-u", "user-123"])
        assert result.exit_code == 0, result.output
        assert "Indexed 2" in result.output
        assert "skipped 1" in result.output

    def test_no_provider(self, runner, components):
        from llm import LLMError

        with (
            patch("cli.commands.embed.get_components", return_value=components),
            patch("llm.create_embedding_provider", side_effect=LLMError("No LLM API key found")),
        ):
            result = runner.invoke(cli, ["embed", "-u", "user-123"])
        assert result.exit_code == 1
        assert "No LLM API key found" in result.output


def test_serve(runner, isolated_home):
    with patch("uvicorn.run") as mock_run:
        result = runner.invoke(cli, ["serve", "--port", "9000"])
    assert result.exit_code == 0, result.output
    mock_run.assert_called_once_with("web.app:app", host="127.0.0.1", port=9000, reload=False)
