"""Pydantic configuration models for EcoJournal."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from dashboard.aggregates import WORD_CLOUD_LIMIT
from dashboard.heatmap import MAX_HEATMAP_ROWS
from dashboard.map_points import MAX_MAP_POINTS

VALID_LLM_PROVIDERS = {"auto", "claude", "openai", "gemini"}
VALID_EMBEDDING_PROVIDERS = {"auto", "openai", "gemini"}


def _default_home() -> Path:
    return Path(os.environ.get("ECOJOURNAL_HOME", "~/ecojournal"))


def _expand_env(value: Optional[str]) -> Optional[str]:
    """``${VAR}`` -> value of VAR (empty string when unset)."""
    if value and value.startswith("${") and value.endswith("}"):
        return os.getenv(value[2:-1], "")
    return value


class LLMConfig(BaseModel):
    """Chat / fun-fact generation provider."""

    provider: str = "auto"
    model: Optional[str] = None  # None = use provider default
    api_key: Optional[str] = None
    max_tokens: int = 2000
    cheap_max_tokens: int = 400

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        if v not in VALID_LLM_PROVIDERS:
            raise ValueError(f"Invalid LLM provider: {v}. Must be one of {VALID_LLM_PROVIDERS}")
        return v


class EmbeddingsConfig(BaseModel):
    """Chunking, embedding provider and retrieval settings."""

    provider: str = "auto"
    model: Optional[str] = None
    api_key: Optional[str] = None
    chunk_chars: int = 1000
    chunk_overlap: int = 100
    delay_seconds: float = 0.2
    match_count: int = 5
    context_chunks: int = 3
    # Cosine distance; 0.8 == similarity threshold 0.2
    max_distance: float = 0.8

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        if v not in VALID_EMBEDDING_PROVIDERS:
            raise ValueError(
                f"Invalid embedding provider: {v}. Must be one of {VALID_EMBEDDING_PROVIDERS}"
            )
        return v

    @model_validator(mode="after")
    def validate_chunking(self):
        if self.chunk_overlap >= self.chunk_chars:
            raise ValueError("chunk_overlap must be smaller than chunk_chars")
        if self.context_chunks > self.match_count:
            raise ValueError("context_chunks cannot exceed match_count")
        return self


class PathsConfig(BaseModel):
    """File paths configuration."""

    home: Path = Field(default_factory=_default_home)
    journal_db: Optional[Path] = None
    users_db: Optional[Path] = None
    chroma_dir: Optional[Path] = None
    log_file: Optional[Path] = None

    @model_validator(mode="after")
    def expand_paths(self):
        """Expand ~ and fill unset paths from home."""
        self.home = self.home.expanduser()
        env_db = os.environ.get("ECOJOURNAL_DB")
        self.journal_db = Path(self.journal_db or env_db or self.home / "journal.db").expanduser()
        self.users_db = Path(self.users_db or self.home / "users.db").expanduser()
        self.chroma_dir = Path(self.chroma_dir or self.home / "chroma").expanduser()
        self.log_file = Path(self.log_file or self.home / "ecojournal.log").expanduser()
        return self


class WeatherConfig(BaseModel):
    api_key: Optional[str] = None
    base_url: str = "https://api.weatherapi.com/v1/current.json"
    timeout: float = 10.0


class DashboardConfig(BaseModel):
    """Aggregation limits."""

    word_cloud_limit: int = WORD_CLOUD_LIMIT
    map_max_points: int = MAX_MAP_POINTS
    heatmap_max_rows: int = MAX_HEATMAP_ROWS
    extra_stopwords: list[str] = Field(default_factory=list)

    @field_validator("word_cloud_limit", "map_max_points", "heatmap_max_rows")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"Limit must be positive, got {v}")
        return v


class WebConfig(BaseModel):
    frontend_origin: str = Field(
        default_factory=lambda: os.environ.get("FRONTEND_ORIGIN", "http://localhost:3000")
    )
    host: str = "127.0.0.1"
    port: int = 8000


VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    json_mode: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {VALID_LOG_LEVELS}")
        return v_upper


class EcoJournalConfig(BaseModel):
    """Main configuration model."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    embeddings: EmbeddingsConfig = Field(default_factory=EmbeddingsConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    weather: WeatherConfig = Field(default_factory=WeatherConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)
    web: WebConfig = Field(default_factory=WebConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def expand_env_vars(self):
        """Expand ${VAR} patterns in API keys, then fall back to the usual env vars."""
        self.llm.api_key = _expand_env(self.llm.api_key)
        self.embeddings.api_key = _expand_env(self.embeddings.api_key)
        self.weather.api_key = _expand_env(self.weather.api_key) or os.getenv("WEATHER_API_KEY")
        return self

    @classmethod
    def from_dict(cls, data: dict) -> "EcoJournalConfig":
        return cls.model_validate(data)

    def to_dict(self) -> dict:
        return self.model_dump(mode="python")
