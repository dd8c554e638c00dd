"""Dependency injection for FastAPI routes."""

from functools import lru_cache

import structlog

from cli.config import load_config_model
from cli.config_models import EcoJournalConfig
from journal.embeddings import EmbeddingManager
from journal.gamification import GamificationStore
from journal.store import JournalStore
from llm import LLMProvider, create_cheap_provider, create_embedding_provider, create_llm_provider
from weather import WeatherClient

logger = structlog.get_logger()


@lru_cache
def get_config() -> EcoJournalConfig:
    """Load shared config (config.yaml + env)."""
    return load_config_model()


def get_store() -> JournalStore:
    return JournalStore(get_config().paths.journal_db)


def get_gamification() -> GamificationStore:
    return GamificationStore(get_config().paths.journal_db)


def get_embeddings() -> EmbeddingManager:
    return EmbeddingManager(get_config().paths.chroma_dir)


def get_llm() -> LLMProvider:
    """Chat provider; raises LLMError when no key is configured."""
    cfg = get_config().llm
    return create_llm_provider(provider=cfg.provider, api_key=cfg.api_key or None, model=cfg.model)


def get_cheap_llm() -> LLMProvider:
    cfg = get_config().llm
    return create_cheap_provider(provider=cfg.provider, api_key=cfg.api_key or None)


def get_embedder() -> LLMProvider:
    cfg = get_config().embeddings
    return create_embedding_provider(
        provider=cfg.provider, api_key=cfg.api_key or None, model=cfg.model
    )


def get_weather_client() -> WeatherClient:
    cfg = get_config().weather
    return WeatherClient(api_key=cfg.api_key, base_url=cfg.base_url, timeout=cfg.timeout)
