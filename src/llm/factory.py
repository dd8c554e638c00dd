"""LLM provider factory with auto-detection."""

import os

from .base import LLMError, LLMProvider

_PROVIDER_ENV_KEYS = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    "openai": ("OPENAI_API_KEY",),
    "claude": ("ANTHROPIC_API_KEY",),
}

_AUTO_DETECT_ORDER = ["gemini", "openai", "claude"]

# Providers with an embedding endpoint, in preference order
_EMBEDDING_PROVIDERS = ["gemini", "openai"]

_CHEAP_MODELS = {
    "gemini": "gemini-2.0-flash",
    "openai": "gpt-4o-mini",
    "claude": "claude-3-5-haiku-latest",
}


def _env_key(provider: str) -> str | None:
    for env_var in _PROVIDER_ENV_KEYS.get(provider, ()):
        val = os.getenv(env_var)
        if val:
            return val
    return None


def create_cheap_provider(
    provider: str | None = None,
    api_key: str | None = None,
    model: str | None = None,
    client=None,
) -> LLMProvider:
    """Cheap-tier provider for short generations (fun facts, titles)."""
    resolved = provider or "auto"
    if resolved == "auto":
        resolved = _auto_detect_provider(api_key)
    cheap_model = model or _CHEAP_MODELS.get(resolved)
    return create_llm_provider(provider=resolved, api_key=api_key, model=cheap_model, client=client)


def create_embedding_provider(
    provider: str | None = None,
    api_key: str | None = None,
    model: str | None = None,
    client=None,
) -> LLMProvider:
    """Provider used for embeddings; auto mode skips providers without one."""
    resolved = provider or "auto"
    if resolved == "auto":
        resolved = _auto_detect_provider(api_key, candidates=_EMBEDDING_PROVIDERS)
    if resolved not in _EMBEDDING_PROVIDERS:
        raise LLMError(f"Provider '{resolved}' has no embedding endpoint. Use: gemini, openai")
    return create_llm_provider(
        provider=resolved, api_key=api_key, client=client, embedding_model=model
    )


def create_llm_provider(
    provider: str | None = None,
    api_key: str | None = None,
    model: str | None = None,
    client=None,
    embedding_model: str | None = None,
) -> LLMProvider:
    """Create an LLM provider instance.

    Args:
        provider: "gemini", "openai", "claude", "auto", or None (auto-detect)
        api_key: Explicit API key (overrides env var)
        model: Generation model name (None = provider default)
        client: Pre-built SDK client for testing/DI
        embedding_model: Embedding model name (None = provider default)

    Returns:
        LLMProvider instance
    """
    resolved = provider or "auto"

    if resolved == "auto":
        resolved = _auto_detect_provider(api_key)

    if not api_key and not client:
        api_key = _env_key(resolved)

    if resolved == "gemini":
        from .providers.gemini import GeminiProvider

        return GeminiProvider(
            api_key=api_key, model=model, client=client, embedding_model=embedding_model
        )
    elif resolved == "openai":
        from .providers.openai import OpenAIProvider

        return OpenAIProvider(
            api_key=api_key, model=model, client=client, embedding_model=embedding_model
        )
    elif resolved == "claude":
        from .providers.claude import ClaudeProvider

        return ClaudeProvider(api_key=api_key, model=model, client=client)
    else:
        raise LLMError(f"Unknown provider: {resolved}. Use: gemini, openai, claude")


def _detect_provider_from_key(api_key: str) -> str | None:
    """Infer provider from API key prefix."""
    if api_key.startswith("sk-ant-"):
        return "claude"
    if api_key.startswith("sk-"):
        return "openai"
    if api_key.startswith("AI"):
        return "gemini"
    return None


def _auto_detect_provider(
    api_key: str | None = None, candidates: list[str] | None = None
) -> str:
    """Detect provider from explicit key prefix, then env vars."""
    candidates = candidates or _AUTO_DETECT_ORDER
    if api_key:
        inferred = _detect_provider_from_key(api_key)
        if inferred in candidates:
            return inferred

    for name in candidates:
        if _env_key(name):
            return name
    env_vars = ", ".join(v for name in candidates for v in _PROVIDER_ENV_KEYS[name])
    raise LLMError(f"No LLM API key found. Set one of: {env_vars}")
