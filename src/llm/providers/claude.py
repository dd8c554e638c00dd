"""Anthropic provider for chat answers and short generated texts.

Anthropic takes the system prompt as a top-level parameter and returns a list
of content blocks, so messages are split and the reply is reassembled here.
"""

from ..base import LLMAuthError, LLMError, LLMProvider, LLMRateLimitError

DEFAULT_MODEL = "claude-sonnet-4-20250514"


def _error_table() -> list[tuple[type, type, str]]:
    """(anthropic exception, our exception, label), most specific first."""
    import anthropic

    return [
        (anthropic.AuthenticationError, LLMAuthError, "auth failed"),
        (anthropic.PermissionDeniedError, LLMAuthError, "auth failed"),
        (anthropic.RateLimitError, LLMRateLimitError, "rate limit"),
        (anthropic.APIError, LLMError, "API error"),
    ]


def _translate(e: Exception) -> LLMError:
    for source, target, label in _error_table():
        if isinstance(e, source):
            return target(f"Claude {label}: {e}")
    return LLMError(f"Claude error: {e}")


def _split_system(messages: list[dict], system: str | None) -> tuple[str | None, list[dict]]:
    """Pull system-role turns into the top-level prompt; keep user/assistant turns in order."""
    prompts = [system] if system else []
    turns = []
    for m in messages:
        if m["role"] == "system":
            prompts.append(m["content"])
        else:
            turns.append({"role": m["role"], "content": m["content"]})
    return "\n\n".join(prompts) or None, turns


def _reply_text(response) -> str:
    """Concatenated text blocks; non-text blocks are skipped."""
    parts = [getattr(block, "text", None) for block in response.content or []]
    return "".join(p for p in parts if isinstance(p, str))


class ClaudeProvider(LLMProvider):
    """Anthropic Claude. Generation only; embeddings come from Gemini or OpenAI."""

    provider_name = "claude"

    def __init__(self, api_key: str | None = None, model: str | None = None, client=None):
        self.model = model or DEFAULT_MODEL
        if client is None:
            try:
                import anthropic
            except ImportError:
                raise LLMError("anthropic package not installed. Run: pip install anthropic")
            client = anthropic.Anthropic(api_key=api_key)
        self.client = client

    def generate(
        self, messages: list[dict], system: str | None = None, max_tokens: int = 2000
    ) -> str:
        system, turns = _split_system(messages, system)
        request = {"model": self.model, "max_tokens": max_tokens, "messages": turns}
        if system:
            request["system"] = system

        try:
            response = self.client.messages.create(**request)
        except Exception as e:
            raise _translate(e) from e
        return _reply_text(response)
