"""Provider factory: returns the right provider instance or falls back to mock."""

from __future__ import annotations

import logging

from dignity_index.core.config import get_settings

from .base import BaseProvider, ProviderResult
from .mock import MockProvider

logger = logging.getLogger(__name__)

__all__ = [
    "get_provider",
    "BaseProvider",
    "ProviderResult",
    "MockProvider",
    "ProviderUnavailableError",
]


class ProviderUnavailableError(Exception):
    """Raised in strict mode when the requested provider cannot be built."""


def _unavailable(reason: str, name: str, strict: bool) -> BaseProvider:
    if strict:
        raise ProviderUnavailableError(f"{reason}: {name!r}")
    logger.warning("%s: %r – falling back to mock", reason, name)
    return MockProvider()


def get_provider(provider_name: str, *, strict: bool = False) -> BaseProvider:
    """Return a provider instance for *provider_name*.

    If the requested provider is not in the allowlist, has no API key,
    or is unknown, we fall back to ``MockProvider`` with a warning.
    With ``strict=True`` those cases raise ``ProviderUnavailableError``
    instead; an explicit ``"mock"`` is still served.
    """
    settings = get_settings()
    name = provider_name.lower().strip()

    if name not in settings.ai_allowed_providers:
        return _unavailable("Provider not in allowlist", name, strict)

    if name == "mock":
        return MockProvider()

    if name == "gemini":
        if not settings.gemini_api_key:
            return _unavailable("GEMINI_API_KEY not set", name, strict)
        from .gemini import GeminiProvider

        return GeminiProvider(api_key=settings.gemini_api_key, base_url=settings.gemini_base_url)

    if name == "claude":
        if not settings.anthropic_api_key:
            return _unavailable("ANTHROPIC_API_KEY not set", name, strict)
        from .claude import ClaudeProvider

        return ClaudeProvider(api_key=settings.anthropic_api_key)

    if name == "groq":
        if not settings.groq_api_key:
            return _unavailable("GROQ_API_KEY not set", name, strict)
        from .groq import GroqProvider

        return GroqProvider(api_key=settings.groq_api_key)

    if name == "openai":
        if not settings.openai_api_key:
            return _unavailable("OPENAI_API_KEY not set", name, strict)
        from .openai import OpenAIProvider

        return OpenAIProvider(api_key=settings.openai_api_key)

    return _unavailable("Unknown provider", name, strict)
