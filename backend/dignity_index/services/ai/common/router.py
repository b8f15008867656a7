"""AI Router: resolves provider + model with override > ENV > mock-fallback chain."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from dignity_index.core.config import get_settings

from .providers import BaseProvider, get_provider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedConfig:
    """Final resolved provider + model after the override chain."""

    provider: BaseProvider
    model: str
    temperature: float
    max_tokens: int
    timeout_seconds: float


def resolve(
    scope: str,
    *,
    override_provider: str | None = None,
    override_model: str | None = None,
    strict: bool = False,
) -> ResolvedConfig:
    """Resolve provider + model for a given *scope*.

    Resolution chain (first non-empty wins):
      1. ``override_provider`` / ``override_model`` (runtime request param,
         only when ``enable_ai_overrides=True``).
      2. ENV scope-specific: ``AI_<SCOPE>_PROVIDER`` / ``AI_<SCOPE>_MODEL``.
      3. Fallback: ``"mock"`` with empty model.

    If the resolved model is not in the allowlist for that provider, the
    first allowed model is used instead.

    With ``strict=True`` an unusable provider raises
    ``ProviderUnavailableError`` instead of falling back to mock.
    """
    settings = get_settings()

    provider_name = ""
    if settings.enable_ai_overrides and override_provider:
        provider_name = override_provider.lower().strip()
    if not provider_name:
        provider_name = str(getattr(settings, f"ai_{scope}_provider", "") or "").lower().strip()
    if not provider_name:
        provider_name = "mock"

    model = ""
    if settings.enable_ai_overrides and override_model:
        model = override_model.strip()
    if not model:
        model = str(getattr(settings, f"ai_{scope}_model", "") or "").strip()

    allowed_models = settings.ai_allowed_models.get(provider_name, [])
    if allowed_models and model and model not in allowed_models:
        logger.warning(
            "Model %r not in allowlist for %r, using first allowed: %r",
            model,
            provider_name,
            allowed_models[0],
        )
        model = allowed_models[0]

    if allowed_models and not model:
        model = allowed_models[0]

    timeout = float(getattr(settings, f"ai_{scope}_timeout_seconds", 0) or settings.ai_timeout_seconds)

    return ResolvedConfig(
        provider=get_provider(provider_name, strict=strict),
        model=model,
        temperature=settings.ai_temperature,
        max_tokens=settings.ai_max_tokens,
        timeout_seconds=timeout,
    )
