"""AI audit: one structured log record per successful AI run."""

from __future__ import annotations

import hashlib
import logging
from typing import Any

from dignity_index.core.config import get_settings

from .providers.base import ProviderResult

logger = logging.getLogger(__name__)

# Scope-dependent audit actions. Falls back to "AI_RUN" for unknown scopes.
SCOPE_ACTIONS: dict[str, str] = {
    "dignity": "AI_DIGNITY_CLASSIFIED",
}


def build_ai_run_record(
    *,
    scope: str,
    provider_result: ProviderResult,
    prompt_text: str,
    parsed_output: dict[str, Any] | None,
    extra_meta: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the audit payload.

    Prompt and response are always hashed; the raw texts are only included
    when ``AI_DEBUG_STORE_RAW=true``.
    """
    settings = get_settings()

    record: dict[str, Any] = {
        "action": SCOPE_ACTIONS.get(scope, "AI_RUN"),
        "scope": scope,
        "provider": provider_result.provider,
        "model": provider_result.model,
        "prompt_tokens": provider_result.prompt_tokens,
        "completion_tokens": provider_result.completion_tokens,
        "latency_ms": provider_result.latency_ms,
        "prompt_hash": hashlib.sha256(prompt_text.encode()).hexdigest(),
        "response_hash": hashlib.sha256(provider_result.raw_text.encode()).hexdigest(),
        "output": parsed_output,
    }

    if settings.ai_debug_store_raw:
        record["prompt_raw"] = prompt_text
        record["response_raw"] = provider_result.raw_text

    if extra_meta:
        record.update(extra_meta)

    return record


def log_ai_run(
    *,
    scope: str,
    provider_result: ProviderResult,
    prompt_text: str,
    parsed_output: dict[str, Any] | None,
    extra_meta: dict[str, Any] | None = None,
) -> dict[str, Any]:
    record = build_ai_run_record(
        scope=scope,
        provider_result=provider_result,
        prompt_text=prompt_text,
        parsed_output=parsed_output,
        extra_meta=extra_meta,
    )
    logger.info("%s provider=%s model=%s", record["action"], record["provider"], record["model"], extra={"ai_run": record})
    return record
