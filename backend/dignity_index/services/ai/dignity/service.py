"""Dignity Index classification service.

Sends free-form text to the resolved AI provider and returns a validated
``AnalysisResult``. Every failure (transport, non-2xx status, timeout,
unparseable reply, schema mismatch) surfaces as ``AnalysisFailedError``;
the underlying cause is chained and logged. No retries.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

from pydantic import ValidationError

from ..common import router as ai_router
from ..common.audit import log_ai_run
from ..common.json_tools import extract_json_object
from ..common.providers import ProviderUnavailableError
from ..common.providers.base import ProviderResult
from .contracts import AnalysisResult
from .presentation import DESCRIPTIONS

logger = logging.getLogger(__name__)

SCOPE = "dignity"


def _rubric() -> str:
    return "\n".join(f"{score}. {text}" for score, text in sorted(DESCRIPTIONS.items()))


DIGNITY_SYSTEM_PROMPT = (
    "You are an expert scorer for the Dignity Index, an eight-point scale that rates "
    "the rhetorical tone of a statement from contempt (1) to dignity (8). "
    "Score the speech, not the speaker.\n\n"
    f"Levels:\n{_rubric()}\n\n"
    "Scores 1-4 are contempt, scores 5-8 are dignity.\n"
    "Return ONLY a JSON object, no other text, with keys: "
    'score (integer 1-8), category ("contempt" or "dignity"), explanation (string). '
    'Example: {"score": 6, "category": "dignity", "explanation": "The speaker invites '
    'the other side to find common ground."}'
)


class AnalysisFailedError(Exception):
    """Raised when a text could not be analyzed, whatever the cause."""


@dataclass
class DignityServiceResult:
    """Result from ``run_dignity_analysis`` including provider metadata."""

    result: AnalysisResult
    provider_result: ProviderResult
    latency_ms: float


def build_prompt(text: str) -> str:
    return f'Text to analyze:\n"""\n{text}\n"""'


def parse_reply(raw_text: str) -> AnalysisResult:
    """Parse a raw provider reply into ``AnalysisResult``.

    Raises:
        AnalysisFailedError: no JSON object in the reply, or it does not
            match the expected shape.
    """
    parsed = extract_json_object(raw_text)
    if parsed is None:
        raise AnalysisFailedError("No JSON object in provider reply")
    try:
        return AnalysisResult.model_validate(parsed)
    except ValidationError as exc:
        raise AnalysisFailedError("Provider reply does not match AnalysisResult") from exc


async def run_dignity_analysis(
    text: str,
    *,
    override_provider: str | None = None,
    override_model: str | None = None,
) -> DignityServiceResult:
    try:
        config = ai_router.resolve(
            SCOPE,
            override_provider=override_provider,
            override_model=override_model,
            strict=True,
        )
    except ProviderUnavailableError as exc:
        logger.warning("Dignity provider unavailable: %s", exc)
        raise AnalysisFailedError("Configured provider is unavailable") from exc
    prompt = build_prompt(text)

    t0 = time.monotonic()
    try:
        # httpx timeouts are per phase; this bounds the whole call.
        provider_result = await asyncio.wait_for(
            config.provider.generate(
                prompt,
                system_prompt=DIGNITY_SYSTEM_PROMPT,
                model=config.model,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
                timeout_seconds=config.timeout_seconds,
            ),
            timeout=config.timeout_seconds,
        )
    except Exception as exc:
        logger.warning("Dignity provider %s failed", config.provider.name, exc_info=True)
        raise AnalysisFailedError("Provider call failed") from exc

    try:
        result = parse_reply(provider_result.raw_text)
    except AnalysisFailedError:
        logger.warning(
            "Dignity: unusable reply from %s/%s",
            provider_result.provider,
            provider_result.model,
            exc_info=True,
        )
        raise

    latency_ms = round((time.monotonic() - t0) * 1000, 2)

    log_ai_run(
        scope=SCOPE,
        provider_result=provider_result,
        prompt_text=prompt,
        parsed_output=result.model_dump(),
        extra_meta={"latency_ms": latency_ms, "input_chars": len(text)},
    )

    return DignityServiceResult(result=result, provider_result=provider_result, latency_ms=latency_ms)


async def analyze_dignity(text: str) -> AnalysisResult:
    """Classify *text* on the Dignity Index.

    The caller is responsible for rejecting empty input.
    """
    outcome = await run_dignity_analysis(text)
    return outcome.result
