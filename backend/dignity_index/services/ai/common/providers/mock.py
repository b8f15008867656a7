"""Mock provider: deterministic responses for tests and fallback."""

from __future__ import annotations

import json
import time

from .base import BaseProvider, ProviderResult

MOCK_REPLY = {
    "score": 5,
    "category": "dignity",
    "explanation": (
        "Mock analysis: no AI provider is configured, so this canned result "
        "is returned for every text."
    ),
}


class MockProvider(BaseProvider):
    name = "mock"

    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        model: str = "",
        temperature: float = 0.0,
        max_tokens: int = 512,
        timeout_seconds: float = 15.0,
    ) -> ProviderResult:
        t0 = time.monotonic()
        text = json.dumps(MOCK_REPLY)
        elapsed = (time.monotonic() - t0) * 1000
        return ProviderResult(
            raw_text=text,
            model=model or "mock-v1",
            provider=self.name,
            prompt_tokens=len(prompt.split()) + len((system_prompt or "").split()),
            completion_tokens=len(text.split()),
            latency_ms=round(elapsed, 2),
        )
