from __future__ import annotations

from pydantic import BaseModel, Field

from dignity_index.services.ai.dignity.contracts import Category


class AnalyzeRequest(BaseModel):
    text: str = Field(..., min_length=1)
    override_provider: str | None = None
    override_model: str | None = None


class AnalyzeResponse(BaseModel):
    score: int
    category: Category
    explanation: str
    category_label: str
    badge_variant: str
    score_color: str
    description: str
    score_display: str
    score_percent: float
    provider: str
    model: str
    latency_ms: float
