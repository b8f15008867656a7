"""Dignity scope contracts: AnalysisResult + validation."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

MIN_SCORE = 1
MAX_SCORE = 8

Category = Literal["contempt", "dignity"]


class AnalysisResult(BaseModel):
    """Structured outcome of one Dignity Index classification."""

    score: int = Field(..., strict=True)
    category: Category
    explanation: str = Field(..., strict=True)

    @field_validator("score")
    @classmethod
    def score_in_range(cls, v: int) -> int:
        if not MIN_SCORE <= v <= MAX_SCORE:
            msg = f"Score must be {MIN_SCORE}–{MAX_SCORE}, got {v}"
            raise ValueError(msg)
        return v

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v
