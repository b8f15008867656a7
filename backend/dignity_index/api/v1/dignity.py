"""Dignity Index analysis endpoint."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from dignity_index.schemas.dignity import AnalyzeRequest, AnalyzeResponse
from dignity_index.services.ai.dignity.presentation import present
from dignity_index.services.ai.dignity.service import AnalysisFailedError, run_dignity_analysis
from dignity_index.services.page_controller import ANALYSIS_FAILED_MESSAGE, input_error

router = APIRouter()


@router.post(
    "/dignity/analyze",
    response_model=AnalyzeResponse,
    summary="Score text on the Dignity Index via AI",
)
async def analyze_endpoint(body: AnalyzeRequest):
    error = input_error(body.text)
    if error:
        raise HTTPException(422, error)

    try:
        outcome = await run_dignity_analysis(
            body.text,
            override_provider=body.override_provider,
            override_model=body.override_model,
        )
    except AnalysisFailedError:
        raise HTTPException(502, ANALYSIS_FAILED_MESSAGE) from None

    result = outcome.result
    return AnalyzeResponse(
        score=result.score,
        category=result.category,
        explanation=result.explanation,
        **present(result.score, result.category),
        provider=outcome.provider_result.provider,
        model=outcome.provider_result.model,
        latency_ms=outcome.latency_ms,
    )
