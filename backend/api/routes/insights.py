"""
Insights API Routes

Heuristic business insights, the markdown report, and inline analysis.
"""

import time
from datetime import datetime

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse

from api.routes.upload import get_session_dataset
from api.schemas.requests import AnalyzeRequest
from api.schemas.responses import AnalyzeResponse, Insight, InsightsResponse
from core.cache import analysis_cache, cached, session_store
from core.data_profiler import data_profiler
from core.dataset import Dataset
from core.logging_config import insights_logger as logger
from insights.insight_generator import insight_generator, match_roles
from insights.report_generator import NEXT_STEPS, REPORT_FILENAME, report_generator


router = APIRouter()


@cached(analysis_cache)
def _session_insights(session_id: str) -> list[Insight]:
    return insight_generator.generate(session_store.get_dataset(session_id))


@router.get("/insights/{session_id}", response_model=InsightsResponse)
async def get_insights(session_id: str) -> InsightsResponse:
    """
    Generate insights for the dataset.

    Data quality first, then domain findings, then outlier warnings.
    """
    dataset = get_session_dataset(session_id)
    start = time.perf_counter()

    try:
        insights = _session_insights(session_id)
    except Exception as e:
        logger.exception(f"Insight generation failed for session {session_id}")
        raise HTTPException(status_code=500, detail=f"Error generating insights: {str(e)}")

    return InsightsResponse(
        session_id=session_id,
        generated_at=datetime.now(),
        processing_time_ms=round((time.perf_counter() - start) * 1000, 2),
        row_count=dataset.row_count,
        column_count=dataset.column_count,
        insights=insights,
        column_roles=match_roles(dataset.headers),
        next_steps=list(NEXT_STEPS),
    )


@router.get("/insights/{session_id}/report", response_class=PlainTextResponse)
async def download_report(session_id: str) -> PlainTextResponse:
    """Download the insights as a markdown report."""
    dataset = get_session_dataset(session_id)

    report = report_generator.render(
        _session_insights(session_id),
        dataset.headers,
        dataset.row_count,
    )

    return PlainTextResponse(
        report,
        media_type="text/markdown",
        headers={"Content-Disposition": f'attachment; filename="{REPORT_FILENAME}"'},
    )


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(request: AnalyzeRequest) -> AnalyzeResponse:
    """
    Profile an inline dataset without creating a session.

    Accepts ordered headers and records keyed by header.
    """
    dataset = Dataset.from_records(request.headers, request.rows)
    logger.info(f"Inline analysis of {dataset.row_count} rows x {dataset.column_count} columns")

    return AnalyzeResponse(
        profile=data_profiler.profile(dataset, top_n=request.top_n),
        insights=insight_generator.generate(dataset),
        column_roles=match_roles(dataset.headers),
    )
