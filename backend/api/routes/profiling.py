"""
Profiling API Routes

Column statistics, distributions and scatter data for an uploaded dataset.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from analysis.correlations import correlation_sampler
from analysis.distributions import distribution_binner
from api.routes.upload import get_session_dataset
from api.schemas.responses import (
    CategoryBreakdownResponse, CorrelationResponse, DataProfile, DistributionResponse,
)
from config import get_settings
from core.cache import analysis_cache, cached, session_store
from core.data_profiler import data_profiler
from core.logging_config import profiling_logger as logger


router = APIRouter()


@cached(analysis_cache)
def _session_profile(session_id: str, top_n: int) -> DataProfile:
    return data_profiler.profile(session_store.get_dataset(session_id), top_n=top_n)


@router.get("/sessions/{session_id}/profile", response_model=DataProfile)
async def get_profile(
    session_id: str,
    top_n: Optional[int] = Query(default=None, ge=1, le=50, description="Top values per categorical column"),
    compact: bool = Query(default=False, description="Use the compact statistics panel size"),
) -> DataProfile:
    """
    Get the data profile for a session.

    Without top_n the configured size is used; compact=true picks
    the smaller statistics panel size.
    """
    get_session_dataset(session_id)

    if top_n is None:
        analysis = get_settings().analysis
        top_n = analysis.compact_top_values if compact else analysis.stats_top_values

    try:
        return _session_profile(session_id, top_n)
    except Exception as e:
        logger.exception(f"Profiling failed for session {session_id}")
        raise HTTPException(status_code=500, detail=f"Error profiling data: {str(e)}")


@router.get("/sessions/{session_id}/distribution/{column}", response_model=DistributionResponse)
async def get_distribution(session_id: str, column: str) -> DistributionResponse:
    """Histogram (numeric) or top categories (otherwise) for one column."""
    dataset = get_session_dataset(session_id)
    if column not in dataset.headers:
        raise HTTPException(status_code=404, detail=f"Column '{column}' not found")

    cells = dataset.column(column)
    column_type = data_profiler.classify(cells)
    buckets = distribution_binner.distribution(cells, column_type)

    return DistributionResponse(
        session_id=session_id,
        column=column,
        column_type=column_type,
        buckets=[bucket.to_dict() for bucket in buckets],
    )


@router.get("/sessions/{session_id}/categories", response_model=CategoryBreakdownResponse)
async def get_category_breakdown(session_id: str) -> CategoryBreakdownResponse:
    """Top categories of the leading categorical columns."""
    dataset = get_session_dataset(session_id)
    breakdown = distribution_binner.category_breakdown(dataset)

    return CategoryBreakdownResponse(
        session_id=session_id,
        breakdown={
            column: [bucket.to_dict() for bucket in buckets]
            for column, buckets in breakdown.items()
        },
    )


@router.get("/sessions/{session_id}/correlation", response_model=CorrelationResponse)
async def get_correlation(
    session_id: str,
    x: str = Query(..., description="X-axis column"),
    y: str = Query(..., description="Y-axis column"),
) -> CorrelationResponse:
    """Scatter points for two numeric columns."""
    dataset = get_session_dataset(session_id)
    for column in (x, y):
        if column not in dataset.headers:
            raise HTTPException(status_code=404, detail=f"Column '{column}' not found")

    sample = correlation_sampler.sample(dataset, x, y)

    return CorrelationResponse(
        session_id=session_id,
        x_column=x,
        y_column=y,
        numeric_columns=data_profiler.get_numeric_columns(dataset),
        points=[p.to_dict() for p in sample.points],
        valid_count=sample.valid_count,
        truncated=sample.truncated,
        message="Both axes must be numeric columns" if sample.refused else None,
    )
