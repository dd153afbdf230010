"""
API Response Schemas

Pydantic models for profiling results and API responses.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class ColumnType(str, Enum):
    """Semantic column types."""

    NUMERIC = "numeric"
    DATE = "date"
    CATEGORICAL = "categorical"


class InsightKind(str, Enum):
    """Insight tone, used for badges and report sections."""

    SUCCESS = "success"
    WARNING = "warning"
    INFO = "info"


class ValueCount(BaseModel):
    """A categorical value and its frequency."""

    value: str
    count: int


class ColumnStatistics(BaseModel):
    """Profile of a single column."""

    name: str
    type: ColumnType
    count: int
    null_count: int
    null_percentage: float
    unique_count: int

    # Numeric columns
    min: Optional[float] = None
    max: Optional[float] = None
    mean: Optional[float] = None
    median: Optional[float] = None
    std_dev: Optional[float] = None

    # Categorical columns
    top_values: Optional[list[ValueCount]] = None


class DataProfile(BaseModel):
    """Complete data profile."""

    row_count: int
    column_count: int
    total_cells: int
    missing_cells: int
    completeness: float = Field(..., description="Share of non-missing cells, percent")
    columns: list[ColumnStatistics]
    column_types: dict[str, ColumnType] = Field(
        default={}, description="Per-column type from the first non-missing value"
    )
    numeric_columns: list[str]
    categorical_columns: list[str]


class Insight(BaseModel):
    """A single insight."""

    kind: InsightKind
    title: str = Field(..., description="Brief insight title")
    description: str = Field(..., description="The finding")
    recommendation: str = Field(..., description="Suggested action")

    # Context
    columns: list[str] = Field(default=[], description="Related columns")
    metrics: dict[str, Any] = Field(default={}, description="Supporting metrics")


class DistributionResponse(BaseModel):
    """Chart-ready distribution for one column."""

    session_id: str
    column: str
    column_type: ColumnType
    buckets: list[dict[str, Any]] = []


class CategoryBreakdownResponse(BaseModel):
    """Top categories for the leading categorical columns."""

    session_id: str
    breakdown: dict[str, list[dict[str, Any]]] = {}


class CorrelationResponse(BaseModel):
    """Scatter data for a pair of numeric columns."""

    session_id: str
    x_column: str
    y_column: str
    numeric_columns: list[str]
    points: list[dict[str, float]] = []
    valid_count: int = 0
    truncated: bool = False
    message: Optional[str] = None


class InsightsResponse(BaseModel):
    """Generated insights for a dataset."""

    session_id: Optional[str] = None
    generated_at: datetime
    processing_time_ms: float
    row_count: int
    column_count: int
    insights: list[Insight] = []
    column_roles: dict[str, str] = Field(
        default={}, description="Domain role -> bound column"
    )
    next_steps: list[str] = []


class AnalyzeResponse(BaseModel):
    """Profile plus insights for an inline dataset."""

    profile: DataProfile
    insights: list[Insight] = []
    column_roles: dict[str, str] = {}


class PreviewResponse(BaseModel):
    """One page of raw rows."""

    session_id: str
    page: int
    page_size: int
    total_pages: int
    row_count: int
    columns: list[str]
    column_types: dict[str, ColumnType]
    rows: list[dict[str, Any]] = []


class SessionInfo(BaseModel):
    """Session information."""

    session_id: str
    filename: str
    created_at: datetime
    row_count: int
    column_count: int
    columns: list[str]
    status: str


class UploadResponse(BaseModel):
    """File upload response."""

    session_id: str
    filename: str
    row_count: int
    column_count: int
    columns: list[str]
    column_types: dict[str, ColumnType]
    message: str
