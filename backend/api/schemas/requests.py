"""
API Request Schemas

Pydantic models for API request validation.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class AnalyzeRequest(BaseModel):
    """Inline dataset submitted for profiling."""

    headers: list[str] = Field(
        ...,
        description="Ordered, unique column names"
    )
    rows: list[dict[str, Any]] = Field(
        default=[],
        description="Records keyed by header"
    )
    top_n: Optional[int] = Field(
        default=None,
        ge=1,
        le=50,
        description="Top values reported per categorical column; configured size when omitted"
    )

    @field_validator("headers")
    @classmethod
    def headers_must_be_unique(cls, v: list[str]) -> list[str]:
        duplicates = sorted({h for h in v if v.count(h) > 1})
        if duplicates:
            raise ValueError(f"Duplicate headers: {', '.join(duplicates)}")
        return v
