"""
Correlation Sampler

Pairs two numeric columns into scatter points for display.
Points are the first valid rows in order, not a random sample.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from config import get_settings
from core.data_profiler import data_profiler
from core.dataset import Cell, Dataset
from core.logging_config import profiling_logger as logger


@dataclass
class CorrelationPoint:
    """One (x, y) scatter point."""

    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass
class CorrelationSample:
    """Scatter points for a column pair."""

    x_column: str
    y_column: str
    points: list[CorrelationPoint] = field(default_factory=list)
    valid_count: int = 0
    refused: bool = False

    @property
    def truncated(self) -> bool:
        return self.valid_count > len(self.points)

    def to_dict(self) -> dict[str, Any]:
        return {
            "x_column": self.x_column,
            "y_column": self.y_column,
            "points": [p.to_dict() for p in self.points],
            "valid_count": self.valid_count,
            "truncated": self.truncated,
        }


class CorrelationSampler:
    """Builds capped scatter samples for numeric column pairs."""

    def __init__(self):
        self.settings = get_settings()

    def valid_pairs(self, pairs: Sequence[tuple[Cell, Cell]]) -> list[CorrelationPoint]:
        """Every row where both sides are finite numbers, in row order."""
        return [
            CorrelationPoint(x=x.number, y=y.number)
            for x, y in pairs
            if x.is_finite_number and y.is_finite_number
        ]

    def sample_points(
        self,
        pairs: Sequence[tuple[Cell, Cell]],
        limit: Optional[int] = None,
    ) -> list[CorrelationPoint]:
        """
        Filter and convert row pairs, keeping the first `limit` survivors.

        Args:
            pairs: Row-aligned (x, y) cells
            limit: Maximum points (default from config)
        """
        if limit is None:
            limit = self.settings.analysis.correlation_max_points
        return self.valid_pairs(pairs)[:limit]

    def sample(
        self,
        dataset: Dataset,
        x_column: str,
        y_column: str,
        limit: Optional[int] = None,
    ) -> CorrelationSample:
        """
        Scatter sample for two columns.

        Returns an empty, refused sample unless both columns are
        classified numeric.
        """
        if limit is None:
            limit = self.settings.analysis.correlation_max_points

        numeric = set(data_profiler.get_numeric_columns(dataset))
        if x_column not in numeric or y_column not in numeric:
            logger.debug(f"Correlation refused for non-numeric pair ({x_column}, {y_column})")
            return CorrelationSample(x_column=x_column, y_column=y_column, refused=True)

        valid = self.valid_pairs(dataset.column_pairs(x_column, y_column))
        return CorrelationSample(
            x_column=x_column,
            y_column=y_column,
            points=valid[:limit],
            valid_count=len(valid),
        )


# Global instance
correlation_sampler = CorrelationSampler()
