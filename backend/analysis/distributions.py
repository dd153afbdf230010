"""
Distribution Binner

Chart-ready distributions: fixed-width histogram bins for numeric
columns and top-N frequency buckets for everything else.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import numpy as np

from api.schemas.responses import ColumnType
from config import get_settings
from core.data_profiler import data_profiler, top_counts, value_counts
from core.dataset import Cell, Dataset


@dataclass
class HistogramBin:
    """One numeric histogram bucket, half-open [lower, upper)."""

    range_label: str
    bin_center: float
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "range_label": self.range_label,
            "bin_center": self.bin_center,
            "count": self.count,
        }


@dataclass
class CategoryCount:
    """One categorical frequency bucket."""

    category: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"category": self.category, "count": self.count}


class DistributionBinner:
    """Builds histogram and frequency buckets for charting."""

    def __init__(self):
        self.settings = get_settings()

    def histogram(
        self,
        cells: Sequence[Cell],
        max_bins: Optional[int] = None,
    ) -> list[HistogramBin]:
        """
        Bin finite numeric values into min(max_bins, ceil(sqrt(n))) equal-width bins.

        The maximum value is clamped into the last bin. When every
        value is equal the width is zero and all values land in bin 0.
        """
        if max_bins is None:
            max_bins = self.settings.analysis.max_histogram_bins

        arr = np.asarray(
            [cell.number for cell in cells if cell.is_finite_number],
            dtype=np.float64,
        )
        n = len(arr)
        bin_count = min(max_bins, math.ceil(math.sqrt(n)))
        if bin_count == 0:
            return []

        lo = float(arr.min())
        hi = float(arr.max())
        span = hi - lo
        width = span / bin_count if math.isfinite(span) else hi / bin_count - lo / bin_count

        if width > 0:
            # Halved operands keep offsets finite for values near the float limits
            offsets = np.floor((arr / 2 - lo / 2) / (width / 2))
            indices = np.clip(offsets, 0, bin_count - 1).astype(np.int64)
        else:
            indices = np.zeros(n, dtype=np.int64)
        counts = np.bincount(indices, minlength=bin_count)

        return [
            HistogramBin(
                range_label=f"{lo + i * width:.1f}-{lo + (i + 1) * width:.1f}",
                bin_center=lo + i * width + width / 2,
                count=int(counts[i]),
            )
            for i in range(bin_count)
        ]

    def frequencies(
        self,
        cells: Sequence[Cell],
        top_n: Optional[int] = None,
    ) -> list[CategoryCount]:
        """Most frequent values, descending; ties keep first-seen order."""
        if top_n is None:
            top_n = self.settings.analysis.category_top_n

        return [
            CategoryCount(category=value, count=count)
            for value, count in top_counts(value_counts(cells), top_n)
        ]

    def distribution(
        self,
        cells: Sequence[Cell],
        column_type: ColumnType,
    ) -> list[HistogramBin] | list[CategoryCount]:
        """Histogram for numeric columns, frequency buckets otherwise."""
        if column_type is ColumnType.NUMERIC:
            return self.histogram(cells)
        return self.frequencies(cells)

    def category_breakdown(
        self,
        dataset: Dataset,
        max_columns: Optional[int] = None,
        top_n: Optional[int] = None,
    ) -> dict[str, list[CategoryCount]]:
        """
        Top categories for the first few non-numeric columns.

        Columns without any present value are skipped.
        """
        if max_columns is None:
            max_columns = self.settings.analysis.breakdown_columns
        if top_n is None:
            top_n = self.settings.analysis.breakdown_top_n

        breakdown: dict[str, list[CategoryCount]] = {}
        for header in data_profiler.get_categorical_columns(dataset):
            if len(breakdown) >= max_columns:
                break
            cells = dataset.column(header)
            if all(cell.is_missing for cell in cells):
                continue
            breakdown[header] = self.frequencies(cells, top_n)
        return breakdown


# Global instance
distribution_binner = DistributionBinner()
