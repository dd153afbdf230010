"""
Outlier Detector

Tukey-fence (IQR) outlier detection over numeric columns.
Quartiles are plain order statistics, not interpolated percentiles.
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence

import numpy as np
from numba import jit

from config import get_settings


@dataclass
class OutlierResult:
    """Result of outlier detection."""

    outlier_count: int
    total_count: int
    q1: Optional[float]
    q3: Optional[float]
    lower_bound: Optional[float]
    upper_bound: Optional[float]
    rate_threshold: float = 0.05

    @property
    def outlier_rate(self) -> float:
        """Share of values outside the fences (0-1)."""
        return self.outlier_count / self.total_count if self.total_count > 0 else 0.0

    @property
    def outlier_percentage(self) -> float:
        return self.outlier_rate * 100

    @property
    def is_significant(self) -> bool:
        """True when more than the threshold share of values is flagged."""
        return self.outlier_count > self.rate_threshold * self.total_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "outlier_count": self.outlier_count,
            "total_count": self.total_count,
            "outlier_rate": round(self.outlier_rate, 4),
            "q1": self.q1,
            "q3": self.q3,
            "lower_bound": self.lower_bound,
            "upper_bound": self.upper_bound,
            "is_significant": self.is_significant,
        }


@jit(nopython=True, cache=True)
def _iqr_bounds_numba(arr: np.ndarray, multiplier: float) -> tuple[float, float, float, float]:
    """Numba-accelerated IQR bounds calculation."""
    sorted_arr = np.sort(arr)
    n = len(sorted_arr)

    q1 = sorted_arr[int(n * 0.25)]
    q3 = sorted_arr[int(n * 0.75)]
    iqr = q3 - q1

    lower = q1 - multiplier * iqr
    upper = q3 + multiplier * iqr

    return q1, q3, lower, upper


@jit(nopython=True, cache=True)
def _count_outliers_numba(arr: np.ndarray, lower: float, upper: float) -> int:
    """Numba-accelerated fence violation count."""
    count = 0
    for i in range(len(arr)):
        if arr[i] < lower or arr[i] > upper:
            count += 1
    return count


class OutlierDetector:
    """IQR outlier detection engine."""

    def __init__(self):
        self.settings = get_settings()

    def detect_iqr(
        self,
        values: Sequence[float],
        multiplier: Optional[float] = None,
        rate_threshold: Optional[float] = None,
    ) -> OutlierResult:
        """
        Detect outliers using the Interquartile Range (IQR) fences.

        Callers only run this for columns with more than
        `outlier_min_values` values; see `should_analyze`.

        Args:
            values: Finite numeric values
            multiplier: Fence multiplier (default from config)
            rate_threshold: Share of flagged values that makes the result significant

        Returns:
            OutlierResult
        """
        if multiplier is None:
            multiplier = self.settings.analysis.outlier_iqr_multiplier
        if rate_threshold is None:
            rate_threshold = self.settings.analysis.outlier_rate_threshold

        arr = np.asarray(values, dtype=np.float64)

        if len(arr) == 0:
            return OutlierResult(
                outlier_count=0, total_count=0, q1=None, q3=None,
                lower_bound=None, upper_bound=None, rate_threshold=rate_threshold,
            )

        q1, q3, lower, upper = _iqr_bounds_numba(arr, float(multiplier))
        count = _count_outliers_numba(arr, lower, upper)

        return OutlierResult(
            outlier_count=int(count),
            total_count=len(arr),
            q1=float(q1),
            q3=float(q3),
            lower_bound=float(lower),
            upper_bound=float(upper),
            rate_threshold=rate_threshold,
        )

    def should_analyze(self, values: Sequence[float]) -> bool:
        """Outlier detection gate: strictly more than the minimum value count."""
        return len(values) > self.settings.analysis.outlier_min_values


# Global instance
outlier_detector = OutlierDetector()
