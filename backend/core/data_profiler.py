"""
Data Profiler

Column type inference and per-column descriptive statistics.

Two numeric tests live here and may disagree on the same column:
the classifier looks only at the first non-missing value, while the
statistics engine requires more than 80% of present values to be numeric.
"""

from typing import Optional, Sequence

import numpy as np

from api.schemas.responses import ColumnStatistics, ColumnType, DataProfile, ValueCount
from config import get_settings
from core.dataset import Cell, Dataset, parse_date
from core.logging_config import profiling_logger as logger


def value_counts(cells: Sequence[Cell]) -> dict[str, int]:
    """Frequency table of present cells keyed by raw string, in first-seen order."""
    counts: dict[str, int] = {}
    for cell in cells:
        if cell.is_missing:
            continue
        key = cell.text
        counts[key] = counts.get(key, 0) + 1
    return counts


def top_counts(counts: dict[str, int], top_n: int) -> list[tuple[str, int]]:
    """Entries sorted by count descending; ties keep first-seen order."""
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)[:top_n]


class DataProfiler:
    """Column classifier and statistics engine."""

    def __init__(self):
        self.settings = get_settings()

    def classify(self, cells: Sequence[Cell]) -> ColumnType:
        """
        Infer a column type from its first non-missing value.

        Args:
            cells: Column cells in row order

        Returns:
            ColumnType; categorical when the column has no values
        """
        sample = next((cell for cell in cells if not cell.is_missing), None)
        if sample is None:
            return ColumnType.CATEGORICAL

        if sample.is_number:
            return ColumnType.NUMERIC
        if parse_date(sample.raw) is not None:
            return ColumnType.DATE
        return ColumnType.CATEGORICAL

    def column_types(self, dataset: Dataset) -> dict[str, ColumnType]:
        """Classifier type for every column, in header order."""
        return {header: self.classify(dataset.column(header)) for header in dataset.headers}

    def get_numeric_columns(self, dataset: Dataset) -> list[str]:
        """Columns whose first value is numeric."""
        return [
            header for header, column_type in self.column_types(dataset).items()
            if column_type is ColumnType.NUMERIC
        ]

    def get_categorical_columns(self, dataset: Dataset) -> list[str]:
        """Every column the classifier did not mark numeric (dates included)."""
        return [
            header for header, column_type in self.column_types(dataset).items()
            if column_type is not ColumnType.NUMERIC
        ]

    def column_statistics(
        self,
        name: str,
        cells: Sequence[Cell],
        total_rows: int,
        top_n: Optional[int] = None,
    ) -> ColumnStatistics:
        """
        Compute descriptive statistics for one column.

        Args:
            name: Column name
            cells: Column cells in row order
            total_rows: Row count of the dataset
            top_n: Top values kept for categorical columns

        Returns:
            ColumnStatistics; numeric or categorical shape
        """
        if top_n is None:
            top_n = self.settings.analysis.stats_top_values

        present = [cell for cell in cells if not cell.is_missing]
        count = len(present)
        null_count = total_rows - count
        null_percentage = round(null_count / total_rows * 100, 1) if total_rows > 0 else 0.0

        numeric_values = [cell.number for cell in present if cell.is_finite_number]
        threshold = self.settings.analysis.numeric_ratio_threshold
        is_numeric = (
            count > 0
            and len(numeric_values) > 0
            and len(numeric_values) / count > threshold
        )

        if is_numeric:
            return self._numeric_statistics(name, numeric_values, count, null_count, null_percentage)

        counts = value_counts(present)
        return ColumnStatistics(
            name=name,
            type=ColumnType.CATEGORICAL,
            count=count,
            null_count=null_count,
            null_percentage=null_percentage,
            unique_count=len(counts),
            top_values=[
                ValueCount(value=value, count=frequency)
                for value, frequency in top_counts(counts, top_n)
            ],
        )

    def _numeric_statistics(
        self,
        name: str,
        values: list[float],
        count: int,
        null_count: int,
        null_percentage: float,
    ) -> ColumnStatistics:
        """Numeric branch; the median is the upper-middle element, std is population."""
        arr = np.asarray(values, dtype=np.float64)

        if len(arr) == 0:
            return ColumnStatistics(
                name=name, type=ColumnType.NUMERIC, count=count,
                null_count=null_count, null_percentage=null_percentage,
                unique_count=0, mean=0.0, median=0.0, std_dev=0.0,
            )

        sorted_arr = np.sort(arr)
        mean = float(arr.mean())

        return ColumnStatistics(
            name=name,
            type=ColumnType.NUMERIC,
            count=count,
            null_count=null_count,
            null_percentage=null_percentage,
            unique_count=len(set(values)),
            min=float(sorted_arr[0]),
            max=float(sorted_arr[-1]),
            mean=round(mean, 2),
            median=round(float(sorted_arr[len(sorted_arr) // 2]), 2),
            std_dev=round(float(np.sqrt(np.mean((arr - mean) ** 2))), 2),
        )

    def completeness(self, dataset: Dataset) -> tuple[float, int]:
        """
        Overall completeness across every cell.

        Returns:
            (percentage rounded to 1 decimal, missing cell count);
            0.0 for a dataset without cells
        """
        missing = sum(
            1 for row in dataset.rows for header in dataset.headers
            if row[header].is_missing
        )
        total = dataset.row_count * dataset.column_count
        if total == 0:
            return 0.0, 0
        return round((total - missing) / total * 100, 1), missing

    def profile(self, dataset: Dataset, top_n: Optional[int] = None) -> DataProfile:
        """
        Generate the full data profile.

        Args:
            dataset: Normalised dataset
            top_n: Top values kept for categorical columns

        Returns:
            DataProfile with column-level statistics
        """
        columns = [
            self.column_statistics(header, dataset.column(header), dataset.row_count, top_n)
            for header in dataset.headers
        ]
        completeness, missing = self.completeness(dataset)

        logger.debug(
            f"Profiled {dataset.column_count} columns over {dataset.row_count} rows "
            f"(completeness {completeness}%)"
        )

        return DataProfile(
            row_count=dataset.row_count,
            column_count=dataset.column_count,
            total_cells=dataset.row_count * dataset.column_count,
            missing_cells=missing,
            completeness=completeness,
            columns=columns,
            column_types=self.column_types(dataset),
            numeric_columns=[c.name for c in columns if c.type is ColumnType.NUMERIC],
            categorical_columns=[c.name for c in columns if c.type is ColumnType.CATEGORICAL],
        )


# Global profiler instance
data_profiler = DataProfiler()
