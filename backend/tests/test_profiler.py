"""
Test Data Profiler

Unit tests for cell normalisation, column classification and statistics.
"""

import math

import pytest

from api.schemas.responses import ColumnType
from core.data_profiler import DataProfiler
from core.dataset import CellKind, Dataset, normalize_cell, parse_date, parse_number


@pytest.fixture
def profiler():
    return DataProfiler()


def cells(*values):
    return [normalize_cell(v) for v in values]


class TestCellNormalization:
    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_values(self, value):
        assert normalize_cell(value).kind is CellKind.MISSING

    @pytest.mark.parametrize("value,expected", [
        ("42", 42.0),
        (" 3.5 ", 3.5),
        ("-1e3", -1000.0),
        (".5", 0.5),
        ("0x1F", 31.0),
        (7, 7.0),
    ])
    def test_numbers(self, value, expected):
        cell = normalize_cell(value)
        assert cell.kind is CellKind.NUMBER
        assert cell.number == expected

    def test_infinity_is_number_but_not_finite(self):
        cell = normalize_cell("Infinity")
        assert cell.is_number
        assert not cell.is_finite_number

    @pytest.mark.parametrize("value", ["abc", "1_000", "nan", "12px"])
    def test_text(self, value):
        assert normalize_cell(value).kind is CellKind.TEXT
        assert parse_number(value) is None

    def test_whitespace_only_is_zero(self):
        cell = normalize_cell("   ")
        assert cell.kind is CellKind.NUMBER
        assert cell.number == 0.0
        assert cell.text == "   "

    @pytest.mark.parametrize("value,expected", [
        (10 ** 400, math.inf),
        (-(10 ** 400), -math.inf),
        ("0x" + "F" * 300, math.inf),
    ])
    def test_oversized_integers_saturate(self, value, expected):
        cell = normalize_cell(value)
        assert cell.is_number
        assert cell.number == expected
        assert not cell.is_finite_number

    def test_oversized_integer_in_dataset(self, profiler):
        dataset = Dataset.from_records(["x"], [{"x": 10 ** 400}, {"x": 5}])

        stats = profiler.profile(dataset).columns[0]

        assert stats.count == 2
        assert profiler.classify(dataset.column("x")) is ColumnType.NUMERIC

    def test_text_key_of_numeric_raw(self):
        assert normalize_cell(25).text == "25"
        assert normalize_cell("25.0").text == "25.0"

    @pytest.mark.parametrize("value", [
        "2024-01-15", "2024-01-15T10:30:00Z", "01/15/2024", "Jan 15, 2024", "15 January 2024",
    ])
    def test_dates(self, value):
        assert parse_date(value) is not None

    @pytest.mark.parametrize("value", ["CA", "hello world", "2024-13-45"])
    def test_not_dates(self, value):
        assert parse_date(value) is None


class TestClassifier:
    def test_numeric_column(self, profiler):
        assert profiler.classify(cells("25", "35", "45", "")) is ColumnType.NUMERIC

    def test_date_column(self, profiler):
        assert profiler.classify(cells(None, "2024-01-01", "2024-01-02")) is ColumnType.DATE

    def test_categorical_column(self, profiler):
        assert profiler.classify(cells("CA", "NY")) is ColumnType.CATEGORICAL

    def test_empty_column_is_categorical(self, profiler):
        assert profiler.classify(cells(None, "", None)) is ColumnType.CATEGORICAL
        assert profiler.classify([]) is ColumnType.CATEGORICAL

    def test_uses_first_value_only(self, profiler):
        """A numeric first value wins even when the rest is text."""
        assert profiler.classify(cells("", "1", "a", "b", "c")) is ColumnType.NUMERIC
        assert profiler.classify(cells("a", "1", "2", "3", "4")) is ColumnType.CATEGORICAL


class TestColumnStatistics:
    def test_numeric_example(self, profiler):
        stats = profiler.column_statistics("age", cells(25, 35, 45, ""), total_rows=4)

        assert stats.type is ColumnType.NUMERIC
        assert stats.count == 3
        assert stats.null_count == 1
        assert stats.null_percentage == 25.0
        assert stats.mean == 35.0
        assert stats.median == 35.0
        assert stats.min == 25
        assert stats.max == 45
        assert stats.unique_count == 3
        assert stats.std_dev == round(math.sqrt(200 / 3), 2)

    def test_median_picks_upper_middle(self, profiler):
        stats = profiler.column_statistics("x", cells(1, 2, 3, 10), total_rows=4)

        assert stats.median == 3.0
        assert stats.mean == 4.0

    def test_population_std(self, profiler):
        stats = profiler.column_statistics("x", cells(2, 4, 4, 4, 5, 5, 7, 9), total_rows=8)

        assert stats.std_dev == 2.0

    def test_categorical_top_values(self, profiler):
        stats = profiler.column_statistics(
            "region", cells("CA", "CA", "NY", "CA", "TX"), total_rows=5
        )

        assert stats.type is ColumnType.CATEGORICAL
        assert [(v.value, v.count) for v in stats.top_values] == [("CA", 3), ("NY", 1), ("TX", 1)]
        assert stats.unique_count == 3
        assert stats.mean is None

    def test_top_values_truncation(self, profiler):
        values = cells("a", "b", "b", "c", "d", "e", "f", "g")

        assert len(profiler.column_statistics("x", values, 8).top_values) == 5
        compact = profiler.column_statistics("x", values, 8, top_n=3).top_values
        assert [v.value for v in compact] == ["b", "a", "c"]

    def test_case_sensitive_values(self, profiler):
        stats = profiler.column_statistics("x", cells("ca", "CA", "Ca"), total_rows=3)

        assert stats.unique_count == 3

    def test_eighty_percent_threshold_is_strict(self, profiler):
        """Exactly 80% numeric stays categorical; above 80% is numeric."""
        at_threshold = cells("1", "2", "3", "4", "x")
        above_threshold = cells("1", "2", "3", "4", "5", "x")

        assert profiler.column_statistics("x", at_threshold, 5).type is ColumnType.CATEGORICAL
        stats = profiler.column_statistics("x", above_threshold, 6)
        assert stats.type is ColumnType.NUMERIC
        assert stats.count == 6
        assert stats.max == 5

    def test_all_missing_column(self, profiler):
        stats = profiler.column_statistics("x", cells(None, "", None), total_rows=3)

        assert stats.count == 0
        assert stats.null_count == 3
        assert stats.null_percentage == 100.0
        assert stats.top_values == []
        assert stats.mean is None

    def test_empty_dataset(self, profiler):
        stats = profiler.column_statistics("x", [], total_rows=0)

        assert stats.count == 0
        assert stats.null_percentage == 0.0

    def test_classifier_and_statistics_can_disagree(self, profiler):
        """First value numeric, but only 20% of values numeric overall."""
        column = cells("1", "a", "b", "c", "d")

        assert profiler.classify(column) is ColumnType.NUMERIC
        assert profiler.column_statistics("x", column, 5).type is ColumnType.CATEGORICAL


class TestProfile:
    def test_row_invariant(self, profiler, insurance_dataset):
        profile = profiler.profile(insurance_dataset)

        for column in profile.columns:
            assert column.count + column.null_count == profile.row_count

    def test_numeric_bounds(self, profiler, insurance_dataset):
        profile = profiler.profile(insurance_dataset)

        for column in profile.columns:
            if column.type is ColumnType.NUMERIC and column.count > 0:
                assert column.min <= column.median <= column.max
                assert column.min <= column.mean <= column.max

    def test_column_lists(self, profiler, insurance_dataset):
        profile = profiler.profile(insurance_dataset)

        assert profile.numeric_columns == ["customer_age", "annual_premium", "claim_amount"]
        assert profile.categorical_columns == ["region", "gender", "policy_type"]
        assert profile.column_types["region"] is ColumnType.CATEGORICAL
        assert profile.completeness == 100.0

    def test_completeness(self, profiler):
        dataset = Dataset.from_records(
            ["a", "b"],
            [{"a": "1", "b": ""}, {"a": "2", "b": "x"}, {"a": None}, {"a": "4", "b": "y"}],
        )

        assert profiler.completeness(dataset) == (62.5, 3)

    def test_empty_dataset_completeness(self, profiler):
        assert profiler.completeness(Dataset.from_records(["a"], [])) == (0.0, 0)

    def test_deterministic(self, profiler, insurance_dataset):
        assert profiler.profile(insurance_dataset) == profiler.profile(insurance_dataset)
