"""
Test Insight Generation

Unit tests for heuristic insights and the markdown report.
"""

from datetime import date

import pytest

from api.schemas.responses import InsightKind
from core.dataset import Dataset
from insights.insight_generator import InsightGenerator, match_roles
from insights.report_generator import NEXT_STEPS, ReportGenerator


@pytest.fixture
def generator():
    return InsightGenerator()


@pytest.fixture
def reporter():
    return ReportGenerator()


def single_column(header, values):
    return Dataset.from_records([header], [{header: v} for v in values])


class TestRoleMatching:
    def test_first_matching_header_wins(self):
        roles = match_roles(["id", "Customer_Age", "age", "Monthly_Premium", "State"])

        assert roles == {"age": "Customer_Age", "premium": "Monthly_Premium", "region": "State"}

    def test_substring_match(self):
        """'coverage_type' contains 'age', so it also binds the age role."""
        roles = match_roles(["coverage_type"])

        assert roles == {"age": "coverage_type", "policy": "coverage_type"}

    def test_no_matches(self):
        assert match_roles(["id", "value"]) == {}


class TestInsightGenerator:
    def test_full_dataset(self, generator, insurance_dataset):
        insights = generator.generate(insurance_dataset)

        assert [i.title for i in insights] == [
            "High Data Quality",
            "Customer Demographics",
            "Premium Structure",
            "Claims Pattern",
            "Geographic Distribution",
        ]
        assert insights[0].kind is InsightKind.SUCCESS
        assert all(i.kind is InsightKind.INFO for i in insights[1:])

    def test_domain_metrics(self, generator, insurance_dataset):
        age, premium, claim, region = generator.generate(insurance_dataset)[1:]

        assert "Average customer age is 40.0 years (range: 25-55)" in age.description
        # Zero premium excluded; median is the upper-middle value
        assert "Average premium is $1450.00 with a median of $1500.00" in premium.description
        # Negative claim excluded; two of four remaining claims are non-zero
        assert "Average claim amount is $500.00 with a claim rate of 50.0%" in claim.description
        assert region.description.startswith("CA represents 60.0% of customers")

    def test_completeness_boundary(self, generator):
        """Exactly 90.0% complete is still high quality."""
        dataset = single_column("x", ["a"] * 9 + [""])

        insight = generator.generate(dataset)[0]

        assert insight.kind is InsightKind.SUCCESS
        assert insight.title == "High Data Quality"
        assert "90.0%" in insight.description

    def test_low_completeness(self, generator):
        dataset = single_column("x", ["a"] * 8 + ["", None])

        insight = generator.generate(dataset)[0]

        assert insight.kind is InsightKind.WARNING
        assert insight.title == "Data Quality Concern"

    def test_completeness_compared_after_rounding(self, generator):
        """89.96% is shown and judged as 90.0%."""
        dataset = single_column("x", ["a"] * 2249 + [""] * 251)

        assert generator.generate(dataset)[0].kind is InsightKind.SUCCESS

    def test_empty_dataset(self, generator):
        insights = generator.generate(Dataset.from_records(["age"], []))

        assert len(insights) == 1
        assert insights[0].kind is InsightKind.WARNING

    def test_empty_region_column(self, generator):
        dataset = single_column("region", [None, "", None])

        insights = generator.generate(dataset)

        assert [i.title for i in insights] == ["Data Quality Concern"]

    def test_numeric_region_skipped(self, generator):
        dataset = single_column("region", ["1", "2", "1"])

        assert "Geographic Distribution" not in [i.title for i in generator.generate(dataset)]

    def test_categorical_age_skipped(self, generator):
        dataset = single_column("age", ["young", "old"])

        assert "Customer Demographics" not in [i.title for i in generator.generate(dataset)]

    def test_outlier_insight(self, generator):
        dataset = single_column("score", [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 100])

        insights = generator.generate(dataset)

        assert len(insights) == 2
        outlier = insights[1]
        assert outlier.kind is InsightKind.WARNING
        assert outlier.title == "Outliers in score"
        assert outlier.description == "1 outliers detected (9.1% of data)."
        assert outlier.columns == ["score"]

    def test_no_outlier_insight_at_ten_values(self, generator):
        dataset = single_column("score", [1, 2, 3, 4, 5, 6, 7, 8, 9, 100])

        assert [i.title for i in generator.generate(dataset)] == ["High Data Quality"]

    def test_outliers_follow_header_order(self, generator):
        spiky = [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 100]
        dataset = Dataset.from_records(
            ["b_score", "a_score"],
            [{"b_score": v, "a_score": v} for v in spiky],
        )

        titles = [i.title for i in generator.generate(dataset)[1:]]

        assert titles == ["Outliers in b_score", "Outliers in a_score"]

    def test_deterministic(self, generator, insurance_dataset):
        assert generator.generate(insurance_dataset) == generator.generate(insurance_dataset)


class TestReportGenerator:
    def test_report_layout(self, generator, reporter, insurance_dataset):
        insights = generator.generate(insurance_dataset)

        report = reporter.render(insights, insurance_dataset.headers, 1234, date(2026, 1, 5))

        assert report.startswith("# Insurance Data Analysis Report\n")
        assert "- **Total Records**: 1,234" in report
        assert "- **Total Columns**: 6" in report
        assert "- **Generated**: 1/5/2026" in report
        assert "### 1. High Data Quality\n**Type**: Success" in report
        assert "### 5. Geographic Distribution\n**Type**: Info" in report
        assert "- customer_age\n- annual_premium" in report
        for index, step in enumerate(NEXT_STEPS, start=1):
            assert f"{index}. {step}" in report
        assert report.rstrip().endswith("uploaded insurance dataset.*")

    def test_report_is_pure(self, generator, reporter, insurance_dataset):
        insights = generator.generate(insurance_dataset)
        args = (insights, insurance_dataset.headers, insurance_dataset.row_count, date(2026, 1, 5))

        assert reporter.render(*args) == reporter.render(*args)

    def test_report_without_insights(self, reporter):
        report = reporter.render([], ["a"], 0, date(2026, 10, 19))

        assert "## Key Insights\n\n## Data Columns\n- a" in report
        assert len(NEXT_STEPS) == 5
