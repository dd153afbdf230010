"""
Insight Generator

Heuristic business insights for insurance-style datasets.

Order is fixed: data quality first, then domain insights
(age, premium, claim, region), then one outlier warning per
numeric column that clears the outlier threshold.
"""

from typing import Optional, Sequence

import numpy as np

from analysis.outliers import outlier_detector
from api.schemas.responses import ColumnType, Insight, InsightKind
from config import get_settings
from core.data_profiler import data_profiler, top_counts, value_counts
from core.dataset import Dataset, format_number
from core.logging_config import insights_logger as logger


# Ordered (role, synonyms) table; header matching is a case-insensitive substring test
DOMAIN_VOCABULARY: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("age", ("age", "customer_age", "policyholder_age")),
    ("premium", ("premium", "premium_amount", "annual_premium", "monthly_premium")),
    ("claim", ("claim", "claim_amount", "claims", "claim_total")),
    ("region", ("region", "state", "location", "area", "zone")),
    ("gender", ("gender", "sex")),
    ("policy", ("policy_type", "coverage_type", "plan", "product")),
)


def match_roles(headers: Sequence[str]) -> dict[str, str]:
    """Bind each role to the first header containing one of its synonyms."""
    roles: dict[str, str] = {}
    for role, synonyms in DOMAIN_VOCABULARY:
        for header in headers:
            name = header.lower()
            if any(synonym in name for synonym in synonyms):
                roles[role] = header
                break
    return roles


def _mean(values: list[float]) -> float:
    return float(np.mean(values)) if values else 0.0


def _upper_median(values: list[float]) -> float:
    if not values:
        return 0.0
    return sorted(values)[len(values) // 2]


class InsightGenerator:
    """Builds the ordered insight list for a dataset."""

    def __init__(self):
        self.settings = get_settings()

    def generate(self, dataset: Dataset) -> list[Insight]:
        """
        Generate insights for a dataset.

        Args:
            dataset: Normalised dataset

        Returns:
            Insights in generation order
        """
        column_types = data_profiler.column_types(dataset)
        numeric_columns = [h for h, t in column_types.items() if t is ColumnType.NUMERIC]
        roles = match_roles(dataset.headers)

        insights = [self._data_quality_insight(dataset)]

        for role, builder in (
            ("age", self._age_insight),
            ("premium", self._premium_insight),
            ("claim", self._claim_insight),
        ):
            column = roles.get(role)
            if column is not None and column in numeric_columns:
                insights.append(builder(dataset, column))

        region = roles.get("region")
        if region is not None and region not in numeric_columns:
            insight = self._region_insight(dataset, region)
            if insight is not None:
                insights.append(insight)

        insights.extend(self._outlier_insights(dataset, numeric_columns))

        logger.debug(f"Generated {len(insights)} insights (roles: {roles})")
        return insights

    def _numbers(self, dataset: Dataset, column: str) -> list[float]:
        return [cell.number for cell in dataset.column(column) if cell.is_finite_number]

    def _data_quality_insight(self, dataset: Dataset) -> Insight:
        completeness, missing = data_profiler.completeness(dataset)
        metrics = {"completeness": completeness, "missing_cells": missing}

        if completeness < self.settings.analysis.completeness_threshold:
            return Insight(
                kind=InsightKind.WARNING,
                title="Data Quality Concern",
                description=(
                    f"Data completeness is {completeness:.1f}%, indicating significant "
                    "missing values that may impact analysis."
                ),
                recommendation="Consider data imputation strategies or investigate data collection processes.",
                metrics=metrics,
            )

        return Insight(
            kind=InsightKind.SUCCESS,
            title="High Data Quality",
            description=(
                f"Excellent data completeness at {completeness:.1f}%, providing a solid "
                "foundation for analysis."
            ),
            recommendation="Proceed with advanced analytics and predictive modeling.",
            metrics=metrics,
        )

    def _age_insight(self, dataset: Dataset, column: str) -> Insight:
        ages = self._numbers(dataset, column)
        avg_age = _mean(ages)
        min_age = min(ages) if ages else 0.0
        max_age = max(ages) if ages else 0.0

        return Insight(
            kind=InsightKind.INFO,
            title="Customer Demographics",
            description=(
                f"Average customer age is {avg_age:.1f} years "
                f"(range: {format_number(min_age)}-{format_number(max_age)}). "
                "This indicates the primary customer segment."
            ),
            recommendation=(
                "Consider age-based premium adjustments and targeted marketing "
                "campaigns for different age groups."
            ),
            columns=[column],
            metrics={"mean": round(avg_age, 1), "min": min_age, "max": max_age},
        )

    def _premium_insight(self, dataset: Dataset, column: str) -> Insight:
        premiums = [p for p in self._numbers(dataset, column) if p > 0]
        avg_premium = _mean(premiums)
        median = _upper_median(premiums)

        return Insight(
            kind=InsightKind.INFO,
            title="Premium Structure",
            description=(
                f"Average premium is ${avg_premium:.2f} with a median of ${median:.2f}. "
                "This suggests the pricing distribution."
            ),
            recommendation=(
                "Analyze premium vs. claims ratio to optimize pricing strategies "
                "and identify profitable segments."
            ),
            columns=[column],
            metrics={"mean": round(avg_premium, 2), "median": round(median, 2)},
        )

    def _claim_insight(self, dataset: Dataset, column: str) -> Insight:
        claims = [c for c in self._numbers(dataset, column) if c >= 0]
        avg_claim = _mean(claims)
        non_zero = sum(1 for c in claims if c != 0)
        claim_rate = non_zero / len(claims) * 100 if claims else 0.0

        return Insight(
            kind=InsightKind.INFO,
            title="Claims Pattern",
            description=f"Average claim amount is ${avg_claim:.2f} with a claim rate of {claim_rate:.1f}%.",
            recommendation=(
                "Focus on claim prevention strategies and risk assessment "
                "improvements for high-claim segments."
            ),
            columns=[column],
            metrics={"mean": round(avg_claim, 2), "claim_rate": round(claim_rate, 1)},
        )

    def _region_insight(self, dataset: Dataset, column: str) -> Optional[Insight]:
        counts = value_counts(dataset.column(column))
        if not counts:
            return None

        top_region, top_count = top_counts(counts, 1)[0]
        percentage = top_count / sum(counts.values()) * 100

        return Insight(
            kind=InsightKind.INFO,
            title="Geographic Distribution",
            description=(
                f"{top_region} represents {percentage:.1f}% of customers, "
                "indicating geographic concentration."
            ),
            recommendation="Consider regional risk factors and local market expansion opportunities.",
            columns=[column],
            metrics={"top_region": top_region, "share": round(percentage, 1)},
        )

    def _outlier_insights(self, dataset: Dataset, numeric_columns: list[str]) -> list[Insight]:
        insights = []
        for column in numeric_columns:
            values = self._numbers(dataset, column)
            if not outlier_detector.should_analyze(values):
                continue

            result = outlier_detector.detect_iqr(values)
            if not result.is_significant:
                continue

            insights.append(Insight(
                kind=InsightKind.WARNING,
                title=f"Outliers in {column}",
                description=(
                    f"{result.outlier_count} outliers detected "
                    f"({result.outlier_percentage:.1f}% of data)."
                ),
                recommendation=(
                    "Investigate outliers for data entry errors or legitimate extreme "
                    "cases that may need special handling."
                ),
                columns=[column],
                metrics=result.to_dict(),
            ))
        return insights


# Global instance
insight_generator = InsightGenerator()
