"""
Report Generator

Renders an insight list into a downloadable markdown report.
"""

from datetime import date
from typing import Optional, Sequence

from api.schemas.responses import Insight


REPORT_FILENAME = "insurance-data-analysis-report.md"

NEXT_STEPS = (
    "Implement data cleaning procedures for missing values",
    "Develop predictive models for key metrics",
    "Create automated monitoring dashboards",
    "Establish data quality benchmarks",
    "Design targeted business strategies based on insights",
)


def format_report_date(value: date) -> str:
    """Month/day/year without zero padding."""
    return f"{value.month}/{value.day}/{value.year}"


class ReportGenerator:
    """Markdown report renderer."""

    def render(
        self,
        insights: Sequence[Insight],
        headers: Sequence[str],
        row_count: int,
        generated_on: Optional[date] = None,
    ) -> str:
        """
        Render the analysis report.

        Args:
            insights: Insights in generation order
            headers: Dataset column names
            row_count: Number of dataset rows
            generated_on: Report date (defaults to today)

        Returns:
            Markdown document
        """
        if generated_on is None:
            generated_on = date.today()

        sections = [
            "# Insurance Data Analysis Report",
            "## Dataset Overview\n"
            f"- **Total Records**: {row_count:,}\n"
            f"- **Total Columns**: {len(headers)}\n"
            f"- **Generated**: {format_report_date(generated_on)}",
            "## Key Insights",
        ]

        for index, insight in enumerate(insights, start=1):
            sections.append(
                f"### {index}. {insight.title}\n"
                f"**Type**: {insight.kind.value.capitalize()}\n\n"
                f"**Finding**: {insight.description}\n\n"
                f"**Recommendation**: {insight.recommendation}"
            )

        sections.append("## Data Columns\n" + "\n".join(f"- {header}" for header in headers))
        sections.append(
            "## Next Steps\n"
            + "\n".join(f"{i}. {step}" for i, step in enumerate(NEXT_STEPS, start=1))
        )
        sections.append(
            "---\n"
            "*This report was generated automatically based on the uploaded insurance dataset.*"
        )

        return "\n\n".join(sections) + "\n"


# Global instance
report_generator = ReportGenerator()
