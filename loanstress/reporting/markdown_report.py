"""Markdown report generator for loan stress tests"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Tuple

import pandas as pd

from ..scoring.aggregator import RiskAggregator
from ..stress.models import StressTestOutput
from .charts import ChartGenerator

logger = logging.getLogger(__name__)


class MarkdownReportGenerator:
    """Generates markdown reports for loan stress tests"""

    def __init__(self, output_dir: Path = None, include_charts: bool = True):
        """
        Initialize report generator

        Args:
            output_dir: Directory to save reports (default: reports/)
            include_charts: Whether to render and embed matplotlib charts
        """
        if output_dir is None:
            output_dir = Path(__file__).parent.parent.parent / "reports"

        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.include_charts = include_charts

    def generate_report(
        self,
        loan_id: str,
        output: StressTestOutput,
        save_timestamped: bool = True,
        save_latest: bool = True,
    ) -> Tuple[Optional[Path], Optional[Path]]:
        """
        Generate markdown report for one loan

        Args:
            loan_id: Loan identifier (used as directory name)
            output: Stress test output for the loan
            save_timestamped: Whether to save timestamped report
            save_latest: Whether to save/overwrite latest report

        Returns:
            Tuple of (timestamped_path, latest_path)
        """
        content = self._generate_content(loan_id, output)

        loan_dir = self.output_dir / loan_id.replace("/", "-")
        loan_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M")

        if self.include_charts:
            chart_gen = ChartGenerator(loan_dir / "images" / timestamp)
            charts = chart_gen.generate_all_charts(output)
            content = self._add_chart_references(content, timestamp, charts)

        timestamped_path = None
        latest_path = None

        if save_timestamped:
            timestamped_path = loan_dir / f"{timestamp}.md"
            timestamped_path.write_text(content, encoding="utf-8")
            logger.info(f"Wrote report: {timestamped_path}")

        if save_latest:
            latest_path = loan_dir / "latest.md"
            latest_path.write_text(content, encoding="utf-8")
            logger.info(f"Wrote report: {latest_path}")

        return timestamped_path, latest_path

    def generate_portfolio_report(self, results: pd.DataFrame, filename: str = "portfolio.md") -> Path:
        """
        Generate a one-table summary across all loans

        Args:
            results: DataFrame from PortfolioStressAnalyzer.to_frame
            filename: Output filename

        Returns:
            Path to saved report
        """
        content = f"""# Portfolio Stress Summary

**Generated:** {datetime.now().strftime("%Y-%m-%d %H:%M:%S")}

**Loans Tested:** {len(results)}

| Loan | Principal | Base Profit | Overall Risk | Critical | High | Worst Profit Impact | Max Default Increase |
|------|-----------|-------------|--------------|----------|------|---------------------|----------------------|
"""
        for _, row in results.iterrows():
            content += (
                f"| {row['loan_id']} | {self._format_number(row['principal'])} "
                f"| {self._format_number(row['base_profit'])} | {row['overall_risk'].upper()} "
                f"| {int(row['critical_count'])} | {int(row['high_count'])} "
                f"| {self._format_number(row['worst_profit_impact'])} "
                f"| {row['max_default_increase'] * 100:+.1f}% |\n"
            )

        content += "\n" + self._generate_footer()

        output_path = self.output_dir / filename
        output_path.write_text(content, encoding="utf-8")
        logger.info(f"Wrote portfolio report: {output_path}")
        return output_path

    def _generate_content(self, loan_id: str, output: StressTestOutput) -> str:
        """Generate markdown content"""
        sections = [
            self._generate_header(loan_id, output),
            self._generate_base_case(output),
            self._generate_stress_tests(output),
            self._generate_warnings(output),
            self._generate_recommendations(output),
            self._generate_footer(),
        ]

        return "\n\n".join(section for section in sections if section)

    def _generate_header(self, loan_id: str, output: StressTestOutput) -> str:
        """Generate report header"""
        color = RiskAggregator(output.stress_tests).get_risk_color(output.overall_risk)

        return f"""# Stress Test Report: {loan_id}

**Generated:** {datetime.now().strftime("%Y-%m-%d %H:%M:%S")}

**Overall Risk:** {output.overall_risk.value.upper()} ({color})

{output.summary}"""

    def _generate_base_case(self, output: StressTestOutput) -> str:
        """Generate base case section"""
        base = output.base_case

        return f"""## Base Case

| Metric | Value |
|--------|-------|
| **Expected Profit** | {self._format_number(base.profit)} |
| **Repayment Probability** | {base.repayment_probability:.0%} |
| **Default Probability** | {base.default_probability:.0%} |"""

    def _generate_stress_tests(self, output: StressTestOutput) -> str:
        """Generate stress test results section"""
        content = """## Stress Test Results

Scenarios in the order they were run:

| Scenario | Severity | Profit Change | Repayment Change | Default Change |
|----------|----------|---------------|------------------|----------------|
"""
        for test in output.stress_tests:
            content += (
                f"| {test.factor.name} | {test.factor.severity.value.upper()} "
                f"| {test.impact.on_profit:+,.2f} | {test.impact.on_repayment * 100:+.1f}% "
                f"| {test.impact.on_default * 100:+.1f}% |\n"
            )

        return content

    def _generate_warnings(self, output: StressTestOutput) -> str:
        """Generate warnings section (empty if no scenario warned)"""
        lines = [
            f"- **{test.factor.name}**: {warning}"
            for test in output.stress_tests
            for warning in test.warnings
        ]
        if not lines:
            return ""

        return "## Warnings\n\n" + "\n".join(lines)

    def _generate_recommendations(self, output: StressTestOutput) -> str:
        """Generate de-duplicated recommendations section"""
        seen = []
        for test in output.stress_tests:
            for recommendation in test.recommendations:
                if recommendation not in seen:
                    seen.append(recommendation)

        return "## Recommendations\n\n" + "\n".join(f"- {r}" for r in seen)

    def _generate_footer(self) -> str:
        """Generate report footer"""
        return """---

*Probabilities are fixed heuristics, not fitted estimates. Use alongside credit review, not instead of it.*"""

    def _add_chart_references(self, content: str, timestamp: str, charts: Dict[str, Path]) -> str:
        """Add chart image references to markdown content"""
        header = "## Stress Test Results\n\nScenarios in the order they were run:"
        images = "".join(
            f"\n![{name.replace('_', ' ').title()}](images/{timestamp}/{path.name})\n"
            for name, path in charts.items()
        )

        return content.replace(header, f"{header}\n{images}")

    def _format_number(self, num: float) -> str:
        """Format number with K/M/B suffix"""
        if abs(num) < 1000:
            return f"{num:.2f}"

        for unit in ["K", "M", "B", "T"]:
            num /= 1000
            if abs(num) < 1000:
                return f"{num:.2f}{unit}"

        return f"{num:.2f}P"
