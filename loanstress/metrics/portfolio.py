"""
Portfolio Stress Metrics - Runs the stress battery across a loan book
"""

import logging
from typing import Dict

import numpy as np
import pandas as pd

from ..stress.engine import run_stress_tests
from ..stress.models import Severity, StressTestInput, StressTestOutput

logger = logging.getLogger(__name__)

PORTFOLIO_COLUMNS = [
    "loan_id",
    "principal",
    "base_profit",
    "overall_risk",
    "scenarios",
    "critical_count",
    "high_count",
    "worst_profit_impact",
    "max_default_increase",
]


class PortfolioStressAnalyzer:
    """Stress tests every loan in a book and tabulates the results"""

    def __init__(self, loans: Dict[str, StressTestInput]):
        """
        Initialize portfolio analyzer

        Args:
            loans: Loan inputs keyed by loan id
        """
        self.loans = loans

    def run_all(self) -> Dict[str, StressTestOutput]:
        """Run stress tests on every loan, keyed by loan id"""
        logger.info(f"Running stress tests on {len(self.loans)} loans...")
        return {loan_id: run_stress_tests(loan) for loan_id, loan in self.loans.items()}

    def to_frame(self) -> pd.DataFrame:
        """
        One row per loan with its verdict and worst-case figures

        Returns:
            DataFrame with PORTFOLIO_COLUMNS
        """
        rows = []

        for loan_id, output in self.run_all().items():
            loan = self.loans[loan_id]
            profits = np.array([t.impact.on_profit for t in output.stress_tests])
            defaults = np.array([t.impact.on_default for t in output.stress_tests])
            severities = [t.factor.severity for t in output.stress_tests]

            rows.append({
                "loan_id": loan_id,
                "principal": loan.principal,
                "base_profit": output.base_case.profit,
                "overall_risk": output.overall_risk.value,
                "scenarios": len(output.stress_tests),
                "critical_count": severities.count(Severity.CRITICAL),
                "high_count": severities.count(Severity.HIGH),
                "worst_profit_impact": float(profits.min()),
                "max_default_increase": float(defaults.max()),
            })

        return pd.DataFrame(rows, columns=PORTFOLIO_COLUMNS)

    def risk_distribution(self, results: pd.DataFrame = None) -> Dict[str, int]:
        """
        Count loans per overall risk band

        Args:
            results: DataFrame from to_frame (if None, will run it)

        Returns:
            Dict of band -> loan count, every band present
        """
        if results is None:
            results = self.to_frame()

        counts = results["overall_risk"].value_counts()
        return {level.value: int(counts.get(level.value, 0)) for level in Severity}

    def total_exposure_at_risk(
        self, min_risk: Severity = Severity.HIGH, results: pd.DataFrame = None
    ) -> float:
        """
        Principal lent to loans whose overall risk is at or above min_risk

        Args:
            min_risk: Lowest band counted as at risk
            results: DataFrame from to_frame (if None, will run it)

        Returns:
            Sum of principal
        """
        if results is None:
            results = self.to_frame()

        if results.empty:
            return 0.0

        at_risk = results["overall_risk"].map(lambda level: Severity(level).rank >= min_risk.rank)
        return float(results.loc[at_risk, "principal"].sum())
