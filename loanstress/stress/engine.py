"""
Stress Testing Engine - Runs the scenario battery on a single loan
"""

import logging
from functools import partial
from typing import Callable, List

import pandas as pd

from ..financials.calculator import LoanFinancials, calculate_loan_financials
from ..scoring.aggregator import RiskAggregator
from .models import BaseCase, StressTestInput, StressTestOutput, StressTestResult
from .scenarios import (
    COLLATERAL_DROPS,
    DELAY_DAYS,
    collateral_drop_scenario,
    inflation_scenario,
    payment_delay_scenario,
    restructuring_scenario,
)

logger = logging.getLogger(__name__)

# Assumed probabilities for an unstressed loan
BASE_REPAYMENT_PROBABILITY = 0.75
BASE_DEFAULT_PROBABILITY = 0.15

ScenarioBuilder = Callable[[StressTestInput, LoanFinancials], StressTestResult]


class StressTestEngine:
    """Runs stress test scenarios on one loan"""

    def __init__(self, loan: StressTestInput):
        """
        Initialize stress test engine

        Args:
            loan: Loan terms plus optional collateral and income data
        """
        self.loan = loan

    def baseline(self) -> LoanFinancials:
        """Financials of the loan with no stress applied"""
        return calculate_loan_financials(
            self.loan.principal, self.loan.interest_rate, self.loan.duration_months
        )

    def scenario_builders(self) -> List[ScenarioBuilder]:
        """
        Scenario generators applicable to this loan, in run order

        Delay scenarios always run. Collateral scenarios need a collateral
        value, the inflation scenario needs both income and expenses.
        Restructuring always runs last.

        Returns:
            List of callables taking (loan, baseline)
        """
        builders: List[ScenarioBuilder] = [
            partial(payment_delay_scenario, delay_days=days) for days in DELAY_DAYS
        ]

        if self.loan.has_collateral:
            builders.extend(
                partial(collateral_drop_scenario, drop_percentage=drop)
                for drop in COLLATERAL_DROPS
            )

        if self.loan.has_income_profile:
            builders.append(inflation_scenario)

        builders.append(restructuring_scenario)
        return builders

    def run(self) -> StressTestOutput:
        """
        Compute the base case, run every applicable scenario and aggregate

        Returns:
            StressTestOutput with scenarios in generation order
        """
        baseline = self.baseline()
        base_case = BaseCase(
            profit=baseline.total_interest,
            repayment_probability=BASE_REPAYMENT_PROBABILITY,
            default_probability=BASE_DEFAULT_PROBABILITY,
        )

        stress_tests = []
        for build in self.scenario_builders():
            result = build(self.loan, baseline)
            logger.debug(
                f"{result.factor.name}: severity={result.factor.severity.value}, "
                f"profit={result.impact.on_profit:+.2f}, default={result.impact.on_default:+.4f}"
            )
            stress_tests.append(result)

        aggregator = RiskAggregator(stress_tests)
        overall_risk = aggregator.overall_risk()

        logger.info(
            f"Ran {len(stress_tests)} stress scenarios "
            f"(critical: {aggregator.critical_count}, high: {aggregator.high_count}) "
            f"-> overall risk {overall_risk.value}"
        )

        return StressTestOutput(
            base_case=base_case,
            stress_tests=stress_tests,
            overall_risk=overall_risk,
            summary=aggregator.summary(overall_risk),
        )

    def to_frame(self) -> pd.DataFrame:
        """
        Run all scenarios and return them as a table

        Returns:
            DataFrame with one row per scenario
        """
        return self.run().to_frame()


def run_stress_tests(loan: StressTestInput) -> StressTestOutput:
    """
    Run comprehensive stress tests on a loan

    Args:
        loan: Loan terms plus optional collateral and income data

    Returns:
        Base case, ordered scenario results, overall risk and summary
    """
    return StressTestEngine(loan).run()
