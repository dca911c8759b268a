"""
Risk Aggregation - Rolls scenario severities up into an overall risk verdict
"""

from typing import List, Optional

from ..stress.models import Severity, StressTestResult

# Number of high-severity scenarios that makes a loan high risk overall
HIGH_RISK_MIN_HIGH_COUNT = 3


class RiskAggregator:
    """Reduces a list of scenario results to an overall risk band and summary"""

    def __init__(self, results: List[StressTestResult]):
        """
        Initialize risk aggregator

        Args:
            results: Scenario results that were actually generated
        """
        self.results = results

    @property
    def critical_count(self) -> int:
        """Number of scenarios with critical severity"""
        return sum(1 for r in self.results if r.factor.severity is Severity.CRITICAL)

    @property
    def high_count(self) -> int:
        """Number of scenarios with high severity"""
        return sum(1 for r in self.results if r.factor.severity is Severity.HIGH)

    def overall_risk(self) -> Severity:
        """
        Classify the loan from its scenario severities

        Any critical scenario makes the loan critical. Otherwise three or
        more high scenarios make it high, one or two make it medium.

        Returns:
            Overall risk band
        """
        if self.critical_count > 0:
            return Severity.CRITICAL
        elif self.high_count >= HIGH_RISK_MIN_HIGH_COUNT:
            return Severity.HIGH
        elif self.high_count >= 1:
            return Severity.MEDIUM
        return Severity.LOW

    def summary(self, overall_risk: Optional[Severity] = None) -> str:
        """
        Human-readable verdict for the overall risk band

        Args:
            overall_risk: Band to describe (if None, computes it)

        Returns:
            Summary sentence(s)
        """
        if overall_risk is None:
            overall_risk = self.overall_risk()

        if overall_risk is Severity.CRITICAL:
            return (
                f"CRITICAL RISK: {self.critical_count} critical stress factors detected. "
                "Loan is highly vulnerable to adverse conditions. "
                "Consider reducing loan amount or requiring additional safeguards."
            )
        elif overall_risk is Severity.HIGH:
            return (
                f"HIGH RISK: {self.high_count} high-severity stress factors identified. "
                "Loan shows vulnerability to adverse conditions. "
                "Monitor closely and consider risk mitigation strategies."
            )
        elif overall_risk is Severity.MEDIUM:
            return (
                "MODERATE RISK: Some vulnerability to stress factors detected. "
                "Loan should be monitored but is generally resilient to normal adverse conditions."
            )
        return (
            "LOW RISK: Loan demonstrates resilience to stress factors. "
            "Low vulnerability to adverse conditions."
        )

    def get_risk_color(self, overall_risk: Optional[Severity] = None) -> str:
        """
        Get color code for risk level (for UI display)

        Args:
            overall_risk: Band to colour (if None, computes it)

        Returns:
            Color name (red/orange/yellow/green)
        """
        if overall_risk is None:
            overall_risk = self.overall_risk()

        color_map = {
            Severity.CRITICAL: "red",
            Severity.HIGH: "orange",
            Severity.MEDIUM: "yellow",
            Severity.LOW: "green",
        }

        return color_map.get(overall_risk, "gray")


def aggregate_risk(results: List[StressTestResult]) -> Severity:
    """Overall risk band for a list of scenario results"""
    return RiskAggregator(results).overall_risk()


def generate_summary(results: List[StressTestResult], overall_risk: Severity) -> str:
    """Summary text for the given results and overall risk band"""
    return RiskAggregator(results).summary(overall_risk)
