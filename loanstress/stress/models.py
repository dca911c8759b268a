"""
Stress Testing Models - Data structures for loan stress test inputs and results
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

import pandas as pd


class Impact(str, Enum):
    """Direction of a scenario's effect on the lender"""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Severity(str, Enum):
    """Risk tier of a single scenario, or of a loan overall"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Ordinal position (low = 0, critical = 3)"""
        return _SEVERITY_ORDER.index(self)


_SEVERITY_ORDER = [Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL]


@dataclass(frozen=True)
class StressTestInput:
    """Loan terms and optional borrower/collateral data for a stress run"""

    principal: float
    interest_rate: float  # annual, in percent
    duration_months: int
    collateral_value: Optional[float] = None
    monthly_income: Optional[float] = None
    monthly_expenses: Optional[float] = None

    @property
    def has_collateral(self) -> bool:
        """Collateral is supplied and non-zero"""
        return bool(self.collateral_value)

    @property
    def has_income_profile(self) -> bool:
        """Income and expenses are both supplied and non-zero"""
        return bool(self.monthly_income) and bool(self.monthly_expenses)


@dataclass(frozen=True)
class StressFactor:
    """Descriptive tag for one scenario"""

    name: str
    description: str
    impact: Impact
    severity: Severity


@dataclass(frozen=True)
class ScenarioImpact:
    """Quantified effect of a scenario relative to the base case"""

    on_profit: float
    on_repayment: float  # change in repayment probability
    on_default: float  # change in default probability
    financial_impact: float


@dataclass
class StressTestResult:
    """Outcome of a single stress scenario"""

    factor: StressFactor
    impact: ScenarioImpact
    warnings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    @property
    def severity(self) -> Severity:
        return self.factor.severity

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization"""
        return {
            "factor": {
                "name": self.factor.name,
                "description": self.factor.description,
                "impact": self.factor.impact.value,
                "severity": self.factor.severity.value,
            },
            "impact": {
                "on_profit": self.impact.on_profit,
                "on_repayment": self.impact.on_repayment,
                "on_default": self.impact.on_default,
                "financial_impact": self.impact.financial_impact,
            },
            "warnings": list(self.warnings),
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class BaseCase:
    """Expected profit and probabilities with no stress applied"""

    profit: float
    repayment_probability: float
    default_probability: float


@dataclass
class StressTestOutput:
    """Combined result of a stress run on one loan"""

    base_case: BaseCase
    stress_tests: List[StressTestResult]
    overall_risk: Severity
    summary: str

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization"""
        return {
            "base_case": {
                "profit": self.base_case.profit,
                "repayment_probability": self.base_case.repayment_probability,
                "default_probability": self.base_case.default_probability,
            },
            "stress_tests": [test.to_dict() for test in self.stress_tests],
            "overall_risk": self.overall_risk.value,
            "summary": self.summary,
        }

    def to_frame(self) -> pd.DataFrame:
        """
        Tabulate scenarios, one row each, in generation order

        Returns:
            DataFrame with scenario name, severity, impact and probability shifts
        """
        rows = [
            {
                "scenario": test.factor.name,
                "severity": test.factor.severity.value,
                "impact": test.factor.impact.value,
                "on_profit": test.impact.on_profit,
                "on_repayment": test.impact.on_repayment,
                "on_default": test.impact.on_default,
                "stressed_profit": self.base_case.profit + test.impact.on_profit,
                "stressed_default_probability": self.base_case.default_probability
                + test.impact.on_default,
                "warnings": len(test.warnings),
            }
            for test in self.stress_tests
        ]

        return pd.DataFrame(
            rows,
            columns=[
                "scenario",
                "severity",
                "impact",
                "on_profit",
                "on_repayment",
                "on_default",
                "stressed_profit",
                "stressed_default_probability",
                "warnings",
            ],
        )

    def summary_text(self) -> str:
        """Generate human-readable summary"""
        text = f"""
Loan Stress Test
----------------------------------------
Base Profit: {self.base_case.profit:,.2f}
Base Repayment Probability: {self.base_case.repayment_probability:.0%}
Base Default Probability: {self.base_case.default_probability:.0%}
Overall Risk: {self.overall_risk.value.upper()}
"""
        for test in self.stress_tests:
            text += (
                f"  [{test.factor.severity.value:>8}] {test.factor.name}: "
                f"profit {test.impact.on_profit:+,.2f}, default {test.impact.on_default:+.1%}\n"
            )

        text += f"\n{self.summary}\n"
        return text
