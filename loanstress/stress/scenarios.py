"""
Stress Scenarios - Payment delay, collateral devaluation, income shock and restructuring

Every scenario is a pure function of the loan input and its baseline
financials. Heuristic constants are grouped per scenario family.
"""

import math

from ..financials.calculator import LoanFinancials, calculate_loan_financials
from .models import (
    Impact,
    ScenarioImpact,
    Severity,
    StressFactor,
    StressTestInput,
    StressTestResult,
)

CURRENCY = "ZMW"

# ====== Payment Delay ======

DELAY_DAYS = (7, 14, 30)
LATE_FEE_RATE = 0.05  # share of one monthly payment
PENALTY_RATE_PCT = 0.02  # percent of principal per 30 days late
LATE_PAYMENT_DIVISOR = 3  # one in three payments assumed late
DELAY_DEFAULT_SCALER = 0.05
DELAY_DEFAULT_CAP = 0.3
DELAY_REPAYMENT_FACTOR = 0.8

# ====== Collateral Devaluation ======

COLLATERAL_DROPS = (0.10, 0.20, 0.40)
QUICK_SALE_RECOVERY = 0.65
COLLATERAL_DEFAULT_SCALER = 0.15
COLLATERAL_REPAYMENT_FACTOR = 0.5

# ====== Income / Inflation Shock ======

INCOME_REDUCTION = 0.10
PAYMENT_RATIO_STRESSED = 0.8
STRESSED_DEFAULT_INCREASE = 0.2
INFLATION_DEFAULT_CAP = 0.25
PAYMENT_RATIO_FLOOR = 0.3
INFLATION_DEFAULT_SLOPE = 0.25
INFLATION_REPAYMENT_FACTOR = 0.8
INFLATION_PROFIT_FACTOR = 0.3
PAYMENT_RATIO_CRITICAL = 0.9
PAYMENT_RATIO_HIGH = 0.7

# ====== Restructuring ======

RESTRUCTURE_MULTIPLIER = 1.25
RESTRUCTURE_REPAYMENT_GAIN = 0.10
RESTRUCTURE_DEFAULT_RELIEF = 0.05


def format_amount(amount: float) -> str:
    """Thousands-separated amount with at most three decimals, trailing zeros dropped"""
    text = f"{amount:,.3f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def delay_severity(delay_days: int) -> Severity:
    """Severity tier for a payment delay of the given length"""
    if delay_days >= 30:
        return Severity.CRITICAL
    elif delay_days >= 14:
        return Severity.HIGH
    elif delay_days >= 7:
        return Severity.MEDIUM
    return Severity.LOW


def payment_delay_scenario(
    loan: StressTestInput, baseline: LoanFinancials, delay_days: int
) -> StressTestResult:
    """
    Stress the loan with every payment arriving late

    Late fees and penalty interest add revenue, but the delay raises the
    probability of default.

    Args:
        loan: Loan under test
        baseline: Financials of the unstressed loan
        delay_days: Days each payment is delayed

    Returns:
        StressTestResult for the delay scenario
    """
    late_fee = baseline.monthly_payment * LATE_FEE_RATE
    penalty_interest = loan.principal * (PENALTY_RATE_PCT / 100) * (delay_days / 30)

    additional_revenue = late_fee + penalty_interest
    on_profit = additional_revenue * (loan.duration_months / LATE_PAYMENT_DIVISOR)

    default_increase = min(DELAY_DEFAULT_CAP, (delay_days / 30) * DELAY_DEFAULT_SCALER)
    repayment_decrease = default_increase * DELAY_REPAYMENT_FACTOR

    warnings = []
    if delay_days >= 30:
        warnings.append(
            f"Severe payment delays ({delay_days} days) significantly increase default risk"
        )
    elif delay_days >= 14:
        warnings.append(f"Moderate delays ({delay_days} days) may impact cash flow")

    if delay_days >= 14:
        recommendations = [
            "Consider restructuring loan terms",
            "Implement early warning system for late payments",
            "Review borrower financial capacity",
        ]
    else:
        recommendations = ["Monitor payment patterns closely"]

    return StressTestResult(
        factor=StressFactor(
            name=f"Payment Delay +{delay_days} days",
            description=f"All payments delayed by {delay_days} days",
            impact=Impact.NEGATIVE,
            severity=delay_severity(delay_days),
        ),
        impact=ScenarioImpact(
            on_profit=on_profit,
            on_repayment=-repayment_decrease,
            on_default=default_increase,
            financial_impact=on_profit,
        ),
        warnings=warnings,
        recommendations=recommendations,
    )


def collateral_severity(drop_percentage: float) -> Severity:
    """Severity tier for a collateral value drop (never low)"""
    if drop_percentage >= 0.40:
        return Severity.CRITICAL
    elif drop_percentage >= 0.20:
        return Severity.HIGH
    return Severity.MEDIUM


def recovery_loss(collateral_value: float, total_owed: float, drop_percentage: float = 0.0) -> float:
    """
    Loss on default after a quick sale of the (devalued) collateral

    Args:
        collateral_value: Stated collateral value
        total_owed: Principal plus interest outstanding
        drop_percentage: Collateral devaluation as decimal (e.g., 0.20)

    Returns:
        Unrecovered amount (>= 0)
    """
    quick_sale_value = collateral_value * (1 - drop_percentage) * QUICK_SALE_RECOVERY
    recovery = min(quick_sale_value, total_owed)
    return max(0.0, total_owed - recovery)


def collateral_drop_scenario(
    loan: StressTestInput, baseline: LoanFinancials, drop_percentage: float
) -> StressTestResult:
    """
    Stress the loan with a fall in collateral market value

    Args:
        loan: Loan under test (collateral_value must be set)
        baseline: Financials of the unstressed loan
        drop_percentage: Collateral devaluation as decimal (e.g., 0.10 for -10%)

    Returns:
        StressTestResult for the collateral scenario
    """
    collateral_value = loan.collateral_value or 0.0
    total_owed = baseline.total_amount

    original_loss = recovery_loss(collateral_value, total_owed)
    new_loss = recovery_loss(collateral_value, total_owed, drop_percentage)
    additional_loss = abs(original_loss - new_loss)

    default_increase = drop_percentage * COLLATERAL_DEFAULT_SCALER
    drop_label = f"{drop_percentage * 100:.0f}%"

    return StressTestResult(
        factor=StressFactor(
            name=f"Collateral Price Drop -{drop_label}",
            description=f"Collateral value decreases by {drop_label}",
            impact=Impact.NEGATIVE,
            severity=collateral_severity(drop_percentage),
        ),
        impact=ScenarioImpact(
            on_profit=-additional_loss,
            on_repayment=-(default_increase * COLLATERAL_REPAYMENT_FACTOR),
            on_default=default_increase,
            financial_impact=-additional_loss,
        ),
        warnings=[
            f"Collateral value reduced by {drop_label} reduces recovery in default scenario",
            f"Estimated additional loss: {format_amount(additional_loss)} {CURRENCY}",
        ],
        recommendations=[
            "Monitor collateral market value regularly",
            "Consider requiring additional collateral",
            "Review LTV ratio and adjust if necessary",
        ],
    )


def payment_ratio(monthly_payment: float, disposable_income: float) -> float:
    """
    Share of disposable income consumed by the monthly payment

    Non-positive disposable income is treated as the worst case (1.0).
    """
    if disposable_income > 0:
        return monthly_payment / disposable_income
    return 1.0


def inflation_severity(ratio: float) -> Severity:
    """Severity tier for a post-shock payment ratio (never low)"""
    if ratio > PAYMENT_RATIO_CRITICAL:
        return Severity.CRITICAL
    elif ratio > PAYMENT_RATIO_HIGH:
        return Severity.HIGH
    return Severity.MEDIUM


def inflation_scenario(
    loan: StressTestInput,
    baseline: LoanFinancials,
    income_reduction: float = INCOME_REDUCTION,
) -> StressTestResult:
    """
    Stress the borrower's income and measure repayment capacity

    The default increase is left signed: a very low payment ratio (below
    0.3) yields a negative default delta.

    Args:
        loan: Loan under test (monthly_income and monthly_expenses must be set)
        baseline: Financials of the unstressed loan
        income_reduction: Fractional income cut (e.g., 0.10 for -10%)

    Returns:
        StressTestResult for the income shock scenario
    """
    reduced_income = (loan.monthly_income or 0.0) * (1 - income_reduction)
    disposable_income = reduced_income - (loan.monthly_expenses or 0.0)
    ratio = payment_ratio(baseline.monthly_payment, disposable_income)

    if ratio > PAYMENT_RATIO_STRESSED:
        raw_increase = STRESSED_DEFAULT_INCREASE
    else:
        raw_increase = (ratio - PAYMENT_RATIO_FLOOR) * INFLATION_DEFAULT_SLOPE
    default_increase = min(INFLATION_DEFAULT_CAP, raw_increase)
    on_profit = -(baseline.total_interest * default_increase * INFLATION_PROFIT_FACTOR)

    if ratio > PAYMENT_RATIO_STRESSED:
        warnings = [
            f"Payment now represents {ratio * 100:.0f}% of disposable income - high risk"
        ]
    else:
        warnings = ["Monitor borrower financial situation"]

    return StressTestResult(
        factor=StressFactor(
            name=f"Inflation Impact (-{income_reduction * 100:.0f}% disposable income)",
            description="Reduced purchasing power affects borrower repayment capacity",
            impact=Impact.NEGATIVE,
            severity=inflation_severity(ratio),
        ),
        impact=ScenarioImpact(
            on_profit=on_profit,
            on_repayment=-(default_increase * INFLATION_REPAYMENT_FACTOR),
            on_default=default_increase,
            financial_impact=on_profit,
        ),
        warnings=warnings,
        recommendations=[
            "Consider flexible repayment options",
            "Offer payment restructuring if needed",
            "Monitor economic indicators",
        ],
    )


def restructured_duration(duration_months: int, multiplier: float = RESTRUCTURE_MULTIPLIER) -> int:
    """Extended term in months, rounding halves up (2 * 1.25 -> 3)"""
    return int(math.floor(duration_months * multiplier + 0.5))


def restructuring_scenario(
    loan: StressTestInput,
    baseline: LoanFinancials,
    multiplier: float = RESTRUCTURE_MULTIPLIER,
) -> StressTestResult:
    """Extend the loan term and measure the extra interest earned"""
    new_duration = restructured_duration(loan.duration_months, multiplier)
    restructured = calculate_loan_financials(loan.principal, loan.interest_rate, new_duration)

    profit_increase = restructured.total_interest - baseline.total_interest

    return StressTestResult(
        factor=StressFactor(
            name=f"Loan Restructuring (+{(multiplier - 1) * 100:.0f}% duration)",
            description=f"Loan duration extended to {new_duration} months",
            impact=Impact.POSITIVE,
            severity=Severity.LOW,
        ),
        impact=ScenarioImpact(
            on_profit=profit_increase,
            on_repayment=RESTRUCTURE_REPAYMENT_GAIN,
            on_default=-RESTRUCTURE_DEFAULT_RELIEF,
            financial_impact=profit_increase,
        ),
        warnings=[],
        recommendations=[
            "Restructuring improves cash flow but increases total interest",
            "Consider this option for struggling borrowers",
        ],
    )
