"""
Loan Financials Calculator - Interest, totals and monthly payment for a loan
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LoanFinancials:
    """Financial figures for a loan over its full term"""

    principal: float
    interest_rate: float
    monthly_payment: float
    total_interest: float
    total_amount: float
    profit_margin: float

    @property
    def total_profit(self) -> float:
        """Lender profit over the term (all interest is profit)"""
        return self.total_interest

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {
            "principal": self.principal,
            "interest_rate": self.interest_rate,
            "monthly_payment": self.monthly_payment,
            "total_interest": self.total_interest,
            "total_amount": self.total_amount,
            "total_profit": self.total_profit,
            "profit_margin": self.profit_margin,
        }


def monthly_annuity_payment(principal: float, annual_rate_pct: float, duration_months: int) -> float:
    """
    Fixed monthly instalment under a reducing-balance schedule

    Args:
        principal: Amount lent
        annual_rate_pct: Annual interest rate in percent (e.g., 15 for 15%)
        duration_months: Number of monthly instalments

    Returns:
        Monthly payment (not rounded)
    """
    monthly_rate = annual_rate_pct / 100 / 12

    if monthly_rate <= 0:
        return principal / duration_months

    growth = (1 + monthly_rate) ** duration_months
    return principal * (monthly_rate * growth) / (growth - 1)


def calculate_loan_financials(
    principal: float, annual_interest_rate_pct: float, duration_months: int
) -> LoanFinancials:
    """
    Calculate interest, totals and monthly payment for a loan

    Total interest is charged flat on the principal for the whole term
    (principal * rate * years), so it never decreases as the term grows.
    The monthly payment uses the standard amortization formula.

    Args:
        principal: Amount lent
        annual_interest_rate_pct: Annual interest rate in percent
        duration_months: Loan term in months

    Returns:
        LoanFinancials for the loan
    """
    total_interest = principal * (annual_interest_rate_pct / 100) * (duration_months / 12)
    total_amount = principal + total_interest
    monthly_payment = monthly_annuity_payment(principal, annual_interest_rate_pct, duration_months)
    profit_margin = (total_interest / principal) * 100

    return LoanFinancials(
        principal=principal,
        interest_rate=annual_interest_rate_pct,
        monthly_payment=round(monthly_payment, 2),
        total_interest=total_interest,
        total_amount=total_amount,
        profit_margin=round(profit_margin, 2),
    )
