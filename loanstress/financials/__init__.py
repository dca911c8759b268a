"""Loan financials"""

from .calculator import LoanFinancials, calculate_loan_financials

__all__ = ["LoanFinancials", "calculate_loan_financials"]
