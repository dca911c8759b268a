"""Configuration: loan book loading, input validation and environment settings"""

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

import yaml
from dotenv import load_dotenv

from .stress.models import StressTestInput

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_LOAN_BOOK = PROJECT_ROOT / "config" / "loans.yaml"
DEFAULT_REPORTS_DIR = PROJECT_ROOT / "reports"

OPTIONAL_AMOUNTS = ("collateral_value", "monthly_income", "monthly_expenses")


class InvalidLoanInputError(ValueError):
    """Raised when loan terms cannot be stress tested"""


@dataclass
class Settings:
    """Runtime settings resolved from the environment"""

    loan_book: Path
    reports_dir: Path


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Resolve settings from environment variables (and .env if present)

    Args:
        env_file: Explicit .env path (default: search from working directory)

    Returns:
        Settings with LOANSTRESS_LOAN_BOOK and LOANSTRESS_REPORTS_DIR applied
    """
    load_dotenv(dotenv_path=env_file)

    return Settings(
        loan_book=Path(os.getenv("LOANSTRESS_LOAN_BOOK", str(DEFAULT_LOAN_BOOK))),
        reports_dir=Path(os.getenv("LOANSTRESS_REPORTS_DIR", str(DEFAULT_REPORTS_DIR))),
    )


def validate_input(loan: StressTestInput, loan_id: str = "loan") -> StressTestInput:
    """
    Check loan terms before they reach the engine

    Args:
        loan: Loan input to check
        loan_id: Identifier used in error messages

    Returns:
        The same input, unchanged

    Raises:
        InvalidLoanInputError: If any term is out of range
    """
    for name in ("principal", "interest_rate") + OPTIONAL_AMOUNTS:
        value = getattr(loan, name)
        if value is not None and not math.isfinite(value):
            raise InvalidLoanInputError(f"{loan_id}: {name} must be a finite number, got {value}")

    if loan.principal <= 0:
        raise InvalidLoanInputError(f"{loan_id}: principal must be positive, got {loan.principal}")

    if loan.interest_rate < 0:
        raise InvalidLoanInputError(
            f"{loan_id}: interest_rate must be non-negative, got {loan.interest_rate}"
        )

    if isinstance(loan.duration_months, bool) or not isinstance(loan.duration_months, int):
        raise InvalidLoanInputError(
            f"{loan_id}: duration_months must be an integer, got {loan.duration_months!r}"
        )

    if loan.duration_months <= 0:
        raise InvalidLoanInputError(
            f"{loan_id}: duration_months must be positive, got {loan.duration_months}"
        )

    for name in OPTIONAL_AMOUNTS:
        value = getattr(loan, name)
        if value is not None and value < 0:
            raise InvalidLoanInputError(f"{loan_id}: {name} must be non-negative, got {value}")

    return loan


def parse_loan(entry: Dict, loan_id: str) -> StressTestInput:
    """Build a validated StressTestInput from one loan book entry"""
    try:
        loan = StressTestInput(
            principal=float(entry["principal"]),
            interest_rate=float(entry["interest_rate"]),
            duration_months=entry["duration_months"],
            **{
                name: float(entry[name])
                for name in OPTIONAL_AMOUNTS
                if entry.get(name) is not None
            },
        )
    except KeyError as e:
        raise InvalidLoanInputError(f"{loan_id}: missing required field {e}") from e
    except (TypeError, ValueError) as e:
        raise InvalidLoanInputError(f"{loan_id}: {e}") from e

    return validate_input(loan, loan_id)


def load_loan_book(path: Path = None) -> Dict[str, StressTestInput]:
    """
    Load loans to stress test from a YAML file

    Expected layout:
        loans:
          - id: LN-001
            principal: 10000
            interest_rate: 15
            duration_months: 12
            collateral_value: 8000   # optional

    Args:
        path: YAML file (default: config/loans.yaml)

    Returns:
        Validated loan inputs keyed by loan id
    """
    if path is None:
        path = DEFAULT_LOAN_BOOK

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Loan book not found: {path}")

    with open(path, "r") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise InvalidLoanInputError(f"{path}: expected a mapping with a 'loans' list at the top level")

    entries = config.get("loans") or []
    if not isinstance(entries, list):
        raise InvalidLoanInputError(f"{path}: 'loans' must be a list")

    loans = {}
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise InvalidLoanInputError(f"{path}: loan #{index + 1} must be a mapping, got {entry!r}")
        loan_id = str(entry.get("id", f"loan-{index + 1}"))
        if loan_id in loans:
            raise InvalidLoanInputError(f"Duplicate loan id in {path}: {loan_id}")
        loans[loan_id] = parse_loan(entry, loan_id)

    logger.info(f"Loaded {len(loans)} loans from {path}")
    return loans
