"""
Tests for configuration loading and input validation
"""

from pathlib import Path

import pytest
import yaml

from loanstress.config import (
    DEFAULT_LOAN_BOOK,
    DEFAULT_REPORTS_DIR,
    InvalidLoanInputError,
    load_loan_book,
    load_settings,
    parse_loan,
    validate_input,
)
from loanstress.stress.models import StressTestInput

ENV_VARS = ("LOANSTRESS_LOAN_BOOK", "LOANSTRESS_REPORTS_DIR")


@pytest.fixture
def write_book(tmp_path):
    """Write a loan book YAML file and return its path"""

    def _write(data):
        path = tmp_path / "loans.yaml"
        with open(path, "w") as f:
            yaml.safe_dump(data, f)
        return path

    return _write


@pytest.fixture
def clean_env(monkeypatch):
    """Ensure settings variables are unset and restored afterwards"""
    for name in ENV_VARS:
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)
    return monkeypatch


class TestLoadLoanBook:
    """Test loan book loading"""

    def test_loads_loans(self, write_book):
        """Test required and optional fields are read"""
        path = write_book({
            "loans": [
                {"id": "A", "principal": 10000, "interest_rate": 15, "duration_months": 12},
                {
                    "id": "B",
                    "principal": 5000,
                    "interest_rate": 20,
                    "duration_months": 6,
                    "collateral_value": 4000,
                    "monthly_income": 3000,
                    "monthly_expenses": 1000,
                },
            ]
        })
        loans = load_loan_book(path)

        assert list(loans) == ["A", "B"]
        assert loans["A"] == StressTestInput(10000.0, 15.0, 12)
        assert loans["B"].collateral_value == 4000.0
        assert loans["B"].has_income_profile

    def test_missing_id_gets_index(self, write_book):
        """Test loans without id are numbered"""
        path = write_book({
            "loans": [{"principal": 1000, "interest_rate": 10, "duration_months": 3}]
        })

        assert list(load_loan_book(path)) == ["loan-1"]

    def test_empty_file(self, tmp_path):
        """Test an empty file yields no loans"""
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_loan_book(path) == {}

    def test_missing_file(self, tmp_path):
        """Test a missing loan book raises FileNotFoundError"""
        with pytest.raises(FileNotFoundError):
            load_loan_book(tmp_path / "nope.yaml")

    def test_duplicate_ids(self, write_book):
        """Test duplicate ids are rejected"""
        entry = {"id": "A", "principal": 1000, "interest_rate": 10, "duration_months": 3}
        path = write_book({"loans": [entry, entry]})

        with pytest.raises(InvalidLoanInputError, match="Duplicate"):
            load_loan_book(path)

    def test_invalid_entry_names_loan(self, write_book):
        """Test validation errors mention the loan id"""
        path = write_book({
            "loans": [{"id": "BAD", "principal": -5, "interest_rate": 10, "duration_months": 3}]
        })

        with pytest.raises(InvalidLoanInputError, match="BAD"):
            load_loan_book(path)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("principal", ".nan"),
            ("principal", ".inf"),
            ("interest_rate", ".nan"),
            ("collateral_value", ".nan"),
            ("monthly_income", ".inf"),
            ("monthly_expenses", "-.inf"),
        ],
    )
    def test_non_finite_amounts_rejected(self, tmp_path, field, value):
        """Test NaN and infinite amounts in the book are rejected"""
        entry = {
            "principal": "10000",
            "interest_rate": "15",
            "duration_months": "12",
            "monthly_income": "3000",
            "monthly_expenses": "1000",
        }
        entry[field] = value
        path = tmp_path / "loans.yaml"
        path.write_text(
            "loans:\n  - id: LN-NAN\n"
            + "".join(f"    {key}: {val}\n" for key, val in entry.items())
        )

        with pytest.raises(InvalidLoanInputError, match=f"LN-NAN: {field} must be a finite number"):
            load_loan_book(path)

    def test_entry_not_a_mapping(self, tmp_path):
        """Test a bare string entry is rejected with a loan book error"""
        path = tmp_path / "loans.yaml"
        path.write_text("loans:\n  - LN-001\n")

        with pytest.raises(InvalidLoanInputError, match="loan #1 must be a mapping"):
            load_loan_book(path)

    def test_top_level_list(self, tmp_path):
        """Test a file whose top level is a list is rejected"""
        path = tmp_path / "loans.yaml"
        path.write_text("- id: LN-001\n  principal: 1000\n")

        with pytest.raises(InvalidLoanInputError, match="top level"):
            load_loan_book(path)

    def test_loans_not_a_list(self, write_book):
        """Test a 'loans' mapping instead of a list is rejected"""
        path = write_book({"loans": {"id": "A", "principal": 1000}})

        with pytest.raises(InvalidLoanInputError, match="must be a list"):
            load_loan_book(path)

    def test_default_book_is_valid(self):
        """Test the shipped sample loan book loads"""
        loans = load_loan_book()

        assert len(loans) >= 1
        assert DEFAULT_LOAN_BOOK.name == "loans.yaml"


class TestParseLoan:
    """Test single entry parsing"""

    def test_missing_field(self):
        """Test missing required field"""
        with pytest.raises(InvalidLoanInputError, match="principal"):
            parse_loan({"interest_rate": 10, "duration_months": 3}, "X")

    def test_non_numeric(self):
        """Test non-numeric amount"""
        with pytest.raises(InvalidLoanInputError):
            parse_loan(
                {"principal": "lots", "interest_rate": 10, "duration_months": 3}, "X"
            )

    def test_null_optional_fields_ignored(self):
        """Test explicit nulls leave optional fields absent"""
        loan = parse_loan(
            {
                "principal": 1000,
                "interest_rate": 10,
                "duration_months": 3,
                "collateral_value": None,
            },
            "X",
        )

        assert not loan.has_collateral

    def test_is_an_error_subclass_of_value_error(self):
        """Test callers can catch ValueError"""
        with pytest.raises(ValueError):
            parse_loan({"principal": 0, "interest_rate": 10, "duration_months": 3}, "X")


class TestValidateInput:
    """Test input validation"""

    def test_valid_input_returned(self):
        """Test a valid input passes through unchanged"""
        loan = StressTestInput(1000, 0, 1, collateral_value=0)
        assert validate_input(loan) is loan

    @pytest.mark.parametrize(
        "loan,message",
        [
            (StressTestInput(0, 10, 12), "principal"),
            (StressTestInput(-100, 10, 12), "principal"),
            (StressTestInput(1000, -1, 12), "interest_rate"),
            (StressTestInput(1000, 10, 0), "duration_months"),
            (StressTestInput(1000, 10, 12.5), "duration_months"),
            (StressTestInput(1000, 10, True), "duration_months"),
            (StressTestInput(1000, 10, 12, collateral_value=-1), "collateral_value"),
            (StressTestInput(1000, 10, 12, monthly_income=-1), "monthly_income"),
            (StressTestInput(1000, 10, 12, monthly_expenses=-1), "monthly_expenses"),
            (StressTestInput(float("nan"), 10, 12), "principal must be a finite"),
            (StressTestInput(1000, float("inf"), 12), "interest_rate must be a finite"),
            (StressTestInput(1000, 10, 12, collateral_value=float("nan")), "collateral_value"),
        ],
    )
    def test_rejects(self, loan, message):
        """Test out-of-range terms are rejected"""
        with pytest.raises(InvalidLoanInputError, match=message):
            validate_input(loan)


class TestSettings:
    """Test environment settings"""

    def test_defaults(self, clean_env, tmp_path):
        """Test defaults when nothing is set"""
        settings = load_settings(env_file=tmp_path / "missing.env")

        assert settings.loan_book == DEFAULT_LOAN_BOOK
        assert settings.reports_dir == DEFAULT_REPORTS_DIR

    def test_environment_overrides(self, clean_env, tmp_path):
        """Test environment variables override defaults"""
        clean_env.setenv("LOANSTRESS_LOAN_BOOK", str(tmp_path / "book.yaml"))
        clean_env.setenv("LOANSTRESS_REPORTS_DIR", str(tmp_path / "out"))

        settings = load_settings(env_file=tmp_path / "missing.env")

        assert settings.loan_book == tmp_path / "book.yaml"
        assert settings.reports_dir == tmp_path / "out"

    def test_dotenv_file(self, clean_env, tmp_path):
        """Test values are read from a .env file"""
        env_file = tmp_path / ".env"
        env_file.write_text(f"LOANSTRESS_REPORTS_DIR={tmp_path / 'from-dotenv'}\n")

        settings = load_settings(env_file=env_file)

        assert settings.reports_dir == Path(tmp_path / "from-dotenv")
