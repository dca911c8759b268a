"""
Demo script to stress test a loan book

This script demonstrates:
1. Loading settings and the loan book
2. Running the stress battery on each loan
3. Rolling results up across the portfolio
4. Optionally saving markdown reports

Requirements:
- config/loans.yaml (or LOANSTRESS_LOAN_BOOK in .env)
"""

import argparse
import logging
import os
import sys

from loanstress.config import InvalidLoanInputError, load_loan_book, load_settings
from loanstress.metrics import PortfolioStressAnalyzer
from loanstress.reporting import MarkdownReportGenerator
from loanstress.stress import Severity, run_stress_tests


# ANSI color codes for pretty output
class Colors:
    HEADER = "\033[95m"
    OKBLUE = "\033[94m"
    OKCYAN = "\033[96m"
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"


RISK_COLORS = {
    Severity.CRITICAL: Colors.FAIL,
    Severity.HIGH: Colors.WARNING,
    Severity.MEDIUM: Colors.OKCYAN,
    Severity.LOW: Colors.OKGREEN,
}


def print_header(text):
    """Print a colored header"""
    print(f"\n{Colors.HEADER}{Colors.BOLD}{'=' * 60}{Colors.ENDC}")
    print(f"{Colors.HEADER}{Colors.BOLD}{text.center(60)}{Colors.ENDC}")
    print(f"{Colors.HEADER}{Colors.BOLD}{'=' * 60}{Colors.ENDC}\n")


def print_success(text):
    print(f"{Colors.OKGREEN}[OK] {text}{Colors.ENDC}")


def print_info(text):
    print(f"{Colors.OKCYAN}  {text}{Colors.ENDC}")


def print_warning(text):
    print(f"{Colors.WARNING}[WARNING] {text}{Colors.ENDC}")


def print_error(text):
    print(f"{Colors.FAIL}[ERROR] {text}{Colors.ENDC}")


def load_configuration(settings):
    """Load the loan book named in settings"""
    print_header("Loading Configuration")

    try:
        loans = load_loan_book(settings.loan_book)
    except FileNotFoundError as e:
        print_error(str(e))
        sys.exit(1)
    except InvalidLoanInputError as e:
        print_error(f"Invalid loan book: {e}")
        sys.exit(1)

    print_success(f"Loaded {len(loans)} loans from {settings.loan_book}")
    for loan_id, loan in loans.items():
        extras = []
        if loan.has_collateral:
            extras.append("collateral")
        if loan.has_income_profile:
            extras.append("income")
        print_info(
            f"  - {loan_id}: {loan.principal:,.2f} @ {loan.interest_rate}% "
            f"for {loan.duration_months} months {'(' + ', '.join(extras) + ')' if extras else ''}"
        )

    return loans


def stress_test_loan(loan_id, loan):
    """Run and display stress tests for one loan"""
    print_header(f"Stress Testing: {loan_id}")

    output = run_stress_tests(loan)
    color = RISK_COLORS[output.overall_risk]

    print(f"{Colors.BOLD}Base Case:{Colors.ENDC}")
    print_info(f"Expected profit: {output.base_case.profit:,.2f}")
    print_info(f"Repayment probability: {output.base_case.repayment_probability:.0%}")
    print_info(f"Default probability: {output.base_case.default_probability:.0%}")
    print()

    print(f"{Colors.BOLD}Scenarios:{Colors.ENDC}")
    for test in output.stress_tests:
        sev_color = RISK_COLORS[test.factor.severity]
        print(
            f"{sev_color}  [{test.factor.severity.value.upper():>8}] {test.factor.name:<45}"
            f" profit {test.impact.on_profit:>+12,.2f} | default {test.impact.on_default:>+7.1%}{Colors.ENDC}"
        )
        for warning in test.warnings:
            print_warning(f"    {warning}")
    print()

    print(f"{Colors.BOLD}Overall Risk:{Colors.ENDC}")
    print(f"{color}  {output.overall_risk.value.upper()}{Colors.ENDC}")
    print_info(output.summary)

    return output


def main():
    """Main demo function"""
    parser = argparse.ArgumentParser(description="Loan Stress Testing")
    parser.add_argument(
        "--save-report",
        action="store_true",
        help="Save markdown reports for each loan and the portfolio",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show per-scenario debug logging",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    print(f"\n{Colors.HEADER}{Colors.BOLD}")
    print("╔════════════════════════════════════════════════════════════╗")
    print("║                    Loan Stress Testing                     ║")
    print("║               Scenario & Risk Projection Demo              ║")
    print("╚════════════════════════════════════════════════════════════╝")
    print(f"{Colors.ENDC}\n")

    settings = load_settings()

    report_gen = None
    if args.save_report:
        report_gen = MarkdownReportGenerator(settings.reports_dir)
        print_info(f"Reports will be saved to: {report_gen.output_dir}")
        print()

    try:
        loans = load_configuration(settings)

        # Allow selecting loans by id, e.g. ANALYZE_LOANS=LN-001,LN-003
        selected = os.getenv("ANALYZE_LOANS", "all")
        if selected.lower() != "all":
            wanted = {loan_id.strip() for loan_id in selected.split(",")}
            loans = {k: v for k, v in loans.items() if k in wanted}

        for loan_id, loan in loans.items():
            output = stress_test_loan(loan_id, loan)

            if report_gen:
                timestamped_path, latest_path = report_gen.generate_report(loan_id, output)
                if timestamped_path:
                    print_success(f"Saved timestamped report: {timestamped_path}")
                if latest_path:
                    print_success(f"Saved latest report: {latest_path}")

        if len(loans) > 1:
            print_header("Portfolio Summary")

            analyzer = PortfolioStressAnalyzer(loans)
            results = analyzer.to_frame()

            print(results.to_string(index=False))
            print()

            for level, count in analyzer.risk_distribution(results).items():
                print_info(f"{level.upper():<8}: {count} loan(s)")
            print_info(
                f"Principal in HIGH or CRITICAL loans: "
                f"{analyzer.total_exposure_at_risk(results=results):,.2f}"
            )

            if report_gen:
                path = report_gen.generate_portfolio_report(results)
                print_success(f"Saved portfolio report: {path}")

    except KeyboardInterrupt:
        print_warning("\n\nDemo interrupted by user")
        sys.exit(0)


if __name__ == "__main__":
    main()
