"""Loan stress-testing and risk-projection engine"""

from .stress import StressTestEngine, run_stress_tests

__all__ = ["StressTestEngine", "run_stress_tests"]
