"""Stress testing modules"""

from .engine import StressTestEngine, run_stress_tests
from .models import (
    BaseCase,
    Impact,
    ScenarioImpact,
    Severity,
    StressFactor,
    StressTestInput,
    StressTestOutput,
    StressTestResult,
)

__all__ = [
    "StressTestEngine",
    "run_stress_tests",
    "BaseCase",
    "Impact",
    "ScenarioImpact",
    "Severity",
    "StressFactor",
    "StressTestInput",
    "StressTestOutput",
    "StressTestResult",
]
