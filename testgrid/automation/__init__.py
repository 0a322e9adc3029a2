"""Scenario execution and result parsing."""

from .errors import TestAutomationError
from .executor import ScenarioExecutor
from .parsers import collect_test_cases, parse_jmeter_results, parse_junit_results

__all__ = [
    "TestAutomationError",
    "ScenarioExecutor",
    "collect_test_cases",
    "parse_jmeter_results",
    "parse_junit_results",
]
