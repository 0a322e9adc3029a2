"""Test plan execution pipeline."""

from .change_sets import ConfigChangeSetApplier
from .errors import TestPlanExecutorError
from .executor import TestPlanExecutor, aggregate_status, scenario_status
from .product import ProductTestPlanRunner

__all__ = [
    "ConfigChangeSetApplier",
    "TestPlanExecutorError",
    "TestPlanExecutor",
    "aggregate_status",
    "scenario_status",
    "ProductTestPlanRunner",
]
