"""Persistence façade for test plans and test scenarios."""

from .base import TestPlanStore, TestScenarioStore
from .errors import PersistenceError
from .memory import InMemoryTestPlanStore, InMemoryTestScenarioStore
from .sql import SqlTestPlanStore, SqlTestScenarioStore, create_store_engine

__all__ = [
    "TestPlanStore",
    "TestScenarioStore",
    "PersistenceError",
    "InMemoryTestPlanStore",
    "InMemoryTestScenarioStore",
    "SqlTestPlanStore",
    "SqlTestScenarioStore",
    "create_store_engine",
]
