"""Store interfaces the executor persists through."""

from abc import ABC, abstractmethod

from ..plan.models import TestPlan, TestScenario


class TestPlanStore(ABC):
    """Durable sink for test plans."""

    __test__ = False

    @abstractmethod
    def persist_test_plan(self, test_plan: TestPlan) -> TestPlan:
        """Insert or update a test plan and the status of its scenarios.

        Assigns ``id`` on first write.

        Raises:
            PersistenceError: If the write fails.
        """

    @abstractmethod
    def get_test_plan(self, test_plan_id: int) -> TestPlan | None:
        """Get a persisted test plan by id."""

    @abstractmethod
    def latest_test_run_number(self, deployment_pattern: str | None, infra_parameters: str) -> int:
        """Get the highest run number for an infra combination, or 0 if none."""


class TestScenarioStore(ABC):
    """Durable sink for test scenarios and their test cases."""

    __test__ = False

    @abstractmethod
    def persist_test_scenario(self, test_scenario: TestScenario) -> TestScenario:
        """Insert or update a scenario, replacing its test cases.

        Raises:
            PersistenceError: If the write fails.
        """
