"""In-process stores for dry runs and tests."""

import copy

from ..lifecycle import Status
from ..plan.models import TestPlan, TestScenario
from .base import TestPlanStore, TestScenarioStore


class InMemoryTestPlanStore(TestPlanStore):
    """Keep test plans in process memory.

    ``history`` records the (plan id, status) of every write in order.
    """

    def __init__(self) -> None:
        self._plans: dict[int, TestPlan] = {}
        self._next_id = 1
        self.history: list[tuple[int, Status]] = []

    def persist_test_plan(self, test_plan: TestPlan) -> TestPlan:
        if test_plan.id is None:
            test_plan.id = self._next_id
            self._next_id += 1
        for scenario in test_plan.test_scenarios:
            scenario.test_plan_id = test_plan.id
        self._plans[test_plan.id] = copy.deepcopy(test_plan)
        self.history.append((test_plan.id, test_plan.status))
        return test_plan

    def get_test_plan(self, test_plan_id: int) -> TestPlan | None:
        plan = self._plans.get(test_plan_id)
        return copy.deepcopy(plan) if plan else None

    def latest_test_run_number(self, deployment_pattern: str | None, infra_parameters: str) -> int:
        numbers = [
            p.test_run_number
            for p in self._plans.values()
            if p.deployment_pattern == deployment_pattern
            and p.infra_parameters == infra_parameters
        ]
        return max(numbers, default=0)


class InMemoryTestScenarioStore(TestScenarioStore):
    """Keep test scenarios in process memory."""

    def __init__(self) -> None:
        self._scenarios: dict[int, TestScenario] = {}
        self._next_id = 1
        self.history: list[tuple[str, Status]] = []

    def persist_test_scenario(self, test_scenario: TestScenario) -> TestScenario:
        if test_scenario.id is None:
            test_scenario.id = self._next_id
            self._next_id += 1
        self._scenarios[test_scenario.id] = copy.deepcopy(test_scenario)
        self.history.append((test_scenario.name, test_scenario.status))
        return test_scenario

    def get_test_scenario(self, test_scenario_id: int) -> TestScenario | None:
        scenario = self._scenarios.get(test_scenario_id)
        return copy.deepcopy(scenario) if scenario else None
