"""Generate test plans from a parsed test configuration."""

import json
import logging
from typing import TYPE_CHECKING, Any

from ..config.errors import ConfigValidationError
from ..config.models import TestConfig
from .models import TestPlan, TestScenario

if TYPE_CHECKING:
    from ..persistence.base import TestPlanStore

logger = logging.getLogger(__name__)


def serialize_infra_parameters(infra_params: dict[str, Any]) -> str:
    """Serialize an infra parameter combination into its equality key."""
    return json.dumps(infra_params, sort_keys=True)


def generate_test_plan(
    config: TestConfig,
    infra_params: dict[str, Any] | None = None,
    infra_repo_dir: str = ".",
    deployment_repo_dir: str = ".",
    scenario_repo_dir: str = ".",
    test_plan_store: "TestPlanStore | None" = None,
) -> TestPlan:
    """Create a PENDING test plan for one infra parameter combination.

    The run number continues the sequence of earlier plans with the same
    deployment pattern and infra parameters found in ``test_plan_store``.

    Args:
        config: The parsed test configuration.
        infra_params: The infra combination; defaults to the first declared one.
        infra_repo_dir: Location of the infrastructure repository.
        deployment_repo_dir: Location of the deployment repository.
        scenario_repo_dir: Location of the scenario repository.
        test_plan_store: Store used to look up earlier run numbers.

    Returns:
        The generated TestPlan with one PENDING scenario per declared scenario.

    Raises:
        ConfigValidationError: If a scenario name is declared twice.
    """
    if infra_params is None:
        infra_params = config.infra_params[0] if config.infra_params else {}

    names = config.scenario_config.get_scenario_names()
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ConfigValidationError(
            f"Scenario names must be unique, duplicated: {', '.join(duplicates)}",
            [
                {"loc": "scenarioConfig.scenarios", "msg": f"duplicate scenario '{n}'", "type": "duplicate"}
                for n in duplicates
            ],
        )

    deployment_pattern = config.resolved_deployment_pattern
    infra_parameters = serialize_infra_parameters(infra_params)

    latest = 0
    if test_plan_store is not None:
        latest = test_plan_store.latest_test_run_number(deployment_pattern, infra_parameters)

    test_plan = TestPlan(
        test_config=config,
        deployment_pattern=deployment_pattern,
        infra_parameters=infra_parameters,
        infra_repo_dir=infra_repo_dir,
        deployment_repo_dir=deployment_repo_dir,
        scenario_repo_dir=scenario_repo_dir,
        test_run_number=latest + 1,
        test_scenarios=[
            TestScenario(name=s.name, description=s.description)
            for s in config.scenario_config.scenarios
        ],
    )
    logger.debug(
        "Generated test plan for %s %s (run #%d)",
        deployment_pattern,
        infra_parameters,
        test_plan.test_run_number,
    )
    return test_plan


def generate_test_plans(config: TestConfig, **kwargs: Any) -> list[TestPlan]:
    """Create one test plan per declared infra parameter combination."""
    combinations = config.infra_params or [{}]
    return [generate_test_plan(config, params, **kwargs) for params in combinations]
