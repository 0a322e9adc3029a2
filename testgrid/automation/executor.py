"""Run one scenario's automation suite against a deployment."""

import logging
from pathlib import Path

from ..plan.models import DeploymentCreationResult, TestPlan, TestScenario, host_environment
from ..shell import CommandExecutionError, ShellCommandRunner
from .errors import TestAutomationError
from .parsers import collect_test_cases

logger = logging.getLogger(__name__)

RUN_SCRIPT_NAME = "run-scenario.sh"


class ScenarioExecutor:
    """Execute a scenario directory and record its test cases on the scenario.

    If the scenario directory holds ``run-scenario.sh`` it is run with the
    deployment's hosts exported as ``<LABEL>_HOST``/``<PROTOCOL>_PORT``
    variables. Results are then read from JMeter and JUnit result files.
    """

    def __init__(self, shell_runner: ShellCommandRunner | None = None):
        self.shell_runner = shell_runner or ShellCommandRunner()

    def scenario_dir(self, test_scenario: TestScenario, test_plan: TestPlan) -> Path:
        return Path(test_plan.scenario_repo_dir) / (test_scenario.dir or test_scenario.name)

    def execute(
        self,
        test_scenario: TestScenario,
        deployment_result: DeploymentCreationResult,
        test_plan: TestPlan,
    ) -> TestScenario:
        """Run the scenario and replace its test cases with the results found.

        A scenario without result files ends up with no test cases; that is
        logged, not raised.

        Raises:
            TestAutomationError: If the scenario directory is missing, the run
                script cannot be launched, or a result file is unreadable.
        """
        scenario_dir = self.scenario_dir(test_scenario, test_plan)
        if not scenario_dir.is_dir():
            raise TestAutomationError(
                f"Scenario directory not found for '{test_scenario.name}'", str(scenario_dir)
            )

        logger.info("Executing scenario %s in %s", test_scenario.name, scenario_dir)
        run_script = scenario_dir / RUN_SCRIPT_NAME
        if run_script.is_file():
            env = host_environment(deployment_result.hosts)
            env["TESTGRID_SCENARIO"] = test_scenario.name
            try:
                exit_code = self.shell_runner.run(scenario_dir, f"bash {RUN_SCRIPT_NAME}", env=env)
            except CommandExecutionError as e:
                raise TestAutomationError(str(e), str(run_script)) from e
            if exit_code != 0:
                logger.warning(
                    "%s of scenario %s exited with status %d",
                    RUN_SCRIPT_NAME,
                    test_scenario.name,
                    exit_code,
                )

        test_scenario.test_cases = collect_test_cases(scenario_dir, test_scenario.name)
        if not test_scenario.test_cases:
            logger.warning("No test results found for scenario %s", test_scenario.name)
        return test_scenario
