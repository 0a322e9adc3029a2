"""Tests for the scenario executor."""

import logging
from pathlib import Path

import pytest

from testgrid.automation import ScenarioExecutor, TestAutomationError
from testgrid.plan.models import DeploymentCreationResult, Host, Port

JTL = '<testResults><httpSample s="true" lb="Login"/></testResults>'


@pytest.fixture
def deployment_result():
    return DeploymentCreationResult(
        name="is-single-node",
        hosts=[Host(ip="10.0.0.5", label="wso2is", ports=[Port("https", 9443)])],
    )


@pytest.fixture
def scenario_dir(test_plan) -> Path:
    path = Path(test_plan.scenario_repo_dir) / "scenario-login"
    path.mkdir()
    return path


class TestScenarioExecutor:
    def test_uses_scenario_dir(self, shell_runner, test_plan, scenario_dir, deployment_result):
        scenario = test_plan.get_scenario("login")
        scenario.dir = "scenario-login"
        (scenario_dir / "results.jtl").write_text(JTL)

        ScenarioExecutor(shell_runner).execute(scenario, deployment_result, test_plan)

        assert [tc.name for tc in scenario.test_cases] == ["Login"]
        assert shell_runner.calls == []

    def test_falls_back_to_scenario_name(self, shell_runner, test_plan, deployment_result):
        scenario = test_plan.get_scenario("sso")
        executor = ScenarioExecutor(shell_runner)

        assert executor.scenario_dir(scenario, test_plan) == Path(test_plan.scenario_repo_dir) / "sso"

    def test_missing_dir(self, shell_runner, test_plan, deployment_result):
        scenario = test_plan.get_scenario("sso")

        with pytest.raises(TestAutomationError):
            ScenarioExecutor(shell_runner).execute(scenario, deployment_result, test_plan)

    def test_runs_run_scenario_script(self, shell_runner, test_plan, scenario_dir, deployment_result):
        scenario = test_plan.get_scenario("login")
        scenario.dir = "scenario-login"
        (scenario_dir / "run-scenario.sh").write_text("exit 0\n")

        ScenarioExecutor(shell_runner).execute(scenario, deployment_result, test_plan)

        work_dir, command, env = shell_runner.calls[0]
        assert work_dir == str(scenario_dir)
        assert command == "bash run-scenario.sh"
        assert env == {"WSO2IS_HOST": "10.0.0.5", "HTTPS_PORT": "9443", "TESTGRID_SCENARIO": "login"}

    def test_script_exit_code_is_not_raised(
        self, shell_runner, test_plan, scenario_dir, deployment_result, caplog
    ):
        scenario = test_plan.get_scenario("login")
        scenario.dir = "scenario-login"
        (scenario_dir / "run-scenario.sh").write_text("exit 1\n")
        shell_runner.exit_codes["run-scenario.sh"] = 1

        with caplog.at_level(logging.WARNING, logger="testgrid.automation.executor"):
            ScenarioExecutor(shell_runner).execute(scenario, deployment_result, test_plan)

        assert "exited with status 1" in caplog.text
        assert "No test results found" in caplog.text
        assert scenario.test_cases == []

    def test_script_launch_failure(self, shell_runner, test_plan, scenario_dir, deployment_result):
        scenario = test_plan.get_scenario("login")
        scenario.dir = "scenario-login"
        (scenario_dir / "run-scenario.sh").write_text("exit 0\n")
        shell_runner.failing.add("run-scenario.sh")

        with pytest.raises(TestAutomationError):
            ScenarioExecutor(shell_runner).execute(scenario, deployment_result, test_plan)

    def test_real_script_writes_results(self, test_plan, scenario_dir, deployment_result):
        scenario = test_plan.get_scenario("login")
        scenario.dir = "scenario-login"
        (scenario_dir / "run-scenario.sh").write_text(
            "mkdir -p Results/Jmeter\n"
            'echo "<testResults><httpSample s=\\"true\\" lb=\\"$WSO2IS_HOST\\"/></testResults>"'
            " > Results/Jmeter/out.xml\n"
        )

        ScenarioExecutor().execute(scenario, deployment_result, test_plan)

        assert [tc.name for tc in scenario.test_cases] == ["10.0.0.5"]
        assert scenario.test_cases[0].success
