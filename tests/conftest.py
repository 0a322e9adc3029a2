"""Shared fixtures for tests."""

from pathlib import Path

import pytest

from testgrid.config.loader import parse_test_config_from_string
from testgrid.core.change_sets import ConfigChangeSetApplier
from testgrid.core.executor import TestPlanExecutor
from testgrid.deployment import Deployer, DeployerError, DeployerRegistry
from testgrid.graph.builder import build_graph
from testgrid.infrastructure import (
    InfrastructureError,
    InfrastructureProvider,
    InfrastructureProviderRegistry,
)
from testgrid.persistence import InMemoryTestPlanStore, InMemoryTestScenarioStore
from testgrid.plan.generator import generate_test_plan
from testgrid.plan.models import (
    DeploymentCreationResult,
    Host,
    InfrastructureProvisionResult,
    Port,
    TestCase,
)
from testgrid.shell import CommandExecutionError, ShellCommandRunner


class RecordingShellRunner(ShellCommandRunner):
    """Shell runner that records commands instead of running them.

    ``exit_codes`` maps a command substring to the exit code to return and
    ``failing`` holds substrings of commands that cannot be launched.
    """

    def __init__(self, events: list | None = None):
        super().__init__()
        self.calls: list[tuple[str, str, dict]] = []
        self.events = events if events is not None else []
        self.exit_codes: dict[str, int] = {}
        self.failing: set[str] = set()

    def run(self, work_dir, command, env=None, timeout=None) -> int:
        self.calls.append((str(work_dir), command, dict(env or {})))
        self.events.append(("shell", Path(work_dir).name, command))
        for fragment in self.failing:
            if fragment in command:
                raise CommandExecutionError(f"cannot launch {command}", command)
        for fragment, code in self.exit_codes.items():
            if fragment in command:
                return code
        return 0


class FakeProvider(InfrastructureProvider):
    """Infrastructure provider that records calls and fails on request."""

    name = "SHELL"

    def __init__(self, events: list):
        self.events = events
        self.fail_init = False
        self.fail_provision: Exception | None = None
        self.fail_release: Exception | None = None

    def init(self, test_plan):
        self.events.append(("init", test_plan.deployment_pattern))
        if self.fail_init:
            raise InfrastructureError("init failed")

    def provision(self, test_plan):
        self.events.append(("provision", test_plan.deployment_pattern))
        if self.fail_provision is not None:
            raise self.fail_provision
        return InfrastructureProvisionResult(
            outputs={"region": "us-east-1"},
            hosts=[Host(ip="10.0.0.5", label="wso2is", ports=[Port("https", 9443)])],
        )

    def release(self, infrastructure_config, infra_repo_dir):
        self.events.append(("release", infra_repo_dir))
        if self.fail_release is not None:
            raise self.fail_release
        return True

    def cleanup(self, test_plan):
        self.events.append(("cleanup", test_plan.deployment_pattern))


class FakeDeployer(Deployer):
    """Deployer that records calls and fails on request."""

    name = "SHELL"

    def __init__(self, events: list):
        self.events = events
        self.fail = False

    def deploy(self, test_plan, provision_result):
        self.events.append(("deploy", test_plan.deployment_pattern))
        if self.fail:
            raise DeployerError("deploy.sh exited with status 1")
        return DeploymentCreationResult(name=test_plan.deployment_pattern, hosts=provision_result.hosts)


class FakeScenarioExecutor:
    """Scenario executor returning canned test cases per scenario.

    ``results`` maps a scenario name to its test cases, or to an exception
    to raise. Scenarios without an entry get one passing test case.
    """

    def __init__(self, events: list):
        self.events = events
        self.results: dict[str, list[TestCase] | Exception] = {}
        self.calls: list[str] = []

    def execute(self, test_scenario, deployment_result, test_plan):
        self.calls.append(test_scenario.name)
        self.events.append(("scenario", test_scenario.name))
        result = self.results.get(
            test_scenario.name,
            [TestCase(name="default", success=True, scenario_name=test_scenario.name)],
        )
        if isinstance(result, Exception):
            raise result
        test_scenario.test_cases = list(result)
        return test_scenario


def passing(scenario: str, count: int = 1) -> list[TestCase]:
    return [TestCase(name=f"case-{i}", success=True, scenario_name=scenario) for i in range(count)]


def failing(scenario: str, message: str = "assertion failed") -> list[TestCase]:
    return [
        TestCase(name="case-ok", success=True, scenario_name=scenario),
        TestCase(name="case-bad", success=False, failure_message=message, scenario_name=scenario),
    ]


@pytest.fixture
def config_yaml() -> str:
    """Return a complete test plan configuration."""
    return """
product: wso2is
deploymentPattern: is-single-node
infraParams:
  - DBEngine: mysql
    OS: ubuntu
  - DBEngine: postgres
    OS: ubuntu
infrastructureConfig:
  infrastructureProvider: SHELL
  provisioners:
    - name: single-node
      scripts:
        - file: create.sh
        - file: destroy.sh
          phase: destroy
deploymentConfig:
  type: SHELL
  deploymentPatterns:
    - name: is-single-node
      scripts:
        - deploy.sh
scenarioConfig:
  scenarios:
    - name: login
      dir: scenario-login
    - name: sso
    - name: provisioning
  configChangeSets:
    - name: ssl-on
      appliesTo: [sso]
"""


@pytest.fixture
def minimal_config_yaml() -> str:
    """Return a configuration with only scenarios."""
    return """
scenarios:
  - login
  - logout
"""


@pytest.fixture
def test_config(config_yaml):
    """Return the parsed complete configuration."""
    return parse_test_config_from_string(config_yaml)


@pytest.fixture
def plan_graph(test_config):
    """Return the plan graph of the complete configuration."""
    return build_graph(test_config)


@pytest.fixture
def test_plan(test_config, tmp_path):
    """Return a PENDING plan whose repositories live under tmp_path."""
    for name in ("infra", "deployment", "scenarios"):
        (tmp_path / name).mkdir()
    return generate_test_plan(
        test_config,
        infra_repo_dir=str(tmp_path / "infra"),
        deployment_repo_dir=str(tmp_path / "deployment"),
        scenario_repo_dir=str(tmp_path / "scenarios"),
    )


@pytest.fixture
def events() -> list:
    """Shared, ordered log of collaborator calls."""
    return []


@pytest.fixture
def shell_runner(events) -> RecordingShellRunner:
    return RecordingShellRunner(events)


@pytest.fixture
def fake_provider(events) -> FakeProvider:
    return FakeProvider(events)


@pytest.fixture
def aws_provider() -> FakeProvider:
    """A second provider with its own event log, registered as AWS by tests."""
    provider = FakeProvider([])
    provider.name = "AWS"
    return provider


@pytest.fixture
def fake_deployer(events) -> FakeDeployer:
    return FakeDeployer(events)


@pytest.fixture
def fake_scenario_executor(events) -> FakeScenarioExecutor:
    return FakeScenarioExecutor(events)


@pytest.fixture
def test_plan_store() -> InMemoryTestPlanStore:
    return InMemoryTestPlanStore()


@pytest.fixture
def test_scenario_store() -> InMemoryTestScenarioStore:
    return InMemoryTestScenarioStore()


@pytest.fixture
def executor(
    fake_provider,
    fake_deployer,
    fake_scenario_executor,
    shell_runner,
    test_plan_store,
    test_scenario_store,
) -> TestPlanExecutor:
    """Return an executor wired to fakes and in-memory stores."""
    return TestPlanExecutor(
        scenario_executor=fake_scenario_executor,
        test_plan_store=test_plan_store,
        test_scenario_store=test_scenario_store,
        provider_registry=InfrastructureProviderRegistry({"SHELL": lambda: fake_provider}),
        deployer_registry=DeployerRegistry({"SHELL": lambda: fake_deployer}),
        change_set_applier=ConfigChangeSetApplier(shell_runner),
    )


@pytest.fixture
def canned():
    """Helpers building canned test case lists."""

    class Canned:
        passing = staticmethod(passing)
        failing = staticmethod(failing)

    return Canned
