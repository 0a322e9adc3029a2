"""Drive a test plan through provisioning, deployment, scenarios and teardown."""

import logging
import time

from ..automation.executor import ScenarioExecutor
from ..config.models import ConfigChangeSet, InfrastructureConfig
from ..deployment import DeployerRegistry, default_deployer_registry
from ..graph import build_graph
from ..infrastructure import (
    InfrastructureError,
    InfrastructureProviderRegistry,
    default_provider_registry,
)
from ..lifecycle import Status
from ..output.summary import format_summary
from ..persistence import (
    InMemoryTestPlanStore,
    InMemoryTestScenarioStore,
    PersistenceError,
    TestPlanStore,
    TestScenarioStore,
)
from ..plan.models import (
    DeploymentCreationResult,
    InfrastructureProvisionResult,
    TestPlan,
    TestScenario,
)
from .change_sets import ConfigChangeSetApplier
from .errors import TestPlanExecutorError

logger = logging.getLogger(__name__)


def scenario_status(test_scenario: TestScenario) -> Status:
    """Roll a scenario's test cases up into its status.

    No test cases is an ERROR. Otherwise the first failed test case makes
    the scenario FAIL.
    """
    if not test_scenario.test_cases:
        return Status.ERROR
    for test_case in test_scenario.test_cases:
        if not test_case.success:
            return Status.FAIL
    return Status.SUCCESS


def aggregate_status(test_scenarios: list[TestScenario]) -> Status | None:
    """Roll scenario statuses up into a test plan status.

    FAIL wins and stops the scan. ERROR is kept unless a later scenario
    FAILs. Returns None when some scenario is neither SUCCESS, FAIL nor
    ERROR and nothing else decided the outcome.
    """
    result = Status.SUCCESS
    for test_scenario in test_scenarios:
        if test_scenario.status == Status.SUCCESS:
            continue
        if test_scenario.status == Status.FAIL:
            return Status.FAIL
        if test_scenario.status == Status.ERROR:
            result = Status.ERROR
        elif result == Status.SUCCESS:
            result = None
    return result


class TestPlanExecutor:
    """Execute one test plan end to end.

    Collaborators are injected; anything not given is built from the
    default registries, in-memory stores and a fresh shell runner.
    """

    __test__ = False

    def __init__(
        self,
        scenario_executor: ScenarioExecutor | None = None,
        test_plan_store: TestPlanStore | None = None,
        test_scenario_store: TestScenarioStore | None = None,
        provider_registry: InfrastructureProviderRegistry | None = None,
        deployer_registry: DeployerRegistry | None = None,
        change_set_applier: ConfigChangeSetApplier | None = None,
    ):
        self.scenario_executor = scenario_executor or ScenarioExecutor()
        self.test_plan_store = test_plan_store or InMemoryTestPlanStore()
        self.test_scenario_store = test_scenario_store or InMemoryTestScenarioStore()
        self.provider_registry = provider_registry or default_provider_registry()
        self.deployer_registry = deployer_registry or default_deployer_registry()
        self.change_set_applier = change_set_applier or ConfigChangeSetApplier()

    def execute(
        self, test_plan: TestPlan, infrastructure_config: InfrastructureConfig | None
    ) -> None:
        """Run the test plan and record its final status.

        Provisioning, deployment and scenario failures are recorded on the plan
        and never raised. Infrastructure is always released.

        Args:
            test_plan: The plan to run. Must not be in a final status.
            infrastructure_config: Infrastructure to provision, None if the
                plan's deployment pattern has none.

        Raises:
            TestPlanExecutorError: If the plan already finished, or if releasing
                the infrastructure fails.
        """
        if test_plan.is_terminal:
            raise TestPlanExecutorError(
                f"{test_plan} already finished with status {test_plan.status.value}"
            )
        if test_plan.status in (Status.PENDING, Status.EXECUTION_PLANNED):
            test_plan.set_status(Status.RUNNING)

        start_time = time.monotonic()
        logger.info("Executing %s", test_plan)

        provision_result = self.provision_infrastructure(infrastructure_config, test_plan)
        deployment_result = self.create_deployment(test_plan, provision_result)

        if not deployment_result.success:
            test_plan.set_status(Status.ERROR)
            for test_scenario in test_plan.test_scenarios:
                test_scenario.status = Status.DID_NOT_RUN
            self._persist_test_plan(test_plan)
            logger.error("Deployment failed for %s. Releasing infrastructure...", test_plan)
            self.release_infrastructure(
                test_plan, infrastructure_config, provision_result, deployment_result
            )
            return

        try:
            self.run_scenarios(test_plan, deployment_result)
            self.persist_test_plan_status(test_plan)
        finally:
            self.release_infrastructure(
                test_plan, infrastructure_config, provision_result, deployment_result
            )

        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        for line in format_summary(test_plan, elapsed_ms):
            logger.info(line)

    def provision_infrastructure(
        self, infrastructure_config: InfrastructureConfig | None, test_plan: TestPlan
    ) -> InfrastructureProvisionResult:
        """Provision the plan's infrastructure.

        Any failure marks the plan FAIL and yields an unsuccessful result.
        """
        if infrastructure_config is None:
            logger.error(
                "No infrastructure descriptor for deployment pattern '%s'",
                test_plan.deployment_pattern,
            )
            self._fail(test_plan)
            return InfrastructureProvisionResult(success=False)

        try:
            provider = self.provider_registry.resolve(infrastructure_config)
            provider.init(test_plan)
            provision_result = provider.provision(test_plan)
        except InfrastructureError:
            logger.exception(
                "Error on infrastructure creation for deployment pattern '%s'",
                test_plan.deployment_pattern,
            )
        except Exception:
            logger.exception("Unexpected error while provisioning the infrastructure")
        else:
            provisioner = infrastructure_config.first_provisioner
            if provisioner is not None:
                provision_result.name = provisioner.name
            provision_result.outputs["deployment_scripts_dir"] = test_plan.deployment_repo_dir
            return provision_result

        self._fail(test_plan)
        return InfrastructureProvisionResult(success=False)

    def create_deployment(
        self, test_plan: TestPlan, provision_result: InfrastructureProvisionResult
    ) -> DeploymentCreationResult:
        """Deploy the product onto provisioned infrastructure.

        Unsuccessful provisioning skips the deployer. A deployer failure
        marks the plan FAIL and yields an unsuccessful result.
        """
        if not provision_result.success:
            return DeploymentCreationResult(success=False)

        try:
            deployer = self.deployer_registry.resolve(test_plan)
            return deployer.deploy(test_plan, provision_result)
        except Exception:
            logger.exception(
                "Error while deploying deployment pattern '%s'", test_plan.deployment_pattern
            )

        self._fail(test_plan)
        return DeploymentCreationResult(success=False)

    def run_scenarios(
        self, test_plan: TestPlan, deployment_result: DeploymentCreationResult
    ) -> None:
        """Run every scenario in plan order, each wrapped in its change set if any.

        A failing scenario is logged and the next one still runs.
        """
        scenario_config = test_plan.test_config.scenario_config
        for test_scenario in test_plan.test_scenarios:
            definition = scenario_config.get_scenario(test_scenario.name)
            if definition is not None:
                test_scenario.dir = definition.dir

        graph = build_graph(scenario_config)
        change_sets = {cs.name: cs for cs in scenario_config.config_change_sets}

        for test_scenario in test_plan.test_scenarios:
            change_set_name = graph.change_set_for(test_scenario.name)
            change_set = change_sets.get(change_set_name) if change_set_name else None
            self._run_scenario(test_plan, test_scenario, deployment_result, change_set)

    def _run_scenario(
        self,
        test_plan: TestPlan,
        test_scenario: TestScenario,
        deployment_result: DeploymentCreationResult,
        change_set: ConfigChangeSet | None,
    ) -> None:
        if change_set is not None:
            self.change_set_applier.apply(test_plan, change_set)
        try:
            self.scenario_executor.execute(test_scenario, deployment_result, test_plan)
        except Exception:
            logger.exception("Error while executing scenario '%s'", test_scenario.name)
        finally:
            if change_set is not None:
                self.change_set_applier.revert(test_plan, change_set)

        try:
            self.persist_test_scenario(test_scenario)
        except Exception:
            logger.exception("Error while persisting scenario '%s'", test_scenario.name)

    def persist_test_scenario(self, test_scenario: TestScenario) -> None:
        """Set the scenario's status from its test cases and persist it.

        Raises:
            TestPlanExecutorError: If the scenario cannot be persisted.
        """
        test_scenario.status = scenario_status(test_scenario)
        try:
            self.test_scenario_store.persist_test_scenario(test_scenario)
        except PersistenceError as e:
            raise TestPlanExecutorError(
                f"Error while persisting test scenario {test_scenario.name}: {e}"
            ) from e
        logger.debug(
            "Persisted scenario %s with status %s", test_scenario.name, test_scenario.status.value
        )

    def persist_test_plan_status(self, test_plan: TestPlan) -> None:
        """Set the plan's status from its scenarios and persist it."""
        status = aggregate_status(test_plan.test_scenarios)
        if status is None:
            logger.warning(
                "Scenario statuses of %s did not resolve to a final status", test_plan
            )
        else:
            test_plan.set_status(status)
        self._persist_test_plan(test_plan)

    def release_infrastructure(
        self,
        test_plan: TestPlan,
        infrastructure_config: InfrastructureConfig | None,
        provision_result: InfrastructureProvisionResult,
        deployment_result: DeploymentCreationResult,
    ) -> None:
        """Release the plan's infrastructure and clean up after it.

        The provider is resolved from the descriptor the plan was provisioned
        with, falling back to the plan's own descriptor when there was none.

        Raises:
            TestPlanExecutorError: If the provider cannot be resolved or fails.
        """
        if not provision_result.success or not deployment_result.success:
            logger.error(
                "Execution of previous steps failed. "
                "Trying to release the possibly provisioned infrastructure"
            )

        if infrastructure_config is None:
            infrastructure_config = test_plan.infrastructure_config
        try:
            provider = self.provider_registry.resolve(infrastructure_config)
            provider.release(infrastructure_config, test_plan.infra_repo_dir)
            provider.cleanup(test_plan)
        except Exception as e:
            raise TestPlanExecutorError(
                f"Error on infrastructure removal for deployment pattern "
                f"'{test_plan.deployment_pattern}': {e}"
            ) from e

    def _fail(self, test_plan: TestPlan) -> None:
        test_plan.set_status(Status.FAIL)
        self._persist_test_plan(test_plan)

    def _persist_test_plan(self, test_plan: TestPlan) -> None:
        try:
            self.test_plan_store.persist_test_plan(test_plan)
        except PersistenceError:
            logger.exception("Error while persisting %s", test_plan)
