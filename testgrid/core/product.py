"""Run every test plan of a product version."""

import logging

from ..lifecycle import Status
from ..plan.models import ProductTestPlan
from .errors import TestPlanExecutorError
from .executor import TestPlanExecutor

logger = logging.getLogger(__name__)


class ProductTestPlanRunner:
    """Execute a product's test plans one after the other.

    A plan whose infrastructure cannot be released is logged and the next
    plan still runs.
    """

    def __init__(self, test_plan_executor: TestPlanExecutor | None = None):
        self.test_plan_executor = test_plan_executor or TestPlanExecutor()

    def execute(self, product_test_plan: ProductTestPlan) -> bool:
        """Run all test plans and move the product plan to COMPLETED.

        Returns:
            True once every plan has been attempted.
        """
        product_test_plan.set_status(Status.RUNNING)
        logger.info(
            "Running %d test plan(s) of %s %s",
            len(product_test_plan.test_plans),
            product_test_plan.product_name,
            product_test_plan.product_version,
        )

        for test_plan in product_test_plan.test_plans:
            infrastructure_config = product_test_plan.get_infrastructure_config(test_plan)
            try:
                self.test_plan_executor.execute(test_plan, infrastructure_config)
            except TestPlanExecutorError:
                logger.exception("Error while executing %s", test_plan)

        product_test_plan.set_status(Status.REPORT_GENERATION)
        for test_plan in product_test_plan.test_plans:
            logger.info(
                "%s [%s] run #%d: %s",
                test_plan.deployment_pattern,
                test_plan.infra_parameters,
                test_plan.test_run_number,
                test_plan.status.value,
            )
        product_test_plan.set_status(Status.COMPLETED)
        return True

    def abort_test_plan(self) -> bool:
        """Abort a running product test plan.

        Mid-plan cancellation is not supported; always returns False.
        """
        logger.warning("Aborting a product test plan is not supported")
        return False
