"""Interface implemented by deployers."""

from abc import ABC, abstractmethod

from ..plan.models import DeploymentCreationResult, InfrastructureProvisionResult, TestPlan


class Deployer(ABC):
    """Installs and starts the product under test on provisioned infrastructure."""

    name: str = ""

    @abstractmethod
    def deploy(
        self, test_plan: TestPlan, provision_result: InfrastructureProvisionResult
    ) -> DeploymentCreationResult:
        """Deploy the plan's deployment pattern.

        Raises:
            DeployerError: If the deployment fails.
        """
