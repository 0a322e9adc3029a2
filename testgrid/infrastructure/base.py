"""Interface implemented by infrastructure providers."""

from abc import ABC, abstractmethod

from ..config.models import InfrastructureConfig
from ..plan.models import InfrastructureProvisionResult, TestPlan


class InfrastructureProvider(ABC):
    """Creates and removes the infrastructure a test plan runs on."""

    name: str = ""

    @abstractmethod
    def init(self, test_plan: TestPlan) -> None:
        """Prepare the provider for a test plan.

        Raises:
            InfrastructureProviderInitializationError: If the provider cannot be used.
        """

    @abstractmethod
    def provision(self, test_plan: TestPlan) -> InfrastructureProvisionResult:
        """Create the infrastructure described by the plan.

        Raises:
            InfrastructureError: If provisioning fails.
        """

    @abstractmethod
    def release(self, infrastructure_config: InfrastructureConfig, infra_repo_dir: str) -> bool:
        """Tear down the infrastructure described by ``infrastructure_config``.

        Raises:
            InfrastructureError: If the infrastructure cannot be removed.
        """

    @abstractmethod
    def cleanup(self, test_plan: TestPlan) -> None:
        """Remove resources the test run accumulated outside the descriptor.

        Raises:
            InfrastructureError: If cleanup fails.
        """
