"""Registry resolving deployers by type."""

import logging
from collections.abc import Callable

from ..plan.models import TestPlan
from .base import Deployer
from .errors import DeployerInitializationError, UnsupportedDeployerError

logger = logging.getLogger(__name__)

DeployerFactory = Callable[[], Deployer]


class DeployerRegistry:
    """Maps deployer type tags (``SHELL``, ...) to factories."""

    def __init__(self, factories: dict[str, DeployerFactory] | None = None):
        self._factories: dict[str, DeployerFactory] = {}
        for tag, factory in (factories or {}).items():
            self.register(tag, factory)

    def register(self, tag: str, factory: DeployerFactory) -> None:
        """Register a factory for a deployer type (case-insensitive)."""
        self._factories[tag.upper()] = factory

    @property
    def supported_types(self) -> list[str]:
        return sorted(self._factories)

    def resolve(self, test_plan: TestPlan) -> Deployer:
        """Create the deployer declared by the plan's deployment config.

        Raises:
            UnsupportedDeployerError: If no factory is registered for the type.
            DeployerInitializationError: If the factory fails.
        """
        deployer_type = test_plan.test_config.deployment_config.type
        factory = self._factories.get((deployer_type or "").upper())
        if factory is None:
            raise UnsupportedDeployerError(deployer_type)

        try:
            deployer = factory()
        except Exception as e:
            raise DeployerInitializationError(
                f"Unable to create deployer '{deployer_type}': {e}"
            ) from e

        logger.debug("Resolved deployer %s", deployer_type)
        return deployer
