"""Deployers and the registry that resolves them."""

from ..shell import ShellCommandRunner
from .base import Deployer
from .errors import DeployerError, DeployerInitializationError, UnsupportedDeployerError
from .registry import DeployerRegistry
from .shell import ShellDeployer


def default_deployer_registry(shell_runner: ShellCommandRunner | None = None) -> DeployerRegistry:
    """Build a registry with the built-in deployers."""
    registry = DeployerRegistry()
    registry.register(ShellDeployer.name, lambda: ShellDeployer(shell_runner))
    return registry


__all__ = [
    "Deployer",
    "DeployerError",
    "DeployerInitializationError",
    "UnsupportedDeployerError",
    "DeployerRegistry",
    "ShellDeployer",
    "default_deployer_registry",
]
