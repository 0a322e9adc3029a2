"""Infrastructure providers and the registry that resolves them."""

from pathlib import Path

from ..shell import ShellCommandRunner
from .base import InfrastructureProvider
from .errors import (
    InfrastructureError,
    InfrastructureProviderInitializationError,
    UnsupportedProviderError,
)
from .registry import InfrastructureProviderRegistry
from .shell import ShellInfrastructureProvider


def default_provider_registry(
    shell_runner: ShellCommandRunner | None = None,
    workspace_dir: str | Path | None = None,
) -> InfrastructureProviderRegistry:
    """Build a registry with the built-in providers."""
    registry = InfrastructureProviderRegistry()
    registry.register(
        ShellInfrastructureProvider.name,
        lambda: ShellInfrastructureProvider(shell_runner, workspace_dir),
    )
    return registry


__all__ = [
    "InfrastructureProvider",
    "InfrastructureError",
    "InfrastructureProviderInitializationError",
    "UnsupportedProviderError",
    "InfrastructureProviderRegistry",
    "ShellInfrastructureProvider",
    "default_provider_registry",
]
