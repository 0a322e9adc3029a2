"""Registry resolving infrastructure providers by type."""

import logging
from collections.abc import Callable

from ..config.models import InfrastructureConfig
from .base import InfrastructureProvider
from .errors import InfrastructureProviderInitializationError, UnsupportedProviderError

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[], InfrastructureProvider]


class InfrastructureProviderRegistry:
    """Maps provider type tags (``SHELL``, ``AWS``, ...) to factories."""

    def __init__(self, factories: dict[str, ProviderFactory] | None = None):
        self._factories: dict[str, ProviderFactory] = {}
        for tag, factory in (factories or {}).items():
            self.register(tag, factory)

    def register(self, tag: str, factory: ProviderFactory) -> None:
        """Register a factory for a provider type (case-insensitive)."""
        self._factories[tag.upper()] = factory

    @property
    def supported_types(self) -> list[str]:
        return sorted(self._factories)

    def resolve(self, infrastructure_config: InfrastructureConfig | None) -> InfrastructureProvider:
        """Create the provider for an infrastructure descriptor.

        Raises:
            UnsupportedProviderError: If no factory is registered for the type.
            InfrastructureProviderInitializationError: If the factory fails.
        """
        provider_type = (
            infrastructure_config.infrastructure_provider if infrastructure_config else None
        )
        factory = self._factories.get((provider_type or "").upper())
        if factory is None:
            raise UnsupportedProviderError(provider_type)

        try:
            provider = factory()
        except Exception as e:
            raise InfrastructureProviderInitializationError(
                f"Unable to create infrastructure provider '{provider_type}': {e}"
            ) from e

        logger.debug("Resolved infrastructure provider %s", provider_type)
        return provider
