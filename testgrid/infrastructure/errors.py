"""Infrastructure provider exceptions."""


class InfrastructureError(Exception):
    """Raised when a provider fails to create or remove infrastructure."""

    pass


class UnsupportedProviderError(InfrastructureError):
    """Raised when no provider is registered for the requested type."""

    def __init__(self, provider_type: str | None):
        self.provider_type = provider_type
        super().__init__(f"No infrastructure provider registered for type '{provider_type}'")


class InfrastructureProviderInitializationError(InfrastructureError):
    """Raised when a provider cannot be constructed or initialized."""

    pass
