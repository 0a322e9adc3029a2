"""Deployer exceptions."""


class DeployerError(Exception):
    """Raised when a deployer fails to deploy the product."""

    pass


class UnsupportedDeployerError(DeployerError):
    """Raised when no deployer is registered for the requested type."""

    def __init__(self, deployer_type: str | None):
        self.deployer_type = deployer_type
        super().__init__(f"No deployer registered for type '{deployer_type}'")


class DeployerInitializationError(DeployerError):
    """Raised when a deployer cannot be constructed."""

    pass
