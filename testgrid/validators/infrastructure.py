"""Infrastructure descriptor validators."""

from ..config.models import TestConfig
from .base import ValidationResult


def check_infrastructure(config: TestConfig) -> ValidationResult:
    """Check that the infrastructure can be provisioned for at least one combination.

    Args:
        config: The parsed test configuration.

    Returns:
        ValidationResult with an error when no provisioner is declared and a
        warning when there are no infra parameter combinations.
    """
    result = ValidationResult()

    if not config.infrastructure_config.provisioners:
        result.report(
            code="NO_PROVISIONER",
            message="Infrastructure config declares no provisioners",
        )

    if not config.infra_params:
        result.report(
            code="NO_INFRA_PARAMS",
            message="No infra parameter combination declared; an empty combination is used",
        )

    return result
