"""Reference integrity validator."""

from ..graph.plan_graph import PlanGraph
from .base import ValidationResult


def check_reference_integrity(graph: PlanGraph) -> ValidationResult:
    """Check that scenario names are unique and change sets target declared scenarios.

    Args:
        graph: The plan graph.

    Returns:
        ValidationResult with errors for duplicates and broken references.
    """
    result = ValidationResult()

    for scenario in graph.get_duplicate_scenarios():
        result.report(
            code="DUPLICATE_SCENARIO",
            message=f"Scenario '{scenario}' is declared more than once",
            scenario=scenario,
        )

    for change_set, scenario in graph.iter_undefined_references():
        result.report(
            code="UNDEFINED_SCENARIO_REF",
            message=f"Config change set applies to undeclared scenario '{scenario}'",
            scenario=scenario,
            change_set=change_set,
        )

    return result
