"""Config change set validators."""

from ..graph.plan_graph import PlanGraph
from .base import ValidationResult


def check_overlapping_change_sets(graph: PlanGraph) -> ValidationResult:
    """Check for scenarios targeted by more than one change set.

    Only the first declared change set is applied to such a scenario, so the
    others are silently skipped for it.

    Args:
        graph: The plan graph to check.

    Returns:
        ValidationResult with warnings for overlapping change sets.
    """
    result = ValidationResult()

    for scenario in graph.get_scenario_names():
        change_sets = graph.change_sets_for(scenario)
        if len(change_sets) > 1:
            result.report(
                code="OVERLAPPING_CHANGE_SET",
                message=(
                    f"Scenario is targeted by {len(change_sets)} change sets; "
                    f"only '{change_sets[0]}' will be applied"
                ),
                scenario=scenario,
                change_set=change_sets[0],
                ignored=change_sets[1:],
            )

    return result


def check_unused_change_sets(graph: PlanGraph) -> ValidationResult:
    """Check for change sets that target no declared scenario."""
    result = ValidationResult()
    declared = set(graph.get_scenario_names())

    for change_set in graph.get_change_set_names():
        if not declared.intersection(graph.scenarios_for(change_set)):
            result.report(
                code="UNUSED_CHANGE_SET",
                message=f"Config change set '{change_set}' does not apply to any declared scenario",
                change_set=change_set,
            )

    return result
