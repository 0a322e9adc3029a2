"""Builder for converting a ScenarioConfig to a PlanGraph."""

from ..config.models import ScenarioConfig, TestConfig
from .plan_graph import PlanGraph


def build_graph(config: TestConfig | ScenarioConfig) -> PlanGraph:
    """Build a PlanGraph from a test configuration.

    Args:
        config: The parsed test configuration, or just its scenario section.

    Returns:
        A PlanGraph of declared scenarios and the change sets targeting them.
    """
    scenario_config = config.scenario_config if isinstance(config, TestConfig) else config
    graph = PlanGraph()

    for scenario in scenario_config.scenarios:
        graph.add_scenario(scenario.name, dir=scenario.dir)

    # Change sets after all scenarios exist, so undeclared targets are detectable
    for change_set in scenario_config.config_change_sets:
        graph.add_change_set(change_set.name)
        for scenario_name in change_set.applies_to:
            graph.add_applies_to(change_set.name, scenario_name)

    return graph
