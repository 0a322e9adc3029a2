"""PlanGraph wrapper around networkx for scenario configurations."""

from typing import Any, Iterator

import networkx as nx

from .node_types import EdgeType, NodeType


class PlanGraph:
    """A graph of the scenarios of a test plan and their config change sets.

    Wraps a networkx DiGraph with change set nodes pointing at the scenario
    nodes they apply to. Nodes carry their declaration order, which decides
    which change set wins when several target the same scenario.
    """

    def __init__(self):
        """Initialize an empty plan graph."""
        self._graph = nx.DiGraph()
        self._scenario_count = 0
        self._change_set_count = 0

    @property
    def graph(self) -> nx.DiGraph:
        """Get the underlying networkx graph."""
        return self._graph

    # -------------------------------------------------------------------------
    # Node management
    # -------------------------------------------------------------------------

    def add_scenario(self, name: str, **attrs: Any) -> str:
        """Add a declared scenario node.

        Declaring the same name twice keeps the first node and bumps its
        ``declarations`` counter.

        Args:
            name: The scenario name.
            **attrs: Additional attributes for the node.

        Returns:
            The node ID.
        """
        node_id = f"scenario:{name}"
        if self._graph.has_node(node_id) and self._graph.nodes[node_id]["declared"]:
            self._graph.nodes[node_id]["declarations"] += 1
            return node_id

        self._graph.add_node(
            node_id,
            node_type=NodeType.SCENARIO,
            name=name,
            declared=True,
            declarations=1,
            order=self._scenario_count,
            **attrs,
        )
        self._scenario_count += 1
        return node_id

    def add_change_set(self, name: str, **attrs: Any) -> str:
        """Add a change set node.

        Args:
            name: The change set name.
            **attrs: Additional attributes for the node.

        Returns:
            The node ID.
        """
        node_id = f"change_set:{name}"
        if self._graph.has_node(node_id):
            return node_id

        self._graph.add_node(
            node_id,
            node_type=NodeType.CHANGE_SET,
            name=name,
            order=self._change_set_count,
            **attrs,
        )
        self._change_set_count += 1
        return node_id

    def add_applies_to(self, change_set: str, scenario: str) -> None:
        """Add an edge from a change set to a scenario it targets.

        A scenario that was never declared gets a placeholder node with
        ``declared=False``.
        """
        change_set_id = self.add_change_set(change_set)
        scenario_id = f"scenario:{scenario}"
        if not self._graph.has_node(scenario_id):
            self._graph.add_node(
                scenario_id,
                node_type=NodeType.SCENARIO,
                name=scenario,
                declared=False,
                declarations=0,
                order=None,
            )
        self._graph.add_edge(change_set_id, scenario_id, edge_type=EdgeType.APPLIES_TO)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def _nodes_of_type(self, node_type: NodeType) -> list[dict[str, Any]]:
        return [
            data
            for _, data in self._graph.nodes(data=True)
            if data.get("node_type") == node_type
        ]

    def get_scenario_names(self) -> list[str]:
        """Get declared scenario names in declaration order."""
        scenarios = [s for s in self._nodes_of_type(NodeType.SCENARIO) if s["declared"]]
        return [s["name"] for s in sorted(scenarios, key=lambda s: s["order"])]

    def get_change_set_names(self) -> list[str]:
        """Get change set names in declaration order."""
        change_sets = self._nodes_of_type(NodeType.CHANGE_SET)
        return [c["name"] for c in sorted(change_sets, key=lambda c: c["order"])]

    def get_scenario_node(self, name: str) -> dict[str, Any] | None:
        """Get a scenario node by name."""
        node_id = f"scenario:{name}"
        if self._graph.has_node(node_id):
            return dict(self._graph.nodes[node_id])
        return None

    def change_sets_for(self, scenario: str) -> list[str]:
        """Get every change set targeting a scenario, in declaration order."""
        scenario_id = f"scenario:{scenario}"
        if not self._graph.has_node(scenario_id):
            return []

        sources = [
            self._graph.nodes[source]
            for source, _, data in self._graph.in_edges(scenario_id, data=True)
            if data.get("edge_type") == EdgeType.APPLIES_TO
        ]
        return [s["name"] for s in sorted(sources, key=lambda s: s["order"])]

    def change_set_for(self, scenario: str) -> str | None:
        """Get the change set applied to a scenario: the first declared match."""
        change_sets = self.change_sets_for(scenario)
        return change_sets[0] if change_sets else None

    def scenarios_for(self, change_set: str) -> list[str]:
        """Get the scenarios a change set targets."""
        change_set_id = f"change_set:{change_set}"
        if not self._graph.has_node(change_set_id):
            return []
        return [
            self._graph.nodes[target]["name"]
            for _, target, data in self._graph.out_edges(change_set_id, data=True)
            if data.get("edge_type") == EdgeType.APPLIES_TO
        ]

    def get_duplicate_scenarios(self) -> list[str]:
        """Get scenario names declared more than once."""
        return [
            s["name"]
            for s in self._nodes_of_type(NodeType.SCENARIO)
            if s["declarations"] > 1
        ]

    def iter_undefined_references(self) -> Iterator[tuple[str, str]]:
        """Iterate over change set targets that are not declared scenarios.

        Yields:
            Tuples of (change_set, scenario).
        """
        for source, target, data in self._graph.edges(data=True):
            if data.get("edge_type") != EdgeType.APPLIES_TO:
                continue
            if not self._graph.nodes[target]["declared"]:
                yield self._graph.nodes[source]["name"], self._graph.nodes[target]["name"]
