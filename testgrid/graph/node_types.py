"""Node and edge type definitions for the plan graph."""

from enum import Enum


class NodeType(str, Enum):
    """Types of nodes in the plan graph."""

    SCENARIO = "scenario"
    CHANGE_SET = "change_set"


class EdgeType(str, Enum):
    """Types of edges in the plan graph."""

    APPLIES_TO = "applies_to"  # ChangeSet -> Scenario
