"""Graph layer relating scenarios and config change sets."""

from .node_types import NodeType, EdgeType
from .plan_graph import PlanGraph
from .builder import build_graph

__all__ = [
    "NodeType",
    "EdgeType",
    "PlanGraph",
    "build_graph",
]
