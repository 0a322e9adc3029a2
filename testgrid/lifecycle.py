"""Status values and the lifecycle graphs that constrain them."""

from enum import Enum

import networkx as nx


class Status(str, Enum):
    """Status of a test plan, test scenario or product test plan."""

    PENDING = "PENDING"
    RUNNING = "RUNNING"
    SUCCESS = "SUCCESS"
    FAIL = "FAIL"
    ERROR = "ERROR"
    DID_NOT_RUN = "DID_NOT_RUN"
    INCOMPLETE = "INCOMPLETE"

    # Product-level bookkeeping
    EXECUTION_PLANNED = "EXECUTION_PLANNED"
    REPORT_GENERATION = "REPORT_GENERATION"
    COMPLETED = "COMPLETED"


TERMINAL_STATUSES = frozenset({Status.SUCCESS, Status.FAIL, Status.ERROR})


class StatusTransitionError(ValueError):
    """Raised when a status write would move a lifecycle backwards."""

    def __init__(self, current: Status, requested: Status):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Illegal status transition {current.value} -> {requested.value}"
        )


class StatusGraph:
    """Directed graph of allowed status transitions.

    Wraps a networkx DiGraph. A write is allowed when the requested status is
    reachable from the current one, so skipping intermediate states is fine
    but going back is not.
    """

    def __init__(self, transitions: list[tuple[Status, Status]]):
        self._graph = nx.DiGraph()
        self._graph.add_edges_from(transitions)

    @property
    def graph(self) -> nx.DiGraph:
        """Get the underlying networkx graph."""
        return self._graph

    def can_transition(self, current: Status, requested: Status) -> bool:
        """Check whether ``current`` may be overwritten with ``requested``."""
        if current == requested:
            return True
        if current not in self._graph or requested not in self._graph:
            return False
        return nx.has_path(self._graph, current, requested)

    def successors(self, status: Status) -> list[Status]:
        """Get the statuses directly reachable from ``status``."""
        if status not in self._graph:
            return []
        return list(self._graph.successors(status))

    def is_final(self, status: Status) -> bool:
        """Check if no transition leaves ``status``."""
        return status in self._graph and self._graph.out_degree(status) == 0

    def check(self, current: Status, requested: Status) -> None:
        """Raise StatusTransitionError if the transition is not allowed."""
        if not self.can_transition(current, requested):
            raise StatusTransitionError(current, requested)


def build_plan_lifecycle() -> StatusGraph:
    """Build the lifecycle of a single test plan.

    PENDING -> RUNNING -> {SUCCESS, FAIL, ERROR}. A FAIL written by a failed
    provisioning or deployment step is finalized to ERROR by the deployment
    short-circuit, so FAIL -> ERROR is the only edge leaving a terminal state.
    """
    return StatusGraph(
        [
            (Status.PENDING, Status.EXECUTION_PLANNED),
            (Status.PENDING, Status.RUNNING),
            (Status.EXECUTION_PLANNED, Status.RUNNING),
            (Status.RUNNING, Status.SUCCESS),
            (Status.RUNNING, Status.FAIL),
            (Status.RUNNING, Status.ERROR),
            (Status.FAIL, Status.ERROR),
        ]
    )


def build_product_lifecycle() -> StatusGraph:
    """Build the lifecycle of a product test plan."""
    return StatusGraph(
        [
            (Status.EXECUTION_PLANNED, Status.RUNNING),
            (Status.RUNNING, Status.REPORT_GENERATION),
            (Status.REPORT_GENERATION, Status.COMPLETED),
        ]
    )


PLAN_LIFECYCLE = build_plan_lifecycle()
PRODUCT_LIFECYCLE = build_product_lifecycle()
