"""Validation runner that orchestrates all validators."""

from pathlib import Path

from ..config.loader import parse_test_config
from ..config.models import TestConfig
from ..graph.builder import build_graph
from ..graph.plan_graph import PlanGraph
from .base import ValidationResult
from .change_sets import check_overlapping_change_sets, check_unused_change_sets
from .infrastructure import check_infrastructure
from .reference_integrity import check_reference_integrity


def run_validators(config: TestConfig, graph: PlanGraph) -> ValidationResult:
    """Run all validators on a test configuration.

    Args:
        config: The parsed test configuration.
        graph: The plan graph built from it.

    Returns:
        Combined ValidationResult from all validators.
    """
    return ValidationResult.combine(
        check_reference_integrity(graph),
        check_infrastructure(config),
        check_overlapping_change_sets(graph),
        check_unused_change_sets(graph),
    )


def validate_config_file(path: str | Path) -> ValidationResult:
    """Load and validate a test plan configuration file.

    Raises:
        ConfigLoadError: If the file cannot be loaded.
        ConfigValidationError: If the configuration fails schema validation.
    """
    config = parse_test_config(path)
    graph = build_graph(config)
    return run_validators(config, graph)
