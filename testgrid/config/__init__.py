"""Configuration layer for parsing and validating test plan YAML files."""

from .errors import ConfigLoadError, ConfigValidationError
from .models import (
    ConfigChangeSet,
    DeploymentConfig,
    DeploymentPatternConfig,
    InfrastructureConfig,
    Provisioner,
    ScenarioConfig,
    ScenarioDefinition,
    Script,
    TestConfig,
)
from .loader import load_yaml, parse_test_config, parse_test_config_from_string

__all__ = [
    "ConfigLoadError",
    "ConfigValidationError",
    "ConfigChangeSet",
    "DeploymentConfig",
    "DeploymentPatternConfig",
    "InfrastructureConfig",
    "Provisioner",
    "ScenarioConfig",
    "ScenarioDefinition",
    "Script",
    "TestConfig",
    "load_yaml",
    "parse_test_config",
    "parse_test_config_from_string",
]
