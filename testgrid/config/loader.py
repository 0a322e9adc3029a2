"""Read ``testgrid.yaml`` test plan configurations."""

from pathlib import Path

import yaml
from pydantic import ValidationError

from .errors import ConfigLoadError, ConfigValidationError
from .models import TestConfig

YAML_EXTENSIONS = (".yaml", ".yml")


def load_yaml(path: str | Path) -> dict:
    """Read a configuration file into its raw mapping.

    An empty file is an empty configuration.

    Raises:
        ConfigLoadError: If the file is missing, not YAML, or not a mapping.
    """
    path = Path(path)
    if not path.is_file():
        reason = "Not a file" if path.exists() else "File not found"
        raise ConfigLoadError(f"{reason}: {path}", str(path))
    if path.suffix not in YAML_EXTENSIONS:
        raise ConfigLoadError(
            f"Test plan configuration should be a YAML file: {path}", str(path)
        )

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigLoadError(f"Cannot read file: {e}", str(path)) from e
    return _to_mapping(text, str(path))


def parse_test_config(path: str | Path) -> TestConfig:
    """Load a configuration file into a TestConfig.

    Raises:
        ConfigLoadError: If the file cannot be read or parsed.
        ConfigValidationError: If the data fails validation.
    """
    return _to_test_config(load_yaml(path))


def parse_test_config_from_string(yaml_string: str) -> TestConfig:
    """Parse an inline YAML document into a TestConfig."""
    return _to_test_config(_to_mapping(yaml_string))


def _to_test_config(data: dict) -> TestConfig:
    """Validate a raw mapping.

    Each problem is reported under its dotted YAML path, for example
    ``scenarioConfig.scenarios.0.name``.

    Raises:
        ConfigValidationError: If the mapping is not a valid configuration.
    """
    try:
        return TestConfig.model_validate(data)
    except ValidationError as e:
        errors = [
            {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"], "type": err["type"]}
            for err in e.errors()
        ]
        raise ConfigValidationError(
            f"Configuration validation failed with {len(errors)} error(s)", errors
        ) from e


def _to_mapping(text: str, source: str | None = None) -> dict:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML: {e}", source) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(
            f"Expected YAML mapping at root, got {type(data).__name__}", source
        )
    return data
