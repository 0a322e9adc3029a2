"""Tests for the test plan configuration loader."""

import pytest

from testgrid.config.errors import ConfigLoadError, ConfigValidationError
from testgrid.config.loader import load_yaml, parse_test_config, parse_test_config_from_string


class TestLoadYaml:
    def test_load_valid_yaml(self, tmp_path):
        yaml_file = tmp_path / "testgrid.yaml"
        yaml_file.write_text("key: value\nlist:\n  - item1\n  - item2")

        data = load_yaml(yaml_file)
        assert data["key"] == "value"
        assert data["list"] == ["item1", "item2"]

    def test_file_not_found(self):
        with pytest.raises(ConfigLoadError) as exc_info:
            load_yaml("/nonexistent/testgrid.yaml")
        assert "not found" in str(exc_info.value).lower()
        assert exc_info.value.path == "/nonexistent/testgrid.yaml"

    def test_directory_is_rejected(self, tmp_path):
        with pytest.raises(ConfigLoadError):
            load_yaml(tmp_path)

    def test_non_yaml_suffix_is_rejected(self, tmp_path):
        json_file = tmp_path / "testgrid.json"
        json_file.write_text("{}")

        with pytest.raises(ConfigLoadError) as exc_info:
            load_yaml(json_file)
        assert "YAML" in str(exc_info.value)

    def test_invalid_yaml(self, tmp_path):
        yaml_file = tmp_path / "invalid.yml"
        yaml_file.write_text("key: [unclosed bracket")

        with pytest.raises(ConfigLoadError) as exc_info:
            load_yaml(yaml_file)
        assert "Invalid YAML" in str(exc_info.value)

    def test_empty_file_returns_empty_dict(self, tmp_path):
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert load_yaml(yaml_file) == {}

    def test_non_mapping_at_root(self, tmp_path):
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- item1\n- item2")

        with pytest.raises(ConfigLoadError) as exc_info:
            load_yaml(yaml_file)
        assert "mapping" in str(exc_info.value).lower()


class TestParseTestConfig:
    def test_parse_file(self, tmp_path, config_yaml):
        yaml_file = tmp_path / "testgrid.yaml"
        yaml_file.write_text(config_yaml)

        config = parse_test_config(yaml_file)

        assert config.product == "wso2is"
        assert config.scenario_config.get_scenario_names() == ["login", "sso", "provisioning"]

    def test_parse_empty_string(self):
        config = parse_test_config_from_string("")

        assert config.scenario_config.scenarios == []
        assert config.infra_params == []

    def test_invalid_yaml_string(self):
        with pytest.raises(ConfigLoadError):
            parse_test_config_from_string("scenarios: [unclosed")

    def test_non_mapping_string(self):
        with pytest.raises(ConfigLoadError):
            parse_test_config_from_string("- login")

    def test_validation_errors_are_normalized(self):
        yaml = """
scenarioConfig:
  scenarios:
    - dir: no-name
"""
        with pytest.raises(ConfigValidationError) as exc_info:
            parse_test_config_from_string(yaml)

        errors = exc_info.value.errors
        assert len(errors) >= 1
        assert set(errors[0]) == {"loc", "msg", "type"}
        assert errors[0]["loc"].startswith("scenarioConfig.scenarios.0")

    def test_unknown_script_phase(self):
        yaml = """
infrastructureConfig:
  provisioners:
    - name: p
      scripts:
        - file: create.sh
          phase: upgrade
"""
        with pytest.raises(ConfigValidationError):
            parse_test_config_from_string(yaml)
