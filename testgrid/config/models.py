"""Pydantic models for test plan configuration files."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ConfigModel(BaseModel):
    """Base for configuration models; accepts snake_case and camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Script(ConfigModel):
    """A script run by a provisioner or deployer."""

    name: str | None = None
    type: str = "SHELL"
    file: str
    phase: Literal["create", "destroy"] = "create"
    input_parameters: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def normalize_script(cls, data: Any) -> Any:
        """Allow a bare file name as shorthand."""
        if isinstance(data, str):
            return {"file": data}
        return data


class Provisioner(ConfigModel):
    """A named set of scripts that creates and destroys infrastructure."""

    name: str
    description: str | None = None
    remote_repository: str | None = None
    scripts: list[Script] = Field(default_factory=list)

    def scripts_for(self, phase: str) -> list[Script]:
        """Get the scripts of a phase in declaration order."""
        return [s for s in self.scripts if s.phase == phase]


class InfrastructureConfig(ConfigModel):
    """Infrastructure descriptor of a test plan."""

    infrastructure_provider: str = "SHELL"
    iac_provider: str | None = None
    container_orchestration_engine: str | None = None
    provisioners: list[Provisioner] = Field(default_factory=list)
    parameters: dict[str, str] = Field(default_factory=dict)

    @property
    def first_provisioner(self) -> Provisioner | None:
        """The provisioner used to create the infrastructure."""
        return self.provisioners[0] if self.provisioners else None


class DeploymentPatternConfig(ConfigModel):
    """A deployment pattern and the scripts that deploy it."""

    name: str
    description: str | None = None
    scripts: list[Script] = Field(default_factory=list)


class DeploymentConfig(ConfigModel):
    """Deployment descriptor of a test plan."""

    type: str = "SHELL"
    deployment_patterns: list[DeploymentPatternConfig] = Field(default_factory=list)

    def get_pattern(self, name: str | None) -> DeploymentPatternConfig | None:
        """Get a deployment pattern by name, or the first one if name is None."""
        for pattern in self.deployment_patterns:
            if name is None or pattern.name == name:
                return pattern
        return None


class ScenarioDefinition(ConfigModel):
    """A scenario declared in the scenario configuration."""

    name: str
    dir: str | None = None
    description: str | None = None

    @model_validator(mode="before")
    @classmethod
    def normalize_scenario(cls, data: Any) -> Any:
        """Allow a bare scenario name as shorthand."""
        if isinstance(data, str):
            return {"name": data}
        return data


class ConfigChangeSet(ConfigModel):
    """A pair of apply/revert scripts and the scenarios they wrap."""

    name: str
    description: str | None = None
    applies_to: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_applies_to(cls, data: Any) -> Any:
        """Normalize appliesTo to always be a list."""
        if isinstance(data, dict):
            for key in ("appliesTo", "applies_to"):
                value = data.get(key)
                if isinstance(value, str):
                    data[key] = [value]
        return data


class ScenarioConfig(ConfigModel):
    """Scenarios and config change sets of a test plan."""

    scenarios: list[ScenarioDefinition] = Field(default_factory=list)
    config_change_sets: list[ConfigChangeSet] = Field(default_factory=list)

    def get_scenario(self, name: str) -> ScenarioDefinition | None:
        """Get the first declared scenario with the given name."""
        for scenario in self.scenarios:
            if scenario.name == name:
                return scenario
        return None

    def get_scenario_names(self) -> list[str]:
        """Get all declared scenario names, in order."""
        return [s.name for s in self.scenarios]


class TestConfig(ConfigModel):
    """Root model for a test plan YAML file."""

    __test__ = False

    product: str | None = None
    deployment_pattern: str | None = None
    infra_params: list[dict[str, Any]] = Field(default_factory=list)
    infrastructure_config: InfrastructureConfig = Field(
        default_factory=InfrastructureConfig
    )
    deployment_config: DeploymentConfig = Field(default_factory=DeploymentConfig)
    scenario_config: ScenarioConfig = Field(default_factory=ScenarioConfig)

    @model_validator(mode="before")
    @classmethod
    def normalize_config(cls, data: Any) -> Any:
        """Normalize shorthand keys."""
        if not isinstance(data, dict):
            return data

        # A single infra parameter mapping is one combination
        for key in ("infraParams", "infra_params"):
            value = data.get(key)
            if isinstance(value, dict):
                data[key] = [value]

        # Top-level scenarios list is shorthand for scenarioConfig.scenarios
        if "scenarios" in data:
            scenarios = data.pop("scenarios")
            key = "scenario_config" if "scenario_config" in data else "scenarioConfig"
            scenario_config = data.setdefault(key, {})
            if isinstance(scenario_config, dict):
                scenario_config.setdefault("scenarios", scenarios)

        return data

    @property
    def resolved_deployment_pattern(self) -> str | None:
        """The deployment pattern name, defaulting to the first declared one."""
        if self.deployment_pattern:
            return self.deployment_pattern
        pattern = self.deployment_config.get_pattern(None)
        return pattern.name if pattern else None
