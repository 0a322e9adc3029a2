"""Runtime data model of a test plan execution."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from ..config.models import InfrastructureConfig, TestConfig
from ..lifecycle import PLAN_LIFECYCLE, PRODUCT_LIFECYCLE, TERMINAL_STATUSES, Status


@dataclass
class Port:
    """A port exposed by a provisioned host."""

    protocol: str
    port_number: int


@dataclass
class Host:
    """A provisioned host."""

    ip: str
    label: str | None = None
    ports: list[Port] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Host":
        """Build a host from a JSON mapping (``portNumber`` or ``port_number``)."""
        ports = [
            Port(
                protocol=str(p.get("protocol", "")),
                port_number=int(p.get("portNumber", p.get("port_number", 0))),
            )
            for p in data.get("ports", [])
        ]
        return cls(ip=str(data.get("ip", "")), label=data.get("label"), ports=ports)


def _env_name(value: str) -> str:
    return re.sub(r"[^A-Za-z0-9]+", "_", value).strip("_").upper()


def host_environment(hosts: list[Host]) -> dict[str, str]:
    """Export hosts as ``<LABEL>_HOST`` and ``<PROTOCOL>_PORT`` variables.

    Later hosts override earlier ones on clashing names.
    """
    env: dict[str, str] = {}
    for host in hosts:
        if host.label:
            env[f"{_env_name(host.label)}_HOST"] = host.ip
        for port in host.ports:
            if port.protocol:
                env[f"{_env_name(port.protocol)}_PORT"] = str(port.port_number)
    return env


@dataclass(frozen=True)
class TestCase:
    """One leaf test result."""

    __test__ = False

    name: str
    success: bool
    failure_message: str | None = None
    scenario_name: str | None = None


@dataclass
class TestScenario:
    """A named automation suite belonging to a test plan."""

    __test__ = False

    name: str
    dir: str | None = None
    description: str | None = None
    status: Status = Status.PENDING
    test_cases: list[TestCase] = field(default_factory=list)
    id: int | None = None
    test_plan_id: int | None = None

    @property
    def failed_test_cases(self) -> list[TestCase]:
        return [tc for tc in self.test_cases if not tc.success]


@dataclass
class TestPlan:
    """One execution of a product's scenarios against one infra combination."""

    __test__ = False

    test_config: TestConfig
    deployment_pattern: str | None = None
    infra_parameters: str = "{}"
    infra_repo_dir: str = "."
    deployment_repo_dir: str = "."
    scenario_repo_dir: str = "."
    test_run_number: int = 1
    status: Status = Status.PENDING
    test_scenarios: list[TestScenario] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: int | None = None

    @property
    def infrastructure_config(self) -> InfrastructureConfig:
        return self.test_config.infrastructure_config

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def set_status(self, status: Status) -> None:
        """Move the plan to ``status``.

        Raises:
            StatusTransitionError: If the write would move the plan backwards.
        """
        PLAN_LIFECYCLE.check(self.status, status)
        self.status = status

    def get_scenario(self, name: str) -> TestScenario | None:
        """Get a scenario by name."""
        for scenario in self.test_scenarios:
            if scenario.name == name:
                return scenario
        return None

    def __str__(self) -> str:
        return (
            f"TestPlan(id={self.id}, deployment_pattern={self.deployment_pattern}, "
            f"infra_parameters={self.infra_parameters}, status={self.status.value})"
        )


@dataclass
class InfrastructureProvisionResult:
    """Outcome of provisioning the infrastructure of a test plan."""

    success: bool = True
    name: str | None = None
    outputs: dict[str, str] = field(default_factory=dict)
    hosts: list[Host] = field(default_factory=list)


@dataclass
class DeploymentCreationResult:
    """Outcome of deploying the product onto provisioned infrastructure."""

    success: bool = True
    name: str | None = None
    hosts: list[Host] = field(default_factory=list)


@dataclass
class ProductTestPlan:
    """The test plans of one product version, run one after the other."""

    __test__ = False

    product_name: str
    product_version: str
    test_plans: list[TestPlan] = field(default_factory=list)
    infrastructure_configs: dict[str, InfrastructureConfig] = field(default_factory=dict)
    status: Status = Status.EXECUTION_PLANNED

    def set_status(self, status: Status) -> None:
        PRODUCT_LIFECYCLE.check(self.status, status)
        self.status = status

    def get_infrastructure_config(self, test_plan: TestPlan) -> InfrastructureConfig | None:
        """Get the infrastructure descriptor for a plan's deployment pattern.

        Falls back to the descriptor carried by the plan's own configuration.
        """
        if test_plan.deployment_pattern in self.infrastructure_configs:
            return self.infrastructure_configs[test_plan.deployment_pattern]
        return test_plan.infrastructure_config
