"""Test plan runtime model and generation."""

from .generator import generate_test_plan, generate_test_plans, serialize_infra_parameters
from .models import (
    DeploymentCreationResult,
    Host,
    InfrastructureProvisionResult,
    Port,
    ProductTestPlan,
    TestCase,
    TestPlan,
    TestScenario,
    host_environment,
)

__all__ = [
    "generate_test_plan",
    "generate_test_plans",
    "serialize_infra_parameters",
    "DeploymentCreationResult",
    "Host",
    "InfrastructureProvisionResult",
    "Port",
    "ProductTestPlan",
    "TestCase",
    "TestPlan",
    "TestScenario",
    "host_environment",
]
