"""Command-line interface for TestGrid."""

import sys

import click

from .config.errors import ConfigLoadError, ConfigValidationError
from .config.loader import parse_test_config
from .core.errors import TestPlanExecutorError
from .core.executor import TestPlanExecutor
from .infrastructure import default_provider_registry
from .lifecycle import Status
from .logging_config import configure_logging
from .output.formatter import format_validation_result
from .persistence import (
    PersistenceError,
    SqlTestPlanStore,
    SqlTestScenarioStore,
    create_store_engine,
)
from .plan.generator import generate_test_plans
from .settings import load_settings
from .validators.runner import validate_config_file

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _echo_config_error(e: Exception) -> None:
    if isinstance(e, ConfigValidationError):
        click.echo(f"Configuration error: {e}", err=True)
        for err in e.errors:
            click.echo(f"  - {err['loc']}: {err['msg']}", err=True)
    else:
        click.echo(f"Error loading file: {e}", err=True)


@click.group()
@click.version_option()
def main():
    """TestGrid: run test plans against provisioned deployments."""
    pass


@main.command()
@click.argument("config_file", type=click.Path(exists=True))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Treat warnings as errors",
)
def validate(config_file: str, output_format: str, strict: bool):
    """Validate a test plan configuration file.

    CONFIG_FILE is the path to a testgrid YAML file.

    Exit codes:
      0 - Validation passed
      1 - Validation failed (errors found)
      2 - File or schema error
    """
    try:
        result = validate_config_file(config_file)
    except (ConfigLoadError, ConfigValidationError) as e:
        _echo_config_error(e)
        sys.exit(2)

    click.echo(format_validation_result(result, output_format))  # type: ignore

    if result.fails(strict):
        sys.exit(1)
    sys.exit(0)


@main.command("run-testplan")
@click.argument("config_file", type=click.Path(exists=True))
@click.option(
    "--infra-repo",
    required=True,
    type=click.Path(exists=True, file_okay=False),
    help="Infrastructure repository with provisioning scripts",
)
@click.option(
    "--deployment-repo",
    required=True,
    type=click.Path(exists=True, file_okay=False),
    help="Deployment repository with deployment scripts",
)
@click.option(
    "--scenario-repo",
    required=True,
    type=click.Path(exists=True, file_okay=False),
    help="Scenario repository with test scenarios and config sets",
)
@click.option(
    "--database-url",
    default=None,
    help="SQLAlchemy database URL (defaults to TESTGRID_DATABASE_URL)",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level (defaults to TESTGRID_LOG_LEVEL)",
)
def run_testplan(
    config_file: str,
    infra_repo: str,
    deployment_repo: str,
    scenario_repo: str,
    database_url: str | None,
    log_level: str | None,
):
    """Run the test plans of a configuration file.

    One test plan is run per infra parameter combination.

    Exit codes:
      0 - Every test plan passed
      1 - A test plan did not pass
      2 - File, schema, database or execution error
    """
    settings = load_settings(database_url=database_url, log_level=log_level)
    configure_logging(settings.log_level)

    try:
        config = parse_test_config(config_file)
        engine = create_store_engine(settings.database_url)
        test_plan_store = SqlTestPlanStore.from_engine(engine)
        test_plans = generate_test_plans(
            config,
            infra_repo_dir=infra_repo,
            deployment_repo_dir=deployment_repo,
            scenario_repo_dir=scenario_repo,
            test_plan_store=test_plan_store,
        )
    except (ConfigLoadError, ConfigValidationError) as e:
        _echo_config_error(e)
        sys.exit(2)
    except PersistenceError as e:
        click.echo(f"Database error: {e}", err=True)
        sys.exit(2)

    executor = TestPlanExecutor(
        test_plan_store=test_plan_store,
        test_scenario_store=SqlTestScenarioStore.from_engine(engine),
        provider_registry=default_provider_registry(workspace_dir=settings.workspace_dir),
    )

    exit_code = 0
    for test_plan in test_plans:
        try:
            test_plan.set_status(Status.RUNNING)
            test_plan_store.persist_test_plan(test_plan)
            executor.execute(test_plan, test_plan.infrastructure_config)
        except (PersistenceError, TestPlanExecutorError) as e:
            click.echo(f"Error running {test_plan}: {e}", err=True)
            exit_code = 2
        else:
            if test_plan.status != Status.SUCCESS:
                exit_code = max(exit_code, 1)

        click.echo(
            f"{test_plan.deployment_pattern} {test_plan.infra_parameters} "
            f"run #{test_plan.test_run_number}: {test_plan.status.value}"
        )

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
