"""Deployer that runs the deployment pattern's shell scripts."""

import json
import logging
import shlex
from pathlib import Path

from ..config.models import Script
from ..plan.models import (
    DeploymentCreationResult,
    Host,
    InfrastructureProvisionResult,
    TestPlan,
    host_environment,
)
from ..shell import CommandExecutionError, ShellCommandRunner
from .base import Deployer
from .errors import DeployerError

logger = logging.getLogger(__name__)

DEPLOY_SCRIPT_NAME = "deploy.sh"
DEPLOYMENT_FILE = "deployment.json"


class ShellDeployer(Deployer):
    """Run ``deploy.sh`` (or the pattern's scripts) from the deployment repository.

    Provisioning outputs and host variables are exported to the scripts. A
    script may write ``deployment.json`` (``{"hosts": [...]}``) into
    ``TESTGRID_OUTPUT_DIR`` to replace the provisioned host list.
    """

    name = "SHELL"

    def __init__(self, shell_runner: ShellCommandRunner | None = None):
        self.shell_runner = shell_runner or ShellCommandRunner()

    def deploy(
        self, test_plan: TestPlan, provision_result: InfrastructureProvisionResult
    ) -> DeploymentCreationResult:
        pattern = test_plan.test_config.deployment_config.get_pattern(
            test_plan.deployment_pattern
        )
        scripts = pattern.scripts if pattern and pattern.scripts else [Script(file=DEPLOY_SCRIPT_NAME)]
        logger.info("Performing the deployment %s", test_plan.deployment_pattern)

        env = dict(provision_result.outputs)
        env.update(host_environment(provision_result.hosts))
        output_dir = provision_result.outputs.get("output_dir")
        if output_dir:
            env["TESTGRID_OUTPUT_DIR"] = output_dir

        for script in scripts:
            try:
                exit_code = self.shell_runner.run(
                    test_plan.deployment_repo_dir,
                    f"bash {shlex.quote(script.file)}",
                    env={**env, **script.input_parameters},
                )
            except CommandExecutionError as e:
                raise DeployerError(f"Error running {script.file}: {e}") from e
            if exit_code != 0:
                raise DeployerError(
                    f"Error occurred while executing {script.file}, exit status {exit_code}"
                )

        hosts = provision_result.hosts
        if output_dir:
            hosts = self._read_hosts(Path(output_dir) / DEPLOYMENT_FILE) or hosts

        return DeploymentCreationResult(
            success=True,
            name=pattern.name if pattern else test_plan.deployment_pattern,
            hosts=hosts,
        )

    @staticmethod
    def _read_hosts(path: Path) -> list[Host]:
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise DeployerError(f"Error occurred while reading the {path.name} file: {e}") from e
        return [Host.from_dict(h) for h in data.get("hosts", [])]
