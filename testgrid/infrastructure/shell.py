"""Infrastructure provider that runs provisioner shell scripts."""

import json
import logging
import re
import shlex
import shutil
import tempfile
from pathlib import Path

from ..config.models import InfrastructureConfig, Script
from ..plan.models import Host, InfrastructureProvisionResult, TestPlan
from ..shell import CommandExecutionError, ShellCommandRunner
from .base import InfrastructureProvider
from .errors import InfrastructureError, InfrastructureProviderInitializationError

logger = logging.getLogger(__name__)

OUTPUT_FILE = "infrastructure.json"


def _slug(value: str | None) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "-", value or "default").strip("-") or "default"


class ShellInfrastructureProvider(InfrastructureProvider):
    """Provision by running the ``create`` scripts of the first provisioner.

    Scripts run from the infrastructure repository with the script input
    parameters, the plan's infra parameters and ``TESTGRID_OUTPUT_DIR`` in
    their environment. A script may write ``infrastructure.json`` into the
    output directory::

        {"outputs": {"key": "value"},
         "hosts": [{"ip": "10.0.0.1", "label": "wso2is", "ports": [...]}]}
    """

    name = "SHELL"

    def __init__(
        self,
        shell_runner: ShellCommandRunner | None = None,
        workspace_dir: str | Path | None = None,
    ):
        self.shell_runner = shell_runner or ShellCommandRunner()
        self.workspace_dir = Path(workspace_dir or Path(tempfile.gettempdir()) / "testgrid")

    def output_dir(self, test_plan: TestPlan) -> Path:
        """Per-plan directory provisioning scripts write their outputs to."""
        return (
            self.workspace_dir
            / _slug(test_plan.deployment_pattern)
            / f"run-{test_plan.test_run_number}"
        )

    def init(self, test_plan: TestPlan) -> None:
        if not Path(test_plan.infra_repo_dir).is_dir():
            raise InfrastructureProviderInitializationError(
                f"Infrastructure repository not found: {test_plan.infra_repo_dir}"
            )

    def provision(self, test_plan: TestPlan) -> InfrastructureProvisionResult:
        config = test_plan.infrastructure_config
        provisioner = config.first_provisioner
        if provisioner is None:
            raise InfrastructureError("Infrastructure config declares no provisioners")

        output_dir = self.output_dir(test_plan)
        output_dir.mkdir(parents=True, exist_ok=True)

        env = {str(k): str(v) for k, v in json.loads(test_plan.infra_parameters).items()}
        env.update(config.parameters)
        env["TESTGRID_OUTPUT_DIR"] = str(output_dir)

        for script in provisioner.scripts_for("create"):
            self._run_script(script, test_plan.infra_repo_dir, env)

        logger.info("Provisioned infrastructure with provisioner '%s'", provisioner.name)
        outputs, hosts = self._read_outputs(output_dir)
        outputs["output_dir"] = str(output_dir)
        return InfrastructureProvisionResult(
            success=True, name=provisioner.name, outputs=outputs, hosts=hosts
        )

    def release(self, infrastructure_config: InfrastructureConfig, infra_repo_dir: str) -> bool:
        provisioner = infrastructure_config.first_provisioner
        if provisioner is None:
            logger.warning("No provisioner declared, nothing to release")
            return True

        for script in provisioner.scripts_for("destroy"):
            self._run_script(script, infra_repo_dir, dict(infrastructure_config.parameters))
        logger.info("Released infrastructure of provisioner '%s'", provisioner.name)
        return True

    def cleanup(self, test_plan: TestPlan) -> None:
        output_dir = self.output_dir(test_plan)
        if output_dir.exists():
            try:
                shutil.rmtree(output_dir)
            except OSError as e:
                raise InfrastructureError(f"Cannot remove {output_dir}: {e}") from e
            logger.debug("Removed %s", output_dir)

    def _run_script(self, script: Script, work_dir: str, env: dict[str, str]) -> None:
        if script.type.upper() != "SHELL":
            raise InfrastructureError(
                f"Script type '{script.type}' of '{script.file}' is not supported by the shell provider"
            )

        try:
            exit_code = self.shell_runner.run(
                work_dir,
                f"bash {shlex.quote(script.file)}",
                env={**env, **script.input_parameters},
            )
        except CommandExecutionError as e:
            raise InfrastructureError(f"Error running {script.file}: {e}") from e

        if exit_code != 0:
            raise InfrastructureError(f"{script.file} exited with status {exit_code}")

    @staticmethod
    def _read_outputs(output_dir: Path) -> tuple[dict[str, str], list[Host]]:
        output_file = output_dir / OUTPUT_FILE
        if not output_file.exists():
            return {}, []

        try:
            data = json.loads(output_file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise InfrastructureError(f"Cannot read {output_file}: {e}") from e

        outputs = {str(k): str(v) for k, v in data.get("outputs", {}).items()}
        hosts = [Host.from_dict(h) for h in data.get("hosts", [])]
        return outputs, hosts
