"""Apply and revert config change sets around a scenario."""

import logging
from pathlib import Path

from ..config.models import ConfigChangeSet
from ..plan.models import TestPlan
from ..shell import CommandExecutionError, ShellCommandRunner

logger = logging.getLogger(__name__)

CHANGE_SETS_DIR = "config-sets"
APPLY_SCRIPT = "apply-config.sh"
REVERT_SCRIPT = "revert-config.sh"


class ConfigChangeSetApplier:
    """Run a change set's apply or revert script.

    Scripts live in ``<scenario repo>/config-sets/<change set name>/``.
    Failures are logged and reported through the return value only.
    """

    def __init__(self, shell_runner: ShellCommandRunner | None = None):
        self.shell_runner = shell_runner or ShellCommandRunner()

    def change_set_dir(self, test_plan: TestPlan, change_set: ConfigChangeSet) -> Path:
        return Path(test_plan.scenario_repo_dir) / CHANGE_SETS_DIR / change_set.name

    def run(self, test_plan: TestPlan, change_set: ConfigChangeSet, apply: bool) -> int | None:
        """Run the apply (``apply=True``) or revert script of a change set.

        Returns:
            The script's exit code, or None if it could not be launched.
        """
        script = APPLY_SCRIPT if apply else REVERT_SCRIPT
        try:
            exit_code = self.shell_runner.run(
                self.change_set_dir(test_plan, change_set), f"bash {script}"
            )
        except CommandExecutionError as e:
            logger.warning("Could not run %s of config change set %s: %s", script, change_set.name, e)
            return None

        if exit_code != 0:
            logger.error(
                "%s of config change set %s exited with status %d",
                script,
                change_set.name,
                exit_code,
            )
        return exit_code

    def apply(self, test_plan: TestPlan, change_set: ConfigChangeSet) -> int | None:
        return self.run(test_plan, change_set, apply=True)

    def revert(self, test_plan: TestPlan, change_set: ConfigChangeSet) -> int | None:
        return self.run(test_plan, change_set, apply=False)
