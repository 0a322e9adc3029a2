"""Run shell commands in a working directory."""

import logging
import os
import shlex
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class CommandExecutionError(Exception):
    """Raised when a command cannot be launched or does not finish."""

    def __init__(self, message: str, command: str | None = None):
        self.command = command
        super().__init__(message)


class ShellCommandRunner:
    """Run commands and stream their output into the log.

    No timeout is applied unless the caller passes one.
    """

    def __init__(self, env: dict[str, str] | None = None):
        """Initialize the runner.

        Args:
            env: Extra environment variables for every command.
        """
        self.env = dict(env or {})

    def run(
        self,
        work_dir: str | Path,
        command: str,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> int:
        """Run a command and wait for it to finish.

        Args:
            work_dir: Directory the command runs in.
            command: Command line, split with shell quoting rules.
            env: Extra environment variables for this command.
            timeout: Seconds to wait before killing the command.

        Returns:
            The exit code of the command.

        Raises:
            CommandExecutionError: If the command cannot be launched or times out.
        """
        args = shlex.split(command)
        if not args:
            raise CommandExecutionError("Empty command", command)

        full_env = {**os.environ, **self.env, **(env or {})}
        logger.info("Running '%s' in %s", command, work_dir)

        try:
            process = subprocess.Popen(
                args,
                cwd=str(work_dir),
                env=full_env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as e:
            raise CommandExecutionError(
                f"Error launching '{command}' in {work_dir}: {e}", command
            ) from e

        try:
            output, _ = process.communicate(timeout=timeout)
        except subprocess.TimeoutExpired as e:
            process.kill()
            process.communicate()
            raise CommandExecutionError(
                f"Command '{command}' did not finish within {timeout}s", command
            ) from e

        for line in (output or "").splitlines():
            logger.info("[%s] %s", args[-1], line)

        logger.debug("'%s' exited with %d", command, process.returncode)
        return process.returncode
