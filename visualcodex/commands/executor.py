"""Command execution utilities for visualcodex."""

import subprocess
from pathlib import Path
from typing import Union

from ..models import CommandResult
from ..utils.logging import logger


class CommandRunner:
    """Runs shell commands and captures their output.

    No timeout is enforced: a command that never exits blocks the turn.
    """

    def run(self, command: str, cwd: Union[str, Path]) -> CommandResult:
        """Execute a shell command in a working directory.

        Args:
            command: Shell command line; pipes and redirection are honoured
            cwd: Directory to run in

        Returns:
            CommandResult; spawn failures are reported in it rather than raised
        """
        logger.command(f"Executing command: {command}")

        try:
            process = subprocess.run(
                command,
                shell=True,
                cwd=str(cwd),
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            error_msg = f"Error executing command: {e}"
            logger.error(error_msg)
            return CommandResult(command=command, exit_code=-1, error=str(e))

        # Negative return codes mean the process died from a signal
        exit_code = process.returncode if process.returncode >= 0 else -1
        result = CommandResult(
            command=command,
            stdout=process.stdout or "",
            stderr=process.stderr or "",
            exit_code=exit_code,
        )

        logger.command(f"Command completed with exit code {result.exit_code}")
        if result.output:
            logger.debug(f"Output:\n{result.output}")
        return result


def create_command_runner() -> CommandRunner:
    """Create a command runner."""
    return CommandRunner()
