"""External command execution for git-grove."""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence

import git

from git_grove.constants import DEFAULT_EXECUTABLE_PATHS
from git_grove.logging_config import get_logger

logger = get_logger(__name__)


class CommandOutcome(Enum):
    """How an external command invocation ended."""
    SUCCESS = "success"
    EMPTY = "empty"
    LAUNCH_FAILED = "launch_failed"


@dataclass
class CommandResult:
    """Captured result of one external command."""
    outcome: CommandOutcome
    output: str = ""
    exit_code: Optional[int] = None
    error: str = ""  # Captured stderr or launch error, for diagnostics only

    @property
    def ok(self) -> bool:
        return self.outcome == CommandOutcome.SUCCESS

    @property
    def succeeded(self) -> bool:
        """True when the process launched and exited with status 0."""
        return self.exit_code == 0


class CommandRunner:
    """Runs git and du with their output captured as text.

    Failures are soft: callers that only need the text get an empty string
    when the tool is missing or cannot be launched.
    """

    def __init__(self, executable_paths: Optional[Dict[str, List[str]]] = None,
                 timeout: Optional[float] = None):
        """Initialize the runner.

        Args:
            executable_paths: Candidate install locations per tool name
            timeout: Seconds before a command is killed (None waits indefinitely)
        """
        self.executable_paths = executable_paths or DEFAULT_EXECUTABLE_PATHS
        self.timeout = timeout
        self._git = git.Git()

    def resolve(self, tool: str) -> Optional[str]:
        """Return the first existing executable for a tool, if any."""
        for candidate in self.executable_paths.get(tool, []):
            if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
                return candidate
        return None

    def run(self, tool: str, args: Sequence[str]) -> CommandResult:
        """Run a tool and capture its standard output.

        Args:
            tool: Tool name, looked up in the executable paths
            args: Arguments passed to the tool

        Returns:
            CommandResult; never raises for launch or exit failures
        """
        executable = self.resolve(tool)
        if executable is None:
            logger.debug(f"No executable found for '{tool}' in {self.executable_paths.get(tool, [])}")
            return CommandResult(CommandOutcome.LAUNCH_FAILED, error=f"{tool} not found")

        command = [executable, *args]
        try:
            status, stdout, stderr = self._git.execute(
                command,
                with_extended_output=True,
                with_exceptions=False,
                strip_newline_in_stdout=False,
                kill_after_timeout=self.timeout,
            )
        except (git.exc.GitCommandNotFound, OSError) as e:
            logger.debug(f"Could not launch {' '.join(command)}: {e}")
            return CommandResult(CommandOutcome.LAUNCH_FAILED, error=str(e))

        if status != 0:
            logger.debug(f"{' '.join(command)} exited with {status}: {stderr.strip()}")

        outcome = CommandOutcome.SUCCESS if stdout else CommandOutcome.EMPTY
        return CommandResult(outcome, output=stdout, exit_code=status, error=stderr)

    def output(self, tool: str, args: Sequence[str]) -> str:
        """Run a tool and return its standard output, or "" on any failure."""
        return self.run(tool, args).output
