"""Worktree queries and actions for git-grove."""

from datetime import datetime
from typing import List, Optional

from git_grove.exceptions import GitOperationError, MainWorktreeError
from git_grove.models.worktree import Worktree
from git_grove.services.parser import parse_worktree_list
from git_grove.services.runner import CommandResult, CommandRunner
from git_grove.logging_config import get_logger

logger = get_logger(__name__)


class WorktreeService:
    """Service for listing, enriching and managing the worktrees of one repository."""

    def __init__(self, repo_path: str, runner: CommandRunner):
        """Initialize the worktree service.

        Args:
            repo_path: Path to the git repository
            runner: Command runner used for every git invocation
        """
        self.repo_path = repo_path
        self.runner = runner

    def list_worktrees(self) -> List[Worktree]:
        """Get all worktrees of the repository.

        Returns:
            Parsed worktrees in git's order; empty if git produced nothing usable
        """
        output = self.runner.output("git", ["-C", self.repo_path, "worktree", "list", "--porcelain"])
        worktrees = parse_worktree_list(output, self.repo_path)
        logger.debug(f"Found {len(worktrees)} worktrees in {self.repo_path}")
        return worktrees

    def enrich(self, worktree: Worktree) -> Worktree:
        """Fill in last commit and dirty state for a worktree in place.

        Missing or malformed output leaves the affected fields untouched.

        Args:
            worktree: Worktree to update

        Returns:
            The same worktree object
        """
        log_output = self.runner.output("git", ["-C", worktree.path, "log", "-1", "--format=%aI%n%s"])
        log_lines = log_output.split("\n")
        if len(log_lines) >= 2:
            worktree.last_commit_date = parse_commit_date(log_lines[0])
            worktree.last_commit_message = log_lines[1]
        else:
            logger.debug(f"No commit information for {worktree.path}")

        status_output = self.runner.output("git", ["-C", worktree.path, "status", "--porcelain", "-uno"])
        worktree.is_dirty = bool(status_output.strip())
        return worktree

    def remove_worktree(self, worktree: Worktree, force: bool = False) -> None:
        """Remove a linked worktree.

        Args:
            worktree: Worktree to remove
            force: Remove even if the worktree is dirty or locked

        Raises:
            MainWorktreeError: If the worktree is the repository's main one
            GitOperationError: If git fails or cannot be launched
        """
        if worktree.is_main_worktree or worktree.path == self.repo_path:
            raise MainWorktreeError(worktree.path)

        args = ["-C", self.repo_path, "worktree", "remove", worktree.path]
        if force:
            args.append("--force")

        result = self.runner.run("git", args)
        self._check("worktree remove", worktree.path, result)
        logger.info(f"Removed worktree at {worktree.path}")

    def prune_worktrees(self) -> None:
        """Prune metadata of worktrees whose directories no longer exist.

        Raises:
            GitOperationError: If git fails or cannot be launched
        """
        result = self.runner.run("git", ["-C", self.repo_path, "worktree", "prune"])
        self._check("worktree prune", self.repo_path, result)
        logger.info(f"Pruned stale worktree metadata in {self.repo_path}")

    @staticmethod
    def _check(operation: str, path: str, result: CommandResult) -> None:
        if result.succeeded:
            return
        stderr = result.error.strip()
        if result.exit_code is None:
            message = stderr or "git could not be launched"
        elif stderr:
            message = f"exit {result.exit_code}: {stderr}"
        else:
            message = f"exit code {result.exit_code}"
        logger.error(f"git {operation} failed for {path}: {message}")
        raise GitOperationError(operation, path, message)


def parse_commit_date(value: str) -> Optional[datetime]:
    """Parse a strict ISO-8601 commit date (``%aI``), or None if malformed."""
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None
