"""Custom exceptions for git-grove"""

from typing import Optional


class GitGroveError(Exception):
    """Base exception for all git-grove errors."""
    pass


class GitOperationError(GitGroveError):
    """Exception raised when a git worktree action fails."""

    def __init__(self, operation: str, path: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.path = path
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if path:
            error_msg += f" for '{path}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class MainWorktreeError(GitOperationError):
    """Exception raised when attempting to remove a repository's main worktree."""

    def __init__(self, path: str):
        super().__init__("worktree remove", path, "The main worktree cannot be removed")
