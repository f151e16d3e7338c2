"""Git-related services for git-grove."""

from .worktrees import WorktreeService

__all__ = [
    "WorktreeService",
]
