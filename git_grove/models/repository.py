"""Repository model and sort orders"""
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from git_grove.formatters.path import abbreviate_path
from git_grove.models.worktree import Worktree


class SortOrder(Enum):
    """How the snapshot is ordered after each scan."""
    NAME = "name"
    LAST_MODIFIED = "last_modified"
    BRANCH = "branch"


@dataclass
class Repository:
    """A repository root and its worktrees. ``path`` is the unique key."""
    name: str
    path: str
    worktrees: List[Worktree] = field(default_factory=list)

    @classmethod
    def from_path(cls, path: str, worktrees: List[Worktree]) -> "Repository":
        return cls(name=os.path.basename(path.rstrip(os.sep)) or path, path=path, worktrees=worktrees)

    @property
    def main_worktree(self) -> Optional[Worktree]:
        return next((wt for wt in self.worktrees if wt.is_main_worktree), None)

    @property
    def total_disk_usage(self) -> Optional[int]:
        """Sum of measured worktree sizes; None until at least one is measured."""
        sizes = [wt.disk_usage_bytes for wt in self.worktrees if wt.disk_usage_bytes is not None]
        if not sizes:
            return None
        return sum(sizes)

    @property
    def display_path(self) -> str:
        return abbreviate_path(self.path)

    @property
    def worktree_count(self) -> int:
        return len(self.worktrees)

    def find_worktree(self, path: str) -> Optional[Worktree]:
        return next((wt for wt in self.worktrees if wt.path == path), None)
