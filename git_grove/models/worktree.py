"""Worktree data models."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from git_grove.constants import SHORT_HASH_LENGTH
from git_grove.formatters.path import abbreviate_path


@dataclass
class Worktree:
    """A checked-out working directory of a repository.

    ``id`` is generated whenever a record is created, so every scan yields new
    identities. It is not a cross-scan key; merging matches worktrees by path.
    """

    path: str
    branch: str
    commit_hash: str
    is_main_worktree: bool = False
    last_commit_date: Optional[datetime] = None
    last_commit_message: str = ""
    is_dirty: bool = False  # Tracked changes only, untracked files ignored
    disk_usage_bytes: Optional[int] = None
    id: uuid.UUID = field(default_factory=uuid.uuid4, compare=False)

    @property
    def short_hash(self) -> str:
        return self.commit_hash[:SHORT_HASH_LENGTH]

    @property
    def display_path(self) -> str:
        return abbreviate_path(self.path)

    def __str__(self) -> str:
        main_marker = " (main)" if self.is_main_worktree else ""
        state = "dirty" if self.is_dirty else "clean"
        return f"{self.branch} @ {self.path}{main_marker} [{state}]"
