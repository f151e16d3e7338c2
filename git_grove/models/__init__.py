"""Data models for git-grove."""

from .worktree import Worktree
from .repository import Repository, SortOrder

__all__ = ["Worktree", "Repository", "SortOrder"]
