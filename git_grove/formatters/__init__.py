"""Formatting utilities for repository and worktree display."""

from .date import format_date, format_relative_date
from .path import abbreviate_path
from .size import format_size, PENDING_SIZE

__all__ = [
    "format_date",
    "format_relative_date",
    "abbreviate_path",
    "format_size",
    "PENDING_SIZE",
]
