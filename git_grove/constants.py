"""Shared constants for git-grove."""

from dataclasses import dataclass
from typing import Dict, FrozenSet, List


# Directory whose presence marks a repository root (a folder, or a file in linked worktrees)
REPO_MARKER = ".git"

# Walker depth relative to each configured root
DEFAULT_MAX_DEPTH = 5

# Heavy or generated directories the walker never descends into
SKIP_DIRECTORIES: FrozenSet[str] = frozenset(
    {"node_modules", ".build", "Pods", "vendor", "DerivedData", ".Trash", REPO_MARKER}
)

# Known install locations, first existing one wins
DEFAULT_EXECUTABLE_PATHS: Dict[str, List[str]] = {
    "git": ["/usr/bin/git", "/usr/local/bin/git", "/opt/homebrew/bin/git"],
    "du": ["/usr/bin/du", "/bin/du"],
}

DETACHED_BRANCH = "HEAD (detached)"
SHORT_HASH_LENGTH = 8
REFS_HEADS = "refs/heads/"

# Periodic rescan used by `git-grove watch`
DEFAULT_REFRESH_INTERVAL = 300

APP_DIR_NAME = ".git-grove"


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str
    width: int = 0  # 0 means auto-width


COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("repository", "Repository", 24),
    ColumnDefinition("branch", "Branch", 30),
    ColumnDefinition("path", "Path"),
    ColumnDefinition("last_commit", "Last Commit", 12),
    ColumnDefinition("state", "State", 8),
    ColumnDefinition("size", "Size", 10),
]

SYMBOL_MAIN_WORKTREE = "●"
SYMBOL_LINKED_WORKTREE = "⊢"

# CLI colors (Rich color names)
CLI_COLORS = {
    "dirty": "yellow",
    "clean": "green",
    "main": "cyan",
}
