"""Bounded filesystem walk that finds repository roots."""

import os
from typing import List

from git_grove.constants import DEFAULT_MAX_DEPTH, REPO_MARKER, SKIP_DIRECTORIES
from git_grove.logging_config import get_logger

logger = get_logger(__name__)


def find_git_repos(root: str, max_depth: int = DEFAULT_MAX_DEPTH) -> List[str]:
    """Find repository roots under a directory.

    A directory containing a ``.git`` entry is a repository and is not
    descended into. Hidden directories and heavy generated ones are skipped.
    Unreadable directories end their branch of the walk silently.

    A linked worktree has a ``.git`` file, so one that lives under a root is
    reported as a repository of its own. Its path equals that entry's
    repository path, so it is flagged as the entry's main worktree.

    Args:
        root: Directory to start from (depth 0)
        max_depth: Deepest level below root that is still listed

    Returns:
        Repository paths in discovery order
    """
    results: List[str] = []
    _walk(root, results, 0, max_depth)
    return results


def _walk(path: str, results: List[str], depth: int, max_depth: int) -> None:
    if depth > max_depth:
        return

    try:
        with os.scandir(path) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        logger.debug(f"Cannot list {path}: {e}")
        return

    if any(entry.name == REPO_MARKER for entry in entries):
        results.append(path)
        return

    for entry in entries:
        if entry.name.startswith(".") or entry.name in SKIP_DIRECTORIES:
            continue
        try:
            is_dir = entry.is_dir()
        except OSError:
            continue
        if is_dir and depth + 1 <= max_depth:
            _walk(os.path.join(path, entry.name), results, depth + 1, max_depth)
