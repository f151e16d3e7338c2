"""Search helpers over the repository snapshot."""

import copy
from typing import List, Tuple

from git_grove.models.repository import Repository
from git_grove.models.worktree import Worktree


def filter_repositories(repositories: List[Repository], query: str) -> List[Repository]:
    """Narrow repositories to worktrees matching a search query.

    A worktree matches when the query appears (case-insensitively) in its
    branch, path, or last commit message, or in its repository's name.
    Repositories without matching worktrees are left out.
    """
    if not query:
        return repositories

    q = query.lower()
    results = []
    for repo in repositories:
        repo_matches = q in repo.name.lower()
        matching = [
            wt for wt in repo.worktrees
            if repo_matches
            or q in wt.branch.lower()
            or q in wt.path.lower()
            or q in wt.last_commit_message.lower()
        ]
        if not matching:
            continue
        narrowed = copy.copy(repo)
        narrowed.worktrees = matching
        results.append(narrowed)
    return results


def quick_switch_matches(repositories: List[Repository], query: str) -> List[Tuple[Repository, Worktree]]:
    """Flat list of (repository, worktree) pairs for jumping to a worktree.

    Matches branch, repository name, or path; an empty query matches all.
    """
    q = query.lower()
    matches = []
    for repo in repositories:
        for wt in repo.worktrees:
            if (not q
                    or q in wt.branch.lower()
                    or q in repo.name.lower()
                    or q in wt.path.lower()):
                matches.append((repo, wt))
    return matches
