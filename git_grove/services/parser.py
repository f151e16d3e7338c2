"""Parser for `git worktree list --porcelain` output."""

from typing import List

from git_grove.constants import DETACHED_BRANCH, REFS_HEADS, SHORT_HASH_LENGTH
from git_grove.models.worktree import Worktree


def parse_worktree_list(output: str, repo_path: str) -> List[Worktree]:
    """Parse porcelain worktree output into Worktree records.

    Format (one block per worktree, blocks separated by a blank line):
        worktree /path/to/worktree
        HEAD <commit sha>
        branch refs/heads/<branch name>   | detached | bare

    Blocks without both a path and a commit hash are skipped. Order is kept
    and duplicates are not removed.

    Args:
        output: Raw command output
        repo_path: Path of the owning repository; the block with exactly this
            path is the main worktree

    Returns:
        List of Worktree objects in input order
    """
    worktrees = []

    for block in output.split("\n\n"):
        path = ""
        commit_hash = ""
        branch = ""
        detached = False

        for line in block.strip().split("\n"):
            if line.startswith("worktree "):
                path = line[len("worktree "):]
            elif line.startswith("HEAD "):
                commit_hash = line[len("HEAD "):]
            elif line.startswith("branch "):
                branch = line[len("branch "):]
                if branch.startswith(REFS_HEADS):
                    branch = branch[len(REFS_HEADS):]
            elif line == "detached":
                detached = True
            # "bare" and annotations such as "locked"/"prunable" carry no fields

        if not path or not commit_hash:
            continue

        if detached:
            branch = DETACHED_BRANCH
        elif not branch:
            branch = commit_hash[:SHORT_HASH_LENGTH]

        worktrees.append(
            Worktree(
                path=path,
                branch=branch,
                commit_hash=commit_hash,
                is_main_worktree=path == repo_path,
            )
        )

    return worktrees
