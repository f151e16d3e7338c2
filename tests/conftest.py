"""Pytest fixtures for git-grove tests"""
import shutil
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import git
import pytest

from git_grove.config import Config
from git_grove.services.runner import CommandOutcome, CommandResult, CommandRunner
from git_grove.services.snapshot_store import SnapshotStore


class FakeRunner(CommandRunner):
    """Command runner that answers from a table of canned outputs.

    Keys are (tool, *args) tuples; unknown commands produce empty output
    with exit code 0, or a launch failure for tools listed in ``missing``.
    """

    def __init__(self, responses: Optional[Dict[Tuple[str, ...], str]] = None):
        super().__init__(executable_paths={})
        self.responses: Dict[Tuple[str, ...], str] = dict(responses or {})
        self.failures: Dict[Tuple[str, ...], Tuple[int, str]] = {}
        self.missing: set = set()
        self.calls: List[Tuple[str, ...]] = []

    def set(self, tool: str, args: Sequence[str], output: str) -> None:
        self.responses[(tool, *args)] = output

    def fail(self, tool: str, args: Sequence[str], exit_code: int, stderr: str) -> None:
        self.failures[(tool, *args)] = (exit_code, stderr)

    def run(self, tool: str, args: Sequence[str]) -> CommandResult:
        key = (tool, *args)
        self.calls.append(key)
        if tool in self.missing:
            return CommandResult(CommandOutcome.LAUNCH_FAILED, error=f"{tool} not found")
        if key in self.failures:
            exit_code, stderr = self.failures[key]
            return CommandResult(CommandOutcome.EMPTY, exit_code=exit_code, error=stderr)
        output = self.responses.get(key, "")
        outcome = CommandOutcome.SUCCESS if output else CommandOutcome.EMPTY
        return CommandResult(outcome, output=output, exit_code=0)


def porcelain(*blocks: List[str]) -> str:
    """Build `git worktree list --porcelain` output from lists of lines."""
    return "".join("\n".join(lines) + "\n\n" for lines in blocks)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def cache_file(temp_dir):
    return temp_dir / "state" / "scan-cache.json"


@pytest.fixture
def store(cache_file):
    return SnapshotStore(cache_file)


@pytest.fixture
def make_config(temp_dir, cache_file):
    """Factory for a Config scanning the given roots with an isolated snapshot file."""

    def _make(*roots: Path, **overrides) -> Config:
        values = {
            "scan_paths": [str(root) for root in roots] or [str(temp_dir)],
            "cache_file": str(cache_file),
            "sequential": True,
        }
        values.update(overrides)
        return Config(**values)

    return _make


@pytest.fixture
def system_runner():
    """Runner that uses the git and du found on PATH."""
    git_path = shutil.which("git")
    du_path = shutil.which("du")
    if git_path is None or du_path is None:
        pytest.skip("git and du are required")
    return CommandRunner(executable_paths={"git": [git_path], "du": [du_path]})


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository at <temp>/root-a/project."""
    repo_path = temp_dir / "root-a" / "project"
    repo_path.mkdir(parents=True)

    repo = git.Repo.init(repo_path)
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    readme = repo_path / "README.md"
    readme.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    try:
        repo.git.branch('-M', 'main')
    except git.exc.GitCommandError:
        pass

    yield repo

    repo.close()


@pytest.fixture
def git_repo_with_worktree(git_repo, temp_dir):
    """Repository with a linked worktree outside the scan roots."""
    linked_path = temp_dir / "elsewhere" / "feature"
    linked_path.parent.mkdir(parents=True)
    git_repo.git.worktree("add", "-b", "feature", str(linked_path))
    yield git_repo, linked_path
