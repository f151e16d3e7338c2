"""Tests for worktree queries and actions"""
from datetime import datetime, timedelta, timezone

import pytest

from git_grove.exceptions import GitOperationError, MainWorktreeError
from git_grove.models.worktree import Worktree
from git_grove.services.git.worktrees import WorktreeService, parse_commit_date

from conftest import porcelain

REPO = "/code/project"
LINKED = "/code/wt/feature"
SHA = "1234567890abcdef1234567890abcdef12345678"

LOG_ARGS = ["-C", LINKED, "log", "-1", "--format=%aI%n%s"]
STATUS_ARGS = ["-C", LINKED, "status", "--porcelain", "-uno"]


@pytest.fixture
def linked_worktree():
    return Worktree(path=LINKED, branch="feature", commit_hash=SHA)


class TestListWorktrees:
    """Test listing worktrees through git."""

    def test_lists_with_porcelain_format(self, fake_runner):
        fake_runner.set("git", ["-C", REPO, "worktree", "list", "--porcelain"], porcelain(
            [f"worktree {REPO}", f"HEAD {SHA}", "branch refs/heads/main"],
            [f"worktree {LINKED}", f"HEAD {SHA}", "branch refs/heads/feature"],
        ))

        worktrees = WorktreeService(REPO, fake_runner).list_worktrees()

        assert [(wt.path, wt.is_main_worktree) for wt in worktrees] == [(REPO, True), (LINKED, False)]

    def test_no_output_means_no_worktrees(self, fake_runner):
        assert WorktreeService(REPO, fake_runner).list_worktrees() == []


class TestEnrich:
    """Test last commit and dirty state enrichment."""

    def test_sets_commit_info_and_dirty_flag(self, fake_runner, linked_worktree):
        fake_runner.set("git", LOG_ARGS, "2024-03-05T10:15:00+01:00\nFix login redirect\n")
        fake_runner.set("git", STATUS_ARGS, " M app.py\n")

        WorktreeService(REPO, fake_runner).enrich(linked_worktree)

        assert linked_worktree.last_commit_date == datetime(
            2024, 3, 5, 10, 15, tzinfo=timezone(timedelta(hours=1))
        )
        assert linked_worktree.last_commit_message == "Fix login redirect"
        assert linked_worktree.is_dirty is True

    def test_short_log_output_is_ignored(self, fake_runner, linked_worktree):
        fake_runner.set("git", LOG_ARGS, "2024-03-05T10:15:00+01:00")

        WorktreeService(REPO, fake_runner).enrich(linked_worktree)

        assert linked_worktree.last_commit_date is None
        assert linked_worktree.last_commit_message == ""
        assert linked_worktree.is_dirty is False

    def test_bad_date_still_records_subject(self, fake_runner, linked_worktree):
        fake_runner.set("git", LOG_ARGS, "yesterday\nSubject line\n")

        WorktreeService(REPO, fake_runner).enrich(linked_worktree)

        assert linked_worktree.last_commit_date is None
        assert linked_worktree.last_commit_message == "Subject line"

    def test_whitespace_status_is_clean(self, fake_runner, linked_worktree):
        fake_runner.set("git", STATUS_ARGS, "\n  \n")

        WorktreeService(REPO, fake_runner).enrich(linked_worktree)

        assert linked_worktree.is_dirty is False


class TestWorktreeActions:
    """Test removal and pruning."""

    def test_remove_refuses_main_worktree(self, fake_runner):
        main = Worktree(path=REPO, branch="main", commit_hash=SHA, is_main_worktree=True)

        with pytest.raises(MainWorktreeError):
            WorktreeService(REPO, fake_runner).remove_worktree(main)

        assert fake_runner.calls == []

    def test_remove_runs_git(self, fake_runner, linked_worktree):
        WorktreeService(REPO, fake_runner).remove_worktree(linked_worktree, force=True)

        assert fake_runner.calls == [("git", "-C", REPO, "worktree", "remove", LINKED, "--force")]

    def test_remove_failure_carries_git_error(self, fake_runner, linked_worktree):
        fake_runner.fail("git", ["-C", REPO, "worktree", "remove", LINKED], 128,
                         "fatal: contains modified or untracked files\n")

        with pytest.raises(GitOperationError) as excinfo:
            WorktreeService(REPO, fake_runner).remove_worktree(linked_worktree)

        assert "exit 128" in str(excinfo.value)
        assert "modified or untracked" in str(excinfo.value)

    def test_prune_runs_git(self, fake_runner):
        WorktreeService(REPO, fake_runner).prune_worktrees()

        assert fake_runner.calls == [("git", "-C", REPO, "worktree", "prune")]

    def test_prune_without_git_raises(self, fake_runner):
        fake_runner.missing.add("git")

        with pytest.raises(GitOperationError, match="git not found"):
            WorktreeService(REPO, fake_runner).prune_worktrees()


class TestParseCommitDate:
    """Test ISO-8601 commit date parsing."""

    def test_offset_and_zulu(self):
        assert parse_commit_date("2024-01-01T00:00:00Z") == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert parse_commit_date("2024-01-01T02:00:00+02:00").utcoffset() == timedelta(hours=2)

    def test_invalid(self):
        assert parse_commit_date("") is None
        assert parse_commit_date("not a date") is None
