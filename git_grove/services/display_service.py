"""Display service for repository and worktree tables"""
from datetime import datetime
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from git_grove.constants import CLI_COLORS, COLUMNS, SYMBOL_LINKED_WORKTREE, SYMBOL_MAIN_WORKTREE
from git_grove.formatters import format_relative_date, format_size
from git_grove.models.repository import Repository
from git_grove.logging_config import get_logger

logger = get_logger(__name__)


class DisplayService:
    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self.console = console or Console()
        self.verbose = verbose

    def display_repositories(self, repositories: List[Repository], now: Optional[datetime] = None) -> None:
        """Print one row per worktree, grouped by repository, and a summary line."""
        if not repositories:
            self.console.print("[yellow]No repositories found[/yellow]")
            return

        table = Table()
        for col in COLUMNS:
            if col.width:
                table.add_column(col.label, max_width=col.width)
            else:
                table.add_column(col.label)

        for repo in repositories:
            for index, wt in enumerate(repo.worktrees):
                repo_cell = ""
                if index == 0:
                    repo_cell = f"{repo.name} ({format_size(repo.total_disk_usage)})"
                marker = SYMBOL_MAIN_WORKTREE if wt.is_main_worktree else SYMBOL_LINKED_WORKTREE
                state = "dirty" if wt.is_dirty else "clean"
                state_color = CLI_COLORS["dirty"] if wt.is_dirty else CLI_COLORS["clean"]
                table.add_row(
                    repo_cell,
                    f"{marker} {wt.branch}",
                    wt.display_path,
                    format_relative_date(wt.last_commit_date, now),
                    f"[{state_color}]{state}[/{state_color}]",
                    format_size(wt.disk_usage_bytes),
                    style=CLI_COLORS["main"] if wt.is_main_worktree and self.verbose else None,
                )

        self.console.print(table)
        self.console.print(summary_line(repositories))

    def display_matches(self, matches) -> None:
        """Print quick-switch matches as plain paths, one per line."""
        for _, wt in matches:
            self.console.print(wt.path, highlight=False, soft_wrap=True)


def summary_line(repositories: List[Repository]) -> str:
    worktree_count = sum(repo.worktree_count for repo in repositories)
    return f"{len(repositories)} repos · {worktree_count} worktrees"
