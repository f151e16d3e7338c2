"""Command-line argument parsing for git-grove."""

import argparse
from typing import List, Optional

from git_grove.__version__ import __version__
from git_grove.constants import DEFAULT_REFRESH_INTERVAL

SORT_CHOICES = {
    "name": "name",
    "last-modified": "last_modified",
    "branch": "branch",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-grove",
        description="Find git repositories and list their worktrees",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"git-grove {__version__}")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information and write a log file"
    )
    parser.add_argument("--config", metavar="FILE", help="Settings file (default: ~/.git-grove/config.json)")
    parser.add_argument("--cache-file", metavar="FILE", help="Snapshot file (overrides the settings file)")
    parser.add_argument(
        "--sort",
        choices=list(SORT_CHOICES),
        help="Sort repositories by name, last commit, or branch of the first worktree",
    )
    parser.add_argument(
        "--workers",
        type=int,
        metavar="N",
        help="Number of repositories scanned in parallel (default: auto-detect)",
    )
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Scan one repository at a time",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="Kill git/du commands that run longer than this",
    )

    subparsers = parser.add_subparsers(dest="command")

    scan = subparsers.add_parser("scan", help="Scan the configured folders (default)")
    scan.add_argument("--no-sizes", action="store_true", help="Skip disk usage measurement")

    list_cmd = subparsers.add_parser("list", help="Show the last scan result")
    list_cmd.add_argument("query", nargs="?", default="", help="Only show matching worktrees")

    find = subparsers.add_parser("find", help="Print paths of worktrees matching a query")
    find.add_argument("query", help="Text matched against branch, repository name and path")

    subparsers.add_parser("sizes", help="Measure disk usage of every known worktree")

    remove = subparsers.add_parser("remove", help="Remove a linked worktree")
    remove.add_argument("path", help="Path of the worktree to remove")
    remove.add_argument("--force", action="store_true", help="Remove even with uncommitted changes")

    prune = subparsers.add_parser("prune", help="Prune stale worktree metadata of a repository")
    prune.add_argument("path", help="Path of the repository")

    paths = subparsers.add_parser("paths", help="Manage the folders that are scanned")
    paths_sub = paths.add_subparsers(dest="paths_command")
    paths_sub.add_parser("list", help="List scan folders")
    add = paths_sub.add_parser("add", help="Add a scan folder")
    add.add_argument("path")
    rm = paths_sub.add_parser("remove", help="Remove a scan folder")
    rm.add_argument("path")

    watch = subparsers.add_parser("watch", help="Rescan periodically until interrupted")
    watch.add_argument(
        "--interval",
        type=float,
        default=DEFAULT_REFRESH_INTERVAL,
        metavar="SECONDS",
        help=f"Seconds between scans (default: {DEFAULT_REFRESH_INTERVAL})",
    )

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    args = build_parser().parse_args(argv)
    if args.command is None:
        args.command = "scan"
        args.no_sizes = False
    if args.command == "paths" and getattr(args, "paths_command", None) is None:
        args.paths_command = "list"
    return args
