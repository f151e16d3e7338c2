"""Entry point for the git-grove command."""

import os
import sys
import time
from typing import List, Optional

from rich.console import Console

from git_grove.cli.args import SORT_CHOICES, parse_args
from git_grove.config import Config
from git_grove.exceptions import GitGroveError
from git_grove.filters import filter_repositories, quick_switch_matches
from git_grove.logging_config import get_logger, setup_logging
from git_grove.services.display_service import DisplayService
from git_grove.services.scanner import GroveScanner

console = Console()
logger = get_logger(__name__)


def build_config(args) -> Config:
    """Load the settings file and apply command-line overrides."""
    config = Config.load(args.config)
    overrides = config.to_dict()
    overrides["verbose"] = args.verbose
    overrides["debug"] = args.debug
    if args.cache_file:
        overrides["cache_file"] = args.cache_file
    if args.sort:
        overrides["sort_order"] = SORT_CHOICES[args.sort]
    if args.workers is not None:
        overrides["workers"] = args.workers
    if args.sequential:
        overrides["sequential"] = True
    if args.timeout is not None:
        overrides["command_timeout"] = args.timeout
    return Config.from_dict(overrides)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    args = parse_args(argv)
    setup_logging(verbose=args.verbose, debug=args.debug)

    try:
        config = build_config(args)
        if args.debug:
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}")

        if args.command == "paths":
            return run_paths(args, config)

        scanner = GroveScanner(config)
        display = DisplayService(console=console, verbose=args.verbose)
        return run_command(args, scanner, display)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except (GitGroveError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if args.debug:
            console.print_exception()
        return 1


def run_command(args, scanner: GroveScanner, display: DisplayService) -> int:
    if args.command == "scan":
        with console.status("Scanning repositories..."):
            repositories = scanner.scan()
        if not args.no_sizes:
            with console.status("Measuring disk usage..."):
                repositories = scanner.compute_sizes()
        display.display_repositories(repositories)
        return 0

    if args.command == "list":
        display.display_repositories(filter_repositories(scanner.repositories, args.query))
        return 0

    if args.command == "find":
        matches = quick_switch_matches(scanner.repositories, args.query)
        display.display_matches(matches)
        return 0 if matches else 1

    if args.command == "sizes":
        with console.status("Measuring disk usage..."):
            repositories = scanner.compute_sizes()
        display.display_repositories(repositories)
        return 0

    if args.command == "remove":
        return run_remove(args, scanner)

    if args.command == "prune":
        path = os.path.abspath(os.path.expanduser(args.path))
        repo = scanner.get_repository(path)
        if repo is None:
            console.print(f"[red]Unknown repository: {path} (run 'git-grove scan' first)[/red]")
            return 1
        scanner.prune_worktrees(repo)
        console.print(f"[green]Pruned worktree metadata in {repo.display_path}[/green]")
        scanner.scan()
        return 0

    if args.command == "watch":
        return run_watch(args, scanner, display)

    console.print(f"[red]Unknown command: {args.command}[/red]")
    return 1


def run_remove(args, scanner: GroveScanner) -> int:
    path = os.path.abspath(os.path.expanduser(args.path))
    for repo in scanner.repositories:
        worktree = repo.find_worktree(path)
        if worktree is None:
            continue
        scanner.remove_worktree(repo, worktree, force=args.force)
        console.print(f"[green]Removed worktree {worktree.display_path}[/green]")
        scanner.scan()
        return 0

    console.print(f"[red]Unknown worktree: {path} (run 'git-grove scan' first)[/red]")
    return 1


def run_paths(args, config: Config) -> int:
    if args.paths_command == "add":
        if config.add_scan_path(args.path):
            config.save(args.config)
            console.print(f"[green]Added {args.path}[/green]")
        else:
            console.print(f"[yellow]{args.path} is already configured[/yellow]")
        return 0

    if args.paths_command == "remove":
        if not config.remove_scan_path(args.path):
            console.print(f"[red]{args.path} is not configured[/red]")
            return 1
        config.save(args.config)
        console.print(f"[green]Removed {args.path}[/green]")
        return 0

    for path in config.scan_paths:
        console.print(path, highlight=False)
    return 0


def run_watch(args, scanner: GroveScanner, display: DisplayService) -> int:
    if args.interval <= 0:
        console.print("[red]--interval must be positive[/red]")
        return 1
    while True:
        repositories = scanner.refresh()
        console.clear()
        display.display_repositories(repositories)
        console.print(f"[dim]Next scan in {args.interval:.0f}s, Ctrl-C to stop[/dim]")
        time.sleep(args.interval)


if __name__ == "__main__":
    sys.exit(main())
