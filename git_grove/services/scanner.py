"""Repository discovery and snapshot reconciliation for git-grove."""

import copy
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, List, Optional, Set, Union

from git_grove.config import Config
from git_grove.models.repository import Repository, SortOrder
from git_grove.models.worktree import Worktree
from git_grove.services.git.worktrees import WorktreeService
from git_grove.services.runner import CommandRunner
from git_grove.services.snapshot_store import SnapshotStore
from git_grove.services.walker import find_git_repos
from git_grove.utils.threading import get_optimal_worker_count
from git_grove.logging_config import get_logger

logger = get_logger(__name__)

SnapshotListener = Callable[[List[Repository]], None]

DISTANT_PAST = datetime.min.replace(tzinfo=timezone.utc)


def latest_commit_date(repo: Repository) -> datetime:
    """Most recent commit date across a repository's worktrees, or DISTANT_PAST."""
    dates = []
    for wt in repo.worktrees:
        if wt.last_commit_date is None:
            continue
        date = wt.last_commit_date
        if date.tzinfo is None:
            date = date.replace(tzinfo=timezone.utc)
        dates.append(date)
    return max(dates, default=DISTANT_PAST)


def sort_repositories(repositories: List[Repository], order: SortOrder) -> List[Repository]:
    """Return repositories sorted by the given order (stable for ties)."""
    if order == SortOrder.LAST_MODIFIED:
        return sorted(repositories, key=latest_commit_date, reverse=True)
    if order == SortOrder.BRANCH:
        return sorted(
            repositories,
            key=lambda repo: repo.worktrees[0].branch.lower() if repo.worktrees else "",
        )
    return sorted(repositories, key=lambda repo: repo.name.lower())


def merge_repository(repositories: List[Repository], repo: Repository) -> None:
    """Merge a freshly scanned repository into a snapshot list in place.

    An existing entry with the same path is replaced. Worktrees of the new
    entry that have no disk usage inherit it from the old worktree at the
    same path. Unknown repositories are appended.
    """
    for index, existing in enumerate(repositories):
        if existing.path != repo.path:
            continue
        for worktree in repo.worktrees:
            if worktree.disk_usage_bytes is None:
                previous = existing.find_worktree(worktree.path)
                if previous is not None:
                    worktree.disk_usage_bytes = previous.disk_usage_bytes
        repositories[index] = repo
        return
    repositories.append(repo)


class GroveScanner:
    """Owns the repository snapshot and keeps it in sync with the filesystem.

    All snapshot mutations go through one lock. Only one scan runs at a time;
    a scan requested while another is running returns the current snapshot.
    """

    def __init__(self, config: Union[Config, dict, None] = None,
                 runner: Optional[CommandRunner] = None,
                 store: Optional[SnapshotStore] = None):
        """Initialize the scanner and load the persisted snapshot.

        Args:
            config: Configuration dict or Config object
            runner: Command runner (built from config if omitted)
            store: Snapshot store (built from config if omitted)
        """
        if config is None:
            config = Config()
        elif isinstance(config, dict):
            config = Config.from_dict(config)
        self.config = config
        self.runner = runner or CommandRunner(config.executable_paths, config.command_timeout)
        self.store = store or SnapshotStore(config.cache_file)

        self._lock = threading.RLock()
        self._scan_guard = threading.Lock()
        self._listeners: List[SnapshotListener] = []
        self._repositories: List[Repository] = self.store.load()

    @property
    def is_scanning(self) -> bool:
        return self._scan_guard.locked()

    @property
    def repositories(self) -> List[Repository]:
        """A copy of the current snapshot."""
        return self.snapshot()

    def snapshot(self) -> List[Repository]:
        with self._lock:
            return copy.deepcopy(self._repositories)

    def get_repository(self, path: str) -> Optional[Repository]:
        with self._lock:
            repo = self._find_repository(path)
            return copy.deepcopy(repo) if repo else None

    def add_listener(self, listener: SnapshotListener) -> None:
        """Register a callback that receives the snapshot after every save."""
        self._listeners.append(listener)

    def remove_listener(self, listener: SnapshotListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def scan(self) -> List[Repository]:
        """Discover repositories under the configured roots and reconcile the snapshot.

        Returns:
            The reconciled, sorted snapshot
        """
        if not self._scan_guard.acquire(blocking=False):
            logger.info("Scan already in progress, ignoring request")
            return self.snapshot()
        try:
            return self._scan()
        finally:
            self._scan_guard.release()

    def _scan(self) -> List[Repository]:
        found: Set[str] = set()
        workers = get_optimal_worker_count(self.config.workers, self.config.sequential)

        with ThreadPoolExecutor(max_workers=workers) as executor:
            for root in self.config.expanded_paths():
                candidates = find_git_repos(root, self.config.max_depth)
                logger.info(f"Found {len(candidates)} repositories under {root}")
                found.update(candidates)
                # map keeps discovery order, so merges happen in a stable order
                for path, repo in zip(candidates, executor.map(self._scan_repo, candidates)):
                    self._merge(path, repo)

        with self._lock:
            before = len(self._repositories)
            self._repositories = [repo for repo in self._repositories if repo.path in found]
            evicted = before - len(self._repositories)
            if evicted:
                logger.info(f"Removed {evicted} repositories that are no longer present")
            self._repositories = sort_repositories(self._repositories, self.config.sort)
            self.store.save(self._repositories)
            result = copy.deepcopy(self._repositories)

        self._notify(result)
        return result

    def _scan_repo(self, path: str) -> Optional[Repository]:
        """Build a Repository for a candidate path, or None if it has no worktrees."""
        try:
            service = WorktreeService(path, self.runner)
            worktrees = []
            for worktree in service.list_worktrees():
                # git keeps listing deleted worktrees as prunable until they are pruned
                if not os.path.isdir(worktree.path):
                    logger.debug(f"Worktree {worktree.path} no longer exists, skipping")
                    continue
                worktrees.append(worktree)
            if not worktrees:
                logger.debug(f"No worktrees reported for {path}, skipping")
                return None
            for worktree in worktrees:
                service.enrich(worktree)
            return Repository.from_path(path, worktrees)
        except Exception as e:
            logger.warning(f"Failed to scan repository {path}: {e}")
            return None

    def _merge(self, path: str, repo: Optional[Repository]) -> None:
        with self._lock:
            if repo is None:
                # A repository without worktrees is never kept, even from an earlier scan
                existing = self._find_repository(path)
                if existing is not None:
                    self._repositories.remove(existing)
                return
            merge_repository(self._repositories, repo)

    def compute_sizes(self) -> List[Repository]:
        """Measure the disk usage of every worktree and persist once at the end.

        Worktrees evicted while measuring are ignored.

        Returns:
            The snapshot after the sizes were written
        """
        targets = [(repo.path, wt.path) for repo in self.snapshot() for wt in repo.worktrees]
        workers = get_optimal_worker_count(self.config.workers, self.config.sequential)

        with ThreadPoolExecutor(max_workers=workers) as executor:
            sizes = executor.map(self._measure, [wt_path for _, wt_path in targets])
            for (repo_path, wt_path), size in zip(targets, sizes):
                if size is None:
                    continue
                with self._lock:
                    worktree = self._find_worktree(repo_path, wt_path)
                    if worktree is not None:
                        worktree.disk_usage_bytes = size

        with self._lock:
            self.store.save(self._repositories)
            result = copy.deepcopy(self._repositories)

        logger.info(f"Measured disk usage for {len(targets)} worktrees")
        self._notify(result)
        return result

    def _measure(self, path: str) -> Optional[int]:
        """Size of a directory in bytes from `du -sk`, or None if unavailable."""
        tokens = self.runner.output("du", ["-sk", path]).split()
        if not tokens:
            return None
        try:
            return int(tokens[0]) * 1024
        except ValueError:
            logger.debug(f"Unexpected du output for {path}: {tokens[0]!r}")
            return None

    def refresh(self) -> List[Repository]:
        """Scan, then measure disk usage."""
        self.scan()
        return self.compute_sizes()

    def resort(self, order: Optional[SortOrder] = None) -> List[Repository]:
        """Re-sort the snapshot, optionally switching the configured order."""
        with self._lock:
            if order is not None:
                self.config.sort_order = order.value
            self._repositories = sort_repositories(self._repositories, self.config.sort)
            return copy.deepcopy(self._repositories)

    def remove_worktree(self, repo: Repository, worktree: Worktree, force: bool = False) -> None:
        """Remove a linked worktree of a repository.

        Raises:
            MainWorktreeError: If the worktree is the main one
            GitOperationError: If git fails
        """
        WorktreeService(repo.path, self.runner).remove_worktree(worktree, force=force)

    def prune_worktrees(self, repo: Repository) -> None:
        """Prune stale worktree metadata of a repository.

        Raises:
            GitOperationError: If git fails
        """
        WorktreeService(repo.path, self.runner).prune_worktrees()

    def _find_repository(self, path: str) -> Optional[Repository]:
        return next((repo for repo in self._repositories if repo.path == path), None)

    def _find_worktree(self, repo_path: str, worktree_path: str) -> Optional[Worktree]:
        repo = self._find_repository(repo_path)
        return repo.find_worktree(worktree_path) if repo else None

    def _notify(self, repositories: List[Repository]) -> None:
        for listener in list(self._listeners):
            try:
                listener(copy.deepcopy(repositories))
            except Exception as e:
                logger.warning(f"Snapshot listener {listener!r} failed: {e}")
