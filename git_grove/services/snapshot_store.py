"""Persistence of the repository snapshot."""
import json
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Union

from git_grove.models.repository import Repository
from git_grove.models.worktree import Worktree
from git_grove.logging_config import get_logger

# Import fcntl for POSIX file locking (Unix/Linux/macOS)
try:
    import fcntl
    HAS_FCNTL = True
except ImportError:
    HAS_FCNTL = False

logger = get_logger(__name__)


class SnapshotStore:
    """Reads and writes the scan snapshot as a JSON file.

    File layout::

        {
          "last_updated": "<iso timestamp>",
          "repositories": [
            {"name": ..., "path": ..., "worktrees": [
              {"id", "path", "branch", "commit_hash", "last_commit_date",
               "last_commit_message", "is_dirty", "disk_usage_bytes",
               "is_main_worktree"}, ...]}
          ]
        }

    Loading never fails: a missing or malformed file yields an empty list.
    Saving never raises: errors are logged and the in-memory state stays
    authoritative.
    """

    def __init__(self, cache_file: Union[str, Path]):
        """Initialize the store.

        Args:
            cache_file: Location of the snapshot file
        """
        self.cache_file = Path(cache_file).expanduser()

    @contextmanager
    def _acquire_lock(self, file_handle, operation: str = "read"):
        """Hold a shared (read) or exclusive (write) lock on an open file."""
        if not HAS_FCNTL:
            yield
            return

        lock_type = fcntl.LOCK_EX if operation == "write" else fcntl.LOCK_SH
        fcntl.flock(file_handle.fileno(), lock_type)
        try:
            yield
        finally:
            try:
                fcntl.flock(file_handle.fileno(), fcntl.LOCK_UN)
            except OSError as e:
                logger.debug(f"Error releasing lock: {e}")

    def load(self) -> List[Repository]:
        """Load the persisted snapshot.

        Returns:
            Repositories in persisted order, or an empty list
        """
        if not self.cache_file.exists():
            logger.debug("No snapshot file found")
            return []

        try:
            with open(self.cache_file, 'r') as f:
                with self._acquire_lock(f, operation="read"):
                    data = json.load(f)
        except ValueError as e:
            # Covers JSONDecodeError and undecodable bytes
            logger.warning(f"Invalid JSON in snapshot file: {e}")
            return []
        except OSError as e:
            logger.warning(f"Failed to read snapshot: {e}")
            return []

        if not self._validate(data):
            logger.warning("Snapshot validation failed, starting empty")
            return []

        repositories = []
        for repo_data in data["repositories"]:
            repo = self.deserialize_repository(repo_data)
            if repo is None:
                logger.warning("Snapshot contains an unreadable repository, starting empty")
                return []
            repositories.append(repo)

        logger.debug(f"Loaded snapshot with {len(repositories)} repositories")
        return repositories

    def save(self, repositories: List[Repository]) -> bool:
        """Write the snapshot atomically, overwriting the previous file.

        Args:
            repositories: Repositories to persist

        Returns:
            True if the file was written
        """
        data = {
            "last_updated": datetime.now().isoformat(),
            "repositories": [
                self.serialize_repository(repo) for repo in repositories if repo.worktrees
            ],
        }

        temp_file = self.cache_file.with_suffix('.tmp')
        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_file, 'w') as f:
                with self._acquire_lock(f, operation="write"):
                    json.dump(data, f, indent=2)
                    f.flush()
            temp_file.replace(self.cache_file)
            logger.debug(f"Saved snapshot with {len(data['repositories'])} repositories")
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Failed to save snapshot: {e}")
            return False
        finally:
            if temp_file.exists():
                try:
                    temp_file.unlink()
                except OSError:
                    pass

    def clear(self) -> None:
        """Delete the snapshot file."""
        try:
            if self.cache_file.exists():
                self.cache_file.unlink()
                logger.info("Snapshot cleared")
        except OSError as e:
            logger.warning(f"Failed to clear snapshot: {e}")

    def _validate(self, data) -> bool:
        """Check the top-level structure of loaded snapshot data."""
        if not isinstance(data, dict):
            logger.warning("Snapshot data is not a dictionary")
            return False

        repositories = data.get("repositories")
        if not isinstance(repositories, list):
            logger.warning("Snapshot 'repositories' is missing or not a list")
            return False

        for repo_data in repositories:
            if not isinstance(repo_data, dict):
                return False
            for key in ("name", "path", "worktrees"):
                if key not in repo_data:
                    logger.warning(f"Repository entry missing required field '{key}'")
                    return False
            if not isinstance(repo_data["worktrees"], list) or not repo_data["worktrees"]:
                logger.warning(f"Repository '{repo_data['path']}' has no worktrees")
                return False
            if not all(isinstance(wt, dict) for wt in repo_data["worktrees"]):
                logger.warning(f"Repository '{repo_data['path']}' has a malformed worktree entry")
                return False

        return True

    @staticmethod
    def serialize_repository(repo: Repository) -> Dict:
        return {
            "name": repo.name,
            "path": repo.path,
            "worktrees": [SnapshotStore.serialize_worktree(wt) for wt in repo.worktrees],
        }

    @staticmethod
    def serialize_worktree(worktree: Worktree) -> Dict:
        return {
            "id": str(worktree.id),
            "path": worktree.path,
            "branch": worktree.branch,
            "commit_hash": worktree.commit_hash,
            "last_commit_date": worktree.last_commit_date.isoformat() if worktree.last_commit_date else None,
            "last_commit_message": worktree.last_commit_message,
            "is_dirty": worktree.is_dirty,
            "disk_usage_bytes": worktree.disk_usage_bytes,
            "is_main_worktree": worktree.is_main_worktree,
        }

    @staticmethod
    def deserialize_repository(data: Dict) -> Optional[Repository]:
        """Convert a persisted dictionary back to a Repository, or None if invalid."""
        try:
            worktrees = [SnapshotStore.deserialize_worktree(wt) for wt in data["worktrees"]]
            return Repository(name=str(data["name"]), path=str(data["path"]), worktrees=worktrees)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Failed to deserialize repository {data.get('path', 'unknown')}: {e}")
            return None

    @staticmethod
    def deserialize_worktree(data: Dict) -> Worktree:
        """Convert a persisted dictionary back to a Worktree.

        Raises:
            KeyError, TypeError, ValueError: If required fields are missing or malformed
        """
        for key in ("path", "branch", "commit_hash"):
            if not isinstance(data[key], str):
                raise TypeError(f"field '{key}' must be a string")
        last_commit_date = data.get("last_commit_date")
        disk_usage = data.get("disk_usage_bytes")
        if isinstance(disk_usage, bool):
            raise TypeError("field 'disk_usage_bytes' must be a number")
        worktree = Worktree(
            path=data["path"],
            branch=data["branch"],
            commit_hash=data["commit_hash"],
            is_main_worktree=bool(data.get("is_main_worktree", False)),
            last_commit_date=datetime.fromisoformat(last_commit_date) if last_commit_date else None,
            last_commit_message=data.get("last_commit_message", ""),
            is_dirty=bool(data.get("is_dirty", False)),
            disk_usage_bytes=int(disk_usage) if disk_usage is not None else None,
        )
        worktree_id = data.get("id")
        if worktree_id is not None:
            if not isinstance(worktree_id, str):
                raise TypeError("field 'id' must be a string")
            worktree.id = uuid.UUID(worktree_id)
        return worktree
