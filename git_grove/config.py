"""Configuration handling for git-grove"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from git_grove.constants import APP_DIR_NAME, DEFAULT_EXECUTABLE_PATHS, DEFAULT_MAX_DEPTH
from git_grove.formatters.path import abbreviate_path
from git_grove.models.repository import SortOrder
from git_grove.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_FILE = Path.home() / APP_DIR_NAME / "config.json"
DEFAULT_CACHE_FILE = Path.home() / APP_DIR_NAME / "scan-cache.json"


@dataclass
class Config:
    """Configuration for git-grove with validation."""

    # Scan roots, stored with ~ abbreviations
    scan_paths: List[str] = field(default_factory=lambda: ["~/code"])
    sort_order: str = SortOrder.NAME.value
    max_depth: int = DEFAULT_MAX_DEPTH

    # Snapshot persistence
    cache_file: str = str(DEFAULT_CACHE_FILE)

    # External commands
    command_timeout: Optional[float] = None  # None = wait indefinitely
    executable_paths: Dict[str, List[str]] = field(
        default_factory=lambda: {tool: list(paths) for tool, paths in DEFAULT_EXECUTABLE_PATHS.items()}
    )

    # Execution modes
    sequential: bool = False
    workers: Optional[int] = None  # None = auto-detect
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_scan_paths()
        self._validate_sort_order()
        self._validate_max_depth()
        self._validate_command_timeout()
        self._validate_workers()
        self._validate_executable_paths()

    def _validate_scan_paths(self):
        if not isinstance(self.scan_paths, list):
            raise ValueError("scan_paths must be a list")
        for path in self.scan_paths:
            if not isinstance(path, str) or not path.strip():
                raise ValueError(f"scan_paths entries must be non-empty strings, got {path!r}")

    def _validate_sort_order(self):
        allowed = [order.value for order in SortOrder]
        if self.sort_order not in allowed:
            raise ValueError(f"sort_order must be one of {allowed}, got '{self.sort_order}'")

    def _validate_max_depth(self):
        if self.max_depth < 0:
            raise ValueError(f"max_depth cannot be negative, got {self.max_depth}")

    def _validate_command_timeout(self):
        if self.command_timeout is not None and self.command_timeout <= 0:
            raise ValueError(f"command_timeout must be positive, got {self.command_timeout}")

    def _validate_workers(self):
        if self.workers is not None and self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")

    def _validate_executable_paths(self):
        if not isinstance(self.executable_paths, dict):
            raise ValueError("executable_paths must map tool names to path lists")
        for tool in DEFAULT_EXECUTABLE_PATHS:
            self.executable_paths.setdefault(tool, list(DEFAULT_EXECUTABLE_PATHS[tool]))

    @property
    def sort(self) -> SortOrder:
        return SortOrder(self.sort_order)

    def expanded_paths(self) -> List[str]:
        """Scan roots with ``~`` expanded, as absolute paths, in configured order."""
        return [os.path.abspath(os.path.expanduser(path)) for path in self.scan_paths]

    def add_scan_path(self, path: str) -> bool:
        """Add a scan root, returning False when it is already configured."""
        abbreviated = abbreviate_path(os.path.abspath(os.path.expanduser(path)))
        if abbreviated in self.scan_paths:
            return False
        self.scan_paths.append(abbreviated)
        return True

    def remove_scan_path(self, path: str) -> bool:
        """Remove a scan root given either its stored or its expanded form."""
        abbreviated = abbreviate_path(os.path.abspath(os.path.expanduser(path)))
        for candidate in (path, abbreviated):
            if candidate in self.scan_paths:
                self.scan_paths.remove(candidate)
                return True
        return False

    def to_dict(self) -> dict:
        return {
            "scan_paths": list(self.scan_paths),
            "sort_order": self.sort_order,
            "max_depth": self.max_depth,
            "cache_file": self.cache_file,
            "command_timeout": self.command_timeout,
            "executable_paths": {tool: list(paths) for tool, paths in self.executable_paths.items()},
            "sequential": self.sequential,
            "workers": self.workers,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {
            "scan_paths",
            "sort_order",
            "max_depth",
            "cache_file",
            "command_timeout",
            "executable_paths",
            "sequential",
            "workers",
            "verbose",
            "debug",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)

    @classmethod
    def load(cls, path: Union[str, Path, None] = None) -> "Config":
        """Load settings from a JSON file, falling back to defaults.

        Args:
            path: Settings file location (defaults to ~/.git-grove/config.json)

        Returns:
            Config built from the file, or a default Config when the file is
            missing or unusable
        """
        config_path = Path(path) if path else DEFAULT_CONFIG_FILE
        if not config_path.exists():
            logger.debug(f"No config file at {config_path}, using defaults")
            return cls()

        try:
            with open(config_path, "r") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("config file must contain a JSON object")
            return cls.from_dict(data)
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Ignoring invalid config file {config_path}: {e}")
            return cls()

    def save(self, path: Union[str, Path, None] = None) -> None:
        """Write the settings to a JSON file.

        Raises:
            OSError: If the file cannot be written
        """
        config_path = Path(path) if path else DEFAULT_CONFIG_FILE
        config_path.parent.mkdir(parents=True, exist_ok=True)
        data = self.to_dict()
        # Runtime flags are not settings
        data.pop("verbose")
        data.pop("debug")
        with open(config_path, "w") as f:
            json.dump(data, f, indent=2)
        logger.debug(f"Saved config to {config_path}")
