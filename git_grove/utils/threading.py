"""Worker pool sizing for subprocess-bound scanning."""

import os
import sys
from typing import Optional


def is_free_threading_enabled() -> bool:
    """Detect if Python is running with the GIL disabled (3.13+ free-threading build)."""
    is_gil_enabled = getattr(sys, "_is_gil_enabled", None)
    return is_gil_enabled is not None and not is_gil_enabled()


def get_optimal_worker_count(user_specified: Optional[int] = None, sequential: bool = False) -> int:
    """Calculate how many repositories to scan at once.

    Scanning mostly waits on git and du processes, so the pool is sized for
    I/O-bound work rather than CPU count alone.

    Args:
        user_specified: Explicit worker count, if provided
        sequential: Force a single worker

    Returns:
        Number of workers, at least 1
    """
    if sequential:
        return 1
    if user_specified is not None and user_specified > 0:
        return user_specified

    cpu_count = os.cpu_count() or 1
    if is_free_threading_enabled():
        return min(64, cpu_count * 2)
    # Each worker mostly blocks on a child process
    return min(16, cpu_count + 4)
