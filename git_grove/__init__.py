"""
git-grove - discover git repositories and their worktrees
"""

from .__version__ import __version__
from .services.scanner import GroveScanner

__all__ = ["GroveScanner", "__version__"]
