"""Version information for git-grove."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("git-grove")
except PackageNotFoundError:
    # Running from a source checkout without an installed distribution
    __version__ = "0.0.0+unknown"
