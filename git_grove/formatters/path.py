"""Path formatting utilities."""

import os


def abbreviate_path(path: str) -> str:
    """
    Replace the home directory prefix of a path with ``~``.

    Args:
        path: Absolute filesystem path

    Returns:
        The path with the home prefix abbreviated, or unchanged
    """
    home = os.path.expanduser("~")
    if path == home:
        return "~"
    if path.startswith(home + os.sep):
        return "~" + path[len(home):]
    return path
