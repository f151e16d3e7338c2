"""Disk usage formatting."""

from typing import Optional

PENDING_SIZE = "…"

_UNITS = ["KB", "MB", "GB", "TB", "PB"]


def format_size(size_bytes: Optional[int]) -> str:
    """
    Format a byte count using decimal file-size units.

    Args:
        size_bytes: Number of bytes, or None when not yet measured

    Returns:
        String such as "512 bytes", "1.5 MB", or "…" for unknown sizes
    """
    if size_bytes is None:
        return PENDING_SIZE
    if size_bytes < 1000:
        return f"{size_bytes} bytes"

    value = size_bytes / 1000
    unit_index = 0
    while value >= 1000 and unit_index < len(_UNITS) - 1:
        value /= 1000
        unit_index += 1

    unit = _UNITS[unit_index]
    return f"{value:.1f} {unit}" if value < 10 else f"{value:.0f} {unit}"
