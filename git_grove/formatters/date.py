"""Date and time formatting utilities."""

from datetime import datetime, timezone
from typing import Any, Optional


def format_date(date: Any) -> str:
    """
    Format a date object to YYYY-MM-DD string.

    Args:
        date: Date object (datetime or string), or None

    Returns:
        Formatted date string
    """
    if date is None:
        return "unknown"
    if hasattr(date, "strftime"):
        return date.strftime("%Y-%m-%d")
    return str(date)


def format_relative_date(date: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    Format a commit date relative to now in an abbreviated style.

    Args:
        date: Timezone-aware datetime, or None when unknown
        now: Reference time (defaults to the current UTC time)

    Returns:
        String such as "5m ago", "3h ago", "12d ago", or "unknown"
    """
    if date is None:
        return "unknown"
    now = now or datetime.now(timezone.utc)
    seconds = int((now - date).total_seconds())
    if seconds < 0:
        return "in the future"
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    days = seconds // 86400
    if days < 365:
        return f"{days}d ago"
    return f"{days // 365}y ago"
