"""
BlockUsers Output Formatters

Timestamp and text helpers shared by the command layer.
"""

from __future__ import annotations

from datetime import datetime, timezone


def get_utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def format_datetime(dt: datetime) -> str:
    """
    Format a datetime as an ISO-8601 UTC string.

    Args:
        dt: Datetime to format (naive values are treated as UTC)

    Returns:
        String like "2026-01-15T12:30:00Z"
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def get_utc_timestamp() -> str:
    """
    Get current UTC timestamp string.

    Returns:
        ISO format timestamp like "2026-01-15T12:30:00Z"
    """
    return format_datetime(get_utc_now())


def truncate(text: str, max_length: int, suffix: str = "...") -> str:
    """
    Shorten text to at most max_length characters.

    Args:
        text: Text to shorten
        max_length: Maximum length including the suffix
        suffix: Appended when text is cut

    Returns:
        Original text if short enough, else a cut copy ending in suffix
    """
    if len(text) <= max_length:
        return text
    if max_length <= len(suffix):
        return text[:max_length]
    return text[: max_length - len(suffix)] + suffix


def format_seconds(seconds: float) -> str:
    """Format a duration with one decimal place, e.g. 2.5."""
    return f"{max(0.0, seconds):.1f}"
