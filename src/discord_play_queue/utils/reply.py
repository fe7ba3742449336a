"""Utility functions for formatting Discord messages."""

from __future__ import annotations

from functools import cache

LIVE_LABEL = "LIVE"
UNKNOWN_DURATION_LABEL = "Unknown"


@cache
def format_duration(milliseconds: int | None, *, is_stream: bool = False) -> str:
    """Render a backend length as ``M:SS`` or ``H:MM:SS``."""
    if is_stream:
        return LIVE_LABEL
    if milliseconds is None:
        return UNKNOWN_DURATION_LABEL

    hours, remainder = divmod(milliseconds // 1000, 3600)
    minutes, seconds = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


@cache
def truncate(text: str, max_length: int = 90) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"
