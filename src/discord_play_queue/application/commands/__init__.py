"""
Application Commands

Command objects and their handlers for write operations.
"""

from discord_play_queue.application.commands.play_track import (
    PlaySource,
    PlayTrackCommand,
    PlayTrackHandler,
    PlayTrackResult,
    PlayTrackStatus,
)

__all__ = [
    "PlayTrackCommand",
    "PlayTrackHandler",
    "PlayTrackResult",
    "PlayTrackStatus",
    "PlaySource",
]
