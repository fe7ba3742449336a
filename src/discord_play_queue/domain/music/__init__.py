"""
Music Bounded Context

Tracks, per-guild playback sessions, and the value objects describing how a
/play query is routed and what the search backend made of it.
"""

from discord_play_queue.domain.music.entities import GuildPlaybackSession, Track
from discord_play_queue.domain.music.value_objects import (
    ExternalTrackReference,
    LoadOutcome,
    PlaybackState,
    PlaylistReference,
    QueryKind,
    Requester,
)

__all__ = [
    # Entities
    "Track",
    "GuildPlaybackSession",
    # Value Objects
    "Requester",
    "PlaylistReference",
    "ExternalTrackReference",
    "QueryKind",
    "LoadOutcome",
    "PlaybackState",
]
