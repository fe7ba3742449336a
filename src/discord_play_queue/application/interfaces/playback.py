"""Port interfaces for per-guild playback connections."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from discord_play_queue.domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.music.entities import Track


class PlaybackConnection(ABC):
    """One guild's playback session: an ordered queue plus a play trigger."""

    @property
    @abstractmethod
    def guild_id(self) -> DiscordSnowflake:
        ...

    @property
    @abstractmethod
    def is_playing(self) -> bool:
        ...

    @property
    @abstractmethod
    def is_paused(self) -> bool:
        ...

    @property
    @abstractmethod
    def current_track(self) -> Track | None:
        ...

    @property
    @abstractmethod
    def queue(self) -> list[Track]:
        """Snapshot of the upcoming tracks, in play order."""
        ...

    @abstractmethod
    def enqueue(self, track: Track) -> int:
        """Append a track to the queue and return its zero-based position."""
        ...

    @abstractmethod
    async def play(self) -> Track | None:
        """Start playing the next queued track; returns None when the queue is empty."""
        ...


class PlaybackConnectionProvider(ABC):
    """Creates and looks up playback connections keyed by guild."""

    @abstractmethod
    def create_or_get_connection(
        self,
        guild_id: DiscordSnowflake,
        voice_channel_id: DiscordSnowflake,
        text_channel_id: DiscordSnowflake,
    ) -> PlaybackConnection:
        ...

    @abstractmethod
    def get_connection(self, guild_id: DiscordSnowflake) -> PlaybackConnection | None:
        ...
