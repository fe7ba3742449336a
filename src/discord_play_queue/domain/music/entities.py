"""Core domain entities for the music bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from discord_play_queue.domain.music.value_objects import PlaybackState, Requester
from discord_play_queue.domain.shared.exceptions import InvalidOperationError
from discord_play_queue.domain.shared.types import (
    DiscordSnowflake,
    HttpUrlStr,
    NonEmptyStr,
    NonNegativeInt,
    TrackTitleStr,
)
from discord_play_queue.utils.reply import format_duration


class Track(BaseModel):
    """Immutable value object representing a playable track returned by the search backend."""

    model_config = ConfigDict(frozen=True, strict=True)

    uri: NonEmptyStr
    title: TrackTitleStr
    author: str = ""

    # Backend metadata
    encoded: NonEmptyStr | None = None
    identifier: NonEmptyStr | None = None
    length_ms: NonNegativeInt | None = None
    is_stream: bool = False
    source_name: NonEmptyStr | None = None
    artwork_url: HttpUrlStr | None = None

    # Request metadata (set at resolution time)
    requested_by_id: DiscordSnowflake | None = None
    requested_by_name: NonEmptyStr | None = None

    @property
    def duration_formatted(self) -> str:
        """Format duration as M:SS or H:MM:SS; streams read as LIVE."""
        return format_duration(self.length_ms, is_stream=self.is_stream)

    @property
    def display_title(self) -> str:
        if self.author:
            return f"{self.title} — {self.author}"
        return self.title

    @property
    def has_requester(self) -> bool:
        return self.requested_by_id is not None and self.requested_by_name is not None

    def with_requester(self, requester: Requester) -> Track:
        """Return a copy of this track attributed to *requester*."""
        return self.model_copy(
            update={
                "requested_by_id": requester.user_id,
                "requested_by_name": requester.display_name,
            }
        )


class GuildPlaybackSession(BaseModel):
    """One guild's ordered queue, what is playing now, and the playback state.

    Tracks are played in the order they were enqueued. Nothing here talks to
    Discord or Lavalink; :class:`GuildConnection` drives it.
    """

    model_config = ConfigDict(strict=True)

    guild_id: DiscordSnowflake
    voice_channel_id: DiscordSnowflake
    text_channel_id: DiscordSnowflake
    queue: list[Track] = Field(default_factory=list)
    current_track: Track | None = None
    state: PlaybackState = PlaybackState.IDLE

    @property
    def queue_length(self) -> int:
        return len(self.queue)

    @property
    def is_playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    @property
    def is_paused(self) -> bool:
        return self.state is PlaybackState.PAUSED

    @property
    def is_idle(self) -> bool:
        return not self.state.is_active

    def enqueue(self, track: Track) -> int:
        """Append *track* and return its zero-based queue position."""
        self.queue.append(track)
        return len(self.queue) - 1

    def peek(self) -> Track | None:
        return next(iter(self.queue), None)

    def dequeue(self) -> Track | None:
        return self.queue.pop(0) if self.queue else None

    def transition_to(self, new_state: PlaybackState) -> None:
        """Move to *new_state*, refusing moves the state table does not allow."""
        current = self.state
        if not current.can_transition_to(new_state):
            raise InvalidOperationError(
                operation=f"{current.value} -> {new_state.value}",
                current_state=current.value,
                message=f"Playback cannot go from {current.value} to {new_state.value}",
            )
        self.state = new_state

    def start_next(self) -> Track | None:
        """Pop the head of the queue and play it.

        With an empty queue the session goes back to idle and None is returned.
        """
        self.current_track = self.dequeue()
        self.state = PlaybackState.IDLE if self.current_track is None else PlaybackState.PLAYING
        return self.current_track

    def pause(self) -> None:
        self.transition_to(PlaybackState.PAUSED)

    def resume(self) -> None:
        self.transition_to(PlaybackState.PLAYING)

    def stop(self) -> None:
        # Always allowed; drops whatever is still queued.
        self.state = PlaybackState.STOPPED
        self.current_track = None
        self.queue.clear()
