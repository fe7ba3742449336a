"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from discord_play_queue.domain.shared.messages import ErrorMessages
from discord_play_queue.domain.shared.validators import validate_non_empty_string


@dataclass(frozen=True)
class Requester:
    """The Discord user a track was queued for."""

    user_id: int
    display_name: str

    def __post_init__(self) -> None:
        if self.user_id <= 0:
            raise ValueError(ErrorMessages.INVALID_USER_ID)
        validate_non_empty_string(self.display_name, "display_name")

    def __str__(self) -> str:
        return self.display_name


@dataclass(frozen=True)
class PlaylistReference:
    """An external (Spotify) playlist plus the fixed pagination bounds used to read it."""

    PAGE_SIZE: ClassVar[int] = 100
    MAX_ITEMS: ClassVar[int] = 1000

    playlist_id: str

    def __post_init__(self) -> None:
        validate_non_empty_string(self.playlist_id, "playlist_id")

    def __str__(self) -> str:
        return self.playlist_id


@dataclass(frozen=True)
class ExternalTrackReference:
    """An external (Spotify) single-track reference."""

    track_id: str

    def __post_init__(self) -> None:
        validate_non_empty_string(self.track_id, "track_id")

    def __str__(self) -> str:
        return self.track_id


class QueryKind(Enum):
    """Resolution path chosen for a raw /play query."""

    PLAYLIST = "playlist"
    SINGLE_EXTERNAL = "single-external"
    GENERIC = "generic"


class LoadOutcome(Enum):
    """Classification of one search backend resolution attempt."""

    SINGLE = "single"
    PLAYLIST = "playlist"
    NO_MATCH = "no-match"
    LOAD_FAILED = "load-failed"
    MALFORMED_RESPONSE = "malformed-response"

    @property
    def is_empty(self) -> bool:
        """No-match and load-failed are informational, not errors."""
        return self in {LoadOutcome.NO_MATCH, LoadOutcome.LOAD_FAILED}

    @classmethod
    def from_load_type(cls, tag: str) -> LoadOutcome:
        """Map a backend ``loadType`` tag (Lavalink v3 or v4 vocabulary) to an outcome.

        Raises:
            ValueError: If the tag is not one the backend is known to send.
        """
        try:
            return _LOAD_TYPE_TAGS[tag]
        except KeyError:
            raise ValueError(ErrorMessages.UNKNOWN_LOAD_TYPE.format(tag=tag)) from None


_LOAD_TYPE_TAGS: dict[str, LoadOutcome] = {
    # Lavalink v3
    "TRACK_LOADED": LoadOutcome.SINGLE,
    "SEARCH_RESULT": LoadOutcome.SINGLE,
    "PLAYLIST_LOADED": LoadOutcome.PLAYLIST,
    "NO_MATCHES": LoadOutcome.NO_MATCH,
    "LOAD_FAILED": LoadOutcome.LOAD_FAILED,
    # Lavalink v4
    "track": LoadOutcome.SINGLE,
    "search": LoadOutcome.SINGLE,
    "playlist": LoadOutcome.PLAYLIST,
    "empty": LoadOutcome.NO_MATCH,
    "error": LoadOutcome.LOAD_FAILED,
}


class PlaybackState(Enum):
    """What a guild connection is doing right now.

    Only PLAYING and PAUSED block /play from starting playback; an IDLE or
    STOPPED connection is started by the next successful enqueue.
    """

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"

    def can_transition_to(self, target: PlaybackState) -> bool:
        return target in _TRANSITIONS[self]

    @property
    def is_active(self) -> bool:
        return self is PlaybackState.PLAYING or self is PlaybackState.PAUSED


# Any active state may fall back to IDLE when the queue runs dry.
_TRANSITIONS: dict[PlaybackState, frozenset[PlaybackState]] = {
    PlaybackState.IDLE: frozenset({PlaybackState.PLAYING}),
    PlaybackState.PLAYING: frozenset(
        {PlaybackState.PAUSED, PlaybackState.STOPPED, PlaybackState.IDLE}
    ),
    PlaybackState.PAUSED: frozenset(
        {PlaybackState.PLAYING, PlaybackState.STOPPED, PlaybackState.IDLE}
    ),
    PlaybackState.STOPPED: frozenset({PlaybackState.IDLE, PlaybackState.PLAYING}),
}
