"""Command and handler for turning a /play query into queued tracks."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator

from discord_play_queue.domain.music.entities import Track
from discord_play_queue.domain.music.value_objects import (
    ExternalTrackReference,
    LoadOutcome,
    PlaylistReference,
    QueryKind,
    Requester,
)
from discord_play_queue.domain.shared.exceptions import DomainError, PreconditionError
from discord_play_queue.domain.shared.messages import DiscordUIMessages, LogTemplates
from discord_play_queue.domain.shared.types import (
    DiscordSnowflake,
    NonEmptyStr,
    NonNegativeInt,
)

from ..services.query_classifier import classify

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..interfaces.playback import PlaybackConnection, PlaybackConnectionProvider
    from ..interfaces.search_backend import AudioSearchBackend
    from ..services.playlist_expander import PlaylistExpander
    from ..services.requester_registry import RequesterRegistry
    from ..services.track_resolver import TrackResolver

logger = logging.getLogger(__name__)


class PlayTrackStatus(Enum):
    """Status codes for play track results."""

    QUEUED = "queued"
    NOT_IN_VOICE = "not_in_voice"
    BACKEND_UNAVAILABLE = "backend_unavailable"
    NO_RESULTS = "no_results"
    NO_TRACKS_FOUND = "no_tracks_found"
    RESOLUTION_FAILED = "resolution_failed"
    UNEXPECTED_ERROR = "unexpected_error"

    @property
    def is_precondition_failure(self) -> bool:
        return self in {PlayTrackStatus.NOT_IN_VOICE, PlayTrackStatus.BACKEND_UNAVAILABLE}

    @property
    def is_informational(self) -> bool:
        """Empty results are reported to the user but are not errors."""
        return self in {PlayTrackStatus.NO_RESULTS, PlayTrackStatus.NO_TRACKS_FOUND}


class PlaySource(Enum):
    """Where the queued tracks came from."""

    SEARCH = "search"
    BACKEND_PLAYLIST = "backend_playlist"
    SPOTIFY_PLAYLIST = "spotify_playlist"
    SPOTIFY_TRACK = "spotify_track"


class PlayTrackCommand(BaseModel):
    """Request to resolve a query and queue the result in a guild's session."""

    model_config = ConfigDict(frozen=True, strict=True)

    guild_id: DiscordSnowflake
    text_channel_id: DiscordSnowflake
    voice_channel_id: DiscordSnowflake | None
    user_id: DiscordSnowflake
    user_name: NonEmptyStr
    query: NonEmptyStr

    @field_validator("query", mode="before")
    @classmethod
    def _strip_query(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v

    @property
    def requester(self) -> Requester:
        return Requester(user_id=self.user_id, display_name=self.user_name)


class PlayTrackResult(BaseModel):
    """Result of a play track command."""

    model_config = ConfigDict(frozen=True, strict=True)

    status: PlayTrackStatus
    message: str
    queued_count: NonNegativeInt = 0
    first_track: Track | None = None
    tracks: tuple[Track, ...] = ()
    first_position: NonNegativeInt | None = None
    source: PlaySource | None = None
    started_playing: bool = False

    @property
    def is_success(self) -> bool:
        return self.status is PlayTrackStatus.QUEUED

    @classmethod
    def queued(
        cls,
        *,
        tracks: Sequence[Track],
        first_position: int,
        source: PlaySource,
        started_playing: bool,
    ) -> PlayTrackResult:
        first = tracks[0]
        count = len(tracks)

        if source is PlaySource.SPOTIFY_PLAYLIST:
            message = DiscordUIMessages.QUEUED_SPOTIFY_PLAYLIST.format(count=count)
        elif source is PlaySource.BACKEND_PLAYLIST:
            message = DiscordUIMessages.QUEUED_BACKEND_PLAYLIST.format(count=count)
        elif started_playing:
            message = DiscordUIMessages.NOW_PLAYING_TRACK.format(title=first.title)
        else:
            message = DiscordUIMessages.QUEUED_TRACK.format(
                title=first.title, position=first_position + 1
            )

        return cls(
            status=PlayTrackStatus.QUEUED,
            message=message,
            queued_count=count,
            first_track=first,
            tracks=tuple(tracks),
            first_position=first_position,
            source=source,
            started_playing=started_playing,
        )

    @classmethod
    def error(cls, status: PlayTrackStatus, message: str) -> PlayTrackResult:
        return cls(status=status, message=message)


class PlayTrackHandler:
    """Classifies a query, resolves it to tracks, and commits them to the guild queue.

    Spotify playlist items are resolved strictly one at a time so the queue
    keeps the playlist's order. Playback is started at most once per request,
    and only when the session is neither playing nor paused.
    """

    def __init__(
        self,
        *,
        search_backend: AudioSearchBackend,
        connection_provider: PlaybackConnectionProvider,
        playlist_expander: PlaylistExpander,
        track_resolver: TrackResolver,
        requester_registry: RequesterRegistry,
    ) -> None:
        self._backend = search_backend
        self._connections = connection_provider
        self._expander = playlist_expander
        self._resolver = track_resolver
        self._registry = requester_registry

    async def handle(self, command: PlayTrackCommand) -> PlayTrackResult:
        try:
            self._check_preconditions(command)
        except PreconditionError as e:
            logger.info(LogTemplates.PLAY_PRECONDITION_FAILED, command.guild_id, e.requirement)
            status = (
                PlayTrackStatus.NOT_IN_VOICE
                if e.requirement == "voice_channel"
                else PlayTrackStatus.BACKEND_UNAVAILABLE
            )
            return PlayTrackResult.error(status, e.message)

        assert command.voice_channel_id is not None

        try:
            connection = self._connections.create_or_get_connection(
                command.guild_id, command.voice_channel_id, command.text_channel_id
            )
            classification = classify(command.query)
            logger.info(
                LogTemplates.PLAY_CLASSIFIED,
                classification.kind.value,
                command.guild_id,
                command.user_id,
            )

            if classification.kind is QueryKind.PLAYLIST:
                assert isinstance(classification.reference, PlaylistReference)
                return await self._play_spotify_playlist(
                    connection, classification.reference, command.requester
                )
            if classification.kind is QueryKind.SINGLE_EXTERNAL:
                assert isinstance(classification.reference, ExternalTrackReference)
                return await self._play_spotify_track(
                    connection, classification.reference, command.requester
                )
            return await self._play_generic(connection, command.query, command.requester)
        except Exception:
            logger.exception(LogTemplates.PLAY_UNEXPECTED_ERROR, command.guild_id, command.query)
            return PlayTrackResult.error(
                PlayTrackStatus.UNEXPECTED_ERROR, DiscordUIMessages.ERROR_PLAY_UNEXPECTED
            )

    def _check_preconditions(self, command: PlayTrackCommand) -> None:
        if command.voice_channel_id is None:
            raise PreconditionError("voice_channel", DiscordUIMessages.ERROR_NOT_IN_VOICE)
        if self._backend.available_node_count == 0:
            raise PreconditionError("search_backend", DiscordUIMessages.ERROR_NO_BACKEND_NODES)

    async def _play_generic(
        self, connection: PlaybackConnection, query: str, requester: Requester
    ) -> PlayTrackResult:
        result = await self._resolver.resolve(query, requester)

        if result.outcome is LoadOutcome.MALFORMED_RESPONSE:
            return PlayTrackResult.error(
                PlayTrackStatus.RESOLUTION_FAILED, DiscordUIMessages.ERROR_RESOLUTION_FAILED
            )
        if result.outcome.is_empty or not result.has_tracks:
            return PlayTrackResult.error(
                PlayTrackStatus.NO_RESULTS, DiscordUIMessages.ERROR_NO_RESULTS
            )

        if result.outcome is LoadOutcome.PLAYLIST:
            tracks: Sequence[Track] = result.tracks
            source = PlaySource.BACKEND_PLAYLIST
        else:
            tracks = result.tracks[:1]
            source = PlaySource.SEARCH

        first_position = self._commit(connection, tracks, requester)
        started = await self._start_if_idle(connection)
        return PlayTrackResult.queued(
            tracks=tracks, first_position=first_position, source=source, started_playing=started
        )

    async def _play_spotify_playlist(
        self, connection: PlaybackConnection, reference: PlaylistReference, requester: Requester
    ) -> PlayTrackResult:
        search_strings = await self._expander.expand(reference)
        queued, first_position = await self._resolve_sequentially(
            connection, search_strings, requester
        )

        if not queued:
            logger.info(
                LogTemplates.PLAY_BATCH_EMPTY, reference.playlist_id, len(search_strings)
            )
            return PlayTrackResult.error(
                PlayTrackStatus.NO_TRACKS_FOUND, DiscordUIMessages.ERROR_NO_TRACKS_FOUND
            )

        logger.info(
            LogTemplates.PLAY_BATCH_QUEUED,
            len(queued),
            len(search_strings),
            reference.playlist_id,
            connection.guild_id,
        )
        started = await self._start_if_idle(connection)
        return PlayTrackResult.queued(
            tracks=queued,
            first_position=first_position,
            source=PlaySource.SPOTIFY_PLAYLIST,
            started_playing=started,
        )

    async def _play_spotify_track(
        self,
        connection: PlaybackConnection,
        reference: ExternalTrackReference,
        requester: Requester,
    ) -> PlayTrackResult:
        search_strings = await self._expander.expand_single(reference)
        queued, first_position = await self._resolve_sequentially(
            connection, search_strings, requester
        )

        if not queued:
            return PlayTrackResult.error(
                PlayTrackStatus.NO_RESULTS, DiscordUIMessages.ERROR_NO_RESULTS
            )

        started = await self._start_if_idle(connection)
        return PlayTrackResult.queued(
            tracks=queued,
            first_position=first_position,
            source=PlaySource.SPOTIFY_TRACK,
            started_playing=started,
        )

    async def _resolve_sequentially(
        self,
        connection: PlaybackConnection,
        search_strings: Sequence[str],
        requester: Requester,
    ) -> tuple[list[Track], int]:
        """Resolve each search string in order, queueing the best match of each.

        Each call is awaited before the next starts; running them concurrently
        would let completion order leak into the queue. An item whose lookup
        raises is skipped like a no-match, so earlier commits still count.
        """
        queued: list[Track] = []
        first_position = 0

        for search_string in search_strings:
            try:
                result = await self._resolver.resolve(search_string, requester)
            except DomainError as e:
                logger.warning(LogTemplates.PLAY_ITEM_FAILED, search_string, e)
                continue

            best = result.first
            if best is None:
                if result.is_malformed:
                    logger.warning(LogTemplates.PLAY_ITEM_MALFORMED, search_string, result.error)
                else:
                    logger.debug(LogTemplates.PLAY_ITEM_SKIPPED, search_string)
                continue

            position = self._commit(connection, [best], requester)
            if not queued:
                first_position = position
            queued.append(best)

        return queued, first_position

    def _commit(
        self, connection: PlaybackConnection, tracks: Sequence[Track], requester: Requester
    ) -> int:
        """Append *tracks* in order, attribute them, and return the first one's position."""
        first_position = 0
        for index, track in enumerate(tracks):
            position = connection.enqueue(track)
            self._registry.record(track.uri, requester.display_name)
            if index == 0:
                first_position = position
        return first_position

    async def _start_if_idle(self, connection: PlaybackConnection) -> bool:
        if connection.is_playing or connection.is_paused:
            return False

        await connection.play()
        logger.info(LogTemplates.PLAY_PLAYBACK_TRIGGERED, connection.guild_id)
        return True
