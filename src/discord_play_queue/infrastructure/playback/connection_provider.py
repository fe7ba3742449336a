"""In-memory per-guild playback connections.

Audio transport is not part of this package: a connection keeps the guild's
queue and playback state, and hands each started track to an optional
callback where a voice/Lavalink player can be plugged in.

A player attached there owns the rest of the track's life. It must call
:meth:`InMemoryConnectionProvider.track_finished` when audio for the current
track ends, otherwise the guild stays PLAYING and later /play requests only
queue. ``pause``/``resume`` mirror the player's own pause state. Connections
are dropped through :meth:`InMemoryConnectionProvider.remove` when the bot
leaves the guild or its voice channel.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from discord_play_queue.application.interfaces.playback import (
    PlaybackConnection,
    PlaybackConnectionProvider,
)
from discord_play_queue.domain.music.entities import GuildPlaybackSession, Track
from discord_play_queue.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

TrackStartCallback = Callable[[int, Track], Awaitable[None]]


class GuildConnection(PlaybackConnection):
    def __init__(
        self,
        session: GuildPlaybackSession,
        on_track_start: TrackStartCallback | None = None,
    ) -> None:
        self._session = session
        self._on_track_start = on_track_start

    def set_on_track_start(self, callback: TrackStartCallback | None) -> None:
        self._on_track_start = callback

    @property
    def session(self) -> GuildPlaybackSession:
        return self._session

    @property
    def guild_id(self) -> int:
        return self._session.guild_id

    @property
    def voice_channel_id(self) -> int:
        return self._session.voice_channel_id

    @property
    def text_channel_id(self) -> int:
        return self._session.text_channel_id

    @property
    def is_playing(self) -> bool:
        return self._session.is_playing

    @property
    def is_paused(self) -> bool:
        return self._session.is_paused

    @property
    def current_track(self) -> Track | None:
        return self._session.current_track

    @property
    def queue(self) -> list[Track]:
        return list(self._session.queue)

    def enqueue(self, track: Track) -> int:
        position = self._session.enqueue(track)
        logger.debug(LogTemplates.QUEUE_ENQUEUED, track.title, position, self.guild_id)
        return position

    async def play(self) -> Track | None:
        track = self._session.start_next()
        if track is None:
            logger.debug(LogTemplates.QUEUE_EMPTY, self.guild_id)
            return None

        logger.info(LogTemplates.PLAYBACK_STARTED, track.title, self.guild_id)
        if self._on_track_start is not None:
            try:
                await self._on_track_start(self.guild_id, track)
            except Exception as e:
                logger.exception(LogTemplates.PLAYBACK_CALLBACK_ERROR, self.guild_id, e)
        return track

    def pause(self) -> None:
        self._session.pause()

    def resume(self) -> None:
        self._session.resume()

    def stop(self) -> None:
        self._session.stop()
        logger.info(LogTemplates.PLAYBACK_STOPPED, self.guild_id)


class InMemoryConnectionProvider(PlaybackConnectionProvider):
    """Keeps one :class:`GuildConnection` per guild for the life of the process."""

    def __init__(self) -> None:
        self._connections: dict[int, GuildConnection] = {}
        self._on_track_start: TrackStartCallback | None = None

    def set_on_track_start_callback(self, callback: TrackStartCallback | None) -> None:
        self._on_track_start = callback
        for connection in self._connections.values():
            connection.set_on_track_start(callback)

    def create_or_get_connection(
        self, guild_id: int, voice_channel_id: int, text_channel_id: int
    ) -> GuildConnection:
        connection = self._connections.get(guild_id)
        if connection is not None:
            return connection

        session = GuildPlaybackSession(
            guild_id=guild_id,
            voice_channel_id=voice_channel_id,
            text_channel_id=text_channel_id,
        )
        connection = GuildConnection(session, on_track_start=self._on_track_start)
        self._connections[guild_id] = connection
        logger.info(LogTemplates.CONNECTION_CREATED, guild_id, voice_channel_id)
        return connection

    def get_connection(self, guild_id: int) -> GuildConnection | None:
        return self._connections.get(guild_id)

    async def track_finished(self, guild_id: int) -> Track | None:
        """Advance a guild's queue after its current track ends."""
        connection = self._connections.get(guild_id)
        if connection is None:
            logger.debug(LogTemplates.SESSION_NOT_FOUND, guild_id)
            return None

        finished = connection.current_track
        if finished is not None:
            logger.info(LogTemplates.TRACK_FINISHED, finished.title, guild_id)
        return await connection.play()

    def remove(self, guild_id: int) -> bool:
        connection = self._connections.pop(guild_id, None)
        if connection is None:
            return False
        connection.stop()
        return True

    def __len__(self) -> int:
        return len(self._connections)
