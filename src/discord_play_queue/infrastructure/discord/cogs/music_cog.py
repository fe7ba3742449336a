"""Slash-command music cog delegating to the /play pipeline."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands
from pydantic import ValidationError

from discord_play_queue.application.commands.play_track import (
    PlayTrackCommand,
    PlayTrackResult,
)
from discord_play_queue.domain.shared.messages import (
    DiscordUIMessages,
    ErrorMessages,
    LogTemplates,
)
from discord_play_queue.infrastructure.discord.embeds import (
    build_now_playing_embed,
    build_queued_embed,
)
from discord_play_queue.infrastructure.discord.guards.voice_guards import (
    reply_ephemeral,
    require_voice_context,
)

if TYPE_CHECKING:
    from ....config.container import Container
    from ....domain.music.entities import Track

logger = logging.getLogger(__name__)


class MusicCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    async def cog_load(self) -> None:
        self.container.connection_provider.set_on_track_start_callback(self._on_track_start)

    async def cog_unload(self) -> None:
        self.container.connection_provider.set_on_track_start_callback(None)

    async def _on_track_start(self, guild_id: int, track: Track) -> None:
        """Announce a newly started track in the text channel it was requested from."""
        connection = self.container.connection_provider.get_connection(guild_id)
        if connection is None:
            return

        channel = self.bot.get_channel(connection.text_channel_id)
        if not isinstance(channel, discord.abc.Messageable):
            return

        queue = connection.queue
        embed = build_now_playing_embed(
            track,
            requester=self.container.requester_registry.get(track.uri),
            next_track=queue[0] if queue else None,
        )
        try:
            await channel.send(embed=embed)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.NOW_PLAYING_SEND_FAILED, guild_id, e)

    def _drop_connection(self, guild_id: int, reason: str) -> None:
        if self.container.connection_provider.remove(guild_id):
            logger.info(LogTemplates.CONNECTION_REMOVED, guild_id, reason)

    @commands.Cog.listener()
    async def on_guild_remove(self, guild: discord.Guild) -> None:
        self._drop_connection(guild.id, "left guild")

    @commands.Cog.listener()
    async def on_voice_state_update(
        self, member: discord.Member, before: discord.VoiceState, after: discord.VoiceState
    ) -> None:
        # Only the bot's own disconnect ends a guild's session.
        me = self.bot.user
        if me is None or member.id != me.id:
            return
        if before.channel is not None and after.channel is None:
            self._drop_connection(member.guild.id, "disconnected from voice")

    @app_commands.command(
        name="play", description="Play a song or playlist by search, URL, or Spotify link."
    )
    @app_commands.describe(query="Search terms, a media URL, or a Spotify track/playlist link")
    async def play(self, interaction: discord.Interaction, query: str) -> None:
        context = await require_voice_context(interaction)
        if context is None:
            return

        try:
            command = PlayTrackCommand(
                guild_id=context.guild_id,
                text_channel_id=context.text_channel_id,
                voice_channel_id=context.voice_channel_id,
                user_id=context.member.id,
                user_name=context.member.display_name,
                query=query,
            )
        except ValidationError:
            await reply_ephemeral(interaction, DiscordUIMessages.ERROR_INVALID_QUERY)
            return

        # Playlists take far longer than the 3-second interaction deadline
        await interaction.response.defer(thinking=True)

        try:
            result = await self.container.play_track_handler.handle(command)
        except Exception:
            logger.exception(LogTemplates.PLAY_UNEXPECTED_ERROR, context.guild_id, query)
            await interaction.followup.send(DiscordUIMessages.ERROR_PLAY_UNEXPECTED)
            return

        await self._send_result(interaction, result)

    async def _send_result(self, interaction: discord.Interaction, result: PlayTrackResult) -> None:
        if result.is_success:
            await interaction.followup.send(embed=build_queued_embed(result))
            return

        await interaction.followup.send(result.message)

    @app_commands.command(name="nowplaying", description="Show the current track and who queued it.")
    async def nowplaying(self, interaction: discord.Interaction) -> None:
        if not interaction.guild:
            await reply_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
            return

        connection = self.container.connection_provider.get_connection(interaction.guild.id)
        track = connection.current_track if connection is not None else None
        if connection is None or track is None:
            await reply_ephemeral(interaction, DiscordUIMessages.STATE_NOTHING_PLAYING)
            return

        queue = connection.queue
        embed = build_now_playing_embed(
            track,
            requester=self.container.requester_registry.get(track.uri),
            next_track=queue[0] if queue else None,
        )
        await interaction.response.send_message(embed=embed)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(MusicCog(bot, container))
