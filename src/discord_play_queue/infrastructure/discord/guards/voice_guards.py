"""Interaction guards for commands that need the caller's voice context."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import discord

from discord_play_queue.domain.shared.messages import DiscordUIMessages, LogTemplates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoiceContext:
    """Where a /play request came from and where its audio should go."""

    guild_id: int
    voice_channel_id: int
    text_channel_id: int
    member: discord.Member


async def reply_ephemeral(interaction: discord.Interaction, message: str) -> bool:
    """Reply privately through whichever channel the interaction still allows.

    Returns False when Discord rejected the message.
    """
    try:
        if interaction.response.is_done():
            await interaction.followup.send(message, ephemeral=True)
        else:
            await interaction.response.send_message(message, ephemeral=True)
    except discord.HTTPException as e:
        logger.warning(LogTemplates.EPHEMERAL_REPLY_FAILED, e)
        return False
    return True


async def require_voice_context(interaction: discord.Interaction) -> VoiceContext | None:
    """Resolve the caller's guild, voice channel and reply channel.

    Each failed check is answered ephemerally and yields None. The reply channel
    falls back to the voice channel's own text chat when the interaction has none.
    """
    guild = interaction.guild
    if guild is None:
        await reply_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
        return None

    member = interaction.user
    if not isinstance(member, discord.Member):
        await reply_ephemeral(interaction, DiscordUIMessages.STATE_VERIFY_VOICE_FAILED)
        return None

    channel = member.voice.channel if member.voice is not None else None
    if channel is None:
        await reply_ephemeral(interaction, DiscordUIMessages.ERROR_NOT_IN_VOICE)
        return None

    return VoiceContext(
        guild_id=guild.id,
        voice_channel_id=channel.id,
        text_channel_id=interaction.channel_id or channel.id,
        member=member,
    )
