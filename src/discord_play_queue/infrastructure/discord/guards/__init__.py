"""Interaction guard functions for Discord cogs."""

from discord_play_queue.infrastructure.discord.guards.voice_guards import (
    VoiceContext,
    reply_ephemeral,
    require_voice_context,
)

__all__ = [
    "VoiceContext",
    "reply_ephemeral",
    "require_voice_context",
]
