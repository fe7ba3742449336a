"""Embed builders shared by the music commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import discord

from discord_play_queue.domain.shared.messages import DiscordUIMessages
from discord_play_queue.utils.reply import format_duration, truncate

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ...application.commands.play_track import PlayTrackResult
    from ...domain.music.entities import Track


def _track_link(track: Track, max_length: int = 80) -> str:
    title = truncate(track.title, max_length)
    if track.uri.startswith(("http://", "https://")):
        return f"[{title}]({track.uri})"
    return f"**{title}**"


def total_duration_ms(tracks: Sequence[Track]) -> int | None:
    """Summed length of non-stream tracks, or None when no length is known."""
    lengths = [t.length_ms for t in tracks if t.length_ms is not None and not t.is_stream]
    if not lengths:
        return None
    return sum(lengths)


def build_queued_embed(result: PlayTrackResult) -> discord.Embed:
    track = result.first_track
    title = (
        DiscordUIMessages.EMBED_NOW_PLAYING
        if result.started_playing and result.queued_count == 1
        else DiscordUIMessages.EMBED_ADDED_TO_QUEUE
    )

    embed = discord.Embed(title=title, description=result.message, color=discord.Color.green())
    if track is None:
        return embed

    if track.artwork_url:
        embed.set_thumbnail(url=track.artwork_url)

    if result.queued_count == 1:
        embed.add_field(name="\U0001f3b5 Track", value=_track_link(track), inline=False)
        embed.add_field(name="⏱️ Duration", value=track.duration_formatted, inline=True)
        if track.author:
            embed.add_field(name="\U0001f464 Artist", value=truncate(track.author, 64), inline=True)
    else:
        embed.add_field(name="▶️ First", value=_track_link(track, 60), inline=False)
        embed.add_field(name="\U0001f4cb Tracks", value=str(result.queued_count), inline=True)
        total = total_duration_ms(result.tracks)
        if total is not None:
            embed.add_field(
                name="⏱️ Total duration", value=format_duration(total), inline=True
            )

    if track.requested_by_name:
        embed.set_footer(
            text=DiscordUIMessages.EMBED_REQUESTED_BY.format(name=track.requested_by_name)
        )
    return embed


def build_now_playing_embed(
    track: Track, *, requester: str | None, next_track: Track | None = None
) -> discord.Embed:
    description_lines = [_track_link(track)]
    description_lines.append(
        DiscordUIMessages.EMBED_REQUESTED_BY.format(
            name=requester or DiscordUIMessages.UNKNOWN_REQUESTER
        )
    )

    embed = discord.Embed(
        title=DiscordUIMessages.EMBED_NOW_PLAYING,
        description="\n".join(description_lines),
        color=discord.Color.green(),
    )

    if track.artwork_url:
        embed.set_thumbnail(url=track.artwork_url)

    embed.add_field(name="⏱️ Duration", value=track.duration_formatted, inline=True)

    if track.author:
        embed.add_field(name="\U0001f464 Artist", value=truncate(track.author, 64), inline=True)

    if next_track:
        embed.add_field(
            name="⏭️ Next Up", value=truncate(next_track.title, 60), inline=False
        )

    return embed
