"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Lavalink (REST node pool backing track search)
- Spotify (Web API catalog client)
- Playback (in-memory per-guild connections)
- Discord (bot, cogs, embeds)
"""

from discord_play_queue.infrastructure.discord.bot import create_bot
from discord_play_queue.infrastructure.lavalink.node_pool import LavalinkNodePool
from discord_play_queue.infrastructure.playback.connection_provider import (
    InMemoryConnectionProvider,
)
from discord_play_queue.infrastructure.spotify.client import SpotifyCatalogClient

__all__ = [
    "create_bot",
    "LavalinkNodePool",
    "SpotifyCatalogClient",
    "InMemoryConnectionProvider",
]
