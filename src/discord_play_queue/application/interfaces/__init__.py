"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from discord_play_queue.application.interfaces.catalog_provider import CatalogProvider
from discord_play_queue.application.interfaces.playback import (
    PlaybackConnection,
    PlaybackConnectionProvider,
)
from discord_play_queue.application.interfaces.search_backend import AudioSearchBackend

__all__ = [
    "AudioSearchBackend",
    "CatalogProvider",
    "PlaybackConnection",
    "PlaybackConnectionProvider",
]
