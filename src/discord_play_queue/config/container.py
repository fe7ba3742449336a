"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the search backend, catalog provider, playback
connections, and the /play pipeline built on top of them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.commands.play_track import PlayTrackHandler
    from ..application.services.playlist_expander import PlaylistExpander
    from ..application.services.requester_registry import RequesterRegistry
    from ..application.services.track_resolver import TrackResolver
    from ..infrastructure.lavalink.node_pool import LavalinkNodePool
    from ..infrastructure.playback.connection_provider import InMemoryConnectionProvider
    from ..infrastructure.spotify.client import SpotifyCatalogClient
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed.
    """

    settings: Settings
    _bot: Bot | None = None

    # Infrastructure adapters
    _search_backend: LavalinkNodePool | None = None
    _catalog_provider: SpotifyCatalogClient | None = None
    _connection_provider: InMemoryConnectionProvider | None = None

    # Application services
    _requester_registry: RequesterRegistry | None = None
    _playlist_expander: PlaylistExpander | None = None
    _track_resolver: TrackResolver | None = None

    # Command handlers
    _play_track_handler: PlayTrackHandler | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Infrastructure Adapters ===

    @property
    def search_backend(self) -> LavalinkNodePool:
        """Get the Lavalink node pool."""
        if self._search_backend is None:
            from ..infrastructure.lavalink.node_pool import LavalinkNodePool

            self._search_backend = LavalinkNodePool(self.settings.lavalink)
        return self._search_backend

    @property
    def catalog_provider(self) -> SpotifyCatalogClient:
        """Get the Spotify catalog client."""
        if self._catalog_provider is None:
            from ..infrastructure.spotify.client import SpotifyCatalogClient

            self._catalog_provider = SpotifyCatalogClient(self.settings.spotify)
        return self._catalog_provider

    @property
    def connection_provider(self) -> InMemoryConnectionProvider:
        """Get the per-guild playback connection provider."""
        if self._connection_provider is None:
            from ..infrastructure.playback.connection_provider import (
                InMemoryConnectionProvider,
            )

            self._connection_provider = InMemoryConnectionProvider()
        return self._connection_provider

    # === Application Services ===

    @property
    def requester_registry(self) -> RequesterRegistry:
        """Get the shared track-to-requester registry."""
        if self._requester_registry is None:
            from ..application.services.requester_registry import RequesterRegistry

            self._requester_registry = RequesterRegistry(self.settings.registry.max_entries)
        return self._requester_registry

    @property
    def playlist_expander(self) -> PlaylistExpander:
        if self._playlist_expander is None:
            from ..application.services.playlist_expander import PlaylistExpander

            self._playlist_expander = PlaylistExpander(catalog_provider=self.catalog_provider)
        return self._playlist_expander

    @property
    def track_resolver(self) -> TrackResolver:
        if self._track_resolver is None:
            from ..application.services.track_resolver import TrackResolver

            self._track_resolver = TrackResolver(search_backend=self.search_backend)
        return self._track_resolver

    # === Command Handlers ===

    @property
    def play_track_handler(self) -> PlayTrackHandler:
        """Get the play track command handler."""
        if self._play_track_handler is None:
            from ..application.commands.play_track import PlayTrackHandler

            self._play_track_handler = PlayTrackHandler(
                search_backend=self.search_backend,
                connection_provider=self.connection_provider,
                playlist_expander=self.playlist_expander,
                track_resolver=self.track_resolver,
                requester_registry=self.requester_registry,
            )
        return self._play_track_handler

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Probe the configured backend nodes."""
        available = await self.search_backend.refresh()
        if available == 0:
            logger.warning(LogTemplates.LAVALINK_NO_NODES_AVAILABLE)
        if not self.settings.spotify.is_configured:
            logger.warning(LogTemplates.SPOTIFY_NOT_CONFIGURED)

    async def shutdown(self) -> None:
        """Close HTTP clients and drop cached state."""
        if self._search_backend is not None:
            try:
                await self._search_backend.close()
            except Exception as exc:
                logger.warning(LogTemplates.CONTAINER_CLOSE_FAILED, "search_backend", exc)

        if self._catalog_provider is not None:
            try:
                await self._catalog_provider.close()
            except Exception as exc:
                logger.warning(LogTemplates.CONTAINER_CLOSE_FAILED, "catalog_provider", exc)

        if self._requester_registry is not None:
            self._requester_registry.clear()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
