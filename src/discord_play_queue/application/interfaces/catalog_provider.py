"""Port interface for external playlist/track metadata providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from discord_play_queue.domain.shared.types import CatalogPageSize, NonEmptyStr, NonNegativeInt

if TYPE_CHECKING:
    from ..services.catalog_models import CatalogItem, CatalogPage


class CatalogProvider(ABC):
    """Interface for a credential-based music catalog (e.g. the Spotify Web API).

    Implementations raise ``ProviderError`` for authentication, transport and
    payload failures.
    """

    @abstractmethod
    async def fetch_page(
        self, playlist_id: NonEmptyStr, offset: NonNegativeInt, limit: CatalogPageSize
    ) -> CatalogPage:
        """Fetch one page of playlist items starting at *offset*."""
        ...

    @abstractmethod
    async def fetch_item(self, item_id: NonEmptyStr) -> CatalogItem:
        """Fetch a single catalog track."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""
        ...
