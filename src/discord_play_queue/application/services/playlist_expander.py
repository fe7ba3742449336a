"""Playlist Expander - turns external playlist references into ordered search strings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.music.value_objects import ExternalTrackReference, PlaylistReference
from ...domain.shared.exceptions import ProviderError
from ...domain.shared.messages import LogTemplates
from .catalog_models import CatalogItemType

if TYPE_CHECKING:
    from ..interfaces.catalog_provider import CatalogProvider

logger = logging.getLogger(__name__)


def _below_reported_total(count: int, total: int) -> bool:
    """True while fewer items have been fetched than the provider says exist."""
    return count < total


def _below_safety_cap(offset: int) -> bool:
    """True while the next page would start under the hard pagination cap."""
    return offset < PlaylistReference.MAX_ITEMS


class PlaylistExpander:
    """Paginates a provider playlist into ``"<title> - <artists>"`` search strings.

    Provider failures never escape: expansion stops and whatever was collected
    so far (possibly nothing) is returned.
    """

    def __init__(self, *, catalog_provider: CatalogProvider) -> None:
        self._provider = catalog_provider

    async def expand(self, reference: PlaylistReference) -> list[str]:
        search_strings: list[str] = []
        fetched = 0
        offset = 0
        total = 0

        try:
            while True:
                page = await self._provider.fetch_page(
                    reference.playlist_id, offset, PlaylistReference.PAGE_SIZE
                )
                items = page.items[: PlaylistReference.PAGE_SIZE]
                total = page.total
                fetched += len(items)
                offset += PlaylistReference.PAGE_SIZE

                for item in items:
                    if item is None or not item.is_searchable:
                        continue
                    search_strings.append(item.to_search_string())

                if not items:
                    break
                if not (
                    _below_reported_total(fetched, total)
                    and _below_safety_cap(offset)
                ):
                    break
        except ProviderError as e:
            logger.warning(
                LogTemplates.EXPANSION_ABORTED, reference.playlist_id, len(search_strings), e
            )
            return search_strings

        logger.info(
            LogTemplates.EXPANSION_COMPLETED,
            reference.playlist_id,
            len(search_strings),
            total,
            offset // PlaylistReference.PAGE_SIZE,
        )
        return search_strings

    async def expand_single(self, reference: ExternalTrackReference) -> list[str]:
        """Expand a one-track reference; bypasses pagination entirely."""
        try:
            item = await self._provider.fetch_item(reference.track_id)
        except ProviderError as e:
            logger.warning(LogTemplates.EXPANSION_SINGLE_FAILED, reference.track_id, e)
            return []

        if item.type is not CatalogItemType.TRACK or not item.is_searchable:
            logger.info(LogTemplates.EXPANSION_SINGLE_UNUSABLE, reference.track_id)
            return []

        return [item.to_search_string()]
