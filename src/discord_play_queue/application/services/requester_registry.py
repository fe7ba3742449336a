"""Requester Registry - track URI to the display name of whoever queued it."""

from __future__ import annotations

import logging
from collections import OrderedDict

from ...domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 10_000


class RequesterRegistry:
    """Bounded mapping shared by every guild, read by "now playing" displays.

    Eviction is least-recently-queued: once ``max_entries`` is reached the
    entry recorded longest ago is dropped. Recording a URI again moves it to
    the newest position. Writes are plain upserts; under asyncio no lock is
    needed, but callers on other threads must synchronize externally.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._max_entries = max_entries
        self._entries: OrderedDict[str, str] = OrderedDict()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def record(self, uri: str, requester_name: str) -> None:
        self._entries[uri] = requester_name
        self._entries.move_to_end(uri)

        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(LogTemplates.REGISTRY_EVICTED, evicted)

    def get(self, uri: str) -> str | None:
        return self._entries.get(uri)

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, uri: object) -> bool:
        return uri in self._entries
