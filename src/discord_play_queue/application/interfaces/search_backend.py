"""Port interface for the audio search backend (a pool of Lavalink-style nodes)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from discord_play_queue.domain.shared.types import NonEmptyStr


class AudioSearchBackend(ABC):
    """Interface for resolving a search string or media URL to backend track entries.

    ``search`` returns the backend payload as-is, shaped like
    ``{"loadType": ..., "tracks": [...]}``. Callers must validate it before use.
    """

    @abstractmethod
    async def search(self, query: NonEmptyStr) -> Any:
        """Run one load/search request against an available node."""
        ...

    @property
    @abstractmethod
    def available_node_count(self) -> int:
        """Number of nodes currently able to serve requests."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""
        ...
