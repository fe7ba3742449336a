"""Lavalink REST node pool implementing the audio search backend port."""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Final

import httpx

from discord_play_queue.application.interfaces.search_backend import AudioSearchBackend
from discord_play_queue.config.settings import LavalinkNodeSettings, LavalinkSettings
from discord_play_queue.domain.shared.exceptions import PreconditionError
from discord_play_queue.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

LOAD_TRACKS_PATH: Final[str] = "/v4/loadtracks"
VERSION_PATH: Final[str] = "/version"

URL_PATTERNS: Final[list[re.Pattern[str]]] = [
    re.compile(r"^https?://", re.IGNORECASE),
    re.compile(r"^www\.", re.IGNORECASE),
]

# Source prefixes Lavalink understands natively ("ytsearch:foo", "scsearch:foo").
SEARCH_PREFIX_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-z]+search:", re.IGNORECASE)


def normalize_load_result(payload: Any) -> Any:
    """Reshape a v4 ``{"loadType", "data"}`` envelope into ``{"loadType", "tracks"}``.

    v3 payloads already carry ``tracks`` and pass through, as does anything that
    is not recognisably a v4 envelope; validation happens downstream.
    """
    if not isinstance(payload, dict) or "data" not in payload or "tracks" in payload:
        return payload

    load_type = payload.get("loadType")
    data = payload["data"]

    if load_type == "track":
        tracks: Any = [data]
    elif load_type == "playlist":
        tracks = data.get("tracks") if isinstance(data, dict) else data
    elif load_type == "search":
        tracks = data
    elif load_type in ("empty", "error"):
        tracks = []
    else:
        return payload

    return {"loadType": load_type, "tracks": tracks}


@dataclass
class _NodeState:
    settings: LavalinkNodeSettings
    available: bool = True
    failed_at: float | None = None

    @property
    def name(self) -> str:
        return self.settings.name

    def mark_failed(self, now: float) -> None:
        self.available = False
        self.failed_at = now

    def mark_healthy(self) -> None:
        self.available = True
        self.failed_at = None


class LavalinkNodePool(AudioSearchBackend):
    """Sends load requests to the first healthy node in configuration order.

    A node that raises a transport error is taken out of rotation. It comes
    back after ``node_retry_s`` seconds or after a successful ``refresh()``.
    """

    def __init__(
        self,
        settings: LavalinkSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or LavalinkSettings()
        self._client = client or httpx.AsyncClient(timeout=self._settings.request_timeout_s)
        self._nodes = [_NodeState(node) for node in self._settings.nodes]

    @property
    def available_node_count(self) -> int:
        now = time.monotonic()
        return sum(1 for node in self._nodes if self._is_usable(node, now))

    def _is_usable(self, node: _NodeState, now: float) -> bool:
        if node.available:
            return True
        if node.failed_at is None:
            return False
        return now - node.failed_at >= self._settings.node_retry_s

    def _headers(self, node: _NodeState) -> dict[str, str]:
        return {"Authorization": node.settings.password.get_secret_value()}

    def build_identifier(self, query: str) -> str:
        """Pass URLs and explicit ``xxsearch:`` queries through; prefix everything else."""
        if any(pattern.match(query) for pattern in URL_PATTERNS):
            return query
        if SEARCH_PREFIX_PATTERN.match(query):
            return query
        return f"{self._settings.default_search}:{query}"

    async def search(self, query: str) -> Any:
        identifier = self.build_identifier(query)
        now = time.monotonic()

        for node in self._nodes:
            if not self._is_usable(node, now):
                continue

            try:
                response = await self._client.get(
                    f"{node.settings.base_url}{LOAD_TRACKS_PATH}",
                    params={"identifier": identifier},
                    headers=self._headers(node),
                )
                response.raise_for_status()
                payload = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(LogTemplates.LAVALINK_NODE_FAILED, node.name, e)
                node.mark_failed(time.monotonic())
                continue

            if not node.available:
                logger.info(LogTemplates.LAVALINK_NODE_RECOVERED, node.name)
            node.mark_healthy()
            logger.debug(LogTemplates.LAVALINK_SEARCH, node.name, identifier)
            return normalize_load_result(payload)

        raise PreconditionError("search_backend", ErrorMessages.NO_LAVALINK_NODES)

    async def refresh(self) -> int:
        """Probe every node's ``/version`` endpoint and return the healthy count."""
        for node in self._nodes:
            try:
                response = await self._client.get(
                    f"{node.settings.base_url}{VERSION_PATH}", headers=self._headers(node)
                )
                response.raise_for_status()
            except httpx.HTTPError as e:
                logger.warning(LogTemplates.LAVALINK_NODE_FAILED, node.name, e)
                node.mark_failed(time.monotonic())
                continue

            logger.info(LogTemplates.LAVALINK_NODE_READY, node.name, response.text.strip())
            node.mark_healthy()

        return sum(1 for node in self._nodes if node.available)

    async def close(self) -> None:
        await self._client.aclose()
