"""Spotify Web API client (client-credentials flow) implementing the catalog port."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Final

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from discord_play_queue.application.interfaces.catalog_provider import CatalogProvider
from discord_play_queue.application.services.catalog_models import (
    CatalogItem,
    CatalogItemType,
    CatalogPage,
)
from discord_play_queue.config.settings import SpotifySettings
from discord_play_queue.domain.shared.exceptions import ProviderError
from discord_play_queue.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

PROVIDER_NAME: Final[str] = "spotify"
TOKEN_URL: Final[str] = "https://accounts.spotify.com/api/token"
API_BASE_URL: Final[str] = "https://api.spotify.com/v1"

# Refresh a little before the advertised expiry.
TOKEN_EXPIRY_MARGIN_S: Final[float] = 60.0


class SpotifyToken(BaseModel):
    access_token: str = Field(..., min_length=1)
    expires_in: int = 3600


class SpotifyArtist(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None


class SpotifyTrack(BaseModel):
    """Track (or episode) object as embedded in playlist items."""

    model_config = ConfigDict(extra="ignore")

    type: str = "track"
    name: str | None = None
    artists: list[SpotifyArtist] = Field(default_factory=list)

    @field_validator("artists", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    def to_catalog_item(self) -> CatalogItem:
        try:
            item_type = CatalogItemType(self.type)
        except ValueError:
            item_type = CatalogItemType.OTHER
        return CatalogItem(
            type=item_type,
            name=self.name,
            artists=[a.name for a in self.artists if a.name],
        )


class SpotifyPlaylistItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    track: SpotifyTrack | None = None


class SpotifyPlaylistPage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    items: list[SpotifyPlaylistItem | None] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)

    def to_catalog_page(self) -> CatalogPage:
        items: list[CatalogItem | None] = []
        for entry in self.items:
            if entry is None or entry.track is None:
                items.append(None)
            else:
                items.append(entry.track.to_catalog_item())
        return CatalogPage(items=items, total=self.total)


class SpotifyCatalogClient(CatalogProvider):
    def __init__(
        self,
        settings: SpotifySettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or SpotifySettings()
        self._client = client or httpx.AsyncClient(timeout=self._settings.request_timeout_s)
        self._token: str | None = None
        self._token_expires_at: float = 0.0
        self._token_lock = asyncio.Lock()

    def _token_valid(self) -> bool:
        return self._token is not None and time.monotonic() < self._token_expires_at

    def _invalidate_token(self) -> None:
        self._token = None
        self._token_expires_at = 0.0

    async def _get_token(self) -> str:
        if self._token_valid():
            assert self._token is not None
            return self._token

        async with self._token_lock:
            # Another request may have refreshed it while we waited.
            if self._token_valid():
                assert self._token is not None
                return self._token

            if not self._settings.is_configured:
                raise ProviderError(PROVIDER_NAME, ErrorMessages.SPOTIFY_CREDENTIALS_MISSING)

            try:
                response = await self._client.post(
                    TOKEN_URL,
                    data={"grant_type": "client_credentials"},
                    auth=(
                        self._settings.client_id,
                        self._settings.client_secret.get_secret_value(),
                    ),
                )
            except httpx.HTTPError as e:
                raise ProviderError(PROVIDER_NAME, str(e)) from e

            if response.status_code != 200:
                raise ProviderError(
                    PROVIDER_NAME,
                    ErrorMessages.SPOTIFY_AUTH_FAILED.format(status=response.status_code),
                    status_code=response.status_code,
                )

            try:
                token = SpotifyToken.model_validate(response.json())
            except (ValueError, ValidationError) as e:
                raise ProviderError(PROVIDER_NAME, ErrorMessages.SPOTIFY_BAD_PAYLOAD) from e

            self._token = token.access_token
            self._token_expires_at = (
                time.monotonic() + max(token.expires_in - TOKEN_EXPIRY_MARGIN_S, 0.0)
            )
            logger.debug(LogTemplates.SPOTIFY_TOKEN_REFRESHED, token.expires_in)
            return self._token

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET an API path; a 401 drops the cached token and retries once."""
        for attempt in (1, 2):
            token = await self._get_token()
            try:
                response = await self._client.get(
                    f"{API_BASE_URL}{path}",
                    params=params,
                    headers={"Authorization": f"Bearer {token}"},
                )
            except httpx.HTTPError as e:
                raise ProviderError(PROVIDER_NAME, str(e)) from e

            if response.status_code == 401 and attempt == 1:
                logger.info(LogTemplates.SPOTIFY_TOKEN_REJECTED)
                self._invalidate_token()
                continue

            if response.status_code != 200:
                raise ProviderError(
                    PROVIDER_NAME,
                    ErrorMessages.SPOTIFY_REQUEST_FAILED.format(
                        path=path, status=response.status_code
                    ),
                    status_code=response.status_code,
                )

            try:
                return response.json()
            except ValueError as e:
                raise ProviderError(PROVIDER_NAME, ErrorMessages.SPOTIFY_BAD_PAYLOAD) from e

        raise ProviderError(PROVIDER_NAME, ErrorMessages.SPOTIFY_AUTH_FAILED.format(status=401))

    async def fetch_page(self, playlist_id: str, offset: int, limit: int) -> CatalogPage:
        payload = await self._get_json(
            f"/playlists/{playlist_id}/tracks", params={"limit": limit, "offset": offset}
        )
        try:
            page = SpotifyPlaylistPage.model_validate(payload)
        except ValidationError as e:
            raise ProviderError(PROVIDER_NAME, ErrorMessages.SPOTIFY_BAD_PAYLOAD) from e

        logger.debug(LogTemplates.SPOTIFY_PAGE_FETCHED, playlist_id, offset, len(page.items))
        return page.to_catalog_page()

    async def fetch_item(self, item_id: str) -> CatalogItem:
        payload = await self._get_json(f"/tracks/{item_id}")
        try:
            track = SpotifyTrack.model_validate(payload)
        except ValidationError as e:
            raise ProviderError(PROVIDER_NAME, ErrorMessages.SPOTIFY_BAD_PAYLOAD) from e
        return track.to_catalog_item()

    async def close(self) -> None:
        await self._client.aclose()
