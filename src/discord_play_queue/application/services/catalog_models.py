"""DTOs exchanged between the playlist expander and catalog providers."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ...domain.shared.types import NonNegativeInt


class CatalogItemType(Enum):
    TRACK = "track"
    PLAYLIST = "playlist"
    EPISODE = "episode"
    OTHER = "other"


class CatalogItem(BaseModel):
    """One entry of a provider catalog: a name plus its contributing artists."""

    model_config = ConfigDict(frozen=True)

    type: CatalogItemType = CatalogItemType.TRACK
    name: str | None = None
    artists: list[str] = Field(default_factory=list)

    @property
    def is_searchable(self) -> bool:
        """True when the item carries both a name and at least one artist."""
        return bool(self.name and self.name.strip()) and any(a.strip() for a in self.artists)

    def to_search_string(self) -> str:
        """Build ``"<name> - <artist1, artist2, ...>"``."""
        artists = ", ".join(a for a in self.artists if a.strip())
        return f"{self.name} - {artists}"


class CatalogPage(BaseModel):
    """One page of playlist items plus the provider-reported total."""

    model_config = ConfigDict(frozen=True)

    items: list[CatalogItem | None] = Field(default_factory=list)
    total: NonNegativeInt = 0
