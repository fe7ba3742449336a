"""Pydantic models for validating and normalizing search backend payloads.

The backend answers in more than one dialect (Lavalink v3 ``track`` vs v4
``encoded``, nested ``info`` objects vs flat entries with an ``artists`` list).
These models accept all of them and coerce garbage field values gracefully;
only the envelope shape itself is strict.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ...domain.music.entities import Track
from ...domain.music.value_objects import LoadOutcome
from ...domain.shared.exceptions import BackendResponseError
from ...domain.shared.types import NonEmptyStr, NonNegativeInt

UNKNOWN_TITLE = "Unknown Title"
MAX_TITLE_LENGTH = 500


class BackendTrackInfo(BaseModel):
    """Track metadata as reported by the backend; extra fields are ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    uri: NonEmptyStr | None = None
    identifier: NonEmptyStr | None = None
    title: NonEmptyStr = UNKNOWN_TITLE
    author: str = ""
    length: NonNegativeInt | None = None
    is_stream: bool = Field(default=False, validation_alias=AliasChoices("isStream", "is_stream"))
    source_name: NonEmptyStr | None = Field(
        default=None, validation_alias=AliasChoices("sourceName", "source_name")
    )
    artwork_url: NonEmptyStr | None = Field(
        default=None, validation_alias=AliasChoices("artworkUrl", "artwork_url")
    )

    @field_validator("uri", "identifier", "source_name", "artwork_url", mode="before")
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        if not isinstance(v, str) or not v.strip():
            return None
        return v

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            return UNKNOWN_TITLE
        return v[:MAX_TITLE_LENGTH]

    @field_validator("author", mode="before")
    @classmethod
    def _coerce_author(cls, v: Any) -> str:
        return v if isinstance(v, str) else ""

    @field_validator("length", mode="before")
    @classmethod
    def _coerce_length(cls, v: Any) -> int | None:
        if v is None or isinstance(v, bool):
            return None
        try:
            val = int(v)
            return val if val >= 0 else None
        except (TypeError, ValueError):
            return None

    @field_validator("is_stream", mode="before")
    @classmethod
    def _coerce_bool(cls, v: Any) -> bool:
        return v is True


class BackendTrackEntry(BaseModel):
    """One element of the backend ``tracks`` array."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    encoded: NonEmptyStr | None = Field(
        default=None, validation_alias=AliasChoices("encoded", "track")
    )
    info: BackendTrackInfo

    @classmethod
    def from_raw(cls, raw: Any) -> BackendTrackEntry:
        """Parse nested (``{"encoded", "info"}``) and flat (``{uri, title, artists}``) shapes."""
        if not isinstance(raw, dict):
            raise TypeError(f"track entry must be an object, got {type(raw).__name__}")

        if isinstance(raw.get("info"), dict):
            return cls.model_validate(raw)

        info = dict(raw)
        artists = info.pop("artists", None)
        if not info.get("author") and isinstance(artists, list):
            info["author"] = ", ".join(_artist_names(artists))
        return cls.model_validate({"encoded": raw.get("encoded") or raw.get("track"), "info": info})

    @field_validator("encoded", mode="before")
    @classmethod
    def _coerce_encoded(cls, v: Any) -> str | None:
        if not isinstance(v, str) or not v.strip():
            return None
        return v

    def to_track(self) -> Track | None:
        """Convert to a domain Track, or None when the entry has no usable identifier."""
        uri = self.info.uri or self.info.identifier
        if not uri:
            return None

        artwork = self.info.artwork_url
        if artwork is not None and not artwork.startswith(("http://", "https://")):
            artwork = None

        return Track(
            uri=uri,
            title=self.info.title,
            author=self.info.author,
            encoded=self.encoded,
            identifier=self.info.identifier,
            length_ms=self.info.length,
            is_stream=self.info.is_stream,
            source_name=self.info.source_name,
            artwork_url=artwork,
        )


def _artist_names(artists: list[Any]) -> list[str]:
    names: list[str] = []
    for artist in artists:
        if isinstance(artist, str) and artist.strip():
            names.append(artist)
        elif isinstance(artist, dict) and isinstance(artist.get("name"), str):
            names.append(artist["name"])
    return names


class SearchResponse(BaseModel):
    """Envelope of a backend search: a ``loadType`` tag plus an array of track entries."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    load_type: str = Field(validation_alias=AliasChoices("loadType", "load_type"))
    tracks: list[Any]


class ResolutionResult(BaseModel):
    """Outcome of one resolver call plus the requester-stamped tracks it produced."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    outcome: LoadOutcome
    tracks: tuple[Track, ...] = ()
    error: BackendResponseError | None = None

    @property
    def first(self) -> Track | None:
        """Best match: the first candidate the backend returned."""
        return self.tracks[0] if self.tracks else None

    @property
    def has_tracks(self) -> bool:
        return bool(self.tracks)

    @property
    def is_malformed(self) -> bool:
        return self.outcome is LoadOutcome.MALFORMED_RESPONSE

    @classmethod
    def malformed(cls, error: BackendResponseError) -> ResolutionResult:
        return cls(outcome=LoadOutcome.MALFORMED_RESPONSE, error=error)
