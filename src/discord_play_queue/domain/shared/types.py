"""Constrained Pydantic types shared by models, ports and settings.

Annotate a field with one of these instead of repeating ``Field(...)`` bounds::

    class PlayTrackCommand(BaseModel):
        guild_id: DiscordSnowflake
        query: NonEmptyStr
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

# Discord identifiers and counters

DiscordSnowflake = Annotated[int, Field(gt=0, lt=2**64)]
"""Guild, channel or user ID (1 … 2^64-1)."""

NonNegativeInt = Annotated[int, Field(ge=0)]

# Text

NonEmptyStr = Annotated[str, Field(min_length=1)]

TrackTitleStr = Annotated[str, Field(min_length=1, max_length=500)]

HttpUrlStr = Annotated[str, Field(pattern=r"^https?://")]
"""Absolute http(s) URL, e.g. track artwork."""

# Catalog and search backend

CatalogPageSize = Annotated[int, Field(ge=1, le=100)]
"""Items per playlist page; 100 is the Spotify Web API maximum."""

SearchPrefixStr = Annotated[str, Field(min_length=1, max_length=32)]
"""Lavalink search source such as ``ytsearch`` or ``scsearch``."""

# Settings

CommandPrefixStr = Annotated[str, Field(min_length=1, max_length=5)]

PortInt = Annotated[int, Field(ge=1, le=65535)]

TimeoutSeconds = Annotated[float, Field(gt=0.0, le=120.0)]

CooldownSeconds = Annotated[float, Field(ge=0.0, le=3600.0)]
"""How long a failed Lavalink node is skipped before it is tried again."""

RegistryCapacity = Annotated[int, Field(ge=1, le=1_000_000)]
