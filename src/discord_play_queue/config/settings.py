"""Runtime configuration for the bot, the Lavalink nodes and the Spotify client.

Values come from the environment (and an optional ``.env`` file). Nested groups
use a double underscore, e.g. ``LAVALINK__DEFAULT_SEARCH=scsearch`` or
``SPOTIFY__CLIENT_SECRET=...``. Every model is frozen once loaded.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import (
    CommandPrefixStr,
    CooldownSeconds,
    NonEmptyStr,
    PortInt,
    RegistryCapacity,
    SearchPrefixStr,
    TimeoutSeconds,
)
from ..domain.shared.validators import validate_discord_snowflake

_SECTION = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

LOG_LEVELS: frozenset[str] = frozenset(logging.getLevelNamesMapping()) - {"NOTSET", "WARN", "FATAL"}


class DiscordSettings(BaseModel):
    """Gateway token and slash command registration."""

    model_config = _SECTION

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "discord_token")
    )
    command_prefix: CommandPrefixStr = Field(
        default="!", validation_alias=AliasChoices("command_prefix", "prefix")
    )
    # Guilds that get commands synced instantly instead of waiting for global propagation.
    test_guild_ids: tuple[int, ...] = Field(
        default=(), validation_alias=AliasChoices("test_guild_ids", "test_guilds")
    )
    sync_on_startup: bool = False

    @field_validator("test_guild_ids", mode="before")
    @classmethod
    def coerce_guild_ids(cls, v: object) -> object:
        if isinstance(v, list | tuple):
            return tuple(validate_discord_snowflake(guild_id) for guild_id in v)
        return v


class LavalinkNodeSettings(BaseModel):
    """One Lavalink server."""

    model_config = _SECTION

    name: NonEmptyStr = "main"
    host: NonEmptyStr = "127.0.0.1"
    port: PortInt = 2333
    password: SecretStr = Field(
        default=SecretStr("youshallnotpass"),
        validation_alias=AliasChoices("password", "auth", "authorization"),
    )
    secure: bool = False

    @property
    def base_url(self) -> str:
        return f"{'https' if self.secure else 'http'}://{self.host}:{self.port}"


class LavalinkSettings(BaseModel):
    """Search backend: node list, default search source and failover timing."""

    model_config = _SECTION

    nodes: tuple[LavalinkNodeSettings, ...] = Field(
        default_factory=lambda: (LavalinkNodeSettings(),)
    )
    default_search: SearchPrefixStr = Field(
        default="ytsearch", validation_alias=AliasChoices("default_search", "search_prefix")
    )
    request_timeout_s: TimeoutSeconds = Field(
        default=10.0, validation_alias=AliasChoices("request_timeout_s", "request_timeout")
    )
    node_retry_s: CooldownSeconds = Field(
        default=30.0, validation_alias=AliasChoices("node_retry_s", "node_retry")
    )

    @field_validator("nodes", mode="before")
    @classmethod
    def parse_nodes(cls, v: object) -> object:
        """``LAVALINK__NODES`` arrives as a JSON list of objects."""
        if isinstance(v, list):
            return tuple(
                LavalinkNodeSettings.model_validate(node) if isinstance(node, dict) else node
                for node in v
            )
        return v

    @field_validator("default_search")
    @classmethod
    def strip_search_colon(cls, v: str) -> str:
        return v.rstrip(":")


class SpotifySettings(BaseModel):
    """Client-credentials app used to read public playlists and tracks."""

    model_config = _SECTION

    client_id: str = Field(
        default="", validation_alias=AliasChoices("client_id", "spotify_client_id")
    )
    client_secret: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("client_secret", "spotify_client_secret"),
    )
    request_timeout_s: TimeoutSeconds = Field(
        default=10.0, validation_alias=AliasChoices("request_timeout_s", "request_timeout")
    )

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id) and bool(self.client_secret.get_secret_value())


class RegistrySettings(BaseModel):
    model_config = SettingsConfigDict(frozen=True, strict=True)

    max_entries: RegistryCapacity = 10_000


class Settings(BaseSettings):
    """Top-level settings.

    ENVIRONMENT, DEBUG and LOG_LEVEL sit at the top level; the groups below are
    read from DISCORD__*, LAVALINK__*, SPOTIFY__* and REGISTRY__* variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        strict=True,
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    lavalink: LavalinkSettings = Field(default_factory=LavalinkSettings)
    spotify: SpotifySettings = Field(default_factory=SpotifySettings)
    registry: RegistrySettings = Field(default_factory=RegistrySettings)

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=sorted(LOG_LEVELS))
            )
        return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process; later calls return the same object."""
    return Settings()


def clear_settings_cache() -> None:
    """Forget the cached settings so the next ``get_settings()`` reloads them."""
    get_settings.cache_clear()
