"""Discord client hosting the /play cog on top of the DI container."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from discord_play_queue.domain.shared.messages import DiscordUIMessages, LogTemplates
from discord_play_queue.infrastructure.discord.guards.voice_guards import reply_ephemeral

if TYPE_CHECKING:
    from ...config.container import Container
    from ...config.settings import Settings

logger = logging.getLogger(__name__)

COGS: tuple[str, ...] = ("discord_play_queue.infrastructure.discord.cogs.music_cog",)

PRESENCE = discord.Activity(type=discord.ActivityType.listening, name="/play")


def _intents() -> discord.Intents:
    # Slash commands only: no message content, but voice states for /play.
    intents = discord.Intents.default()
    intents.guilds = True
    intents.voice_states = True
    return intents


class PlayQueueBot(commands.Bot):
    """Bot whose only job is to route /play and /nowplaying into the container."""

    def __init__(self, container: Container, settings: Settings, **kwargs) -> None:
        super().__init__(
            command_prefix=settings.discord.command_prefix,
            intents=_intents(),
            help_command=None,
            **kwargs,
        )
        self.container = container
        self.settings = settings
        self._shutdown_event = asyncio.Event()
        container.set_bot(self)

    # === Startup ===

    async def setup_hook(self) -> None:
        logger.info(LogTemplates.BOT_SETUP)

        try:
            await self.container.initialize()
        except Exception as e:
            logger.exception(LogTemplates.BOT_CONTAINER_INIT_FAILED, e)
            raise

        await self._load_cogs()
        self.tree.on_error = self._on_app_command_error

        if self.settings.discord.sync_on_startup:
            try:
                await self._sync_commands()
            except Exception as e:
                logger.warning(LogTemplates.BOT_SYNC_ON_STARTUP_FAILED, e)

        logger.info(LogTemplates.BOT_SETUP_COMPLETE)

    async def _load_cogs(self) -> None:
        failed: list[str] = []
        for extension in COGS:
            try:
                await self.load_extension(extension)
            except Exception:
                logger.exception(LogTemplates.BOT_COG_LOAD_FAILED, extension)
                failed.append(extension)

        logger.info(LogTemplates.BOT_COGS_LOADED, len(COGS) - len(failed), len(COGS))

    async def _sync_commands(self) -> None:
        """Sync slash commands to the test guilds if any are configured, else globally."""
        guild_ids = self.settings.discord.test_guild_ids
        if not guild_ids:
            await self._sync_scope(None)
            return

        for guild_id in guild_ids:
            guild = discord.Object(id=guild_id)
            self.tree.copy_global_to(guild=guild)
            await self._sync_scope(guild)

    async def _sync_scope(self, guild: discord.Object | None) -> None:
        scope = "global" if guild is None else f"guild {guild.id}"
        try:
            synced = await self.tree.sync() if guild is None else await self.tree.sync(guild=guild)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.BOT_SYNC_FAILED, scope, e)
            return
        logger.info(LogTemplates.BOT_SYNCED, len(synced), scope)

    # === Events ===

    async def on_ready(self) -> None:
        logger.info(LogTemplates.BOT_READY, self.user, len(self.guilds))
        await self.change_presence(activity=PRESENCE)

    async def _on_app_command_error(
        self, interaction: discord.Interaction, error: Exception
    ) -> None:
        command = getattr(interaction.command, "name", "?")
        logger.error(
            LogTemplates.BOT_SLASH_COMMAND_ERROR, command, getattr(error, "original", error)
        )
        await reply_ephemeral(interaction, DiscordUIMessages.ERROR_PLAY_UNEXPECTED)

    # === Shutdown ===

    async def close(self) -> None:
        logger.info(LogTemplates.BOT_SHUTTING_DOWN)
        try:
            await self.container.shutdown()
        except Exception as e:
            logger.warning(LogTemplates.BOT_CONTAINER_SHUTDOWN_ERROR, e)

        await super().close()
        self._shutdown_event.set()
        logger.info(LogTemplates.BOT_SHUTDOWN_COMPLETE)

    def run_with_graceful_shutdown(self, token: str, *, shutdown_timeout: float = 30.0) -> None:
        """Run until SIGINT/SIGTERM, then close within ``shutdown_timeout`` seconds."""
        asyncio.run(self._serve(token, shutdown_timeout))

    async def _serve(self, token: str, shutdown_timeout: float) -> None:
        async with self:
            self._install_signal_handlers(shutdown_timeout)
            await self.start(token)

    def _install_signal_handlers(self, shutdown_timeout: float) -> None:
        loop = asyncio.get_running_loop()

        async def stop() -> None:
            try:
                await asyncio.wait_for(self.close(), timeout=shutdown_timeout)
            except TimeoutError:
                logger.warning(LogTemplates.BOT_SHUTDOWN_TIMEOUT, shutdown_timeout)

        for sig in (signal.SIGINT, signal.SIGTERM):
            # Not available on Windows event loops; KeyboardInterrupt still applies.
            with contextlib.suppress(NotImplementedError):
                loop.add_signal_handler(sig, lambda: asyncio.create_task(stop()))


def create_bot(container: Container, settings: Settings) -> PlayQueueBot:
    return PlayQueueBot(container=container, settings=settings)
