"""
Unit Tests for Bot Lifecycle

Tests for src/discord_play_queue/infrastructure/discord/bot.py:

1. TestBotInitialization: intents, command prefix, help command, container wiring
2. TestSetupHook: container initialization, cog loading, error handler, optional sync
3. TestLoadCogs: loading the music cog extension and surviving failures
4. TestSyncCommands: global and per-test-guild sync, HTTP failures
5. TestAppCommandErrorHandler: ephemeral replies and send failures
6. TestOnReady: "Listening to /play" presence
7. TestBotClose: container shutdown and shutdown event
8. TestCreateBot: factory function
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, PropertyMock, patch

import discord
import pytest

from discord_play_queue.domain.shared.messages import DiscordUIMessages
from discord_play_queue.infrastructure.discord.bot import COGS, PlayQueueBot, create_bot


@pytest.fixture
def mock_settings():
    """Create mock settings."""
    settings = MagicMock()
    settings.discord.command_prefix = "!"
    settings.discord.sync_on_startup = False
    settings.discord.test_guild_ids = ()
    return settings


@pytest.fixture
def mock_container():
    """Create mock container with the lifecycle hooks the bot calls."""
    container = MagicMock()
    container.initialize = AsyncMock()
    container.shutdown = AsyncMock()
    container.set_bot = MagicMock()
    return container


@pytest.fixture
def bot(mock_container, mock_settings):
    return PlayQueueBot(container=mock_container, settings=mock_settings)


def _http_error(message: str) -> discord.HTTPException:
    return discord.HTTPException(MagicMock(status=500, reason="Server Error"), message)


# =============================================================================
# Bot Initialization Tests
# =============================================================================


class TestBotInitialization:
    """Tests for PlayQueueBot initialization."""

    @pytest.mark.asyncio
    async def test_init_sets_intents(self, bot):
        """Should request voice state and guild intents."""
        assert bot.intents.voice_states is True
        assert bot.intents.guilds is True
        assert bot.intents.message_content is False

    @pytest.mark.asyncio
    async def test_init_sets_command_prefix(self, mock_container, mock_settings):
        """Should set command prefix from settings."""
        mock_settings.discord.command_prefix = "?"
        bot = PlayQueueBot(container=mock_container, settings=mock_settings)

        assert bot.command_prefix == "?"

    @pytest.mark.asyncio
    async def test_init_disables_default_help(self, bot):
        """Should disable default help command."""
        assert bot.help_command is None

    @pytest.mark.asyncio
    async def test_init_stores_container_and_settings(self, bot, mock_container, mock_settings):
        """Should store container and settings references."""
        assert bot.container is mock_container
        assert bot.settings is mock_settings

    @pytest.mark.asyncio
    async def test_init_creates_shutdown_event(self, bot):
        """Should create an unset shutdown event."""
        assert isinstance(bot._shutdown_event, asyncio.Event)
        assert not bot._shutdown_event.is_set()

    @pytest.mark.asyncio
    async def test_init_calls_set_bot_on_container(self, bot, mock_container):
        """Should call set_bot on container."""
        mock_container.set_bot.assert_called_once_with(bot)


# =============================================================================
# Setup Hook Tests
# =============================================================================


class TestSetupHook:
    """Tests for PlayQueueBot.setup_hook method."""

    @pytest.mark.asyncio
    async def test_setup_hook_initializes_container(self, bot, mock_container):
        """Should initialize container during setup."""
        with patch.object(bot, "_load_cogs", new_callable=AsyncMock):
            await bot.setup_hook()

        mock_container.initialize.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_setup_hook_loads_cogs(self, bot):
        """Should load cogs during setup."""
        with patch.object(bot, "_load_cogs", new_callable=AsyncMock) as mock_load:
            await bot.setup_hook()

        mock_load.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_setup_hook_sets_error_handler(self, bot):
        """Should install the global slash command error handler."""
        with patch.object(bot, "_load_cogs", new_callable=AsyncMock):
            await bot.setup_hook()

        assert bot.tree.on_error == bot._on_app_command_error

    @pytest.mark.asyncio
    async def test_setup_hook_syncs_when_enabled(self, mock_container, mock_settings):
        """Should sync commands when sync_on_startup is True."""
        mock_settings.discord.sync_on_startup = True
        bot = PlayQueueBot(container=mock_container, settings=mock_settings)

        with patch.object(bot, "_load_cogs", new_callable=AsyncMock):
            with patch.object(bot, "_sync_commands", new_callable=AsyncMock) as mock_sync:
                await bot.setup_hook()

        mock_sync.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_setup_hook_skips_sync_when_disabled(self, bot):
        """Should not sync commands when sync_on_startup is False."""
        with patch.object(bot, "_load_cogs", new_callable=AsyncMock):
            with patch.object(bot, "_sync_commands", new_callable=AsyncMock) as mock_sync:
                await bot.setup_hook()

        mock_sync.assert_not_called()

    @pytest.mark.asyncio
    async def test_setup_hook_handles_container_init_error(self, bot, mock_container):
        """Should re-raise when container initialization fails."""
        mock_container.initialize.side_effect = Exception("Lavalink config error")

        with pytest.raises(Exception, match="Lavalink config error"):
            await bot.setup_hook()

    @pytest.mark.asyncio
    async def test_setup_hook_handles_sync_error(self, mock_container, mock_settings):
        """Should continue setup when the startup sync fails."""
        mock_settings.discord.sync_on_startup = True
        bot = PlayQueueBot(container=mock_container, settings=mock_settings)

        with patch.object(bot, "_load_cogs", new_callable=AsyncMock):
            with patch.object(
                bot, "_sync_commands", new_callable=AsyncMock, side_effect=Exception("Sync")
            ):
                await bot.setup_hook()


# =============================================================================
# Cog Loading Tests
# =============================================================================


class TestLoadCogs:
    """Tests for PlayQueueBot._load_cogs method."""

    @pytest.mark.asyncio
    async def test_load_cogs_loads_music_cog(self, bot):
        """Should load every registered extension."""
        with patch.object(bot, "load_extension", new_callable=AsyncMock) as mock_load:
            await bot._load_cogs()

        assert COGS == ("discord_play_queue.infrastructure.discord.cogs.music_cog",)
        mock_load.assert_awaited_once_with(COGS[0])

    @pytest.mark.asyncio
    async def test_load_cogs_handles_failure(self, bot):
        """Should log and continue when an extension fails to load."""
        with patch.object(
            bot, "load_extension", new_callable=AsyncMock, side_effect=Exception("boom")
        ) as mock_load:
            await bot._load_cogs()

        assert mock_load.await_count == len(COGS)


# =============================================================================
# Command Sync Tests
# =============================================================================


class TestSyncCommands:
    """Tests for PlayQueueBot._sync_commands method."""

    @pytest.mark.asyncio
    async def test_sync_commands_global(self, bot):
        """Should sync commands globally without test guilds."""
        with patch.object(
            bot.tree, "sync", new_callable=AsyncMock, return_value=[MagicMock(), MagicMock()]
        ) as mock_sync:
            await bot._sync_commands()

        mock_sync.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_sync_commands_test_guilds(self, mock_container, mock_settings):
        """Should copy global commands to each test guild and sync only there."""
        mock_settings.discord.test_guild_ids = (111111, 222222)
        bot = PlayQueueBot(container=mock_container, settings=mock_settings)

        with patch.object(bot.tree, "copy_global_to") as mock_copy:
            with patch.object(
                bot.tree, "sync", new_callable=AsyncMock, return_value=[MagicMock()]
            ) as mock_sync:
                await bot._sync_commands()

        assert mock_copy.call_count == 2
        assert mock_sync.await_count == 2
        synced_ids = [c.kwargs["guild"].id for c in mock_sync.await_args_list]
        assert synced_ids == [111111, 222222]

    @pytest.mark.asyncio
    async def test_sync_commands_handles_guild_error(self, mock_container, mock_settings):
        """Should keep going when one guild sync fails."""
        mock_settings.discord.test_guild_ids = (111111, 222222)
        bot = PlayQueueBot(container=mock_container, settings=mock_settings)

        with patch.object(bot.tree, "copy_global_to"):
            with patch.object(
                bot.tree,
                "sync",
                new_callable=AsyncMock,
                side_effect=[_http_error("Guild sync failed"), []],
            ) as mock_sync:
                await bot._sync_commands()

        assert mock_sync.await_count == 2

    @pytest.mark.asyncio
    async def test_sync_commands_handles_global_error(self, bot):
        """Should handle global sync errors gracefully."""
        with patch.object(
            bot.tree, "sync", new_callable=AsyncMock, side_effect=_http_error("Global sync failed")
        ):
            await bot._sync_commands()


# =============================================================================
# App Command Error Handler Tests
# =============================================================================


class TestAppCommandErrorHandler:
    """Tests for PlayQueueBot._on_app_command_error method."""

    @pytest.mark.asyncio
    async def test_error_handler_sends_ephemeral_response(self, bot):
        """Should send a generic ephemeral error message."""
        interaction = MagicMock()
        interaction.response.is_done.return_value = False
        interaction.response.send_message = AsyncMock()
        interaction.command.name = "play"

        await bot._on_app_command_error(interaction, Exception("Test error"))

        interaction.response.send_message.assert_awaited_once_with(
            DiscordUIMessages.ERROR_PLAY_UNEXPECTED, ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_error_handler_uses_followup_when_responded(self, bot):
        """Should use followup when interaction already responded."""
        interaction = MagicMock()
        interaction.response.is_done.return_value = True
        interaction.followup.send = AsyncMock()
        interaction.command.name = "play"

        await bot._on_app_command_error(interaction, Exception("Test error"))

        assert interaction.followup.send.await_args.kwargs["ephemeral"] is True

    @pytest.mark.asyncio
    async def test_error_handler_logs_original_error(self, bot, caplog):
        """Should log the wrapped original error."""
        interaction = MagicMock()
        interaction.response.is_done.return_value = False
        interaction.response.send_message = AsyncMock()
        interaction.command.name = "play"
        wrapper = MagicMock()
        wrapper.original = ValueError("Original error")

        await bot._on_app_command_error(interaction, wrapper)

        assert "Original error" in caplog.text

    @pytest.mark.asyncio
    async def test_error_handler_handles_send_failure(self, bot):
        """Should handle failure to send error message gracefully."""
        interaction = MagicMock()
        interaction.response.is_done.return_value = False
        interaction.response.send_message = AsyncMock(side_effect=_http_error("Send failed"))
        interaction.command.name = "play"

        await bot._on_app_command_error(interaction, Exception("Test error"))


# =============================================================================
# On Ready Handler Tests
# =============================================================================


class TestOnReady:
    """Tests for PlayQueueBot.on_ready event handler."""

    @pytest.mark.asyncio
    async def test_on_ready_sets_presence(self, bot):
        """Should set bot presence on ready."""
        mock_user = MagicMock()
        mock_user.id = 123456789

        with patch.object(type(bot), "user", PropertyMock(return_value=mock_user)):
            with patch.object(
                type(bot), "guilds", PropertyMock(return_value=[MagicMock(), MagicMock()])
            ):
                with patch.object(bot, "change_presence", new_callable=AsyncMock) as mock_change:
                    await bot.on_ready()

        activity = mock_change.await_args.kwargs["activity"]
        assert activity.type == discord.ActivityType.listening
        assert activity.name == "/play"


# =============================================================================
# Close/Shutdown Tests
# =============================================================================


class TestBotClose:
    """Tests for PlayQueueBot.close method."""

    @pytest.mark.asyncio
    async def test_close_shuts_down_container(self, bot, mock_container):
        """Should shutdown container on close."""
        await bot.close()

        mock_container.shutdown.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_handles_container_shutdown_error(self, bot, mock_container):
        """Should handle container shutdown errors gracefully."""
        mock_container.shutdown.side_effect = Exception("Shutdown failed")

        await bot.close()

        assert bot._shutdown_event.is_set()

    @pytest.mark.asyncio
    async def test_close_sets_shutdown_event(self, bot):
        """Should set shutdown event on close."""
        await bot.close()

        assert bot._shutdown_event.is_set()


# =============================================================================
# Factory Function Tests
# =============================================================================


class TestCreateBot:
    """Tests for create_bot factory function."""

    def test_create_bot_returns_music_bot(self, mock_container, mock_settings):
        """Should return PlayQueueBot wired to the container and settings."""
        bot = create_bot(container=mock_container, settings=mock_settings)

        assert isinstance(bot, PlayQueueBot)
        assert bot.container is mock_container
        assert bot.settings is mock_settings
