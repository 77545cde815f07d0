"""
Unit Tests for Bot Lifecycle

Covers PlayerBot construction, setup_hook, cog loading, command sync, the
global slash-command error handler, presence and shutdown.
"""

from unittest.mock import AsyncMock, MagicMock, PropertyMock, patch

import discord
import pytest

from chill_player.domain.shared.exceptions import InputInvalidError
from chill_player.infrastructure.discord.bot import COGS, PlayerBot, create_bot


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
    """Create mock container."""
    container = MagicMock()
    container.initialize = AsyncMock()
    container.shutdown = AsyncMock()
    container.set_bot = MagicMock()
    return container


@pytest.fixture
def bot(mock_container, mock_settings):
    return PlayerBot(container=mock_container, settings=mock_settings)


def _interaction(responded: bool = False) -> MagicMock:
    interaction = MagicMock()
    interaction.command.name = "play"
    interaction.response.is_done = MagicMock(return_value=responded)
    interaction.response.send_message = AsyncMock()
    interaction.followup.send = AsyncMock()
    return interaction


# =============================================================================
# Initialization
# =============================================================================


class TestBotInitialization:
    """Tests for PlayerBot initialization."""

    async def test_voice_intents(self, bot):
        assert bot.intents.voice_states is True
        assert bot.intents.guilds is True

    async def test_prefix_and_no_help(self, bot):
        assert bot.command_prefix == "!"
        assert bot.help_command is None

    async def test_registers_with_container(self, bot, mock_container):
        mock_container.set_bot.assert_called_once_with(bot)
        assert bot.container is mock_container
        assert not bot._shutdown_event.is_set()


# =============================================================================
# setup_hook
# =============================================================================


class TestSetupHook:
    """Tests for setup_hook."""

    async def test_initializes_container_and_loads_cogs(self, bot, mock_container):
        with patch.object(bot, "_load_cogs", new_callable=AsyncMock) as mock_load:
            await bot.setup_hook()

        mock_container.initialize.assert_awaited_once()
        mock_load.assert_awaited_once()
        assert bot.tree.on_error == bot._on_app_command_error

    async def test_container_failure_propagates(self, bot, mock_container):
        mock_container.initialize.side_effect = RuntimeError("no catalog")

        with patch.object(bot, "_load_cogs", new_callable=AsyncMock) as mock_load:
            with pytest.raises(RuntimeError, match="no catalog"):
                await bot.setup_hook()

        mock_load.assert_not_awaited()

    async def test_sync_skipped_by_default(self, bot):
        with (
            patch.object(bot, "_load_cogs", new_callable=AsyncMock),
            patch.object(bot, "_sync_commands", new_callable=AsyncMock) as mock_sync,
        ):
            await bot.setup_hook()

        mock_sync.assert_not_awaited()

    async def test_sync_failure_is_not_fatal(self, bot, mock_settings):
        mock_settings.discord.sync_on_startup = True

        with (
            patch.object(bot, "_load_cogs", new_callable=AsyncMock),
            patch.object(
                bot, "_sync_commands", new_callable=AsyncMock, side_effect=Exception("rate limited")
            ) as mock_sync,
        ):
            await bot.setup_hook()

        mock_sync.assert_awaited_once()


class TestLoadCogs:
    """Tests for extension loading."""

    async def test_loads_player_cog(self, bot):
        with patch.object(bot, "load_extension", new_callable=AsyncMock) as mock_load:
            await bot._load_cogs()

        assert [c.args[0] for c in mock_load.await_args_list] == list(COGS)

    async def test_failure_does_not_raise(self, bot):
        with patch.object(
            bot, "load_extension", new_callable=AsyncMock, side_effect=Exception("bad cog")
        ):
            await bot._load_cogs()


class TestSyncCommands:
    """Tests for slash command sync."""

    async def test_global_sync(self, bot):
        with patch.object(bot.tree, "sync", new_callable=AsyncMock, return_value=[MagicMock()]):
            await bot._sync_commands()

            bot.tree.sync.assert_awaited_once_with()

    async def test_test_guilds_synced_first(self, bot, mock_settings):
        mock_settings.discord.test_guild_ids = (111111111111111111,)

        with (
            patch.object(bot.tree, "sync", new_callable=AsyncMock, return_value=[]) as mock_sync,
            patch.object(bot.tree, "copy_global_to") as mock_copy,
        ):
            await bot._sync_commands()

        mock_copy.assert_called_once()
        assert mock_sync.await_count == 2
        assert mock_sync.await_args_list[0].kwargs["guild"].id == 111111111111111111

    async def test_global_failure_logged(self, bot):
        with patch.object(bot.tree, "sync", new_callable=AsyncMock, side_effect=Exception("nope")):
            await bot._sync_commands()


# =============================================================================
# Error handler
# =============================================================================


class TestAppCommandErrorHandler:
    """Tests for the global slash-command error handler."""

    async def test_ephemeral_reply(self, bot):
        interaction = _interaction()

        await bot._on_app_command_error(interaction, RuntimeError("boom"))

        args, kwargs = interaction.response.send_message.await_args
        assert "boom" in args[0]
        assert kwargs["ephemeral"] is True

    async def test_followup_after_defer(self, bot):
        interaction = _interaction(responded=True)

        await bot._on_app_command_error(interaction, RuntimeError("boom"))

        interaction.followup.send.assert_awaited_once()
        interaction.response.send_message.assert_not_awaited()

    async def test_unwraps_domain_error(self, bot):
        interaction = _interaction()
        wrapper = MagicMock()
        wrapper.original = InputInvalidError("Video ID is required.")

        await bot._on_app_command_error(interaction, wrapper)

        assert "Video ID is required." in interaction.response.send_message.await_args.args[0]

    async def test_send_failure_swallowed(self, bot):
        interaction = _interaction()
        interaction.response.send_message.side_effect = discord.HTTPException(
            MagicMock(), "Send failed"
        )

        await bot._on_app_command_error(interaction, RuntimeError("boom"))


# =============================================================================
# Ready / close
# =============================================================================


class TestOnReady:
    """Tests for on_ready."""

    async def test_presence_listening_to_search(self, bot):
        mock_user = MagicMock(id=1)

        with (
            patch.object(type(bot), "user", PropertyMock(return_value=mock_user)),
            patch.object(type(bot), "guilds", PropertyMock(return_value=[])),
            patch.object(bot, "change_presence", new_callable=AsyncMock) as mock_change,
        ):
            await bot.on_ready()

        activity = mock_change.await_args.kwargs["activity"]
        assert activity.type is discord.ActivityType.listening
        assert activity.name == "/search"


class TestBotClose:
    """Tests for close()."""

    async def test_close_shuts_down_container(self, bot, mock_container):
        with patch.object(type(bot), "voice_clients", PropertyMock(return_value=[])):
            await bot.close()

        mock_container.shutdown.assert_awaited_once()
        assert bot._shutdown_event.is_set()

    async def test_close_disconnects_voice_clients(self, bot):
        vc1, vc2 = AsyncMock(), AsyncMock()
        vc1.disconnect.side_effect = Exception("Disconnect failed")

        with patch.object(type(bot), "voice_clients", PropertyMock(return_value=[vc1, vc2])):
            await bot.close()

        vc1.disconnect.assert_awaited_once_with(force=True)
        vc2.disconnect.assert_awaited_once_with(force=True)

    async def test_container_shutdown_error_tolerated(self, bot, mock_container):
        mock_container.shutdown.side_effect = Exception("Shutdown failed")

        with patch.object(type(bot), "voice_clients", PropertyMock(return_value=[])):
            await bot.close()

        assert bot._shutdown_event.is_set()


class TestCreateBot:
    """Tests for create_bot."""

    async def test_returns_player_bot(self, mock_container, mock_settings):
        bot = create_bot(mock_container, mock_settings)

        assert isinstance(bot, PlayerBot)
        assert bot.settings is mock_settings
