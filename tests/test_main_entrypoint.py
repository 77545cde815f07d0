"""
Tests for main.py - Main Entry Point

Tests for:
- Logging configuration and its fallback
- Token validation
- Running the bot and mapping the outcome to an exit code
"""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest
from pydantic import SecretStr

from chill_player.main import cli, main, setup_logging
from chill_player.utils.logging import ColoredFormatter


def _settings(token: str = "test-token", debug: bool = False) -> MagicMock:
    settings = MagicMock()
    settings.debug = debug
    settings.log_level = "INFO"
    settings.environment = "test"
    settings.discord.token = SecretStr(token)
    return settings


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "logging_config.json"
    path.write_text(
        json.dumps(
            {
                "version": 1,
                "loggers": {"discord": {"level": "WARNING"}},
                "root": {"level": "INFO", "handlers": []},
            }
        )
    )
    return path


class TestLoggingSetup:
    """Tests for logging configuration."""

    def test_level_applied_to_config(self, config_file):
        """Should point the root and package loggers at the requested level."""
        with patch("logging.config.dictConfig") as mock_dc:
            setup_logging("warning", config_file)

        config = mock_dc.call_args.args[0]
        assert config["root"]["level"] == "WARNING"
        assert config["loggers"]["chill_player"]["level"] == "WARNING"
        assert config["loggers"]["discord"]["level"] == "WARNING"

    def test_unknown_level_defaults_to_info(self, config_file):
        with patch("logging.config.dictConfig") as mock_dc:
            setup_logging("chatty", config_file)

        assert mock_dc.call_args.args[0]["root"]["level"] == "INFO"

    @pytest.mark.parametrize("content", [None, "{nope", "[1, 2]"])
    def test_unusable_file_falls_back(self, tmp_path, content):
        """Should fall back to a colored console handler."""
        path = tmp_path / "logging_config.json"
        if content is not None:
            path.write_text(content)

        with (
            patch("logging.config.dictConfig") as mock_dc,
            patch("logging.basicConfig") as mock_bc,
        ):
            setup_logging("debug", path)

        mock_dc.assert_not_called()
        kwargs = mock_bc.call_args.kwargs
        assert kwargs["level"] == logging.DEBUG
        assert kwargs["force"] is True
        (handler,) = kwargs["handlers"]
        assert isinstance(handler.formatter, ColoredFormatter)

    def test_invalid_dictconfig_falls_back(self, config_file):
        with (
            patch("logging.config.dictConfig", side_effect=ValueError("bad handler")),
            patch("logging.basicConfig") as mock_bc,
        ):
            setup_logging("INFO", config_file)

        assert mock_bc.call_args.kwargs["level"] == logging.INFO
class TestMain:
    """Tests for main() exit codes."""

    def _run(self, settings: MagicMock, bot: MagicMock) -> int:
        with (
            patch("chill_player.config.settings.get_settings", return_value=settings),
            patch("chill_player.main.setup_logging"),
            patch("chill_player.config.container.create_container") as mock_container,
            patch("chill_player.infrastructure.discord.bot.create_bot", return_value=bot) as mock_bot,
        ):
            code = main()
        self.container_factory = mock_container
        self.bot_factory = mock_bot
        return code

    def test_missing_token(self):
        """Should refuse to start without a token."""
        bot = MagicMock()

        assert self._run(_settings(token=""), bot) == 1
        bot.run_with_graceful_shutdown.assert_not_called()

    def test_clean_run(self):
        settings = _settings()
        bot = MagicMock()

        assert self._run(settings, bot) == 0
        bot.run_with_graceful_shutdown.assert_called_once_with("test-token")
        self.container_factory.assert_called_once_with(settings)

    def test_keyboard_interrupt_is_clean(self):
        bot = MagicMock()
        bot.run_with_graceful_shutdown.side_effect = KeyboardInterrupt

        assert self._run(_settings(), bot) == 0

    def test_crash_returns_error(self):
        bot = MagicMock()
        bot.run_with_graceful_shutdown.side_effect = RuntimeError("boom")

        assert self._run(_settings(), bot) == 1

    def test_cli_exits_with_main_code(self):
        with patch("chill_player.main.main", return_value=3), pytest.raises(SystemExit) as exc:
            cli()

        assert exc.value.code == 3

    def test_debug_flag_forces_debug_logging(self):
        with (
            patch("chill_player.config.settings.get_settings", return_value=_settings(debug=True)),
            patch("chill_player.main.setup_logging") as mock_setup,
            patch("chill_player.config.container.create_container"),
            patch("chill_player.infrastructure.discord.bot.create_bot"),
        ):
            main()

        mock_setup.assert_called_once_with("DEBUG")
