#!/usr/bin/env python3
"""Main entry point for the chill player bot."""

from __future__ import annotations

import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import Any

from chill_player.domain.shared.messages import ErrorMessages, LogTemplates
from chill_player.utils.logging import ColoredFormatter

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"
_PACKAGE_LOGGER = "chill_player"
_FALLBACK_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_FALLBACK_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _load_logging_config(path: Path, level_name: str) -> dict[str, Any]:
    """Read the dictConfig file and point the root and package loggers at ``level_name``."""
    with path.open(encoding="utf-8") as f:
        config = json.load(f)
    if not isinstance(config, dict):
        raise ValueError(f"{path} does not contain a logging config object")

    config.setdefault("root", {})["level"] = level_name
    config.setdefault("loggers", {}).setdefault(_PACKAGE_LOGGER, {})["level"] = level_name
    return config


def setup_logging(log_level: str = "INFO", config_path: Path | None = None) -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)
    level_name = logging.getLevelName(resolved_level)
    path = config_path or _LOGGING_CONFIG_PATH

    try:
        logging.config.dictConfig(_load_logging_config(path, level_name))
    except (OSError, ValueError) as exc:
        handler = logging.StreamHandler()
        handler.setFormatter(ColoredFormatter(fmt=_FALLBACK_FORMAT, datefmt=_FALLBACK_DATEFMT))
        logging.basicConfig(level=resolved_level, handlers=[handler], force=True)
        logging.getLogger(__name__).warning(LogTemplates.LOGGING_CONFIG_FALLBACK, path, exc)


def main() -> int:
    from chill_player.config.settings import get_settings

    settings = get_settings()
    setup_logging("DEBUG" if settings.debug else settings.log_level)

    logger = logging.getLogger(__name__)

    token_value = settings.discord.token.get_secret_value()
    if not token_value:
        logger.error(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return 1

    logger.info(LogTemplates.BOT_STARTING.format(environment=settings.environment))

    from chill_player.config.container import create_container
    from chill_player.infrastructure.discord.bot import create_bot

    container = create_container(settings)
    bot = create_bot(container, settings)

    try:
        logger.info(LogTemplates.BOT_STARTING_RUN)
        bot.run_with_graceful_shutdown(token_value)
        logger.info(LogTemplates.BOT_STOPPED)
        return 0
    except KeyboardInterrupt:
        logger.info(LogTemplates.BOT_KEYBOARD_INTERRUPT)
        return 0
    except Exception as e:
        logger.exception(LogTemplates.BOT_FATAL_ERROR, e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
