#!/usr/bin/env python3
"""Entry point: configure logging, validate settings, build the container and run the bot."""

from __future__ import annotations

import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import Any

from discord_play_queue.config.container import create_container
from discord_play_queue.config.settings import Settings, get_settings
from discord_play_queue.domain.shared.messages import ErrorMessages, LogTemplates
from discord_play_queue.infrastructure.discord.bot import create_bot

logger = logging.getLogger(__name__)

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"

# Chatty at INFO; only left alone when the bot itself runs at DEBUG.
_NOISY_LOGGERS = ("httpx", "httpcore", "discord.gateway", "discord.http")


def load_logging_config(path: Path = _LOGGING_CONFIG_PATH) -> dict[str, Any] | None:
    """Read a ``dictConfig`` mapping, or None when the file is missing or not JSON."""
    try:
        with open(path) as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        return None


def setup_logging(log_level: str = "INFO") -> None:
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    config = load_logging_config()
    try:
        if config is None:
            raise ValueError(f"no usable logging config at {_LOGGING_CONFIG_PATH}")
        logging.config.dictConfig(config)
    except ValueError as e:
        logging.basicConfig(
            level=level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logger.warning(LogTemplates.LOGGING_FALLBACK, e)

    logging.getLogger().setLevel(level)
    if level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def _log_startup(settings: Settings) -> None:
    logger.info(LogTemplates.BOT_STARTING, settings.environment)
    logger.info(
        LogTemplates.BOT_BACKEND_SUMMARY,
        len(settings.lavalink.nodes),
        settings.lavalink.default_search,
        "enabled" if settings.spotify.is_configured else "disabled",
    )


def main() -> int:
    """Run the bot; returns the process exit code."""
    settings = get_settings()
    setup_logging("DEBUG" if settings.debug else settings.log_level)

    token = settings.discord.token.get_secret_value()
    if not token:
        logger.error(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return 1

    _log_startup(settings)
    bot = create_bot(create_container(settings), settings)

    try:
        bot.run_with_graceful_shutdown(token)
    except KeyboardInterrupt:
        logger.info(LogTemplates.BOT_KEYBOARD_INTERRUPT)
    except Exception:
        logger.exception(LogTemplates.BOT_FATAL_ERROR)
        return 1

    logger.info(LogTemplates.BOT_STOPPED)
    return 0


def cli() -> None:
    """Console script entry point (``discord-play-queue``)."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
