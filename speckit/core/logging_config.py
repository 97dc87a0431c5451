"""Loguru configuration."""

import sys

from loguru import logger

from speckit.core.config import Settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(settings: Settings) -> None:
    """Configure loguru sinks from settings.

    Console output goes to stderr so that stdout stays clean for reports
    and JSON.
    """
    logger.remove()  # Remove default handler

    level = "DEBUG" if settings.debug else settings.log_level

    logger.add(
        lambda msg: print(msg, end="", file=sys.stderr),
        level=level,
        format=LOG_FORMAT,
        colorize=True,
    )

    if settings.log_file is not None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(settings.log_file),
            rotation="1 day",
            retention="7 days",
            level=level,
            format=LOG_FORMAT,
        )
