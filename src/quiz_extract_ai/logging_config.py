"""
Logging setup for quiz-extract-ai.

Console output goes through rich; an optional rotating log file keeps the
diagnostics operators need when OCR or the model misbehaves.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from rich.console import Console
from rich.logging import RichHandler

from quiz_extract_ai.config import LoggingConfig

PACKAGE_LOGGER = "quiz_extract_ai"


def configure_logging(config: LoggingConfig, console: Console | None = None) -> logging.Logger:
    """
    Configure the package logger from a LoggingConfig.

    Safe to call more than once; previously installed handlers are replaced.

    Args:
        config: Logging section of the settings.
        console: Rich console for terminal output (stderr if None).

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(config.level.upper())

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    if config.file:
        config.file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.file,
            maxBytes=config.max_file_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(config.format))
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
