"""Logging utilities for the chatbot.

This module configures Loguru to emit logs to stderr and an optional
rotating file, keeping stdout free for the conversation itself.  It also
bridges the standard Python ``logging`` module to Loguru so that messages
from ``httpx`` and the OpenAI client are captured consistently.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from ..config.app_config import AppConfig, get_app_config


class LoguruHandler(logging.Handler):
    """Handler to forward standard logging records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            # Fetch the corresponding Loguru level if it exists
            level = logger.level(record.levelname).name
        except (KeyError, ValueError):
            level = record.levelno

        # Find the caller from where the logging call was made
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(app_config: Optional[AppConfig] = None) -> "loguru.Logger":
    """Configure Loguru logging for the application.

    Removes the default Loguru handler, adds a colourised stderr sink and,
    when ``log_file`` is configured, a rotating file sink.  Standard
    library logging is redirected to Loguru.

    Parameters
    ----------
    app_config: AppConfig, optional
        Settings to use.  Loaded from the environment when omitted.

    Returns
    -------
    loguru.Logger
        The configured Loguru logger instance.
    """
    app_config = app_config or get_app_config()

    # Remove default handler to prevent duplicate logs
    logger.remove()

    log_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )

    logger.add(
        sys.stderr,
        level=app_config.log_level,
        format=log_format,
        colorize=True,
        backtrace=True,
        diagnose=app_config.app_debug,
    )

    if app_config.log_file:
        Path(app_config.log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            app_config.log_file,
            level=app_config.log_level,
            format=log_format,
            rotation="10 MB",
            retention="30 days",
            compression="zip",
            backtrace=True,
            diagnose=app_config.app_debug,
        )

    logging.basicConfig(handlers=[LoguruHandler()], level=logging.WARNING, force=True)

    logger.debug("Logging configured: env={} level={}", app_config.app_env, app_config.log_level)
    return logger
