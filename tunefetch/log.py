"""Logging setup for applications embedding tunefetch."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from tunefetch.config import LoggingConfig

DEBUG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[Path] = None,
    debug: bool = False,
    format_str: Optional[str] = None,
) -> None:
    """Configure the root logger.

    Args:
        level: Console log level name
        log_file: Optional log file path, always written at DEBUG level
        debug: Force DEBUG level with file/line information
        format_str: Log record format (default: LoggingConfig.format)
    """
    log_level = logging.DEBUG if debug else logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.WARNING

    if debug:
        format_str = DEBUG_FORMAT
    elif format_str is None:
        format_str = LoggingConfig.format

    handlers: list[logging.Handler] = []

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)  # Always log debug to file
        handlers.append(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    handlers.append(console_handler)

    logging.basicConfig(
        level=logging.DEBUG if log_file else log_level,
        format=format_str,
        handlers=handlers,
        force=True,
    )

    logger = logging.getLogger(__name__)
    logger.debug(f"Logging configured: level={logging.getLevelName(log_level)}, debug={debug}")


def setup_logging_from_config(config: LoggingConfig, debug: bool = False) -> None:
    """Configure logging from a :class:`LoggingConfig`."""
    setup_logging(
        level=config.level,
        log_file=config.file,
        debug=debug,
        format_str=config.format,
    )
