"""
Logging configuration for the Content Intelligence Engine.

All engine loggers hang off the ``content_intel`` root logger, which is
configured once from LoggingSettings with console and/or rotating file
output.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from content_intel.config.settings import LoggingSettings


ROOT_LOGGER_NAME = "content_intel"

_logging_configured = False


def setup_logging(
    settings: "LoggingSettings | None" = None,
    level: str | None = None,
) -> logging.Logger:
    """
    Configure the engine logging system.

    Should be called once at application startup; later calls return the
    already-configured logger untouched.

    Args:
        settings: Logging configuration. If None, uses LoggingSettings defaults.
        level: Optional level name overriding settings.level (e.g. "DEBUG")

    Returns:
        The configured root logger for the engine.
    """
    global _logging_configured

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _logging_configured:
        return logger

    if settings is None:
        from content_intel.config.settings import LoggingSettings

        settings = LoggingSettings()

    log_level = getattr(logging, level or settings.level)
    formatter = logging.Formatter(
        fmt=settings.format, datefmt=settings.date_format)

    logger.handlers.clear()
    logger.setLevel(log_level)

    handlers: list[logging.Handler] = []
    if settings.log_to_console:
        handlers.append(logging.StreamHandler(sys.stderr))

    if settings.file_path is not None:
        settings.file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            filename=str(settings.file_path),
            maxBytes=settings.max_file_size_mb * 1024 * 1024,
            backupCount=settings.backup_count,
            encoding="utf-8",
        ))

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Engine output stays out of the host application's root logger
    logger.propagate = False

    _logging_configured = True
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger under the engine root logger.

    Args:
        name: Module name, typically ``__name__``. None returns the root.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Classifier ready")
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)

    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)

    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Remove all engine handlers so setup_logging can run again."""
    global _logging_configured

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    logger.propagate = True
    _logging_configured = False
