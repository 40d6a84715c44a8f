# athena/core/logging/setup.py
from __future__ import annotations
import logging
import logging.handlers

from athena.config.settings import LoggingSettings
from .formatters import DevFormatter, JsonFormatter

__all__ = [
    "ROOT_LOGGER",
    "configureLogging",
]



ROOT_LOGGER = "athena"



def configureLogging(settings: LoggingSettings | None = None) -> logging.Logger:
    """
    Install handlers on the `athena` logger for applications embedding it.

    Library code never calls this; it only logs through module loggers.

    Dev:
      - Console pretty logs
    Prod (devMode = false):
      - Console JSON lines
    Either:
      - JSON file log with rotation when `logFile` is set
    """
    if settings is None:
        settings = LoggingSettings()

    level = logging.getLevelName(settings.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)
    logger.propagate = False

    consoleHandler = logging.StreamHandler()
    consoleHandler.setLevel(level)
    consoleHandler.setFormatter(DevFormatter() if settings.devMode else JsonFormatter())
    logger.addHandler(consoleHandler)

    if settings.logFile is not None:
        fileHandler = logging.handlers.RotatingFileHandler(
            settings.logFile,
            maxBytes=settings.maxBytes,
            backupCount=settings.backupCount,
            encoding="utf-8",
        )
        fileHandler.setLevel(level)
        fileHandler.setFormatter(JsonFormatter())
        logger.addHandler(fileHandler)

    return logger
