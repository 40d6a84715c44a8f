# athena/core/logging/__init__.py
from __future__ import annotations

from .context import setLogContext, clearLogContext, getLogContext, logContext
from .formatters import DevFormatter, JsonFormatter
from .setup import ROOT_LOGGER, configureLogging

__all__ = [
    "ROOT_LOGGER",
    "configureLogging",
    "DevFormatter",
    "JsonFormatter",
    "setLogContext",
    "clearLogContext",
    "getLogContext",
    "logContext",
]
