# athena/core/logging/formatters.py
from __future__ import annotations

import logging

from athena.core.errors import formatLocation
from athena.core.jsonutils import safeJsonDumps
from .context import getLogContext

__all__ = ["JsonFormatter", "DevFormatter"]



def _contextSuffix() -> str:
    ctx = getLogContext()
    if not ctx:
        return ""
    parts: list[str] = []
    documentName = ctx.get("documentName")
    if documentName:
        parts.append(str(documentName))
    parts.extend(f"{key}={value}" for key, value in ctx.items() if key != "documentName")
    return f" [{' '.join(parts)}]" if parts else ""



class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log files and log shippers."""
    def format(self, record: logging.LogRecord) -> str:
        ctx = dict(getLogContext() or {})
        entry: dict[str, object] = {
            "ts": int(record.created * 1000),
            "level": record.levelname.lower(),
            "logger": record.name,
            "src": f"{record.module}:{record.lineno}",
            "msg": record.getMessage(),
        }

        documentName = ctx.pop("documentName", None)
        if documentName:
            entry["document"] = documentName
        if ctx:
            entry["ctx"] = ctx

        if record.exc_info and record.exc_info[0] is not None:
            excType, excValue, _tb = record.exc_info
            exc: dict[str, object] = {"type": excType.__name__, "message": str(excValue)}
            # Load and render errors know where in the document they happened
            location = getattr(excValue, "location", None)
            if location:
                exc["location"] = formatLocation(location)
            exc["stack"] = self.formatException(record.exc_info)
            entry["exc"] = exc

        return safeJsonDumps(entry)



class DevFormatter(logging.Formatter):
    """
    Console lines for humans:

        DEBUG: [athena.models.pack] Loaded pack 'p' 1 (MinecraftVanilla): ... [pack.toml]
    """
    def format(self, record: logging.LogRecord) -> str:
        line = f"{record.levelname}: [{record.name}] {record.getMessage()}{_contextSuffix()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        if record.stack_info:
            line += "\n" + self.formatStack(record.stack_info)
        return line
