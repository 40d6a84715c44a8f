# athena/config/settings.py
from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from athena.core.errors import ConfigError
from .providers import ConfigProvider

logger = logging.getLogger(__name__)

__all__ = [
    "RenderSettings",
    "LoggingSettings",
    "AthenaSettings",
    "mergeLayers",
    "loadSettings",
]



class RenderSettings(BaseModel):
    """Output formatting of rendered manifests."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    indent: int | None = Field(default=2, ge=0)    # None -> single line
    trailingNewline: bool = True



class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    level: str = "INFO"
    devMode: bool = True                    # pretty console lines instead of JSON
    logFile: Path | None = None             # rotating JSON log when set
    maxBytes: int = Field(default=10 * 1024 * 1024, gt=0)
    backupCount: int = Field(default=5, ge=0)

    @field_validator("level")
    @classmethod
    def _checkLevel(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level {value!r}")
        return level



class AthenaSettings(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    render: RenderSettings = Field(default_factory=RenderSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)



def mergeLayers(left: Any, right: Any) -> Any:
    """
    Deep merge: mappings recurse, anything else on the right replaces the left.
    Neither input is modified.
    """
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        out = {key: copy.deepcopy(value) for key, value in left.items()}
        for key, value in right.items():
            if key in out:
                out[key] = mergeLayers(out[key], value)
            else:
                out[key] = copy.deepcopy(value)
        return out
    return copy.deepcopy(right)



def loadSettings(*providers: ConfigProvider) -> AthenaSettings:
    """
    Merge provider layers in order (later layers win) over the built-in
    defaults and validate the result.
    """
    data: dict[str, Any] = {}
    for provider in providers:
        data = mergeLayers(data, provider.to_dict())

    try:
        settings = AthenaSettings.model_validate(data)
    except ValidationError as err:
        raise ConfigError(f"Invalid settings: {err}") from err

    logger.debug("Settings loaded from %d layer(s)", len(providers))
    return settings
