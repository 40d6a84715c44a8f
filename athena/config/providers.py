# athena/config/providers.py
from __future__ import annotations
import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import json5

from athena.core.errors import ConfigError

logger = logging.getLogger(__name__)

__all__ = ["ConfigProvider", "DictProvider", "DefaultsProvider", "getByPath"]



def getByPath(data: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Look up a dotted path ("render.indent") in nested mappings."""
    if not path:
        raise ValueError("Path must be a non-empty string")
    current: Any = data
    for part in path.split("."):
        if not part:
            raise ValueError(f"Path '{path}' contains empty segment(s)")
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current



class ConfigProvider:
    """One read-only settings layer."""

    def to_dict(self) -> dict[str, Any]:
        raise NotImplementedError



# ----------------------------------------------
#       Read-only dict (embedded/overrides)
# ----------------------------------------------

@dataclass
class DictProvider(ConfigProvider):
    """
    Read-only mapping: (e.g., embedded defaults or caller overrides).
    """
    data: Mapping[str, Any]

    def __post_init__(self) -> None:
        if not isinstance(self.data, Mapping):
            raise ConfigError(f"{type(self).__name__}: 'data' must be a Mapping, not '{type(self.data).__name__}'")

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(dict(self.data))



# ----------------------------------------------
#        File-backed defaults JSON/JSON5
# ----------------------------------------------

class DefaultsProvider(ConfigProvider):
    """
    Read-only provider for a settings file (.json or .json5).

        DefaultsProvider(path="./athena.json5")
        DefaultsProvider(path="./athena.json5", strict=False)   # missing file -> empty layer
    """
    def __init__(
        self,
        *,
        path: Path | str,
        strict: bool = True,
    ) -> None:
        self.path = Path(path)
        self.data: Mapping[str, Any]

        if not self.path.exists():
            if strict:
                raise ConfigError(f"{type(self).__name__}: settings file '{self.path}' not found")
            logger.debug("Settings file '%s' not found, using an empty layer", self.path)
            self.data = {}
            return

        if not self.path.is_file():
            raise ConfigError(f"{type(self).__name__}: '{self.path}' is not a file")

        try:
            parsed = json5.loads(self.path.read_text("utf-8"))
        except (OSError, ValueError) as err:
            raise ConfigError(f"{type(self).__name__}: failed to parse '{self.path}': {err}") from err

        if not isinstance(parsed, Mapping):
            raise ConfigError(
                f"{type(self).__name__}: file content must be a JSON object, not '{type(parsed).__name__}'"
            )

        self.data = cast(Mapping[str, Any], parsed)
        logger.debug("Loaded settings layer from '%s'", self.path)

    def to_dict(self) -> dict[str, Any]:
        # Always return a deep copy to prevent accidental mutation
        return copy.deepcopy(dict(self.data))
