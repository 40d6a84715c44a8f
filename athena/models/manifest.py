# athena/models/manifest.py
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import PurePath
from typing import Any

from pydantic import Field, field_serializer, field_validator

from athena.config.settings import RenderSettings
from athena.core.errors import UnrepresentableValueError
from athena.models.common import WireModel, plainMapping, sortedMapping
from athena.models.pack import PackEnv

logger = logging.getLogger(__name__)

__all__ = [
    "FORMAT_VERSION",
    "ManifestHashes",
    "ManifestEnv",
    "ManifestFile",
    "Manifest",
    "manifestToDict",
    "renderManifest",
]



FORMAT_VERSION = 1

_SHA1_PATTERN = r"^[0-9a-fA-F]{40}$"



class ManifestHashes(WireModel):
    sha1: str = Field(pattern=_SHA1_PATTERN)



class ManifestEnv(WireModel):
    """
    Per-side install requirement. Tokens are installer vocabulary
    ("required", "optional", "unsupported") and are not checked here.
    """
    client: str
    server: str

    @classmethod
    def fromPackEnv(cls, env: PackEnv) -> ManifestEnv | None:
        """
        BOTH means no restriction and maps to no env block at all; a single
        side becomes required on that side and unsupported on the other.
        """
        if env is PackEnv.CLIENT:
            return cls(client="required", server="unsupported")
        if env is PackEnv.SERVER:
            return cls(client="unsupported", server="required")
        return None



class ManifestFile(WireModel):
    path: str
    hashes: ManifestHashes
    env: ManifestEnv | None = None
    # Preferred fetch order, first to last.
    downloads: tuple[str, ...] = ()

    @field_validator("path", mode="before")
    @classmethod
    def _pathToPosix(cls, value: Any) -> Any:
        if isinstance(value, PurePath):
            return value.as_posix()
        return value



class Manifest(WireModel):
    """Fully resolved file list handed to installers. Built once, rendered once."""
    formatVersion: int = Field(default=FORMAT_VERSION, ge=1)
    game: str
    versionId: str
    name: str
    summary: str | None = None
    files: tuple[ManifestFile, ...] = ()
    # Read-only, ordered by dependency name.
    dependencies: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("dependencies")
    @classmethod
    def _sortDependencies(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return sortedMapping(value)

    @field_serializer("dependencies")
    def _dumpDependencies(self, value: Mapping[str, str]) -> dict[str, str]:
        return plainMapping(value)



def _checkRepresentable(value: Any, loc: tuple[str | int, ...]) -> None:
    # Lone surrogates (os.fsdecode of undecodable bytes) survive as str but
    # have no UTF-8 encoding; refuse them instead of escaping or replacing.
    if isinstance(value, str):
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as err:
            raise UnrepresentableValueError(
                f"Value {value!r} is not encodable as UTF-8: {err.reason}",
                location=loc,
            ) from err
    elif isinstance(value, Mapping):
        for key, item in value.items():
            _checkRepresentable(key, loc + (key,))
            _checkRepresentable(item, loc + (key,))
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _checkRepresentable(item, loc + (index,))



def manifestToDict(manifest: Manifest) -> dict[str, Any]:
    """
    JSON-ready dict with camelCase keys. Absent optionals stay as None (null),
    sequences keep their order, dependencies are sorted by name.
    """
    # Python mode hands strings back untouched, so the encoding check sees
    # exactly what the JSON dump would carry.
    _checkRepresentable(manifest.model_dump(mode="python", by_alias=True), ())
    return manifest.model_dump(mode="json", by_alias=True)



def renderManifest(manifest: Manifest, *, settings: RenderSettings | None = None) -> str:
    """Render a manifest as JSON text."""
    if settings is None:
        settings = RenderSettings()

    payload = manifestToDict(manifest)
    text = json.dumps(payload, ensure_ascii=False, allow_nan=False, indent=settings.indent)
    if settings.trailingNewline:
        text += "\n"

    logger.debug(
        "Rendered manifest %r (%s): %d file(s), %d dependency(ies)",
        manifest.name,
        manifest.versionId,
        len(manifest.files),
        len(manifest.dependencies),
    )
    return text
