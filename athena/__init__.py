# athena/__init__.py
"""
Modpack authoring (pack, TOML) and distribution (manifest, JSON) formats.

    pack = parsePack(text)                  # PackLoadError on bad input
    text = renderManifest(manifest)         # UnrepresentableValueError on bad strings
"""
from __future__ import annotations

from athena.config import AthenaSettings, DefaultsProvider, DictProvider, loadSettings
from athena.core.errors import (
    AthenaError,
    ConfigError,
    ConstraintSyntaxError,
    PackLoadError,
    RenderError,
    StructuralError,
    UnknownVariantError,
    UnrepresentableValueError,
)
from athena.core.logging import configureLogging
from athena.models import (
    Manifest,
    ManifestEnv,
    ManifestFile,
    ManifestHashes,
    Pack,
    PackChannel,
    PackEnv,
    PackFile,
    manifestToDict,
    parsePack,
    renderManifest,
)
from athena.semver import Version, VersionReq, parseVersion, parseVersionReq

__all__ = [
    "AthenaSettings",
    "DefaultsProvider",
    "DictProvider",
    "loadSettings",
    "AthenaError",
    "ConfigError",
    "ConstraintSyntaxError",
    "PackLoadError",
    "RenderError",
    "StructuralError",
    "UnknownVariantError",
    "UnrepresentableValueError",
    "configureLogging",
    "Manifest",
    "ManifestEnv",
    "ManifestFile",
    "ManifestHashes",
    "Pack",
    "PackChannel",
    "PackEnv",
    "PackFile",
    "manifestToDict",
    "parsePack",
    "renderManifest",
    "Version",
    "VersionReq",
    "parseVersion",
    "parseVersionReq",
]
