# athena/models/pack.py
from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from enum import Enum
from pathlib import PurePosixPath
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BeforeValidator,
    Discriminator,
    Field,
    Tag,
    ValidationError,
    field_serializer,
    field_validator,
)

from athena.core.errors import StructuralError
from athena.core.logging import logContext
from athena.models.common import (
    DocumentModel,
    UnionSite,
    plainMapping,
    sortedMapping,
    tagOf,
    translateValidationError,
)
from athena.semver.semver import VersionReq, parseVersionReq

logger = logging.getLogger(__name__)

__all__ = [
    "PackChannel",
    "PackEnv",
    "PackMetadata",
    "MinecraftVanilla",
    "MinecraftForge",
    "MinecraftFabric",
    "PackGame",
    "PackSourceLabrinthV1",
    "PackSource",
    "PackVersionLatest",
    "PackVersionSemVer",
    "PackVersionExact",
    "PackVersionDownload",
    "PackVersion",
    "PackFile",
    "Pack",
    "resolveGameShape",
    "parsePack",
]



_SHA1_PATTERN = r"^[0-9a-fA-F]{40}$"



# ------------------------------------------------------------------ #
# Closed-set enums
# ------------------------------------------------------------------ #

class PackChannel(Enum):
    """Release channel, ordered by stability (RELEASE most stable)."""
    RELEASE = "release"
    BETA = "beta"
    ALPHA = "alpha"

    @classmethod
    def default(cls) -> PackChannel:
        return cls.RELEASE

    @property
    def stability(self) -> int:
        return _CHANNEL_STABILITY[self]

    def allows(self, other: PackChannel) -> bool:
        """
        True if a file published on `other` satisfies a policy asking for this
        channel. A beta policy takes release and beta builds, never alpha.
        """
        return other.stability >= self.stability


_CHANNEL_STABILITY: dict[PackChannel, int] = {
    PackChannel.RELEASE: 2,
    PackChannel.BETA: 1,
    PackChannel.ALPHA: 0,
}



class PackEnv(Enum):
    BOTH = "both"
    CLIENT = "client"
    SERVER = "server"

    @classmethod
    def default(cls) -> PackEnv:
        return cls.BOTH

    @property
    def includesClient(self) -> bool:
        return self is not PackEnv.SERVER

    @property
    def includesServer(self) -> bool:
        return self is not PackEnv.CLIENT



# ------------------------------------------------------------------ #
# [modpack]
# ------------------------------------------------------------------ #

class PackMetadata(DocumentModel):
    name: str
    version: str
    summary: str | None = None



# ------------------------------------------------------------------ #
# [game] - untagged, resolved by field presence
# ------------------------------------------------------------------ #

class MinecraftVanilla(DocumentModel):
    minecraft: str

    def manifestDependencies(self) -> dict[str, str]:
        return {"minecraft": self.minecraft}



class MinecraftForge(DocumentModel):
    minecraft: str
    forge: str

    def manifestDependencies(self) -> dict[str, str]:
        return {"forge": self.forge, "minecraft": self.minecraft}



class MinecraftFabric(DocumentModel):
    minecraft: str
    fabricLoader: str = Field(alias="fabric-loader")

    def manifestDependencies(self) -> dict[str, str]:
        return {"fabric-loader": self.fabricLoader, "minecraft": self.minecraft}



PackGame = Union[MinecraftFabric, MinecraftForge, MinecraftVanilla]

# Candidate shapes, most specific first. Each is selected by the exact set of
# wire keys it needs; no discriminant is ever read from the document.
_GAME_SHAPES: tuple[tuple[type[DocumentModel], frozenset[str]], ...] = (
    (MinecraftFabric, frozenset({"minecraft", "fabric-loader"})),
    (MinecraftForge, frozenset({"minecraft", "forge"})),
    (MinecraftVanilla, frozenset({"minecraft"})),
)
_GAME_KEYS: frozenset[str] = frozenset().union(*(keys for _shape, keys in _GAME_SHAPES))



def resolveGameShape(raw: Any) -> Any:
    """
    Pick the single game shape whose key set is present in `raw`.

    Shapes whose keys are a strict subset of another matching shape's keys
    (Vanilla under Fabric) give way to the more specific one. Zero matches,
    or two equally specific matches (forge and fabric-loader together), are
    structural errors. Keys outside the known set are rejected instead of
    being ignored, since dropping one would silently pick another shape.
    """
    if isinstance(raw, (MinecraftFabric, MinecraftForge, MinecraftVanilla)):
        return raw
    if not isinstance(raw, Mapping):
        raise StructuralError(f"Expected a table, got {type(raw).__name__}")

    keys = frozenset(raw)
    unknown = sorted(keys - _GAME_KEYS)
    if unknown:
        raise StructuralError(
            f"Unknown field {unknown[0]!r}, expected some of {sorted(_GAME_KEYS)}",
            location=(unknown[0],),
        )
    for key in sorted(keys):
        if not isinstance(raw[key], str):
            raise StructuralError(
                f"Invalid value {raw[key]!r}: expected a version string",
                location=(key,),
            )

    matched = [(shape, shapeKeys) for shape, shapeKeys in _GAME_SHAPES if shapeKeys <= keys]
    if not matched:
        raise StructuralError("Missing required field 'minecraft'", location=("minecraft",))

    best = [
        (shape, shapeKeys) for shape, shapeKeys in matched
        if not any(shapeKeys < otherKeys for _other, otherKeys in matched)
    ]
    if len(best) > 1:
        names = ", ".join(shape.__name__ for shape, _keys in best)
        raise StructuralError(f"Ambiguous game table {sorted(keys)}: matches {names}")

    shape, _shapeKeys = best[0]
    return shape.model_validate(dict(raw))



# ------------------------------------------------------------------ #
# [sources.<name>] - tagged by `type`
# ------------------------------------------------------------------ #

class PackSourceLabrinthV1(DocumentModel):
    type: Literal["labrinth.v1"] = "labrinth.v1"
    url: str


PackSource = Annotated[
    Union[Annotated[PackSourceLabrinthV1, Tag("labrinth.v1")]],
    Discriminator(tagOf),
]



# ------------------------------------------------------------------ #
# [files.version] - tagged by `type`
# ------------------------------------------------------------------ #

def _coerceVersionReq(value: Any) -> VersionReq:
    if isinstance(value, VersionReq):
        return value
    if not isinstance(value, str):
        raise StructuralError(f"Invalid value {value!r}: expected a version requirement string")
    return parseVersionReq(value)



class PackVersionLatest(DocumentModel):
    type: Literal["latest"] = "latest"
    channel: PackChannel = Field(default_factory=PackChannel.default)



class PackVersionSemVer(DocumentModel):
    type: Literal["semver"] = "semver"
    # Only the parsed requirement is kept; the raw text is validated at load.
    version: Annotated[VersionReq, BeforeValidator(_coerceVersionReq)]



class PackVersionExact(DocumentModel):
    type: Literal["exact"] = "exact"
    version: str



class PackVersionDownload(DocumentModel):
    type: Literal["download"] = "download"
    # Fetch order: first URL is tried first.
    sources: tuple[str, ...] = Field(min_length=1)
    sha1: str | None = Field(default=None, pattern=_SHA1_PATTERN)


PackVersion = Annotated[
    Union[
        Annotated[PackVersionLatest, Tag("latest")],
        Annotated[PackVersionSemVer, Tag("semver")],
        Annotated[PackVersionExact, Tag("exact")],
        Annotated[PackVersionDownload, Tag("download")],
    ],
    Discriminator(tagOf),
]

# Where each tagged union sits in a pack document, with the tags pydantic may
# insert into error locations there.
_UNION_SITES: dict[UnionSite, frozenset[str]] = {
    ("sources", "*"): frozenset({"labrinth.v1"}),
    ("files", "*", "version"): frozenset({"latest", "semver", "exact", "download"}),
}



# ------------------------------------------------------------------ #
# [[files]]
# ------------------------------------------------------------------ #

class PackFile(DocumentModel):
    path: PurePosixPath
    # Named sources to search; None means "all of the pack's sources".
    sources: frozenset[str] | None = None
    version: PackVersion
    environment: PackEnv = Field(default_factory=PackEnv.default)

    @field_validator("path")
    @classmethod
    def _checkRelativePath(cls, value: PurePosixPath) -> PurePosixPath:
        if value.is_absolute() or str(value) == ".":
            raise StructuralError(f"Invalid value {str(value)!r}: expected a relative file path")
        return value



# ------------------------------------------------------------------ #
# Document root
# ------------------------------------------------------------------ #

class Pack(DocumentModel):
    """
    Authored modpack definition.

    `files` keeps document order and may repeat a path; resolving duplicates
    is left to whoever builds a manifest from the pack.
    """
    metadata: PackMetadata = Field(alias="modpack")
    game: Annotated[PackGame, BeforeValidator(resolveGameShape)]
    # Read-only, ordered by source name.
    sources: Mapping[str, PackSource] = Field(default_factory=dict, validate_default=True)
    files: tuple[PackFile, ...] = ()

    @field_validator("sources")
    @classmethod
    def _sortSources(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return sortedMapping(value)

    @field_serializer("sources")
    def _dumpSources(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return plainMapping(value)



def parsePack(text: str, *, documentName: str | None = None) -> Pack:
    """
    Parse a TOML pack document.

    Raises StructuralError, UnknownVariantError or ConstraintSyntaxError
    (all PackLoadError) naming the offending field. Nothing is defaulted
    except the fields the schema marks optional.
    """
    with logContext(documentName=documentName):
        if not isinstance(text, str):
            raise StructuralError(
                f"Expected document text, got {type(text).__name__}",
                documentName=documentName,
            )

        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as err:
            logger.debug("Rejected pack document: invalid TOML: %s", err)
            raise StructuralError(f"Invalid TOML: {err}", documentName=documentName) from err

        try:
            pack = Pack.model_validate(data)
        except ValidationError as err:
            loadError = translateValidationError(err, unionSites=_UNION_SITES, documentName=documentName)
            logger.debug("Rejected pack document: %s", loadError)
            raise loadError from err

        logger.debug(
            "Loaded pack %r %s (%s): %d source(s), %d file(s)",
            pack.metadata.name,
            pack.metadata.version,
            type(pack.game).__name__,
            len(pack.sources),
            len(pack.files),
        )
        return pack
