from .pack import (
    Pack,
    PackMetadata,
    PackGame,
    MinecraftVanilla,
    MinecraftForge,
    MinecraftFabric,
    PackSource,
    PackSourceLabrinthV1,
    PackFile,
    PackVersion,
    PackVersionLatest,
    PackVersionSemVer,
    PackVersionExact,
    PackVersionDownload,
    PackChannel,
    PackEnv,
    parsePack,
    resolveGameShape,
)
from .manifest import (
    FORMAT_VERSION,
    Manifest,
    ManifestFile,
    ManifestHashes,
    ManifestEnv,
    manifestToDict,
    renderManifest,
)

__all__ = [
    "Pack",
    "PackMetadata",
    "PackGame",
    "MinecraftVanilla",
    "MinecraftForge",
    "MinecraftFabric",
    "PackSource",
    "PackSourceLabrinthV1",
    "PackFile",
    "PackVersion",
    "PackVersionLatest",
    "PackVersionSemVer",
    "PackVersionExact",
    "PackVersionDownload",
    "PackChannel",
    "PackEnv",
    "parsePack",
    "resolveGameShape",
    "FORMAT_VERSION",
    "Manifest",
    "ManifestFile",
    "ManifestHashes",
    "ManifestEnv",
    "manifestToDict",
    "renderManifest",
]
