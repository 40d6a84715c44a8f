from .semver import (
    MAX_COMPARATORS,
    Comparator,
    Version,
    VersionReq,
    parseVersion,
    parseVersionReq,
)

__all__ = [
    "MAX_COMPARATORS",
    "Comparator",
    "Version",
    "VersionReq",
    "parseVersion",
    "parseVersionReq",
]
