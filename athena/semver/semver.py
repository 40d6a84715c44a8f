# athena/semver/semver.py
from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import ClassVar, Literal

from athena.core.errors import ConstraintSyntaxError

__all__ = [
    "SEMVER_PATTERN_RE",
    "MAX_COMPARATORS",
    "Version",
    "Comparator",
    "VersionReq",
    "parseVersion",
    "parseVersionReq",
]



SEMVER_PATTERN_RE = re.compile(
    r"^(?P<major>0|[1-9]\d*)"
    r"\.(?P<minor>0|[1-9]\d*)"
    r"\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>(?:0|[1-9]\d*|[0-9A-Za-z-]*[A-Za-z-][0-9A-Za-z-]*)"
    r"(?:\.(?:0|[1-9]\d*|[0-9A-Za-z-]*[A-Za-z-][0-9A-Za-z-]*))*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)
_NUMERIC_RE = re.compile(r"0|[1-9]\d*")
_PRERELEASE_IDENT_RE = re.compile(r"0|[1-9]\d*|[0-9A-Za-z-]*[A-Za-z-][0-9A-Za-z-]*")

# Longest operators first so ">=" is not read as ">" followed by "=1.0".
_OPERATORS: tuple[str, ...] = ("<=", ">=", "=", "<", ">", "~", "^")
_WILDCARDS: tuple[str, ...] = ("*", "x", "X")

MAX_COMPARATORS = 32

Op = Literal["=", ">", ">=", "<", "<=", "~", "^", "*"]



def _prereleaseCmpKey(prerelease: tuple[str, ...]) -> tuple:
    # No prerelease sorts above any prerelease of the same core version.
    # Numeric identifiers have lower precedence than non-numeric:
    # numeric as (0, int), non-numeric as (1, str).
    if not prerelease:
        return (1, ())
    parts: list[tuple[int, int | str]] = []
    for ident in prerelease:
        if ident.isdigit():
            parts.append((0, int(ident)))
        else:
            parts.append((1, ident))
    return (0, tuple(parts))



@total_ordering
@dataclass(frozen=True)
class Version:
    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        prerelease = f"-{'.'.join(self.prerelease)}" if self.prerelease else ""
        build = f"+{'.'.join(self.build)}" if self.build else ""
        return f"{base}{prerelease}{build}"

    def _cmpKey(self) -> tuple:
        # Build is ignored for ordering and equality
        return (self.major, self.minor, self.patch, _prereleaseCmpKey(self.prerelease))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._cmpKey() == other._cmpKey()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._cmpKey() < other._cmpKey()

    def __hash__(self) -> int:
        return hash(self._cmpKey())



def parseVersion(raw: str) -> Version:
    """
    Parse a full semantic version ("1.2.3", "1.2.3-beta.1", "1.2.3+build.5").

    Unlike requirement comparators, partial versions ("1.2") and a leading "v"
    are rejected.
    """
    if not isinstance(raw, str):
        raise ConstraintSyntaxError(repr(raw), f"expected a string, got {type(raw).__name__}", kind="version")

    text = raw.strip()
    if not text:
        raise ConstraintSyntaxError(raw, "empty string, expected a semver version", kind="version")

    mtch = SEMVER_PATTERN_RE.match(text)
    if not mtch:
        raise ConstraintSyntaxError(raw, "expected MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]", kind="version")

    prereleaseGroup = mtch.group("prerelease")
    buildGroup = mtch.group("build")
    return Version(
        major=int(mtch.group("major")),
        minor=int(mtch.group("minor")),
        patch=int(mtch.group("patch")),
        prerelease=tuple(prereleaseGroup.split(".")) if prereleaseGroup else (),
        build=tuple(buildGroup.split(".")) if buildGroup else (),
    )



@dataclass(frozen=True)
class Comparator:
    """
    One `op version` term of a requirement.

    `minor` and `patch` are None when the term was written as a partial
    version ("^1", "~1.2") or with a wildcard ("1.*").
    """
    op: Op
    major: int
    minor: int | None = None
    patch: int | None = None
    prerelease: tuple[str, ...] = ()

    def __str__(self) -> str:
        parts = [str(self.major)]
        if self.minor is not None:
            parts.append(str(self.minor))
        elif self.op == "*":
            parts.append("*")
        if self.patch is not None:
            parts.append(str(self.patch))
        elif self.op == "*" and self.minor is not None:
            parts.append("*")
        text = ".".join(parts)
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.op == "*":
            return text
        return f"{self.op}{text}"

    def matches(self, version: Version) -> bool:
        if self.op in ("=", "*"):
            return self._matchesExact(version)
        if self.op == ">":
            return self._matchesGreater(version)
        if self.op == ">=":
            return self._matchesExact(version) or self._matchesGreater(version)
        if self.op == "<":
            return self._matchesLess(version)
        if self.op == "<=":
            return self._matchesExact(version) or self._matchesLess(version)
        if self.op == "~":
            return self._matchesTilde(version)
        if self.op == "^":
            return self._matchesCaret(version)
        raise ValueError(f"Unknown operator {self.op!r}")

    def _matchesExact(self, version: Version) -> bool:
        if version.major != self.major:
            return False
        if self.minor is not None and version.minor != self.minor:
            return False
        if self.patch is not None and version.patch != self.patch:
            return False
        if self.op == "*":
            return True
        return version.prerelease == self.prerelease

    def _matchesGreater(self, version: Version) -> bool:
        if version.major != self.major:
            return version.major > self.major
        if self.minor is None:
            return False
        if version.minor != self.minor:
            return version.minor > self.minor
        if self.patch is None:
            return False
        if version.patch != self.patch:
            return version.patch > self.patch
        return _prereleaseCmpKey(version.prerelease) > _prereleaseCmpKey(self.prerelease)

    def _matchesLess(self, version: Version) -> bool:
        if version.major != self.major:
            return version.major < self.major
        if self.minor is None:
            return False
        if version.minor != self.minor:
            return version.minor < self.minor
        if self.patch is None:
            return False
        if version.patch != self.patch:
            return version.patch < self.patch
        return _prereleaseCmpKey(version.prerelease) < _prereleaseCmpKey(self.prerelease)

    def _matchesTilde(self, version: Version) -> bool:
        """
        ~M.m.p -> >=M.m.p <M.(m+1).0
        ~M.m   -> >=M.m.0 <M.(m+1).0
        ~M     -> >=M.0.0 <(M+1).0.0
        """
        if version.major != self.major:
            return False
        if self.minor is not None and version.minor != self.minor:
            return False
        if self.patch is not None and version.patch != self.patch:
            return version.patch > self.patch
        return _prereleaseCmpKey(version.prerelease) >= _prereleaseCmpKey(self.prerelease)

    def _matchesCaret(self, version: Version) -> bool:
        """
        ^M.m.p (M > 0)  -> >=M.m.p  <(M+1).0.0
        ^0.m.p (m > 0)  -> >=0.m.p  <0.(m+1).0
        ^0.0.p          -> =0.0.p
        ^M.m            -> like ^M.m.0, except ^0.0 means <0.1.0
        ^M              -> >=M.0.0  <(M+1).0.0
        """
        if version.major != self.major:
            return False
        if self.minor is None:
            return True
        if self.patch is None:
            if self.major > 0:
                return version.minor >= self.minor
            return version.minor == self.minor

        if self.major > 0:
            if version.minor != self.minor:
                return version.minor > self.minor
            if version.patch != self.patch:
                return version.patch > self.patch
        elif self.minor > 0:
            if version.minor != self.minor:
                return False
            if version.patch != self.patch:
                return version.patch > self.patch
        elif version.minor != self.minor or version.patch != self.patch:
            return False
        return _prereleaseCmpKey(version.prerelease) >= _prereleaseCmpKey(self.prerelease)

    def _allowsPrereleaseOf(self, version: Version) -> bool:
        return (
            self.major == version.major
            and self.minor == version.minor
            and self.patch == version.patch
            and bool(self.prerelease)
        )



@dataclass(frozen=True)
class VersionReq:
    """
    A parsed semantic-version requirement. All comparators are AND-ed.

    An empty comparator tuple is the wildcard requirement ("*").
    """
    comparators: tuple[Comparator, ...] = ()

    STAR: ClassVar[VersionReq]

    @property
    def isAny(self) -> bool:
        return not self.comparators

    def __str__(self) -> str:
        if not self.comparators:
            return "*"
        return ", ".join(str(comp) for comp in self.comparators)

    def matches(self, version: Version) -> bool:
        """
        Check `version` against every comparator.

        A pre-release version only matches if some comparator names the same
        major.minor.patch together with a pre-release, so "^1.2.3" never
        selects "1.3.0-beta" but ">=1.3.0-alpha" may select "1.3.0-beta".
        """
        for comparator in self.comparators:
            if not comparator.matches(version):
                return False

        if not version.prerelease:
            return True
        return any(comp._allowsPrereleaseOf(version) for comp in self.comparators)


VersionReq.STAR = VersionReq()



def _parseNumeric(part: str, what: str, rawRequirement: str) -> int:
    if not _NUMERIC_RE.fullmatch(part):
        if part.isdigit():
            raise ConstraintSyntaxError(rawRequirement, f"invalid leading zero in {what} version number {part!r}")
        raise ConstraintSyntaxError(rawRequirement, f"invalid {what} version number {part!r}")
    return int(part)



def _parsePrerelease(text: str, rawRequirement: str) -> tuple[str, ...]:
    if not text:
        raise ConstraintSyntaxError(rawRequirement, "empty pre-release identifier")
    idents = tuple(text.split("."))
    for ident in idents:
        if not ident:
            raise ConstraintSyntaxError(rawRequirement, f"empty identifier segment in pre-release {text!r}")
        if not _PRERELEASE_IDENT_RE.fullmatch(ident):
            if ident.isdigit():
                raise ConstraintSyntaxError(rawRequirement, f"invalid leading zero in pre-release identifier {ident!r}")
            raise ConstraintSyntaxError(rawRequirement, f"invalid character in pre-release identifier {ident!r}")
    return idents



def _parseComparator(piece: str, rawRequirement: str) -> Comparator:
    op: str | None = None
    text = piece
    for candidate in _OPERATORS:
        if text.startswith(candidate):
            op = candidate
            text = text[len(candidate):].lstrip()
            break

    if not text:
        raise ConstraintSyntaxError(rawRequirement, f"missing version after operator {op!r}")
    if any(ch.isspace() for ch in text):
        raise ConstraintSyntaxError(
            rawRequirement,
            f"unexpected whitespace in {text!r}; separate comparators with ','",
        )
    if "+" in text:
        raise ConstraintSyntaxError(rawRequirement, "build metadata is not allowed in a version requirement")

    core, dash, prereleaseText = text.partition("-")
    coreParts = core.split(".")
    if len(coreParts) > 3:
        raise ConstraintSyntaxError(rawRequirement, f"too many version components in {core!r}")
    if any(part == "" for part in coreParts):
        raise ConstraintSyntaxError(rawRequirement, f"empty version component in {core!r}")

    if coreParts[0] in _WILDCARDS:
        raise ConstraintSyntaxError(rawRequirement, "a wildcard major version must be the only comparator")
    major = _parseNumeric(coreParts[0], "major", rawRequirement)

    numbers: list[int | None] = []
    sawWildcard = False
    for what, part in zip(("minor", "patch"), coreParts[1:]):
        if part in _WILDCARDS:
            sawWildcard = True
            numbers.append(None)
            continue
        if sawWildcard:
            raise ConstraintSyntaxError(rawRequirement, f"unexpected {what} version number after wildcard")
        numbers.append(_parseNumeric(part, what, rawRequirement))
    while len(numbers) < 2:
        numbers.append(None)
    minor, patch = numbers

    prerelease: tuple[str, ...] = ()
    if dash:
        if patch is None:
            raise ConstraintSyntaxError(
                rawRequirement,
                "a pre-release requires a full major.minor.patch version",
            )
        prerelease = _parsePrerelease(prereleaseText, rawRequirement)

    if op is None:
        op = "*" if sawWildcard else "^"
    elif op == "=" and sawWildcard:
        op = "*"

    return Comparator(op=op, major=major, minor=minor, patch=patch, prerelease=prerelease)  # type: ignore[arg-type]



def parseVersionReq(rawRequirement: str) -> VersionReq:
    """
    Parse a requirement expression into VersionReq.

    Accepted forms:

        "*"                     -> any version
        "1.2.3"                 -> ^1.2.3 (bare versions are caret requirements)
        "=1.2.3"                -> exactly 1.2.3
        ">=1.2.0, <2.0.0"       -> >=1.2.0 AND <2.0.0
        "^0.2", "~1.2.3"        -> caret / tilde with 0.x semantics
        "1.*", "1.2.x"          -> wildcards in minor/patch position
        ">= 1.2.3-beta.1"       -> whitespace after operator, pre-release

    Comparators are separated by commas. Raises ConstraintSyntaxError
    naming the input and the reason on anything else.
    """
    if not isinstance(rawRequirement, str):
        raise ConstraintSyntaxError(
            repr(rawRequirement),
            f"expected a string, got {type(rawRequirement).__name__}",
        )

    text = rawRequirement.strip()
    if not text:
        raise ConstraintSyntaxError(rawRequirement, "empty string, expected a version requirement")

    pieces = [piece.strip() for piece in text.split(",")]
    if len(pieces) > MAX_COMPARATORS:
        raise ConstraintSyntaxError(
            rawRequirement,
            f"too many comparators ({len(pieces)}), at most {MAX_COMPARATORS} are allowed",
        )

    comparators: list[Comparator] = []
    for piece in pieces:
        if not piece:
            raise ConstraintSyntaxError(rawRequirement, "empty comparator between commas")
        if piece in _WILDCARDS:
            if len(pieces) > 1:
                raise ConstraintSyntaxError(
                    rawRequirement,
                    f"wildcard {piece!r} must be the only comparator",
                )
            return VersionReq.STAR
        comparators.append(_parseComparator(piece, rawRequirement))

    return VersionReq(comparators=tuple(comparators))
