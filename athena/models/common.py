# athena/models/common.py
from __future__ import annotations

import logging
from collections.abc import Collection, Mapping
from types import MappingProxyType
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from athena.core.errors import (
    PackLoadError,
    StructuralError,
    UnknownVariantError,
)

logger = logging.getLogger(__name__)

__all__ = [
    "TAG_FIELD",
    "NON_TEXT_TAG",
    "UnionSite",
    "DocumentModel",
    "WireModel",
    "sortedMapping",
    "plainMapping",
    "tagOf",
    "translateValidationError",
]



# Discriminant field name for every tagged union in both formats.
TAG_FIELD = "type"

V = TypeVar("V")

# Stands in for a `type` value that is not a string; never a real tag.
NON_TEXT_TAG = "<non-text tag>"

# A location pattern naming where a tagged union sits; "*" matches any key or index.
UnionSite = tuple[str, ...]



class DocumentModel(BaseModel):
    """
    Base for models read from an authored document.

    Frozen after validation. Unknown keys are ignored so newer documents stay
    loadable; fields whose wire name differs from the attribute declare an
    explicit alias.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )



class WireModel(BaseModel):
    """
    Base for models rendered to the installer-facing document.

    Every field is rendered under its camelCase alias.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )



def sortedMapping(mapping: Mapping[str, V]) -> Mapping[str, V]:
    """Read-only copy of `mapping` ordered by key, for reproducible re-serialization."""
    return MappingProxyType({key: mapping[key] for key in sorted(mapping)})



def plainMapping(mapping: Mapping[str, V]) -> dict[str, V]:
    """Serializer counterpart of sortedMapping: a plain dict in the same order."""
    return dict(mapping)



def tagOf(raw: Any) -> str | None:
    """
    Callable discriminator for tagged unions: read the `type` field of a raw
    table, or of an already-built variant.

    Returns None when there is no tag so pydantic reports a missing
    discriminant. A tag that is not a string comes back as NON_TEXT_TAG, which
    no union accepts and the error translator reports as a wrong value type.
    """
    if isinstance(raw, BaseModel):
        return getattr(raw, TAG_FIELD, None)
    if not isinstance(raw, Mapping):
        return None
    tag = raw.get(TAG_FIELD)
    if tag is None:
        return None
    return tag if isinstance(tag, str) else NON_TEXT_TAG



# ------------------------------------------------------------------ #
# pydantic ValidationError -> PackLoadError
# ------------------------------------------------------------------ #

def _atSite(prefix: list[str | int], site: UnionSite) -> bool:
    if len(prefix) != len(site):
        return False
    return all(pattern == "*" or pattern == part for part, pattern in zip(prefix, site))



def _cleanLocation(
    loc: tuple[str | int, ...],
    unionSites: Mapping[UnionSite, Collection[str]],
) -> tuple[str | int, ...]:
    # A tagged union inserts the chosen tag right after its own position, and
    # function validators insert their name; neither is a document key. A tag
    # name anywhere else (a source called "semver") is a real key and stays.
    out: list[str | int] = []
    for part in loc:
        if isinstance(part, str):
            if part.startswith("function-"):
                continue
            if any(part in tags and _atSite(out, site) for site, tags in unionSites.items()):
                continue
        out.append(part)
    return tuple(out)



def _errorFromEntry(
    entry: Mapping[str, Any],
    *,
    unionSites: Mapping[UnionSite, Collection[str]],
    documentName: str | None,
) -> PackLoadError:
    loc = _cleanLocation(tuple(entry.get("loc", ())), unionSites)
    errType = entry.get("type", "")
    ctx = entry.get("ctx") or {}

    inner = ctx.get("error")
    if isinstance(inner, PackLoadError):
        return inner.withContext(location=loc, documentName=documentName)

    if errType == "missing":
        field = loc[-1] if loc else "?"
        return StructuralError(
            f"Missing required field '{field}'",
            location=loc,
            documentName=documentName,
        )

    if errType == "union_tag_invalid" and ctx.get("tag") == NON_TEXT_TAG:
        raw = entry.get("input")
        value = raw.get(TAG_FIELD) if isinstance(raw, Mapping) else raw
        return StructuralError(
            f"Invalid value {value!r}: expected a string tag",
            location=loc + (TAG_FIELD,),
            documentName=documentName,
        )

    if errType == "union_tag_invalid":
        tag = ctx.get("tag")
        expected = [item.strip().strip("'") for item in str(ctx.get("expected_tags", "")).split(",") if item.strip()]
        return UnknownVariantError(
            tag,
            expected,
            location=loc + (TAG_FIELD,),
            documentName=documentName,
        )

    if errType == "union_tag_not_found":
        if not isinstance(entry.get("input"), Mapping):
            return StructuralError(
                f"Expected a table, got {type(entry.get('input')).__name__}",
                location=loc,
                documentName=documentName,
            )
        return StructuralError(
            f"Missing required field '{TAG_FIELD}'",
            location=loc + (TAG_FIELD,),
            documentName=documentName,
        )

    return StructuralError(
        f"Invalid value {entry.get('input')!r}: {entry.get('msg', errType)}",
        location=loc,
        documentName=documentName,
    )



def translateValidationError(
    err: ValidationError,
    *,
    unionSites: Mapping[UnionSite, Collection[str]] | None = None,
    documentName: str | None = None,
) -> PackLoadError:
    """
    Map the first entry of a pydantic ValidationError onto the athena error
    taxonomy, keeping the document location.

    Entries carrying an athena error raised from a validator take precedence
    over generic shape errors so a bad requirement string or unknown tag is
    reported as such even when pydantic also flagged siblings.
    """
    entries = err.errors()
    if not entries:
        return StructuralError("Document failed validation", documentName=documentName)

    for entry in entries:
        inner = (entry.get("ctx") or {}).get("error")
        if isinstance(inner, PackLoadError) or entry.get("type") == "union_tag_invalid":
            chosen = entry
            break
    else:
        chosen = entries[0]

    if len(entries) > 1:
        logger.debug("Document has %d validation errors, reporting the first relevant one", len(entries))

    return _errorFromEntry(chosen, unionSites=unionSites or {}, documentName=documentName)
