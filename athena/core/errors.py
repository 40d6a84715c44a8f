# athena/core/errors.py
from __future__ import annotations

from collections.abc import Iterable, Sequence

__all__ = [
    "AthenaError",
    "PackLoadError",
    "StructuralError",
    "UnknownVariantError",
    "ConstraintSyntaxError",
    "RenderError",
    "UnrepresentableValueError",
    "ConfigError",
    "formatLocation",
]



def formatLocation(loc: Iterable[str | int]) -> str:
    """
    Render a location tuple as a dotted path with list indices in brackets.

        ("files", 0, "version", "type") -> "files[0].version.type"
    """
    out = ""
    for part in loc:
        if isinstance(part, int):
            out += f"[{part}]"
        elif out:
            out += f".{part}"
        else:
            out = str(part)
    return out



class AthenaError(Exception):
    """Base class for every error raised by athena."""
    pass



class PackLoadError(AthenaError, ValueError):
    """
    A pack document could not be loaded.

    Derives from ValueError so it can be raised from inside pydantic validators
    and recovered (with its location) by the validation error translator.
    """
    def __init__(
        self,
        message: str,
        *,
        location: Sequence[str | int] = (),
        documentName: str | None = None,
    ) -> None:
        self.message = message
        self.location: tuple[str | int, ...] = tuple(location)
        self.documentName = documentName
        super().__init__(self._render())

    def _render(self) -> str:
        where = formatLocation(self.location)
        prefix = ""
        if self.documentName:
            prefix = f"{self.documentName}: "
        if where:
            return f"{prefix}{self.message} (at {where})"
        return f"{prefix}{self.message}"

    def withContext(
        self,
        *,
        location: Sequence[str | int] = (),
        documentName: str | None = None,
    ) -> PackLoadError:
        """
        Return a copy of this error with `location` prepended to its own
        location and `documentName` filled in when missing.
        """
        clone = self.__class__.__new__(self.__class__)
        clone.__dict__.update(self.__dict__)
        clone.location = tuple(location) + self.location
        if clone.documentName is None:
            clone.documentName = documentName
        clone.args = (clone._render(),)
        return clone

    def __str__(self) -> str:
        return self._render()



class StructuralError(PackLoadError):
    """Document shape mismatch: missing required field or wrong value type."""
    pass



class UnknownVariantError(PackLoadError):
    """A tagged union's `type` value is outside its closed set of tags."""
    def __init__(
        self,
        tag: object,
        expected: Iterable[str],
        *,
        location: Sequence[str | int] = (),
        documentName: str | None = None,
    ) -> None:
        self.tag = tag
        self.expected: tuple[str, ...] = tuple(expected)
        choices = ", ".join(repr(item) for item in self.expected)
        super().__init__(
            f"Unknown variant {tag!r}, expected one of {choices}",
            location=location,
            documentName=documentName,
        )



class ConstraintSyntaxError(PackLoadError):
    """A semantic-version requirement or version string failed to parse."""
    def __init__(
        self,
        text: str,
        reason: str,
        *,
        kind: str = "version requirement",
        location: Sequence[str | int] = (),
        documentName: str | None = None,
    ) -> None:
        self.text = text
        self.reason = reason
        super().__init__(
            f"Invalid {kind} {text!r}: {reason}",
            location=location,
            documentName=documentName,
        )



class RenderError(AthenaError):
    """A value could not be rendered to its document format."""
    pass



class UnrepresentableValueError(RenderError):
    """A value cannot be expressed losslessly in the target format."""
    def __init__(self, message: str, *, location: Sequence[str | int] = ()) -> None:
        self.location: tuple[str | int, ...] = tuple(location)
        where = formatLocation(self.location)
        super().__init__(f"{message} (at {where})" if where else message)



class ConfigError(AthenaError):
    """Settings layers could not be read, merged or validated."""
    pass
