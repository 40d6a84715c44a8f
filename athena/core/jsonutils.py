# athena/core/jsonutils.py
from __future__ import annotations

import json
from typing import Any

__all__ = ["safeJsonDumps"]



def safeJsonDumps(obj: Any) -> str:
    """
    Serializes an object to a compact JSON string.
    Uses deterministic separators (",", ":") and disallows NaN/infinity.
    UTF-8 characters are kept as-is.
    If direct JSON encoding fails, non-serializable values are rendered with repr().
    """
    try:
        return json.dumps(obj, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
    except (TypeError, ValueError):
        # Hardened fallback
        return json.dumps(obj, ensure_ascii=False, allow_nan=False, separators=(",", ":"), default=repr)
