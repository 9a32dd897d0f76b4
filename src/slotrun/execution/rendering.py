"""Rendering of a fragment's return value as trailing output text."""

from __future__ import annotations

import numbers
from typing import Any

# Containers are tagged, never serialized.
_TAGGED_TYPES = (dict, list, tuple, set, frozenset, bytes, bytearray)


def render_return_value(value: Any) -> str:
    """Text appended to a fragment's captured output for its return value.

    ``None`` renders as nothing, booleans as ``true``/``false``, strings and
    numbers verbatim, objects with their own ``__str__`` through it, and
    anything else as a ``[Return Type: <name>]`` tag.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, numbers.Number)):
        return str(value)
    if not isinstance(value, _TAGGED_TYPES) and type(value).__str__ is not object.__str__:
        return str(value)
    return f"[Return Type: {type(value).__name__}]"
