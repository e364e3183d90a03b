from __future__ import annotations

"""
Value Classification and Rendering.

Parsed resource trees are made of mappings, arrays and scalars. This module
tags every node with one of those three variants and renders scalars to the
text stored in flat resource maps and substituted into templates.
"""

from enum import Enum
from typing import Any, Mapping


class ValueKind(Enum):
    MAP = "map"
    ARRAY = "array"
    SCALAR = "scalar"


def classify(value: Any) -> ValueKind:
    """
    Tag a parsed value with its variant.

    Anything that is neither a mapping nor a list/tuple is a scalar.
    """
    if isinstance(value, Mapping):
        return ValueKind.MAP
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    return ValueKind.SCALAR


def scalar_text(value: Any) -> str:
    """
    Render a scalar the way it reads in the source JSON.

    None -> "", booleans -> "true"/"false", integral floats lose their
    trailing ".0".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def join_array(items: Any, joiner: str) -> str:
    """Render scalar elements and join them; nested maps/arrays render as ""."""
    return joiner.join(
        scalar_text(item) if classify(item) is ValueKind.SCALAR else ""
        for item in items
    )
