from __future__ import annotations

"""
Resource Tree Flattener.

Turns the nested mapping produced by the JSON parser into a single-level
mapping of separator-joined key paths to strings.

Example:
    flatten({"buttons": {"ok": "OK"}, "count": 3})
    -> {"buttons.ok": "OK", "count": "3"}
"""

from typing import Any, Dict, Mapping, Optional

from langmanager.core.values import ValueKind, classify, join_array, scalar_text
from langmanager.domain.constants import DEFAULT_SEPARATOR

# Array leaves are stored comma-joined without spaces
ARRAY_LEAF_JOINER = ","


def flatten(tree: Mapping[str, Any], separator: str = DEFAULT_SEPARATOR) -> Dict[str, str]:
    """
    Flatten a nested resource tree.

    Args:
        tree: Root mapping of the parsed resource file.
        separator: Joiner placed between parent and child keys.

    Returns:
        Dict[str, str]: One entry per terminal (non-mapping) value.

    Raises:
        TypeError: If the root is not a mapping.
    """
    if classify(tree) is not ValueKind.MAP:
        raise TypeError(f"Resource root must be an object, got {type(tree).__name__}")

    out: Dict[str, str] = {}
    _flatten_into(out, tree, None, separator)
    return out


def render_leaf(value: Any) -> str:
    """Render a terminal value (scalar or array) to its stored text."""
    if classify(value) is ValueKind.ARRAY:
        return join_array(value, ARRAY_LEAF_JOINER)
    return scalar_text(value)


def _flatten_into(
        out: Dict[str, str],
        node: Mapping[str, Any],
        prefix: Optional[str],
        separator: str,
) -> None:
    # None marks the root; an empty parent key still contributes a separator
    for key, value in node.items():
        flat_key = str(key) if prefix is None else f"{prefix}{separator}{key}"
        if classify(value) is ValueKind.MAP:
            _flatten_into(out, value, flat_key, separator)
        else:
            out[flat_key] = render_leaf(value)
