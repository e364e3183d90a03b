from __future__ import annotations

"""
Placeholder Substitution.

Replaces '{identifier}' tokens in a template with values from a mapping.
Unknown identifiers stay in the output verbatim so missing arguments remain
visible to translators.
"""

import re
from typing import Any, List, Mapping, Optional

from langmanager.core.values import ValueKind, classify, join_array, scalar_text

PLACEHOLDER_RX = re.compile(r"\{(\w+)\}", re.ASCII)
ARRAY_ARG_JOINER = ", "


def substitute(template: str, args: Optional[Mapping[str, Any]] = None) -> str:
    """
    Substitute placeholders in a template.

    Args:
        template: Text possibly containing '{name}' tokens.
        args: Replacement values. Arrays are joined with ', ' and None
              renders as an empty string.

    Returns:
        str: The rendered text.
    """
    if not args:
        return template

    def _replace(match: re.Match) -> str:
        name = match.group(1)
        if name not in args:
            return match.group(0)
        value = args[name]
        if classify(value) is ValueKind.ARRAY:
            return join_array(value, ARRAY_ARG_JOINER)
        if classify(value) is ValueKind.MAP:
            return ""
        return scalar_text(value)

    return PLACEHOLDER_RX.sub(_replace, template)


def placeholders(template: str) -> List[str]:
    """List placeholder names in order of first appearance."""
    seen: List[str] = []
    for name in PLACEHOLDER_RX.findall(template):
        if name not in seen:
            seen.append(name)
    return seen
