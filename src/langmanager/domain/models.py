from __future__ import annotations

"""
Reconciliation Domain Models.

Defines the change notification DTO consumed by the reconciler and the
enumerations describing event kinds and per-file reconciliation state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict

# Locale table value type: dotted key path -> rendered string
FlatResourceMap = Dict[str, str]


class EventKind(Enum):
    """
    Kind of a raw filesystem notification.

    CHANGE: the content of an existing file changed.
    RENAME: a file appeared, disappeared or was renamed.
    """
    CHANGE = "change"
    RENAME = "rename"


class ReconcileState(Enum):
    """Per-filename state of the change reconciler."""
    IDLE = "idle"
    PENDING = "pending"


@dataclass(frozen=True)
class ChangeEvent:
    """
    A single notification emitted by a change source.

    Attributes:
        filename: Name of the affected entry, relative to the watched directory.
        kind: What happened to the entry.
    """
    filename: str
    kind: EventKind
