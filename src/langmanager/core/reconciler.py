from __future__ import annotations

"""
Change Reconciler.

Turns raw directory notifications into store reloads and evictions.

Per filename the reconciler is either IDLE or PENDING. A notification arms
a debounce timer (IDLE -> PENDING); another notification for the same file
while the timer is armed cancels it and arms a fresh one with the full
delay, so a burst of events produced by a single save collapses into one
action. When the timer fires the decision is taken from ground truth: an
existence check selects reload (file present) or evict (file gone). Errors
of that check other than 'not found' leave the locale untouched.
"""

import logging
from typing import Dict, List

from langmanager.core.scheduler import Scheduler, TimerHandle
from langmanager.core.store import ResourceStore
from langmanager.domain.constants import DEFAULT_DEBOUNCE_SECONDS
from langmanager.domain.models import ChangeEvent, EventKind, ReconcileState
from langmanager.infra.fs import FileSystem

logger = logging.getLogger(__name__)


class ChangeReconciler:
    """
    Debounced bridge between a change notification source and a ResourceStore.

    All methods are expected to run on the scheduler's thread.
    """

    def __init__(
            self,
            store: ResourceStore,
            scheduler: Scheduler,
            *,
            fs: FileSystem,
            debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        self._store = store
        self._scheduler = scheduler
        self._fs = fs
        self.debounce_seconds = debounce_seconds
        self._pending: Dict[str, TimerHandle] = {}
        self.reconcile_count = 0

    # -------------------------------------------------------------------------
    # Notification Intake
    # -------------------------------------------------------------------------
    def handle(self, event: ChangeEvent) -> bool:
        return self.notify(event.filename, event.kind)

    def notify(self, filename: str, kind: EventKind) -> bool:
        """
        Register a change notification for a file.

        Args:
            filename: Entry name relative to the resource directory.
            kind: Raw event kind reported by the change source.

        Returns:
            bool: True if a reconciliation was (re)armed, False if the
                  filename is not a resource file.

        Raises:
            TypeError: If kind is not an EventKind.
        """
        if not isinstance(kind, EventKind):
            raise TypeError(f"Unsupported event kind: {kind!r}")

        if not self._store.accepts(filename):
            return False

        previous = self._pending.pop(filename, None)
        if previous is not None:
            previous.cancel()
            logger.debug(f"Reconciler: Debounce restarted for '{filename}' ({kind.value})")
        else:
            logger.debug(f"Reconciler: Change detected on '{filename}' ({kind.value})")

        self._pending[filename] = self._scheduler.call_later(
            self.debounce_seconds, lambda: self._fire(filename)
        )
        return True

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------
    def state(self, filename: str) -> ReconcileState:
        if filename in self._pending:
            return ReconcileState.PENDING
        return ReconcileState.IDLE

    @property
    def pending(self) -> List[str]:
        return sorted(self._pending)

    # -------------------------------------------------------------------------
    # Timer Expiry
    # -------------------------------------------------------------------------
    def _fire(self, filename: str) -> None:
        self._pending.pop(filename, None)
        self.reconcile_count += 1

        path = self._store.path_for(filename)
        try:
            present = self._fs.exists(path)
        except OSError as e:
            logger.error(f"Reconciler: Cannot stat '{filename}', keeping current state: {e}")
            return

        if present:
            self._store.reload(filename)
        else:
            self._store.evict(self._store.locale_for(filename))
