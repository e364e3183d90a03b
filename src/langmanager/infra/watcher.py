from __future__ import annotations

"""
Directory Change Notification Source.

Detects changes by comparing successive snapshots of a directory and yields
them as ChangeEvent objects. New and vanished entries are reported as
RENAME, modified entries (size or mtime changed) as CHANGE. The generator is
lazy, runs until its stop event is set, and cannot be restarted.
"""

import logging
import os
import threading
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from langmanager.domain.constants import DEFAULT_POLL_INTERVAL
from langmanager.domain.models import ChangeEvent, EventKind

logger = logging.getLogger(__name__)

# (mtime_ns, size) per entry name
Snapshot = Dict[str, Tuple[int, int]]


def take_snapshot(directory: str) -> Snapshot:
    """
    Capture the modification signature of every regular file in a directory.

    Entries vanishing while the directory is scanned are skipped.
    """
    snapshot: Snapshot = {}
    with os.scandir(directory) as it:
        for entry in it:
            try:
                if not entry.is_file():
                    continue
                st = entry.stat()
            except FileNotFoundError:
                continue
            snapshot[entry.name] = (st.st_mtime_ns, st.st_size)
    return snapshot


def diff_snapshots(before: Snapshot, after: Snapshot) -> List[ChangeEvent]:
    """
    Compute the events that turn one snapshot into the next.

    Returns:
        List[ChangeEvent]: Events sorted by filename.
    """
    events: List[ChangeEvent] = []
    for name in sorted(set(before) | set(after)):
        if name not in before or name not in after:
            events.append(ChangeEvent(name, EventKind.RENAME))
        elif before[name] != after[name]:
            events.append(ChangeEvent(name, EventKind.CHANGE))
    return events


def watch_directory(
        directory: str,
        stop_event: threading.Event,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        snapshot_fn: Callable[[str], Snapshot] = take_snapshot,
        initial: Optional[Snapshot] = None,
) -> Iterator[ChangeEvent]:
    """
    Yield change events for a directory until stop_event is set.

    A snapshot failure (directory temporarily unavailable) is logged and
    the previous snapshot is kept, so no spurious deletions are emitted.

    Args:
        directory: Directory to observe.
        stop_event: Set it to end the iteration.
        poll_interval: Seconds between two snapshots.
        snapshot_fn: Snapshot capability (injectable for tests).
        initial: Baseline snapshot; taken on first iteration when omitted.

    Yields:
        ChangeEvent: One event per changed entry.
    """
    previous = initial if initial is not None else snapshot_fn(directory)
    while not stop_event.wait(poll_interval):
        try:
            current = snapshot_fn(directory)
        except OSError as e:
            logger.warning(f"Watcher: Cannot scan '{directory}': {e}")
            continue

        for event in diff_snapshots(previous, current):
            yield event
        previous = current


class DirectoryWatcher:
    """
    Background thread draining watch_directory() into a callback.

    Attributes:
        directory: Directory being observed.
        poll_interval: Seconds between snapshots.
    """

    def __init__(
            self,
            directory: str,
            on_event: Callable[[ChangeEvent], None],
            *,
            poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self.directory = directory
        self.poll_interval = poll_interval
        self._on_event = on_event
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop.clear()
        # Baseline taken here so changes made right after start() are not missed
        baseline = take_snapshot(self.directory)
        self._thread = threading.Thread(
            target=self._run,
            args=(baseline,),
            name=f"langmanager-watch:{os.path.basename(self.directory)}",
            daemon=True,
        )
        self._thread.start()
        logger.info(f"Watcher: Observing {self.directory} every {self.poll_interval}s")

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
        self._thread = None

    def _run(self, baseline: Snapshot) -> None:
        try:
            events = watch_directory(
                self.directory, self._stop, poll_interval=self.poll_interval, initial=baseline
            )
            for event in events:
                self._on_event(event)
        except Exception as e:
            logger.critical(f"Watcher: Observation of {self.directory} aborted: {e}", exc_info=True)
