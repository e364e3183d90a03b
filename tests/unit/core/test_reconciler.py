from __future__ import annotations

"""
Unit tests for the Change Reconciler state machine.

Runs entirely on a virtual clock (ManualScheduler) and an in-memory
filesystem: no real timers, no disk I/O.

Verifies:
1. IDLE -> PENDING -> IDLE transitions.
2. Debounce restart coalesces bursts into a single reconciliation.
3. Fire-time existence check selects reload or evict.
4. Non-resource filenames and stat errors are handled without side effects.
"""

from unittest.mock import patch

import pytest

from langmanager.core.reconciler import ChangeReconciler
from langmanager.core.scheduler import ManualScheduler
from langmanager.core.store import ResourceStore
from langmanager.domain.models import ChangeEvent, EventKind, ReconcileState

DEBOUNCE = 0.1


@pytest.fixture
def store(memory_fs) -> ResourceStore:
    s = ResourceStore(memory_fs.root, fs=memory_fs)
    s.load_all(memory_fs.list_entries(memory_fs.root))
    return s


@pytest.fixture
def reconciler(store, scheduler, memory_fs) -> ChangeReconciler:
    return ChangeReconciler(store, scheduler, fs=memory_fs, debounce_seconds=DEBOUNCE)


def test_notification_arms_a_timer(reconciler: ChangeReconciler, scheduler: ManualScheduler) -> None:
    assert reconciler.state("en.json") is ReconcileState.IDLE

    assert reconciler.notify("en.json", EventKind.CHANGE) is True

    assert reconciler.state("en.json") is ReconcileState.PENDING
    assert reconciler.pending == ["en.json"]
    assert scheduler.pending == 1


def test_nothing_happens_before_the_deadline(reconciler, scheduler, store, memory_fs) -> None:
    memory_fs.write("en.json", {"greeting": "Hey"})
    reconciler.notify("en.json", EventKind.CHANGE)

    scheduler.advance(DEBOUNCE / 2)

    assert store.lookup("en")["greeting"] == "Hello {name}!"
    assert reconciler.state("en.json") is ReconcileState.PENDING


def test_fire_reloads_existing_file(reconciler, scheduler, store, memory_fs) -> None:
    memory_fs.write("en.json", {"greeting": "Hey {name}"})
    reconciler.notify("en.json", EventKind.CHANGE)

    scheduler.advance(DEBOUNCE)

    assert store.lookup("en") == {"greeting": "Hey {name}"}
    assert reconciler.state("en.json") is ReconcileState.IDLE
    assert reconciler.reconcile_count == 1


def test_burst_is_coalesced_into_one_reload(reconciler, scheduler, store, memory_fs) -> None:
    memory_fs.write("en.json", {"greeting": "v2"})

    with patch.object(store, "reload", wraps=store.reload) as spy:
        reconciler.notify("en.json", EventKind.CHANGE)
        scheduler.advance(DEBOUNCE * 0.6)
        reconciler.notify("en.json", EventKind.RENAME)
        scheduler.advance(DEBOUNCE * 0.6)
        reconciler.notify("en.json", EventKind.CHANGE)

        # 1.2 windows elapsed since the first event, yet nothing fired
        assert spy.call_count == 0
        assert scheduler.pending == 1

        scheduler.advance(DEBOUNCE)

    spy.assert_called_once_with("en.json")
    assert store.lookup("en") == {"greeting": "v2"}
    assert reconciler.reconcile_count == 1


def test_restart_uses_a_full_fresh_delay(reconciler, scheduler, store, memory_fs) -> None:
    reconciler.notify("en.json", EventKind.CHANGE)
    scheduler.advance(0.09)
    reconciler.notify("en.json", EventKind.CHANGE)

    scheduler.advance(0.09)
    assert reconciler.state("en.json") is ReconcileState.PENDING

    scheduler.advance(0.05)
    assert reconciler.state("en.json") is ReconcileState.IDLE


def test_files_are_debounced_independently(reconciler, scheduler, store, memory_fs) -> None:
    memory_fs.write("en.json", {"k": "en2"})
    memory_fs.write("fr.json", {"k": "fr2"})

    reconciler.notify("en.json", EventKind.CHANGE)
    scheduler.advance(0.05)
    reconciler.notify("fr.json", EventKind.CHANGE)
    scheduler.advance(0.05)

    assert store.lookup("en") == {"k": "en2"}
    assert reconciler.state("fr.json") is ReconcileState.PENDING

    scheduler.advance(0.06)
    assert store.lookup("fr") == {"k": "fr2"}
    assert reconciler.reconcile_count == 2


def test_deleted_file_is_evicted(reconciler, scheduler, store, memory_fs) -> None:
    reconciler.notify("fr.json", EventKind.CHANGE)
    memory_fs.delete("fr.json")
    reconciler.notify("fr.json", EventKind.RENAME)

    scheduler.advance(DEBOUNCE)

    assert store.lookup("fr") is None
    assert store.locales == ["en"]


def test_rewritten_file_is_not_evicted(reconciler, scheduler, store, memory_fs) -> None:
    """Delete followed by re-create inside one window ends in a reload."""
    memory_fs.delete("fr.json")
    reconciler.notify("fr.json", EventKind.RENAME)
    memory_fs.write("fr.json", {"greeting": "Salut"})
    reconciler.notify("fr.json", EventKind.RENAME)

    scheduler.advance(DEBOUNCE)

    assert store.lookup("fr") == {"greeting": "Salut"}


def test_new_file_is_loaded(reconciler, scheduler, store, memory_fs) -> None:
    memory_fs.write("de.json", {"buttons": {"ok": "OK"}})
    reconciler.handle(ChangeEvent("de.json", EventKind.RENAME))

    scheduler.advance(DEBOUNCE)

    assert store.lookup("de") == {"buttons.ok": "OK"}


def test_parse_failure_keeps_previous_version(reconciler, scheduler, store, memory_fs) -> None:
    memory_fs.write("en.json", "{ broken")
    reconciler.notify("en.json", EventKind.CHANGE)

    scheduler.advance(DEBOUNCE)

    assert store.lookup("en")["buttons.confirm"] == "Confirm"
    assert "en.json" in store.failures


def test_stat_error_leaves_entry_unchanged(reconciler, scheduler, store, memory_fs, caplog) -> None:
    memory_fs.broken.add(memory_fs.path("fr.json"))

    with patch.object(store, "evict") as evict, patch.object(store, "reload") as reload:
        reconciler.notify("fr.json", EventKind.RENAME)
        scheduler.advance(DEBOUNCE)

    evict.assert_not_called()
    reload.assert_not_called()
    assert store.lookup("fr") is not None
    assert reconciler.state("fr.json") is ReconcileState.IDLE
    assert any("Cannot stat" in r.getMessage() for r in caplog.records)


@pytest.mark.parametrize("filename", ["notes.txt", "en.json.swp", "", None, ".json"])
def test_unrecognized_filenames_are_ignored(reconciler, scheduler, filename) -> None:
    assert reconciler.notify(filename, EventKind.CHANGE) is False
    assert reconciler.pending == []
    assert scheduler.pending == 0


def test_event_kind_must_be_enumerated(reconciler) -> None:
    with pytest.raises(TypeError):
        reconciler.notify("en.json", "change")  # type: ignore[arg-type]
