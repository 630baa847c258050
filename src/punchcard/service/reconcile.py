# SPDX-License-Identifier: MIT

"""
Turn whatever the shared entry snapshot holds into one running timer plus a
clean list of completed entries.

Devices never lock the snapshot, so two of them can each start a timer and
both in-progress entries end up in the file. The entry that started last
wins; on equal start times the greater id wins. Every other in-progress
entry is closed at its own start time, so it stays visible but adds nothing
to any total.
"""

from copy import deepcopy
from typing import Optional

from punchcard.model.time_entry import ReconciledEntries, TimeEntry
from punchcard.service.entry import is_in_progress, sort_entries_newest_first


def select_current_entry(in_progress: list[TimeEntry]) -> TimeEntry:
    return max(in_progress, key=lambda entry: (entry["start_time"], entry["id"]))


def close_stale_entry(entry: TimeEntry) -> TimeEntry:
    closed = deepcopy(entry)
    closed["end_time"] = closed["start_time"]
    return closed


def reconcile_entries(entries: list[TimeEntry]) -> ReconciledEntries:
    in_progress = [entry for entry in entries if is_in_progress(entry)]
    completed = [deepcopy(entry) for entry in entries if not is_in_progress(entry)]

    if not in_progress:
        return {"current": None, "completed": sort_entries_newest_first(completed)}

    current = select_current_entry(in_progress)
    stale = [close_stale_entry(entry) for entry in in_progress if entry is not current]

    return {
        "current": deepcopy(current),
        "completed": sort_entries_newest_first(completed + stale),
    }


def flatten_reconciled_entries(reconciled: ReconciledEntries) -> list[TimeEntry]:
    """The snapshot to persist: the running entry first, then the rest."""
    snapshot = list(reconciled["completed"])
    if reconciled["current"] is not None:
        snapshot.insert(0, reconciled["current"])
    return snapshot


def merge_local_entries(
    snapshot: list[TimeEntry], local_entries: list[TimeEntry]
) -> list[TimeEntry]:
    """
    Add local entries the snapshot does not mention: the running timer when
    another device rewrote the file without knowing about it, and timers
    closed here by reconciliation that no device has written yet.
    Reconciliation then decides which timer survives instead of local
    entries silently disappearing.
    """
    known_ids = {entry["id"] for entry in snapshot}
    return [
        *snapshot,
        *(entry for entry in local_entries if entry["id"] not in known_ids),
    ]


def get_unsaved_entries(
    reconciled: ReconciledEntries, snapshot: list[TimeEntry]
) -> list[TimeEntry]:
    """Completed entries that only exist in memory, not in `snapshot`."""
    known_ids = {entry["id"] for entry in snapshot}
    return [entry for entry in reconciled["completed"] if entry["id"] not in known_ids]


def has_external_changes(
    current: Optional[TimeEntry],
    completed: list[TimeEntry],
    snapshot: list[TimeEntry],
    unsaved: Optional[list[TimeEntry]] = None,
) -> bool:
    """
    Decide whether a freshly read snapshot differs from the in-memory state
    in a way that needs a new reconciliation:

    - the running entry was closed elsewhere (same id, now with an end time)
    - a timer was started elsewhere that outranks the local one
    - the number of completed entries changed

    `unsaved` are completed entries known only to this device; they are
    merged back in so reading the same snapshot twice changes nothing.
    """
    if current is not None:
        for entry in snapshot:
            if entry["id"] == current["id"] and not is_in_progress(entry):
                return True
    elif any(is_in_progress(entry) for entry in snapshot):
        return True

    local_entries = [current] if current is not None else []
    reconciled = reconcile_entries(
        merge_local_entries(snapshot, [*local_entries, *(unsaved or [])])
    )
    if current is not None:
        winner = reconciled["current"]
        if winner is None or winner["id"] != current["id"]:
            return True
    return len(reconciled["completed"]) != len(completed)
