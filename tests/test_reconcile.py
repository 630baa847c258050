# SPDX-License-Identifier: MIT

import pendulum
import pytest

from punchcard.service.entry import get_entry_duration_seconds
from punchcard.service.reconcile import (
    flatten_reconciled_entries,
    has_external_changes,
    get_unsaved_entries,
    merge_local_entries,
    reconcile_entries,
)

T = pendulum.datetime(2026, 1, 7, 12, 0, tz="UTC")


# ---------------------------------------------------------------------------
# reconcile_entries
# ---------------------------------------------------------------------------


class TestReconcileEntries:
    def test_empty_snapshot(self):
        assert reconcile_entries([]) == {"current": None, "completed": []}

    def test_single_running_entry_becomes_current(self, make_entry):
        reconciled = reconcile_entries([make_entry("a", T)])

        assert reconciled["current"] is not None
        assert reconciled["current"]["start_time"] == T
        assert reconciled["completed"] == []

    def test_only_completed_entries(self, make_entry):
        entries = [
            make_entry("a", T.subtract(hours=3), T.subtract(hours=2)),
            make_entry("b", T.subtract(hours=1), T),
        ]
        reconciled = reconcile_entries(entries)

        assert reconciled["current"] is None
        assert [e["id"] for e in reconciled["completed"]] == ["b", "a"]

    def test_latest_start_wins_and_stale_entry_has_zero_duration(self, make_entry):
        entries = [
            make_entry("1", T.subtract(seconds=3600)),
            make_entry("2", T.subtract(seconds=60)),
        ]
        reconciled = reconcile_entries(entries)

        assert reconciled["current"]["id"] == "2"
        assert len(reconciled["completed"]) == 1
        stale = reconciled["completed"][0]
        assert stale["id"] == "1"
        assert stale["end_time"] == stale["start_time"]
        assert get_entry_duration_seconds(stale, T) == 0

    def test_equal_start_times_pick_greatest_id(self, make_entry):
        entries = [make_entry("b", T), make_entry("c", T), make_entry("a", T)]
        reconciled = reconcile_entries(entries)

        assert reconciled["current"]["id"] == "c"
        assert sorted(e["id"] for e in reconciled["completed"]) == ["a", "b"]

    @pytest.mark.parametrize("running", [0, 1, 2, 5])
    def test_entry_count_is_preserved(self, make_entry, running):
        completed = [
            make_entry(f"done-{i}", T.subtract(hours=i + 10), T.subtract(hours=i + 9))
            for i in range(3)
        ]
        in_progress = [
            make_entry(f"run-{i}", T.subtract(minutes=i)) for i in range(running)
        ]
        reconciled = reconcile_entries(completed + in_progress)

        total = len(reconciled["completed"]) + (1 if reconciled["current"] else 0)
        assert total == len(completed) + len(in_progress)
        assert all(e["end_time"] is not None for e in reconciled["completed"])

    def test_is_idempotent(self, make_entry):
        entries = [
            make_entry("1", T.subtract(hours=2)),
            make_entry("2", T.subtract(hours=1)),
            make_entry("3", T.subtract(hours=5), T.subtract(hours=4)),
        ]
        once = reconcile_entries(entries)
        twice = reconcile_entries(flatten_reconciled_entries(once))

        assert twice == once

    def test_does_not_mutate_input(self, make_entry):
        entries = [make_entry("1", T.subtract(hours=1)), make_entry("2", T)]
        reconcile_entries(entries)

        assert entries[0]["end_time"] is None
        assert entries[1]["end_time"] is None

    def test_end_before_start_counts_as_zero(self, make_entry):
        broken = make_entry("x", T, T.subtract(minutes=5))
        reconciled = reconcile_entries([broken])

        assert reconciled["completed"][0]["end_time"] == T.subtract(minutes=5)
        assert get_entry_duration_seconds(reconciled["completed"][0]) == 0


# ---------------------------------------------------------------------------
# Merging and change detection
# ---------------------------------------------------------------------------


class TestMergeLocalEntries:
    def test_adds_missing_local_entry(self, make_entry):
        local = make_entry("x", T)
        merged = merge_local_entries([make_entry("y", T.add(minutes=1))], [local])

        assert [e["id"] for e in merged] == ["y", "x"]

    def test_keeps_snapshot_version_when_present(self, make_entry):
        local = make_entry("x", T)
        closed = make_entry("x", T, T.add(hours=1))
        merged = merge_local_entries([closed], [local])

        assert merged == [closed]

    def test_without_local_entries(self, make_entry):
        snapshot = [make_entry("y", T)]
        assert merge_local_entries(snapshot, []) == snapshot

    def test_unsaved_entries_are_the_ones_missing_from_the_snapshot(self, make_entry):
        x = make_entry("x", T)
        y = make_entry("y", T.add(minutes=1))
        reconciled = reconcile_entries(merge_local_entries([y], [x]))

        unsaved = get_unsaved_entries(reconciled, [y])
        assert [e["id"] for e in unsaved] == ["x"]
        assert unsaved[0]["end_time"] == unsaved[0]["start_time"]

class TestHasExternalChanges:
    def test_unchanged_snapshot(self, make_entry):
        current = make_entry("x", T)
        completed = [make_entry("a", T.subtract(hours=2), T.subtract(hours=1))]

        assert not has_external_changes(current, completed, [current, *completed])

    def test_running_entry_stopped_elsewhere(self, make_entry):
        current = make_entry("x", T)
        snapshot = [make_entry("x", T, T.add(hours=1))]

        assert has_external_changes(current, [], snapshot)

    def test_timer_started_elsewhere_while_idle(self, make_entry):
        assert has_external_changes(None, [], [make_entry("y", T)])

    def test_later_timer_started_elsewhere(self, make_entry):
        current = make_entry("x", T)
        snapshot = [make_entry("y", T.add(minutes=1))]

        assert has_external_changes(current, [], snapshot)

    def test_earlier_timer_started_elsewhere_changes_completed_count(
        self, make_entry
    ):
        current = make_entry("x", T)
        snapshot = [current, make_entry("y", T.subtract(minutes=1))]

        assert has_external_changes(current, [], snapshot)

    def test_completed_entry_added_elsewhere(self, make_entry):
        snapshot = [make_entry("a", T.subtract(hours=2), T.subtract(hours=1))]

        assert has_external_changes(None, [], snapshot)

    def test_snapshot_without_local_timer_is_not_a_change(self, make_entry):
        current = make_entry("x", T)

        assert not has_external_changes(current, [], [])

    def test_same_snapshot_after_losing_a_timer_is_not_a_change(self, make_entry):
        x = make_entry("x", T)
        y = make_entry("y", T.add(minutes=1))
        snapshot = [y]
        reconciled = reconcile_entries(merge_local_entries(snapshot, [x]))
        unsaved = get_unsaved_entries(reconciled, snapshot)

        assert not has_external_changes(
            reconciled["current"], reconciled["completed"], snapshot, unsaved
        )
        assert has_external_changes(
            reconciled["current"], reconciled["completed"], snapshot
        )
