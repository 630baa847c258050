# SPDX-License-Identifier: MIT

import json

import pytest

from punchcard.errors import ConfigurationMissing, EntryNotFound, IOFailure
from punchcard.repository.entry import EntryRepository
from punchcard.repository.storage import StorageFolder
from punchcard.service.tracker import TimeTracker


@pytest.fixture
def tracker(storage, clock) -> TimeTracker:
    tracker = TimeTracker(storage, now=clock)
    tracker.load()
    return tracker


def make_device(storage_root, clock) -> TimeTracker:
    device = TimeTracker(StorageFolder(storage_root), now=clock)
    device.load()
    return device


class TestClock:
    def test_start_persists_running_entry(self, tracker, storage, clock):
        entry = tracker.start_clock("design", "acme", ["billable", "billable"])

        assert entry is not None
        assert entry["start_time"] == clock()
        assert entry["tags"] == ["billable"]
        assert tracker.is_tracking

        stored = EntryRepository(storage).read()
        assert [e["id"] for e in stored] == [entry["id"]]
        assert stored[0]["end_time"] is None

    def test_start_while_running_does_nothing(self, tracker):
        first = tracker.start_clock()

        assert tracker.start_clock() is None
        assert tracker.current_entry["id"] == first["id"]

    def test_stop_completes_entry(self, tracker, storage, clock):
        tracker.start_clock("design")
        clock.advance(hours=1)
        entry = tracker.stop_clock(description="design review")

        assert entry["end_time"] == clock()
        assert entry["description"] == "design review"
        assert not tracker.is_tracking
        assert [e["id"] for e in tracker.completed_entries] == [entry["id"]]
        assert EntryRepository(storage).read() == [entry]

    def test_stop_while_idle_does_nothing(self, tracker):
        assert tracker.stop_clock() is None

    def test_cancel_discards_entry(self, tracker, storage):
        tracker.start_clock()

        assert tracker.cancel_tracking() is not None
        assert not tracker.is_tracking
        assert EntryRepository(storage).read() == []

    def test_running_entry_survives_restart(self, tracker, storage, clock):
        entry = tracker.start_clock("design")

        restarted = make_device(storage.root, clock)
        assert restarted.current_entry == entry

    def test_failed_write_leaves_state_untouched(self, tracker, monkeypatch):
        def failing_write(entries):
            raise IOFailure("Storage folder is not writable")

        monkeypatch.setattr(tracker.entry_repo, "write", failing_write)

        with pytest.raises(IOFailure):
            tracker.start_clock()
        assert not tracker.is_tracking

    def test_start_without_storage_folder(self, clock):
        tracker = TimeTracker(StorageFolder(), now=clock)
        tracker.load()

        with pytest.raises(ConfigurationMissing):
            tracker.start_clock()

    def test_listeners_are_notified(self, tracker):
        seen = []
        tracker.add_listener(lambda t: seen.append(t.is_tracking))

        tracker.start_clock()
        tracker.stop_clock()

        assert seen == [True, False]


class TestSetup:
    def test_setup_storage_pins_the_timezone(self, tmp_path, clock):
        tracker = TimeTracker(StorageFolder(), now=clock)
        tracker.setup_storage(tmp_path / "shared")

        document = json.loads((tmp_path / "shared" / "config.json").read_text())
        assert document["timezoneIdentifier"] == tracker.configuration["timezone"]

    def test_setup_storage_keeps_existing_configuration(self, storage, clock):
        storage.config_path.write_text('{"timezoneIdentifier": "Europe/Berlin"}')

        tracker = TimeTracker(StorageFolder(), now=clock)
        tracker.setup_storage(storage.root)

        assert tracker.configuration["timezone"] == "Europe/Berlin"


class TestEntries:
    def test_update_completed_entry(self, tracker, clock):
        tracker.start_clock()
        clock.advance(minutes=30)
        entry = tracker.stop_clock()

        entry["project_name"] = "acme"
        tracker.update_entry(entry)

        assert tracker.get_entry(entry["id"])["project_name"] == "acme"

    def test_update_running_entry(self, tracker):
        entry = tracker.start_clock()
        entry["description"] = "writing"
        tracker.update_entry(entry)

        assert tracker.current_entry["description"] == "writing"

    def test_completed_entry_needs_end_time(self, tracker, clock):
        tracker.start_clock()
        clock.advance(minutes=30)
        entry = tracker.stop_clock()
        entry["end_time"] = None

        with pytest.raises(ValueError):
            tracker.update_entry(entry)

    def test_delete_entry(self, tracker, storage, clock):
        tracker.start_clock()
        clock.advance(minutes=30)
        entry = tracker.stop_clock()

        tracker.delete_entry(entry["id"])

        assert tracker.completed_entries == []
        assert EntryRepository(storage).read() == []

    def test_unknown_entry(self, tracker):
        with pytest.raises(EntryNotFound):
            tracker.delete_entry("missing")
        with pytest.raises(EntryNotFound):
            tracker.get_entry("missing")

    def test_find_entry_by_prefix(self, tracker, clock, make_entry):
        tracker.add_entry(make_entry("abc-1", clock(), clock().add(minutes=5)))
        tracker.add_entry(make_entry("abd-2", clock(), clock().add(minutes=5)))

        assert tracker.find_entry("abc")["id"] == "abc-1"
        with pytest.raises(EntryNotFound):
            tracker.find_entry("ab")

    def test_add_entry_requires_end(self, tracker, clock, make_entry):
        with pytest.raises(ValueError):
            tracker.add_entry(make_entry("x", clock()))


class TestMultipleDevices:
    def test_later_timer_from_another_device_wins(self, storage, clock):
        device_a = make_device(storage.root, clock)
        device_b = make_device(storage.root, clock)

        x = device_a.start_clock("on laptop")
        clock.advance(minutes=1)
        # B never saw X and overwrites the snapshot with its own timer
        y = device_b.start_clock("on phone")

        changes = []
        device_a.add_listener(changes.append)

        # Reading the untouched file again must not change anything
        for _ in range(2):
            assert device_a.poller.poll_once()

            assert device_a.current_entry["id"] == y["id"]
            stale = device_a.completed_entries
            assert [e["id"] for e in stale] == [x["id"]]
            assert stale[0]["end_time"] == stale[0]["start_time"]
        assert len(changes) == 1

    def test_lost_timer_is_written_with_the_next_change(self, storage, clock):
        device_a = make_device(storage.root, clock)
        device_b = make_device(storage.root, clock)
        x = device_a.start_clock()
        clock.advance(minutes=1)
        y = device_b.start_clock()
        device_a.poller.poll_once()

        clock.advance(hours=1)
        device_a.stop_clock()

        stored = EntryRepository(storage).read()
        assert sorted(e["id"] for e in stored) == sorted([x["id"], y["id"]])
        assert all(e["end_time"] is not None for e in stored)
        assert device_a.poller.poll_once()
        assert len(device_a.completed_entries) == 2

    def test_stop_on_another_device(self, storage, clock):
        device_a = make_device(storage.root, clock)
        x = device_a.start_clock()

        device_b = make_device(storage.root, clock)
        clock.advance(hours=2)
        device_b.stop_clock()

        device_a.poller.poll_once()

        assert not device_a.is_tracking
        assert device_a.completed_entries[0]["id"] == x["id"]
        assert device_a.completed_entries[0]["end_time"] == clock()

    def test_reload_picks_up_changes(self, storage, clock):
        device_a = make_device(storage.root, clock)
        device_b = make_device(storage.root, clock)
        entry = device_b.start_clock()

        device_a.reload()

        assert device_a.current_entry["id"] == entry["id"]

    def test_unchanged_snapshot_is_not_reapplied(self, tracker, storage):
        tracker.start_clock()
        seen = []
        tracker.add_listener(seen.append)

        assert not tracker.apply_snapshot(EntryRepository(storage).read())
        assert seen == []

    def test_poll_racing_a_local_write_is_discarded(self, tracker):
        stale_snapshot = tracker._read_polled_snapshot()
        entry = tracker.start_clock()

        assert not tracker._apply_polled_snapshot(stale_snapshot)
        assert tracker.current_entry["id"] == entry["id"]

    def test_activate_and_deactivate(self, tracker):
        tracker.activate()
        try:
            assert tracker.poller.is_running
        finally:
            tracker.deactivate()
        assert not tracker.poller.is_running


class TestTotalsAndTimesheets:
    def test_today_and_week_totals(self, tracker, clock, make_entry):
        tracker.update_configuration(timezone="UTC")
        start = clock().start_of("day").add(hours=8)
        tracker.add_entry(make_entry("today", start, start.add(hours=1)))
        monday = start.subtract(days=2)
        tracker.add_entry(make_entry("monday", monday, monday.add(hours=2)))
        tracker.start_clock()
        clock.advance(minutes=10)

        assert tracker.get_today_total_seconds() == 3600
        assert tracker.get_week_total_seconds() == 3 * 3600
        assert tracker.get_elapsed_seconds() == 600

    def test_send_timesheet(self, tracker, clock, make_entry):
        tracker.update_configuration(timezone="UTC")
        tracker.add_entry(make_entry("a", clock(), clock().add(hours=1)))

        timesheet, path = tracker.send_timesheet(notes="all good")

        assert path.is_file()
        assert timesheet["status"] == "Submitted"
        assert timesheet["submitted_at"] == clock()
        assert [e["id"] for e in timesheet["entries"]] == ["a"]
        stored = [t for t in tracker.list_timesheets() if t["id"] == timesheet["id"]]
        assert stored[0]["notes"] == "all good"
