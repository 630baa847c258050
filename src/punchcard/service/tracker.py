# SPDX-License-Identifier: MIT

import logging
import threading
from copy import deepcopy
from pathlib import Path
from typing import Callable, Optional

import pendulum

from punchcard import configuration
from punchcard.errors import EntryNotFound, PunchcardError
from punchcard.model.app_configuration import AppConfiguration
from punchcard.model.time_entry import ReconciledEntries, TimeEntry
from punchcard.model.timesheet import Timesheet, TimesheetPeriod
from punchcard.repository.configuration import ConfigurationRepository
from punchcard.repository.entry import EntryRepository
from punchcard.repository.storage import StorageFolder
from punchcard.repository.timesheet import TimesheetRepository
from punchcard.service.backup import build_period_timesheet, save_due_period_timesheets
from punchcard.service.entry import (
    get_entries_for_day,
    get_entry_duration_seconds,
    get_total_duration_seconds,
    sort_entries_newest_first,
)
from punchcard.service.period import get_entries_for_period, get_period_bounds
from punchcard.service.poller import ChangePoller
from punchcard.service.reconcile import (
    flatten_reconciled_entries,
    get_unsaved_entries,
    has_external_changes,
    merge_local_entries,
    reconcile_entries,
)
from punchcard.template.app_configuration import get_app_configuration_template
from punchcard.template.time_entry import get_time_entry_template
from punchcard.time import now_utc, resolve_timezone

logger = logging.getLogger(__name__)

TrackerListener = Callable[["TimeTracker"], None]


class TimeTracker:
    """
    In-memory view of the shared entry snapshot: at most one running entry
    plus the completed ones, newest first.

    The snapshot on disk is the source of truth. Local changes are written
    through immediately and in the order they are made; a failed write
    leaves the in-memory state untouched. Changes from other devices come in
    through `apply_snapshot`, either from `reload()` or from the poller
    while the tracker is active.
    """

    def __init__(
        self,
        storage: StorageFolder,
        now: Callable[[], pendulum.DateTime] = now_utc,
        poll_interval_seconds: float = configuration.DEFAULT_POLL_INTERVAL_SECONDS,
    ) -> None:
        self.storage = storage
        self.entry_repo = EntryRepository(storage)
        self.timesheet_repo = TimesheetRepository(storage)
        self.configuration_repo = ConfigurationRepository(storage)
        self._now = now
        self._lock = threading.RLock()
        self._config: AppConfiguration = get_app_configuration_template()
        self._current: Optional[TimeEntry] = None
        self._completed: list[TimeEntry] = []
        # Closed here by reconciliation but not in the file yet
        self._unsaved: list[TimeEntry] = []
        self._listeners: list[TrackerListener] = []
        # Bumped on every local write; a poll that read the file before a
        # local write must not overwrite what that write produced
        self._write_generation = 0
        self._polled_generation = 0
        self.poller = ChangePoller(
            self._read_polled_snapshot,
            self._apply_polled_snapshot,
            poll_interval_seconds,
        )

    # State

    @property
    def configuration(self) -> AppConfiguration:
        with self._lock:
            return deepcopy(self._config)

    @property
    def current_entry(self) -> Optional[TimeEntry]:
        with self._lock:
            return deepcopy(self._current)

    @property
    def completed_entries(self) -> list[TimeEntry]:
        with self._lock:
            return deepcopy(self._completed)

    @property
    def is_tracking(self) -> bool:
        return self._current is not None

    @property
    def is_setup_complete(self) -> bool:
        return self.storage.is_configured

    @property
    def timezone(self) -> pendulum.Timezone | pendulum.FixedTimezone:
        return resolve_timezone(self._config["timezone"])

    def add_listener(self, listener: TrackerListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: TrackerListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def __notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # Loading

    def setup_storage(self, path: Path) -> None:
        self.storage.set_root(path)
        self.configuration_repo.ensure_config()
        self.load()

    def load(self) -> None:
        """
        Read configuration and entries from the storage folder and rebuild
        the in-memory state, then back up any period that came due.
        Failures surface to the caller.
        """
        if not self.storage.is_configured:
            return

        config = self.configuration_repo.get_config()
        entries = self.entry_repo.read()
        with self._lock:
            self._config = config
            self.__replace_state(reconcile_entries(entries), entries)
        self.__notify()
        self.run_due_backup()

    def reload(self) -> None:
        self.load()

    def apply_snapshot(self, snapshot: list[TimeEntry], force: bool = False) -> bool:
        """
        Adopt a snapshot read from storage if it differs from what is in
        memory. Never writes. Returns whether the state was replaced.
        """
        with self._lock:
            if not force and not has_external_changes(
                self._current, self._completed, snapshot, self._unsaved
            ):
                return False
            local_entries = [self._current] if self._current is not None else []
            merged = merge_local_entries(snapshot, [*local_entries, *self._unsaved])
            self.__replace_state(reconcile_entries(merged), snapshot)
        logger.info("adopted changes from the shared entry snapshot")
        self.__notify()
        return True

    def __replace_state(
        self, reconciled: ReconciledEntries, snapshot: list[TimeEntry]
    ) -> None:
        self._current = reconciled["current"]
        self._completed = reconciled["completed"]
        self._unsaved = get_unsaved_entries(reconciled, snapshot)

    def _read_polled_snapshot(self) -> list[TimeEntry]:
        self._polled_generation = self._write_generation
        return self.entry_repo.read()

    def _apply_polled_snapshot(self, snapshot: list[TimeEntry]) -> bool:
        with self._lock:
            if self._polled_generation != self._write_generation:
                logger.debug("discarding a poll that raced a local write")
                return False
            return self.apply_snapshot(snapshot)

    # Lifecycle

    def activate(self) -> None:
        """
        The application came to the foreground: pick up whatever changed
        while it was away, back up due periods and start polling.
        """
        if self.storage.is_configured:
            try:
                self.apply_snapshot(self.entry_repo.read())
            except PunchcardError as e:
                logger.warning("could not refresh entries on activation: %s", e)
            self.run_due_backup()
        self.poller.start()

    def deactivate(self) -> None:
        self.poller.stop()

    def run_due_backup(self) -> list[str]:
        with self._lock:
            entries = deepcopy(self._completed)
            config = deepcopy(self._config)
        return save_due_period_timesheets(
            self.timesheet_repo, entries, config, self._now()
        )

    # Mutations

    def __persist(
        self, current: Optional[TimeEntry], completed: list[TimeEntry]
    ) -> None:
        self.entry_repo.write(
            flatten_reconciled_entries({"current": current, "completed": completed})
        )
        self._write_generation += 1
        self._current = current
        self._completed = completed
        self._unsaved = []

    def start_clock(
        self,
        description: str = "",
        project_name: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> Optional[TimeEntry]:
        """Start a timer. Does nothing and returns None if one is running."""
        with self._lock:
            if self._current is not None:
                return None
            entry = get_time_entry_template()
            entry["start_time"] = self._now()
            entry["description"] = description
            entry["project_name"] = project_name
            entry["tags"] = list(dict.fromkeys(tags or []))
            self.__persist(entry, self._completed)
        logger.info("started timer %s", entry["id"])
        self.__notify()
        return deepcopy(entry)

    def stop_clock(
        self,
        description: Optional[str] = None,
        project_name: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> Optional[TimeEntry]:
        """Stop the running timer. Does nothing and returns None if idle."""
        with self._lock:
            if self._current is None:
                return None
            entry = deepcopy(self._current)
            entry["end_time"] = self._now()
            if description is not None:
                entry["description"] = description
            if project_name is not None:
                entry["project_name"] = project_name
            if tags is not None:
                entry["tags"] = list(dict.fromkeys(tags))
            self.__persist(None, sort_entries_newest_first([*self._completed, entry]))
        logger.info("stopped timer %s", entry["id"])
        self.__notify()
        return deepcopy(entry)

    def cancel_tracking(self) -> Optional[TimeEntry]:
        with self._lock:
            if self._current is None:
                return None
            cancelled = self._current
            self.__persist(None, self._completed)
        logger.info("cancelled timer %s", cancelled["id"])
        self.__notify()
        return deepcopy(cancelled)

    def add_entry(self, entry: TimeEntry) -> TimeEntry:
        if entry["end_time"] is None:
            raise ValueError("Use start_clock to begin a running entry")
        with self._lock:
            self.__persist(
                self._current,
                sort_entries_newest_first([*self._completed, deepcopy(entry)]),
            )
        self.__notify()
        return deepcopy(entry)

    def update_entry(self, entry: TimeEntry) -> TimeEntry:
        with self._lock:
            if self._current is not None and self._current["id"] == entry["id"]:
                if entry["end_time"] is not None:
                    raise ValueError("Stop the running entry instead of setting its end")
                self.__persist(deepcopy(entry), self._completed)
            else:
                if entry["end_time"] is None:
                    raise ValueError("A completed entry needs an end time")
                if not any(e["id"] == entry["id"] for e in self._completed):
                    raise EntryNotFound(entry["id"])
                updated = [
                    deepcopy(entry) if e["id"] == entry["id"] else e
                    for e in self._completed
                ]
                self.__persist(self._current, sort_entries_newest_first(updated))
        self.__notify()
        return deepcopy(entry)

    def delete_entry(self, id: str) -> TimeEntry:
        with self._lock:
            deleted = next((e for e in self._completed if e["id"] == id), None)
            if deleted is None:
                raise EntryNotFound(id)
            self.__persist(
                self._current, [e for e in self._completed if e["id"] != id]
            )
        logger.info("deleted entry %s", id)
        self.__notify()
        return deepcopy(deleted)

    def get_entry(self, id: str) -> TimeEntry:
        with self._lock:
            if self._current is not None and self._current["id"] == id:
                return deepcopy(self._current)
            for entry in self._completed:
                if entry["id"] == id:
                    return deepcopy(entry)
        raise EntryNotFound(id)

    def find_entry(self, id_prefix: str) -> TimeEntry:
        """Look an entry up by its id or a unique prefix of it."""
        with self._lock:
            candidates = list(self._completed)
            if self._current is not None:
                candidates.insert(0, self._current)
            matches = [e for e in candidates if e["id"].startswith(id_prefix)]
        if len(matches) != 1:
            raise EntryNotFound(id_prefix)
        return deepcopy(matches[0])

    # Configuration

    def update_configuration(self, **changes: object) -> AppConfiguration:
        config = self.configuration_repo.update_config(**changes)  # type: ignore[arg-type]
        with self._lock:
            self._config = config
        self.__notify()
        return deepcopy(config)

    # Timesheets and totals

    def get_current_period_bounds(
        self, now: Optional[pendulum.DateTime] = None
    ) -> tuple[pendulum.DateTime, pendulum.DateTime]:
        period: TimesheetPeriod = self._config["timesheet_period"]
        return get_period_bounds(period, now or self._now(), self.timezone)

    def generate_timesheet(self) -> Timesheet:
        period_start, period_end = self.get_current_period_bounds()
        with self._lock:
            entries = deepcopy(self._completed)
        return build_period_timesheet(entries, period_start, period_end)

    def send_timesheet(self, notes: Optional[str] = None) -> tuple[Timesheet, Path]:
        """
        Store the current period's timesheet as submitted. Delivering it to
        the approver happens outside of punchcard.
        """
        timesheet = self.generate_timesheet()
        timesheet["status"] = "Submitted"
        timesheet["submitted_at"] = self._now()
        timesheet["notes"] = notes
        path = self.timesheet_repo.save_timesheet(timesheet)
        return timesheet, path

    def list_timesheets(self) -> list[Timesheet]:
        return self.timesheet_repo.get_all_timesheets()

    def get_today_entries(self) -> list[TimeEntry]:
        with self._lock:
            return get_entries_for_day(self._completed, self._now(), self.timezone)

    def get_today_total_seconds(self) -> float:
        return get_total_duration_seconds(self.get_today_entries(), self._now())

    def get_week_total_seconds(self) -> float:
        now = self._now()
        week_start, week_end = get_period_bounds("Weekly", now, self.timezone)
        with self._lock:
            entries = get_entries_for_period(self._completed, week_start, week_end)
        return get_total_duration_seconds(entries, now)

    def get_elapsed_seconds(self) -> float:
        with self._lock:
            if self._current is None:
                return 0.0
            return get_entry_duration_seconds(self._current, self._now())
