# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum

from punchcard.model.time_entry import TimeEntry
from punchcard.time import clamp_seconds, now_utc


def is_in_progress(entry: TimeEntry) -> bool:
    return entry["end_time"] is None


def get_entry_duration_seconds(
    entry: TimeEntry, now: Optional[pendulum.DateTime] = None
) -> float:
    """
    Seconds between start and end (or now, while running). Entries whose end
    precedes their start count as zero.
    """
    end = entry["end_time"]
    if end is None:
        end = now if now is not None else now_utc()
    return clamp_seconds((end - entry["start_time"]).total_seconds())


def get_total_duration_seconds(
    entries: list[TimeEntry], now: Optional[pendulum.DateTime] = None
) -> float:
    if now is None:
        now = now_utc()
    return sum(get_entry_duration_seconds(entry, now) for entry in entries)


def get_display_description(entry: TimeEntry) -> Optional[str]:
    if entry["description"]:
        return entry["description"]
    if entry["project_name"]:
        return entry["project_name"]
    return None


def sort_entries_newest_first(entries: list[TimeEntry]) -> list[TimeEntry]:
    return sorted(
        entries, key=lambda entry: (entry["start_time"], entry["id"]), reverse=True
    )


def get_entries_for_day(
    entries: list[TimeEntry],
    day: pendulum.DateTime,
    tz: pendulum.Timezone | pendulum.FixedTimezone,
) -> list[TimeEntry]:
    start = day.in_tz(tz).start_of("day")
    end = start.add(days=1)
    return [entry for entry in entries if start <= entry["start_time"] < end]


def group_entries_by_day(
    entries: list[TimeEntry],
    tz: pendulum.Timezone | pendulum.FixedTimezone,
) -> dict[pendulum.Date, list[TimeEntry]]:
    """Group entries by local start day, oldest day first."""
    grouped: dict[pendulum.Date, list[TimeEntry]] = {}
    for entry in sorted(entries, key=lambda entry: entry["start_time"]):
        day = entry["start_time"].in_tz(tz).date()
        grouped.setdefault(day, []).append(entry)
    return grouped
