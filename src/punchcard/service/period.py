# SPDX-License-Identifier: MIT

import re
from typing import Optional

import pendulum

from punchcard.model.time_entry import TimeEntry
from punchcard.model.timesheet import TimesheetPeriod

WEEKDAY_NAMES = [
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
]

PERIOD_ARCHIVE_PREFIX = "period-"


def parse_notification_time(value: str) -> Optional[tuple[int, int]]:
    """
    Parse `HH:mm` into (hour, minute). Returns None when malformed or out of
    range.
    """
    match = re.match(r"^(\d{1,2}):(\d{2})$", value.strip())
    if match is None:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return (hour, minute)


def get_period_bounds(
    period: TimesheetPeriod,
    reference: pendulum.DateTime,
    tz: pendulum.Timezone | pendulum.FixedTimezone,
) -> tuple[pendulum.DateTime, pendulum.DateTime]:
    """
    Get the first and last day (each at midnight, in `tz`) of the period
    containing `reference`. Weeks start on Monday; bi-weekly periods start
    on the Monday of the reference week.
    """
    local_time = reference.in_tz(tz)

    if period == "Monthly":
        start = local_time.start_of("month")
        end = start.end_of("month").start_of("day")
    elif period == "Bi-Weekly":
        start = local_time.start_of("week")
        end = start.add(days=13)
    else:
        start = local_time.start_of("week")
        end = start.add(days=6)

    return start, end


def get_previous_period_bounds(
    period: TimesheetPeriod,
    current_start: pendulum.DateTime,
) -> tuple[pendulum.DateTime, pendulum.DateTime]:
    end = current_start.subtract(days=1)
    if period == "Monthly":
        start = current_start.subtract(months=1)
    elif period == "Bi-Weekly":
        start = current_start.subtract(days=14)
    else:
        start = current_start.subtract(days=7)
    return start, end


def is_in_period(
    instant: pendulum.DateTime,
    period_start: pendulum.DateTime,
    period_end: pendulum.DateTime,
) -> bool:
    """The last day of a period counts in full."""
    return period_start <= instant < period_end.start_of("day").add(days=1)


def get_entries_for_period(
    entries: list[TimeEntry],
    period_start: pendulum.DateTime,
    period_end: pendulum.DateTime,
) -> list[TimeEntry]:
    return [
        entry
        for entry in entries
        if is_in_period(entry["start_time"], period_start, period_end)
    ]


def get_due_instant(
    period_start: pendulum.DateTime,
    period_end: pendulum.DateTime,
    notification_days: list[str],
    notification_time: str,
    tz: pendulum.Timezone | pendulum.FixedTimezone,
) -> Optional[pendulum.DateTime]:
    """
    The latest reminder (configured weekday at the configured time) that
    falls within the period, or None if no reminder is configured or none
    lands inside the period.
    """
    time_components = parse_notification_time(notification_time)
    if time_components is None:
        return None
    days = {day.lower() for day in notification_days}
    if not days:
        return None

    hour, minute = time_components
    first_day = period_start.in_tz(tz).start_of("day")
    day = period_end.in_tz(tz).start_of("day")
    while day >= first_day:
        if WEEKDAY_NAMES[day.weekday()] in days:
            return day.at(hour, minute)
        day = day.subtract(days=1)
    return None


def get_period_archive_key(
    period_start: pendulum.DateTime,
    period_end: pendulum.DateTime,
    tz: pendulum.Timezone | pendulum.FixedTimezone,
) -> str:
    """
    Calendar-day name of a period, identical on every device that computes
    the same period in the same timezone.
    """
    start_day = period_start.in_tz(tz).format("YYYYMMDD")
    end_day = period_end.in_tz(tz).format("YYYYMMDD")
    return f"{PERIOD_ARCHIVE_PREFIX}{start_day}_{end_day}"
