# SPDX-License-Identifier: MIT

import logging
from typing import Optional

import pendulum

from punchcard.errors import PunchcardError
from punchcard.model.app_configuration import AppConfiguration
from punchcard.model.time_entry import TimeEntry
from punchcard.model.timesheet import Timesheet
from punchcard.repository.timesheet import TimesheetRepository
from punchcard.service.period import (
    get_due_instant,
    get_entries_for_period,
    get_period_archive_key,
    get_period_bounds,
    get_previous_period_bounds,
)
from punchcard.template.timesheet import get_timesheet_template
from punchcard.time import now_utc, resolve_timezone

logger = logging.getLogger(__name__)


def is_period_due(
    period_start: pendulum.DateTime,
    period_end: pendulum.DateTime,
    config: AppConfiguration,
    now: pendulum.DateTime,
) -> bool:
    due = get_due_instant(
        period_start,
        period_end,
        config["notification_days"],
        config["notification_time"],
        resolve_timezone(config["timezone"]),
    )
    return due is not None and now >= due


def build_period_timesheet(
    entries: list[TimeEntry],
    period_start: pendulum.DateTime,
    period_end: pendulum.DateTime,
) -> Timesheet:
    timesheet = get_timesheet_template(period_start, period_end)
    timesheet["entries"] = get_entries_for_period(entries, period_start, period_end)
    return timesheet


def save_due_period_timesheets(
    timesheet_repo: TimesheetRepository,
    entries: list[TimeEntry],
    config: AppConfiguration,
    now: Optional[pendulum.DateTime] = None,
) -> list[str]:
    """
    Back up the current and the previous period once their reminder time
    has passed. The archive name is the same on every device, so whichever
    device gets there first writes it and everyone else skips it.

    Runs opportunistically and never raises; returns the archive keys that
    were written.
    """
    if not timesheet_repo.storage.is_configured:
        return []

    if now is None:
        now = now_utc()
    tz = resolve_timezone(config["timezone"])
    period = config["timesheet_period"]

    current_start, current_end = get_period_bounds(period, now, tz)
    previous_start, previous_end = get_previous_period_bounds(period, current_start)

    written: list[str] = []
    for period_start, period_end in (
        (current_start, current_end),
        (previous_start, previous_end),
    ):
        if not is_period_due(period_start, period_end, config, now):
            continue
        key = get_period_archive_key(period_start, period_end, tz)
        try:
            if timesheet_repo.period_archive_exists(period_start, period_end, tz):
                continue
            timesheet = build_period_timesheet(entries, period_start, period_end)
            if timesheet_repo.save_period_timesheet(timesheet, tz):
                written.append(key)
        except PunchcardError as e:
            logger.warning("could not back up %s: %s", key, e)

    return written
