# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Optional

import pendulum
from rich import box
from rich.console import Console
from rich.table import Table

from punchcard.model.timesheet import Timesheet
from punchcard.service.entry import get_display_description, get_entry_duration_seconds
from punchcard.service.export import format_period_description, get_timesheet_total_hours
from punchcard.time import (
    datetime_to_display_local_date_str,
    datetime_to_display_local_datetime_str_optional,
    seconds_to_hours_minutes_str,
)
from punchcard.view.header import header

STATUS_STYLES = {
    "Draft": "bright_black",
    "Submitted": "yellow",
    "Approved": "green",
    "Rejected": "red",
}


def timesheet_report(
    storage_folder: Optional[Path],
    timesheet: Timesheet,
    tz: pendulum.Timezone | pendulum.FixedTimezone,
    now: Optional[pendulum.DateTime] = None,
) -> None:
    header(storage_folder, f"timesheet {format_period_description(timesheet, tz)}")

    table = Table(box=box.SIMPLE)
    table.add_column("day")
    table.add_column("duration", justify="right")
    table.add_column("description")
    table.add_column("project")

    for entry in sorted(timesheet["entries"], key=lambda e: e["start_time"]):
        table.add_row(
            datetime_to_display_local_date_str(entry["start_time"]),
            seconds_to_hours_minutes_str(get_entry_duration_seconds(entry, now)),
            get_display_description(entry) or "",
            entry["project_name"] or "",
        )

    table.add_section()
    table.add_row(
        "total", f"{get_timesheet_total_hours(timesheet, now):.1f} hours", "", ""
    )

    console = Console()
    console.print(table)
    console.print(
        f" status: [{STATUS_STYLES[timesheet['status']]}]{timesheet['status']}[/]"
    )


def timesheets_report(
    storage_folder: Optional[Path],
    timesheets: list[Timesheet],
    tz: pendulum.Timezone | pendulum.FixedTimezone,
) -> None:
    header(storage_folder, "archived timesheets")

    table = Table(box=box.SIMPLE)
    for column in ["id", "period", "entries", "hours", "status", "submitted"]:
        table.add_column(column)

    for timesheet in timesheets:
        table.add_row(
            timesheet["id"][:8],
            format_period_description(timesheet, tz),
            str(len(timesheet["entries"])),
            f"{get_timesheet_total_hours(timesheet):.1f}",
            f"[{STATUS_STYLES[timesheet['status']]}]{timesheet['status']}[/]",
            datetime_to_display_local_datetime_str_optional(timesheet["submitted_at"])
            or "",
        )

    Console().print(table)
