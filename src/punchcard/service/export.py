# SPDX-License-Identifier: MIT

import csv
import io
from typing import Optional

import pendulum

from punchcard.model.app_configuration import AppConfiguration
from punchcard.model.timesheet import Timesheet
from punchcard.service.entry import (
    get_display_description,
    get_entry_duration_seconds,
    get_total_duration_seconds,
    group_entries_by_day,
)
from punchcard.time import seconds_to_hours_minutes_str

CSV_HEADER = [
    "Date",
    "Start Time",
    "End Time",
    "Duration (hours)",
    "Description",
    "Project",
]


def get_timesheet_total_hours(
    timesheet: Timesheet, now: Optional[pendulum.DateTime] = None
) -> float:
    return get_total_duration_seconds(timesheet["entries"], now) / 3600.0


def format_period_description(
    timesheet: Timesheet, tz: pendulum.Timezone | pendulum.FixedTimezone
) -> str:
    start = timesheet["period_start"].in_tz(tz).format("MMM D, YYYY")
    end = timesheet["period_end"].in_tz(tz).format("MMM D, YYYY")
    return f"{start} - {end}"


def export_timesheet_as_csv(
    timesheet: Timesheet,
    tz: pendulum.Timezone | pendulum.FixedTimezone,
    now: Optional[pendulum.DateTime] = None,
) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    for entry in timesheet["entries"]:
        start = entry["start_time"].in_tz(tz)
        end = entry["end_time"]
        writer.writerow(
            [
                start.format("YYYY-MM-DD"),
                start.format("HH:mm"),
                end.in_tz(tz).format("HH:mm") if end is not None else "In Progress",
                f"{get_entry_duration_seconds(entry, now) / 3600.0:.2f}",
                entry["description"],
                entry["project_name"] or "",
            ]
        )

    writer.writerow([])
    writer.writerow(["Total Hours:", f"{get_timesheet_total_hours(timesheet, now):.2f}"])
    writer.writerow(["Period:", format_period_description(timesheet, tz)])
    return buffer.getvalue()


def generate_entries_summary(
    timesheet: Timesheet,
    tz: pendulum.Timezone | pendulum.FixedTimezone,
    now: Optional[pendulum.DateTime] = None,
) -> str:
    lines: list[str] = []
    for day, day_entries in group_entries_by_day(timesheet["entries"], tz).items():
        lines.append("")
        lines.append(f"{day.format('dddd, MMM D')}:")
        for entry in day_entries:
            duration = seconds_to_hours_minutes_str(
                get_entry_duration_seconds(entry, now)
            )
            description = get_display_description(entry) or "No description"
            lines.append(f"  - {duration}: {description}")
        day_hours = get_total_duration_seconds(day_entries, now) / 3600.0
        lines.append(f"  Total: {day_hours:.1f} hours")
    return "\n".join(lines)


def export_timesheet_as_text(
    timesheet: Timesheet,
    config: AppConfiguration,
    tz: pendulum.Timezone | pendulum.FixedTimezone,
    now: Optional[pendulum.DateTime] = None,
) -> str:
    """Fill the configured template with the timesheet's figures."""
    summary = ""
    if config["include_entries_in_email"]:
        summary = generate_entries_summary(timesheet, tz, now)
    replacements = {
        "{{userName}}": config["user_name"],
        "{{periodStart}}": timesheet["period_start"].in_tz(tz).format("MMM D, YYYY"),
        "{{periodEnd}}": timesheet["period_end"].in_tz(tz).format("MMM D, YYYY"),
        "{{totalHours}}": f"{get_timesheet_total_hours(timesheet, now):.1f} hours",
        "{{entriesSummary}}": summary,
    }
    body = config["email_template"]
    for placeholder, value in replacements.items():
        body = body.replace(placeholder, value)
    return body


def export_timesheet_subject(
    timesheet: Timesheet,
    config: AppConfiguration,
    tz: pendulum.Timezone | pendulum.FixedTimezone,
) -> str:
    subject = config["email_subject"]
    subject = subject.replace("{{userName}}", config["user_name"])
    subject = subject.replace(
        "{{periodStart}}", timesheet["period_start"].in_tz(tz).format("MMM D, YYYY")
    )
    subject = subject.replace(
        "{{periodEnd}}", timesheet["period_end"].in_tz(tz).format("MMM D, YYYY")
    )
    return subject
