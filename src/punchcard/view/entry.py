# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Optional

import pendulum
from rich import box
from rich.console import Console
from rich.table import Table

from punchcard.model.time_entry import TimeEntry
from punchcard.service.entry import get_entry_duration_seconds, get_total_duration_seconds
from punchcard.time import (
    datetime_to_display_local_datetime_str,
    datetime_to_display_local_datetime_str_optional,
    seconds_to_hours_minutes_str,
)
from punchcard.view.header import header


def format_tags(tags: list[str]) -> str:
    return " ".join(f"#{tag}" for tag in tags)


def entries_report(
    storage_folder: Optional[Path],
    report_name: str,
    entries: list[TimeEntry],
    current: Optional[TimeEntry] = None,
    now: Optional[pendulum.DateTime] = None,
) -> None:
    header(storage_folder, report_name)

    table = Table(box=box.SIMPLE)
    for column in ["id", "start", "end", "duration", "description", "project", "tags"]:
        table.add_column(column)

    rows = list(entries)
    if current is not None:
        rows.insert(0, current)

    for entry in rows:
        is_running = entry["end_time"] is None
        table.add_row(
            entry["id"][:8],
            datetime_to_display_local_datetime_str(entry["start_time"]),
            datetime_to_display_local_datetime_str_optional(entry["end_time"])
            or "running",
            seconds_to_hours_minutes_str(get_entry_duration_seconds(entry, now)),
            entry["description"],
            entry["project_name"] or "",
            format_tags(entry["tags"]),
            style="bold green" if is_running else None,
        )

    total = get_total_duration_seconds(entries, now)
    table.add_section()
    table.add_row("", "", "total", seconds_to_hours_minutes_str(total), "", "", "")

    Console().print(table)


def single_entry_report(
    storage_folder: Optional[Path],
    report_name: str,
    entry: TimeEntry,
    now: Optional[pendulum.DateTime] = None,
) -> None:
    header(storage_folder, report_name)

    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("field", style="cyan")
    table.add_column("value")
    table.add_row("id", entry["id"])
    table.add_row("start", datetime_to_display_local_datetime_str(entry["start_time"]))
    table.add_row(
        "end",
        datetime_to_display_local_datetime_str_optional(entry["end_time"]) or "running",
    )
    table.add_row(
        "duration", seconds_to_hours_minutes_str(get_entry_duration_seconds(entry, now))
    )
    table.add_row("description", entry["description"])
    table.add_row("project", entry["project_name"] or "")
    table.add_row("tags", format_tags(entry["tags"]))

    Console().print(table)
