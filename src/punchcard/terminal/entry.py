# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import pendulum
import typer
from rich import print

from punchcard.initialize import load_tracker
from punchcard.service.entry import get_entries_for_day
from punchcard.service.period import get_entries_for_period
from punchcard.template.time_entry import get_time_entry_template
from punchcard.terminal.custom_typer import AliasedTyperGroup
from punchcard.terminal.parse import parse_datetime
from punchcard.time import now_utc, python_to_pendulum_utc_optional
from punchcard.view import entry as entry_report

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)

DATETIME_HELP = "valid inputs: YYYY-MM-DD [HH:mm], HH:mm, now, today, yesterday, or day offset like -1"


@app.command("list, ls")
def list_entries(
    day: Annotated[
        Optional[pendulum.DateTime],
        typer.Option("--day", "-d", parser=parse_datetime, help=DATETIME_HELP),
    ] = None,
    period: Annotated[
        bool, typer.Option("--period", "-p", help="entries of the current period")
    ] = False,
    all: Annotated[bool, typer.Option("--all", "-a", help="every entry")] = False,
) -> None:
    """List time entries, today's by default."""
    tracker = load_tracker()
    entries = tracker.completed_entries
    now = now_utc()

    if all:
        report_name = "all entries"
    elif period:
        period_start, period_end = tracker.get_current_period_bounds()
        entries = get_entries_for_period(entries, period_start, period_end)
        report_name = "current period"
    else:
        reference = python_to_pendulum_utc_optional(day) or now
        entries = get_entries_for_day(entries, reference, tracker.timezone)
        report_name = reference.in_tz(tracker.timezone).format("dddd, MMM D")

    entry_report.entries_report(
        tracker.storage.root, report_name, entries, tracker.current_entry, now
    )


@app.command("add, a", no_args_is_help=True)
def add(
    start: Annotated[
        pendulum.DateTime,
        typer.Option("--start", "-s", parser=parse_datetime, help=DATETIME_HELP),
    ],
    end: Annotated[
        pendulum.DateTime,
        typer.Option("--end", "-e", parser=parse_datetime, help=DATETIME_HELP),
    ],
    description: Annotated[Optional[str], typer.Argument()] = None,
    project: Annotated[
        Optional[str], typer.Option("--project", "-p", help="project name")
    ] = None,
    tags: Annotated[
        Optional[list[str]],
        typer.Option("--tag", "-t", help="accepts multiple tag options"),
    ] = None,
) -> None:
    """Record a finished entry after the fact."""
    tracker = load_tracker()

    entry = get_time_entry_template()
    entry["start_time"] = python_to_pendulum_utc_optional(start) or now_utc()
    entry["end_time"] = python_to_pendulum_utc_optional(end)
    entry["description"] = description or ""
    entry["project_name"] = project
    entry["tags"] = list(dict.fromkeys(tags or []))

    if entry["end_time"] is None or entry["end_time"] < entry["start_time"]:
        raise typer.BadParameter("end must not be before start")

    entry_report.single_entry_report(
        tracker.storage.root, "added", tracker.add_entry(entry)
    )


@app.command("modify, m", no_args_is_help=True)
def modify(
    id: Annotated[str, typer.Argument(help="entry id or a unique prefix of it")],
    description: Annotated[
        Optional[str], typer.Option("--description", "-d")
    ] = None,
    project: Annotated[
        Optional[str], typer.Option("--project", "-p", help="project name")
    ] = None,
    add_tags: Annotated[
        Optional[list[str]],
        typer.Option("--add-tag", "-at", help="accepts multiple tag options"),
    ] = None,
    remove_tag_list: Annotated[
        Optional[list[str]],
        typer.Option("--remove-tag", "-rt", help="accepts multiple tag options"),
    ] = None,
    start: Annotated[
        Optional[pendulum.DateTime],
        typer.Option("--start", "-s", parser=parse_datetime, help=DATETIME_HELP),
    ] = None,
    end: Annotated[
        Optional[pendulum.DateTime],
        typer.Option("--end", "-e", parser=parse_datetime, help=DATETIME_HELP),
    ] = None,
    remove_project: Annotated[
        bool, typer.Option("--remove-project", "-rp")
    ] = False,
    remove_tags: Annotated[bool, typer.Option("--remove-tags", "-rT")] = False,
) -> None:
    """Change an entry, the running one included."""
    tracker = load_tracker()
    entry = tracker.find_entry(id)

    if description is not None:
        entry["description"] = description
    if project is not None:
        entry["project_name"] = project
    if remove_project:
        entry["project_name"] = None

    tags = [] if remove_tags else entry["tags"]
    if add_tags is not None:
        tags = list(dict.fromkeys([*tags, *add_tags]))
    if remove_tag_list is not None:
        tags = [tag for tag in tags if tag not in remove_tag_list]
    entry["tags"] = tags

    if start is not None:
        entry["start_time"] = python_to_pendulum_utc_optional(start)  # type: ignore[typeddict-item]
    if end is not None:
        if entry["end_time"] is None:
            raise typer.BadParameter("stop the running entry instead of setting its end")
        entry["end_time"] = python_to_pendulum_utc_optional(end)

    if entry["end_time"] is not None and entry["end_time"] < entry["start_time"]:
        raise typer.BadParameter("end must not be before start")

    entry_report.single_entry_report(
        tracker.storage.root, "modified", tracker.update_entry(entry)
    )


@app.command("delete, del", no_args_is_help=True)
def delete(
    id: Annotated[str, typer.Argument(help="entry id or a unique prefix of it")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="do not ask")] = False,
) -> None:
    """Delete a completed entry."""
    tracker = load_tracker()
    entry = tracker.find_entry(id)

    if entry["end_time"] is None:
        print("[yellow]The running entry is discarded with `clock cancel`[/yellow]")
        raise typer.Exit(1)
    if not yes:
        typer.confirm(f"Delete entry {entry['id'][:8]}?", abort=True)

    tracker.delete_entry(entry["id"])
    print(f"[bright_black]deleted {entry['id'][:8]}[/bright_black]")
