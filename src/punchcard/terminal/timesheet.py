# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich import print

from punchcard.errors import IOFailure, PunchcardError
from punchcard.initialize import load_tracker
from punchcard.model.timesheet import Timesheet
from punchcard.service.configuration import validate_configuration
from punchcard.service.export import (
    export_timesheet_as_csv,
    export_timesheet_as_text,
    export_timesheet_subject,
)
from punchcard.service.tracker import TimeTracker
from punchcard.terminal.custom_typer import AliasedTyperGroup
from punchcard.view import timesheet as timesheet_report

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


def find_archived_timesheet(tracker: TimeTracker, id_prefix: str) -> Timesheet:
    matches = [
        timesheet
        for timesheet in tracker.list_timesheets()
        if timesheet["id"].startswith(id_prefix)
    ]
    if len(matches) != 1:
        raise PunchcardError(f"No single archived timesheet matches '{id_prefix}'")
    return matches[0]


def get_timesheet(tracker: TimeTracker, id_prefix: Optional[str]) -> Timesheet:
    if id_prefix is None:
        return tracker.generate_timesheet()
    return find_archived_timesheet(tracker, id_prefix)


@app.command("show, s")
def show(
    id: Annotated[
        Optional[str],
        typer.Argument(help="archived timesheet id, the current period if omitted"),
    ] = None,
) -> None:
    """Show the current period's timesheet or an archived one."""
    tracker = load_tracker()
    timesheet_report.timesheet_report(
        tracker.storage.root, get_timesheet(tracker, id), tracker.timezone
    )


@app.command("list, ls")
def list_timesheets() -> None:
    """List archived timesheets, newest period first."""
    tracker = load_tracker()
    timesheet_report.timesheets_report(
        tracker.storage.root, tracker.list_timesheets(), tracker.timezone
    )


@app.command("send")
def send(
    notes: Annotated[Optional[str], typer.Option("--notes", "-n")] = None,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="do not ask")] = False,
) -> None:
    """
    Mark the current period's timesheet as submitted and archive it. Prints
    the subject and message to hand to the approver.
    """
    tracker = load_tracker()
    config = tracker.configuration

    problems = validate_configuration(config, tracker.is_setup_complete)
    if problems:
        for problem in problems:
            print(f"[red]{problem}[/red]")
        raise typer.Exit(1)

    if config["confirm_before_sending"] and not yes:
        typer.confirm(
            f"Submit this period's timesheet to {config['approver_email']}?",
            abort=True,
        )

    timesheet, path = tracker.send_timesheet(notes)
    tz = tracker.timezone

    print(f"[green]saved {path.name}[/green]")
    print()
    print(f"To: {config['approver_email']}")
    print(f"Subject: {export_timesheet_subject(timesheet, config, tz)}")
    print()
    typer.echo(export_timesheet_as_text(timesheet, config, tz))


@app.command("export, e")
def export(
    id: Annotated[
        Optional[str],
        typer.Argument(help="archived timesheet id, the current period if omitted"),
    ] = None,
    format: Annotated[str, typer.Option("--format", "-f", help="csv, text")] = "csv",
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="file to write, stdout if omitted"),
    ] = None,
) -> None:
    """Export a timesheet as CSV or as the configured message text."""
    if format not in ("csv", "text"):
        typer.echo(f"Invalid format: {format}. Valid options: csv, text")
        raise typer.Exit(1)

    tracker = load_tracker()
    timesheet = get_timesheet(tracker, id)

    if format == "csv":
        content = export_timesheet_as_csv(timesheet, tracker.timezone)
    else:
        content = export_timesheet_as_text(
            timesheet, tracker.configuration, tracker.timezone
        )

    if output is None:
        typer.echo(content, nl=False)
        return

    try:
        output.expanduser().write_text(content, encoding="utf-8")
    except OSError as e:
        raise IOFailure(f"Could not write {output}: {e}", e) from e
    print(f"[green]exported to {output}[/green]")


@app.command("backup, b")
def backup() -> None:
    """Archive the current and previous period if their reminder has passed."""
    tracker = load_tracker()
    written = tracker.run_due_backup()
    if not written:
        print("[bright_black]nothing to back up[/bright_black]")
    for key in written:
        print(f"[green]archived {key}[/green]")
