# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich import print
from rich.console import Console

from punchcard.initialize import load_tracker
from punchcard.terminal.custom_typer import AliasedTyperGroup
from punchcard.view import entry as entry_report
from punchcard.view.header import header
from punchcard.view.status import status_panel

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


@app.command("start, s")
def start(
    description: Annotated[Optional[str], typer.Argument()] = None,
    project: Annotated[
        Optional[str], typer.Option("--project", "-p", help="project name")
    ] = None,
    tags: Annotated[
        Optional[list[str]],
        typer.Option("--tag", "-t", help="accepts multiple tag options"),
    ] = None,
) -> None:
    """Start the timer."""
    tracker = load_tracker()

    entry = tracker.start_clock(description or "", project, tags)
    if entry is None:
        print("[yellow]A timer is already running[/yellow]")
        entry_report.single_entry_report(
            tracker.storage.root, "running", tracker.current_entry  # type: ignore[arg-type]
        )
        raise typer.Exit(1)

    entry_report.single_entry_report(tracker.storage.root, "started", entry)


@app.command("stop, st")
def stop(
    description: Annotated[
        Optional[str], typer.Option("--description", "-d")
    ] = None,
    project: Annotated[
        Optional[str], typer.Option("--project", "-p", help="project name")
    ] = None,
    tags: Annotated[
        Optional[list[str]],
        typer.Option("--tag", "-t", help="replaces the entry's tags"),
    ] = None,
) -> None:
    """Stop the running timer and keep the entry."""
    tracker = load_tracker()

    entry = tracker.stop_clock(description, project, tags)
    if entry is None:
        print("[yellow]No timer is running[/yellow]")
        raise typer.Exit(1)

    entry_report.single_entry_report(tracker.storage.root, "stopped", entry)


@app.command("cancel, x")
def cancel(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="do not ask")] = False,
) -> None:
    """Discard the running timer without keeping an entry."""
    tracker = load_tracker()

    if not tracker.is_tracking:
        print("[yellow]No timer is running[/yellow]")
        raise typer.Exit(1)
    if not yes:
        typer.confirm("Discard the running timer?", abort=True)

    entry = tracker.cancel_tracking()
    if entry is not None:
        print(f"[bright_black]cancelled {entry['id'][:8]}[/bright_black]")


@app.command("status, ss")
def status() -> None:
    """Show the running timer and today's and this week's totals."""
    tracker = load_tracker()

    header(tracker.storage.root, "status")
    Console().print(status_panel(tracker))
