# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich import print
from rich.console import Console
from rich.table import Table

from punchcard import state as app_state
from punchcard.errors import IOFailure
from punchcard.initialize import load_tracker
from punchcard.repository.settings import SETTINGS_REPO
from punchcard.repository.storage import is_valid_storage_folder
from punchcard.service.configuration import is_valid_email, validate_configuration
from punchcard.terminal.custom_typer import AliasedTyperGroup
from punchcard.terminal.parse import (
    parse_notification_time_option,
    parse_period_option,
    parse_timezone_option,
    parse_weekday_option,
)

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


def enabled_str(value: bool) -> str:
    return "✓ Enabled" if value else "✗ Disabled"


@app.command("view, v")
def view() -> None:
    """Display the shared configuration and this device's settings."""
    tracker = load_tracker()
    config = tracker.configuration
    settings = SETTINGS_REPO.get_settings()

    console = Console()
    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("timezone", config["timezone"])
    table.add_row("notification_time", config["notification_time"])
    table.add_row("notification_days", ", ".join(config["notification_days"]))
    table.add_row("timesheet_period", config["timesheet_period"])
    table.add_row("user_name", config["user_name"] or "None")
    table.add_row("approver_email", config["approver_email"] or "None")
    table.add_row("email_subject", config["email_subject"])
    table.add_row(
        "include_entries_in_email", enabled_str(config["include_entries_in_email"])
    )
    table.add_row("auto_start_on_launch", enabled_str(config["auto_start_on_launch"]))
    table.add_row(
        "confirm_before_sending", enabled_str(config["confirm_before_sending"])
    )
    console.print(table)

    console.print("\n[bold]This Device[/bold]")
    device_table = Table()
    device_table.add_column("Setting", style="cyan")
    device_table.add_column("Value", style="magenta")
    device_table.add_row("storage_folder", settings["storage_folder"] or "None")
    device_table.add_row(
        "poll_interval_seconds", str(settings["poll_interval_seconds"])
    )
    device_table.add_row("log_level", settings["log_level"])
    device_table.add_row("settings_file", str(SETTINGS_REPO.path))
    console.print(device_table)

    problems = validate_configuration(config, tracker.is_setup_complete)
    if problems:
        console.print()
        for problem in problems:
            console.print(f"[yellow]{problem}[/yellow]")


@app.command("set, s")
def set(
    timezone: Annotated[
        Optional[str],
        typer.Option(
            "--timezone",
            parser=parse_timezone_option,
            help="IANA timezone periods and reminders are computed in",
        ),
    ] = None,
    notification_time: Annotated[
        Optional[str],
        typer.Option(
            "--notification-time",
            parser=parse_notification_time_option,
            help="Reminder time as HH:mm",
        ),
    ] = None,
    notification_days: Annotated[
        Optional[list[str]],
        typer.Option(
            "--notification-day",
            help="Reminder weekday (accepts multiple, replaces the current days)",
        ),
    ] = None,
    timesheet_period: Annotated[
        Optional[str],
        typer.Option(
            "--period",
            parser=parse_period_option,
            help="Weekly, Bi-Weekly, Monthly",
        ),
    ] = None,
    user_name: Annotated[
        Optional[str], typer.Option("--user-name", help="Name used in timesheets")
    ] = None,
    approver_email: Annotated[
        Optional[str],
        typer.Option("--approver-email", help="Who timesheets are sent to"),
    ] = None,
    email_subject: Annotated[
        Optional[str],
        typer.Option(
            "--email-subject",
            help="Subject template, placeholders: {{userName}} {{periodStart}} {{periodEnd}}",
        ),
    ] = None,
    email_template_file: Annotated[
        Optional[Path],
        typer.Option(
            "--email-template-file",
            help="File holding the message template",
        ),
    ] = None,
    include_entries_in_email: Annotated[
        Optional[bool],
        typer.Option(
            "--include-entries/--no-include-entries",
            help="Include the per-day entry summary in the message",
        ),
    ] = None,
    auto_start_on_launch: Annotated[
        Optional[bool],
        typer.Option(
            "--auto-start/--no-auto-start",
            help="Start the timer when `watch` launches",
        ),
    ] = None,
    confirm_before_sending: Annotated[
        Optional[bool],
        typer.Option(
            "--confirm-before-sending/--no-confirm-before-sending",
            help="Ask before submitting a timesheet",
        ),
    ] = None,
) -> None:
    """Update the configuration shared by every device."""
    tracker = load_tracker()

    if approver_email is not None and not is_valid_email(approver_email):
        raise typer.BadParameter(f"Not a valid email address: '{approver_email}'")

    if notification_days is not None:
        notification_days = [parse_weekday_option(day) for day in notification_days]

    email_template = None
    if email_template_file is not None:
        try:
            email_template = email_template_file.expanduser().read_text(
                encoding="utf-8"
            )
        except OSError as e:
            raise IOFailure(f"Could not read {email_template_file}: {e}", e) from e

    tracker.update_configuration(
        timezone=timezone,
        notification_time=notification_time,
        notification_days=notification_days,
        timesheet_period=timesheet_period,
        user_name=user_name,
        approver_email=approver_email,
        email_subject=email_subject,
        email_template=email_template,
        include_entries_in_email=include_entries_in_email,
        auto_start_on_launch=auto_start_on_launch,
        confirm_before_sending=confirm_before_sending,
    )
    view()


@app.command("storage, st")
def storage(
    folder: Annotated[
        Optional[Path],
        typer.Argument(help="shared folder, e.g. inside a synced drive"),
    ] = None,
    remove: Annotated[
        bool, typer.Option("--remove", help="Forget the storage folder")
    ] = False,
) -> None:
    """Choose the shared folder this device syncs through."""
    tracker = app_state.get_tracker()

    if remove:
        SETTINGS_REPO.update_settings(remove_storage_folder=True)
        tracker.storage.clear_root()
        print("[bright_black]storage folder removed[/bright_black]")
        return

    if folder is None:
        current = SETTINGS_REPO.get_settings()["storage_folder"]
        print(current if current is not None else "[red]no storage folder[/red]")
        return

    folder = folder.expanduser().resolve()
    if not is_valid_storage_folder(folder):
        print(f"[red]Storage folder is not writable: {folder}[/red]")
        raise typer.Exit(1)

    tracker.setup_storage(folder)
    SETTINGS_REPO.update_settings(storage_folder=str(folder))
    print(f"[green]using {folder}[/green]")


@app.command("device, d")
def device(
    poll_interval_seconds: Annotated[
        Optional[float],
        typer.Option(
            "--poll-interval",
            min=0.05,
            help="Seconds between re-reads of the shared entries while watching",
        ),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="DEBUG, INFO, WARNING, ERROR"),
    ] = None,
) -> None:
    """Update the settings that belong to this device only."""
    if log_level is not None and log_level.upper() not in (
        "DEBUG",
        "INFO",
        "WARNING",
        "ERROR",
    ):
        typer.echo(
            f"Invalid log level: {log_level}. Valid options: DEBUG, INFO, WARNING, ERROR"
        )
        raise typer.Exit(1)

    SETTINGS_REPO.update_settings(
        poll_interval_seconds=poll_interval_seconds, log_level=log_level
    )
    settings = SETTINGS_REPO.get_settings()
    print(f"settings file: {SETTINGS_REPO.path}")
    print(f"poll_interval_seconds: {settings['poll_interval_seconds']}")
    print(f"log_level: {settings['log_level']}")
