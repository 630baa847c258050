# SPDX-License-Identifier: MIT

from typing import Annotated

import typer
from rich.console import Console

from punchcard.errors import PunchcardError
from punchcard.initialize import initialize
from punchcard.terminal import clock, configuration, entry, timesheet
from punchcard.terminal.custom_typer import OrderedTyperGroup
from punchcard.terminal.watch import watch
from punchcard.view import state as view_state

app = typer.Typer(
    cls=OrderedTyperGroup,
    help="punchcard - Time tracking synced through a shared folder",
    no_args_is_help=True,
)
app.add_typer(clock.app, name="clock, c")
app.add_typer(entry.app, name="entry, e")
app.add_typer(timesheet.app, name="timesheet, ts")
app.add_typer(configuration.app, name="config, cfg")
app.command(name="watch, w")(watch)


@app.callback()
def main_callback(
    no_header: Annotated[
        bool,
        typer.Option(
            "--no-header",
            "-nh",
            help="Suppress header output in reports",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug output to stderr"),
    ] = False,
) -> None:
    """
    punchcard - Time tracking synced through a shared folder

    Global options that apply to all commands.
    """
    if no_header:
        view_state.set_show_header(False)
    initialize(log_level="DEBUG" if verbose else None)


def run() -> None:
    try:
        app()
    except PunchcardError as e:
        Console(stderr=True).print(f"[red]{e}[/red]")
        raise SystemExit(1)
