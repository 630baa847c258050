# SPDX-License-Identifier: MIT

import time
from typing import Annotated

import typer
from rich.live import Live

from punchcard.initialize import load_tracker
from punchcard.service.tracker import TimeTracker
from punchcard.view.header import header
from punchcard.view.status import status_panel


def watch(
    refresh_seconds: Annotated[
        float,
        typer.Option("--refresh", "-r", min=0.1, help="Seconds between redraws"),
    ] = 1.0,
) -> None:
    """
    Keep a live status on screen while picking up changes from other
    devices. Stop with Ctrl-C.
    """
    tracker = load_tracker()
    if tracker.configuration["auto_start_on_launch"] and not tracker.is_tracking:
        tracker.start_clock()

    header(tracker.storage.root, "watching")

    with Live(status_panel(tracker), auto_refresh=False) as live:

        def redraw(changed: TimeTracker) -> None:
            live.update(status_panel(changed), refresh=True)

        tracker.add_listener(redraw)
        tracker.activate()
        try:
            while True:
                time.sleep(refresh_seconds)
                live.update(status_panel(tracker), refresh=True)
        except KeyboardInterrupt:
            pass
        finally:
            tracker.deactivate()
            tracker.remove_listener(redraw)
