# SPDX-License-Identifier: MIT

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from punchcard.service.tracker import TimeTracker
from punchcard.time import (
    datetime_to_display_local_datetime_str,
    seconds_to_clock_str,
    seconds_to_hours_minutes_str,
)


def status_panel(tracker: TimeTracker) -> Panel:
    current = tracker.current_entry
    if current is None:
        clock = Text("idle", style="bright_black")
    else:
        clock = Text.assemble(
            (seconds_to_clock_str(tracker.get_elapsed_seconds()), "bold green"),
            "  since ",
            datetime_to_display_local_datetime_str(current["start_time"]),
        )
        if current["description"]:
            clock.append(f"  {current['description']}")

    totals = Text.assemble(
        ("today ", "cyan"),
        seconds_to_hours_minutes_str(tracker.get_today_total_seconds()),
        ("   this week ", "cyan"),
        seconds_to_hours_minutes_str(tracker.get_week_total_seconds()),
    )
    return Panel(Group(clock, totals), title="punchcard", border_style="dark_orange")
