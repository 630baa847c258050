# SPDX-License-Identifier: MIT

import re
from typing import Optional, get_args

import pendulum
import typer

from punchcard.model.timesheet import TimesheetPeriod
from punchcard.service.period import WEEKDAY_NAMES, parse_notification_time


def parse_datetime(datetime_param: Optional[str | int]) -> Optional[pendulum.DateTime]:
    """
    Accepts `YYYY-MM-DD[ HH:mm]`, `(H)H:mm` (today), `now`, `today`,
    `yesterday` or a day offset like `-1`. Local time, returned in UTC.
    """
    if datetime_param is None:
        return None

    datetime = str(datetime_param).strip()

    if re.match(r"^\d{4}-\d{2}-\d{2}", datetime):
        try:
            parsed = pendulum.parse(datetime, tz="local")
        except ValueError as e:
            raise typer.BadParameter(f"Invalid date: {e}")
        if not isinstance(parsed, pendulum.DateTime):
            raise typer.BadParameter(f"Invalid date: {datetime}")
        return parsed.in_tz("UTC")

    time_match = re.match(r"^(\d{1,2}):(\d{2})$", datetime)
    if time_match:
        hour = int(time_match.group(1))
        minute = int(time_match.group(2))
        if hour > 23:
            raise typer.BadParameter(f"Hour must be between 0 and 23, got {hour}")
        if minute > 59:
            raise typer.BadParameter(f"Minute must be between 0 and 59, got {minute}")
        return (
            pendulum.today("local")
            .set(hour=hour, minute=minute, second=0, microsecond=0)
            .in_tz("UTC")
        )

    if re.match(r"^-?\d+$", datetime):
        return pendulum.today("local").add(days=int(datetime)).in_tz("UTC")

    if datetime in ("now", "n"):
        return pendulum.now("UTC")
    if datetime in ("today", "t"):
        return pendulum.today("local").in_tz("UTC")
    if datetime in ("yesterday", "y"):
        return pendulum.yesterday("local").in_tz("UTC")
    raise typer.BadParameter("Incorrect datetime format")


def parse_notification_time_option(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if parse_notification_time(value) is None:
        raise typer.BadParameter(
            f"Time must be in HH:mm format (e.g., 8:00 or 17:30), got '{value}'"
        )
    hour, minute = value.strip().split(":")
    return f"{int(hour):02d}:{minute}"


def parse_weekday_option(value: str) -> str:
    day = value.strip().lower()
    matches = [name for name in WEEKDAY_NAMES if name.startswith(day)] if day else []
    if len(matches) != 1:
        raise typer.BadParameter(
            f"Expected a weekday such as 'friday' or 'fri', got '{value}'"
        )
    return matches[0]



def parse_timezone_option(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        return pendulum.timezone(value.strip()).name
    except (KeyError, ValueError):
        raise typer.BadParameter(f"Unknown timezone '{value}'")


def parse_period_option(value: Optional[str]) -> Optional[TimesheetPeriod]:
    if value is None:
        return None
    for period in get_args(TimesheetPeriod):
        if value.strip().lower() == period.lower():
            return period
    raise typer.BadParameter(
        f"Expected one of {', '.join(get_args(TimesheetPeriod))}, got '{value}'"
    )
