# SPDX-License-Identifier: MIT

import datetime
from typing import Optional, cast

import pendulum


def now_utc() -> pendulum.DateTime:
    return pendulum.now("UTC")


def python_to_pendulum_utc(python_value: datetime.datetime) -> pendulum.DateTime:
    pendulum_value = pendulum.instance(python_value, tz="local")
    return pendulum_value.in_tz("UTC")


def python_to_pendulum_utc_optional(
    python_value: Optional[datetime.datetime],
) -> Optional[pendulum.DateTime]:
    if python_value is None:
        return None
    return python_to_pendulum_utc(python_value)


def datetime_to_iso_str(datetime: pendulum.DateTime) -> str:
    return datetime.in_tz("UTC").isoformat()


def datetime_to_iso_str_optional(
    datetime: Optional[pendulum.DateTime],
) -> Optional[str]:
    if datetime is None:
        return None
    return datetime_to_iso_str(datetime)


def datetime_from_str(datetime: str) -> pendulum.DateTime:
    parsed = pendulum.parse(datetime)
    if not isinstance(parsed, pendulum.DateTime):
        raise ValueError(f"not a timestamp: {datetime!r}")
    return parsed.in_tz("UTC")


def datetime_from_str_optional(datetime: Optional[str]) -> Optional[pendulum.DateTime]:
    if datetime is None:
        return None
    return datetime_from_str(datetime)


def datetime_to_display_local_date_str(datetime: pendulum.DateTime) -> str:
    return datetime.in_tz("local").format("YYYY-MM-DD ddd")


def datetime_to_display_local_datetime_str(datetime: pendulum.DateTime) -> str:
    return datetime.in_tz("local").format("MMM-DD ddd HH:mm")


def datetime_to_display_local_datetime_str_optional(
    datetime: Optional[pendulum.DateTime],
) -> Optional[str]:
    if datetime is None:
        return None
    return datetime_to_display_local_datetime_str(datetime)


def resolve_timezone(name: Optional[str]) -> pendulum.Timezone:
    """Return the named IANA timezone, falling back to the local one."""
    if name:
        try:
            return pendulum.timezone(name)
        except (KeyError, ValueError):
            pass
    return cast(pendulum.Timezone, pendulum.local_timezone())


def clamp_seconds(seconds: float) -> float:
    return seconds if seconds > 0 else 0.0


def seconds_to_hours_minutes_str(seconds: float) -> str:
    """Format as `3h 05m`, or `42m` below one hour."""
    total = int(clamp_seconds(seconds))
    hours = total // 3600
    minutes = (total % 3600) // 60
    if hours > 0:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m"


def seconds_to_clock_str(seconds: float) -> str:
    """Format a running timer: `M:SS` below one hour, `H:MM` above."""
    total = int(clamp_seconds(seconds))
    minutes = total // 60
    hours = minutes // 60
    if hours > 0:
        return f"{hours}:{minutes % 60:02d}"
    return f"{minutes}:{total % 60:02d}"
