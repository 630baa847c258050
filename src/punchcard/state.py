# SPDX-License-Identifier: MIT

from contextvars import ContextVar
from typing import Optional

from punchcard.service.tracker import TimeTracker

_tracker: ContextVar[Optional[TimeTracker]] = ContextVar("tracker", default=None)


def set_tracker(tracker: TimeTracker) -> None:
    _tracker.set(tracker)


def get_tracker() -> TimeTracker:
    tracker = _tracker.get()
    if tracker is None:
        raise RuntimeError("punchcard has not been initialized")
    return tracker
