# SPDX-License-Identifier: MIT

from typing import Literal, Optional, TypedDict

import pendulum

from punchcard.model.entity_id import EntityId
from punchcard.model.time_entry import TimeEntry

TimesheetStatus = Literal["Draft", "Submitted", "Approved", "Rejected"]

TimesheetPeriod = Literal["Weekly", "Bi-Weekly", "Monthly"]


class Timesheet(TypedDict):
    id: EntityId
    period_start: pendulum.DateTime
    period_end: pendulum.DateTime  # start of the last day, inclusive
    entries: list[TimeEntry]
    status: TimesheetStatus
    submitted_at: Optional[pendulum.DateTime]
    approved_at: Optional[pendulum.DateTime]
    notes: Optional[str]
