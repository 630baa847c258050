# SPDX-License-Identifier: MIT

import pendulum

from punchcard.model.entity_id import generate_entity_id
from punchcard.model.timesheet import Timesheet


def get_timesheet_template(
    period_start: pendulum.DateTime, period_end: pendulum.DateTime
) -> Timesheet:
    return {
        "id": generate_entity_id(),
        "period_start": period_start,
        "period_end": period_end,
        "entries": [],
        "status": "Draft",
        "submitted_at": None,
        "approved_at": None,
        "notes": None,
    }
