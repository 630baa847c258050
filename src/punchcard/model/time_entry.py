# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

import pendulum

from punchcard.model.entity_id import EntityId


class TimeEntry(TypedDict):
    id: EntityId
    start_time: pendulum.DateTime
    end_time: Optional[pendulum.DateTime]  # None while the timer is running
    description: str
    project_name: Optional[str]
    tags: list[str]


class ReconciledEntries(TypedDict):
    current: Optional[TimeEntry]
    completed: list[TimeEntry]  # newest first, never contains current
