# SPDX-License-Identifier: MIT

from punchcard.model.entity_id import generate_entity_id
from punchcard.model.time_entry import TimeEntry
from punchcard.time import now_utc


def get_time_entry_template() -> TimeEntry:
    return {
        "id": generate_entity_id(),
        "start_time": now_utc(),
        "end_time": None,
        "description": "",
        "project_name": None,
        "tags": [],
    }
