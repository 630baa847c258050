# SPDX-License-Identifier: MIT

from typing import Callable, Optional

import pendulum
import pytest

from punchcard.model.app_configuration import AppConfiguration
from punchcard.model.time_entry import TimeEntry
from punchcard.repository.storage import StorageFolder
from punchcard.template.app_configuration import get_app_configuration_template

T0 = pendulum.datetime(2026, 1, 7, 9, 0, tz="UTC")

EntryFactory = Callable[..., TimeEntry]


class FakeClock:
    """A `now` callable the test moves forward by hand."""

    def __init__(self, start: pendulum.DateTime = T0) -> None:
        self.value = start

    def __call__(self) -> pendulum.DateTime:
        return self.value

    def advance(self, **kwargs: float) -> pendulum.DateTime:
        self.value = self.value.add(**kwargs)
        return self.value


@pytest.fixture
def make_entry() -> EntryFactory:
    def factory(
        id: str,
        start: pendulum.DateTime,
        end: Optional[pendulum.DateTime] = None,
        description: str = "",
        project_name: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> TimeEntry:
        return {
            "id": id,
            "start_time": start,
            "end_time": end,
            "description": description,
            "project_name": project_name,
            "tags": tags or [],
        }

    return factory


@pytest.fixture
def storage(tmp_path) -> StorageFolder:
    return StorageFolder(tmp_path / "shared")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def berlin_config() -> AppConfiguration:
    config = get_app_configuration_template()
    config["timezone"] = "Europe/Berlin"
    config["notification_time"] = "17:00"
    config["notification_days"] = ["friday"]
    config["timesheet_period"] = "Weekly"
    return config
