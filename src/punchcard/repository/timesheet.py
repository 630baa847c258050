# SPDX-License-Identifier: MIT

import logging
from pathlib import Path
from typing import Any, get_args

import pendulum

from punchcard import time
from punchcard.errors import DecodeFailure, IOFailure
from punchcard.model.entity_id import short_entity_id
from punchcard.model.timesheet import Timesheet, TimesheetStatus
from punchcard.repository.entry import (
    convert_time_entry_for_deserialization,
    convert_time_entry_for_serialization,
)
from punchcard.repository.storage import (
    StorageFolder,
    read_json_document,
    write_json_document,
)
from punchcard.service.period import get_period_archive_key

logger = logging.getLogger(__name__)


def convert_timesheet_for_serialization(timesheet: Timesheet) -> dict[str, Any]:
    return {
        "id": timesheet["id"],
        "periodStart": time.datetime_to_iso_str(timesheet["period_start"]),
        "periodEnd": time.datetime_to_iso_str(timesheet["period_end"]),
        "entries": [
            convert_time_entry_for_serialization(entry)
            for entry in timesheet["entries"]
        ],
        "status": timesheet["status"],
        "submittedAt": time.datetime_to_iso_str_optional(timesheet["submitted_at"]),
        "approvedAt": time.datetime_to_iso_str_optional(timesheet["approved_at"]),
        "notes": timesheet["notes"],
    }


def convert_timesheet_for_deserialization(raw_timesheet: Any) -> Timesheet:
    if not isinstance(raw_timesheet, dict):
        raise DecodeFailure(f"Expected a timesheet object, got {raw_timesheet!r}")
    try:
        status = raw_timesheet.get("status") or "Draft"
        if status not in get_args(TimesheetStatus):
            raise ValueError(f"unknown status {status!r}")
        return {
            "id": str(raw_timesheet["id"]),
            "period_start": time.datetime_from_str(raw_timesheet["periodStart"]),
            "period_end": time.datetime_from_str(raw_timesheet["periodEnd"]),
            "entries": [
                convert_time_entry_for_deserialization(raw_entry)
                for raw_entry in raw_timesheet.get("entries") or []
            ],
            "status": status,
            "submitted_at": time.datetime_from_str_optional(
                raw_timesheet.get("submittedAt")
            ),
            "approved_at": time.datetime_from_str_optional(
                raw_timesheet.get("approvedAt")
            ),
            "notes": raw_timesheet.get("notes"),
        }
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeFailure(f"Malformed timesheet: {e}", e) from e


class TimesheetRepository:
    """
    Archived timesheets. Period backups live under a name derived from the
    period's calendar days and are never overwritten; sent timesheets get a
    name of their own.
    """

    def __init__(self, storage: StorageFolder) -> None:
        self.storage = storage

    def __timesheet_files(self) -> list[Path]:
        try:
            return sorted(
                path
                for path in self.storage.timesheets_dir.iterdir()
                if path.suffix == ".json" and not path.name.startswith(".")
            )
        except FileNotFoundError:
            return []
        except OSError as e:
            raise IOFailure(
                f"Could not list {self.storage.timesheets_dir}: {e}", e
            ) from e

    def __load_timesheet(self, path: Path) -> Timesheet:
        document = read_json_document(path)
        if document is None:
            raise IOFailure(f"Timesheet {path} disappeared while reading")
        try:
            return convert_timesheet_for_deserialization(document)
        except DecodeFailure as e:
            raise DecodeFailure(f"{path.name}: {e.message}", e) from e

    def get_all_timesheets(self) -> list[Timesheet]:
        if not self.storage.is_configured:
            return []
        timesheets = [self.__load_timesheet(path) for path in self.__timesheet_files()]
        return sorted(
            timesheets, key=lambda timesheet: timesheet["period_start"], reverse=True
        )

    def save_timesheet(self, timesheet: Timesheet) -> Path:
        month = timesheet["period_start"].format("YYYY-MM")
        path = self.storage.timesheets_dir / (
            f"{month}-{short_entity_id(timesheet['id'])}.json"
        )
        write_json_document(path, convert_timesheet_for_serialization(timesheet))
        logger.info("saved timesheet %s to %s", timesheet["id"], path.name)
        return path

    def get_period_archive_path(
        self,
        period_start: pendulum.DateTime,
        period_end: pendulum.DateTime,
        tz: pendulum.Timezone | pendulum.FixedTimezone,
    ) -> Path:
        key = get_period_archive_key(period_start, period_end, tz)
        return self.storage.timesheets_dir / f"{key}.json"

    def period_archive_exists(
        self,
        period_start: pendulum.DateTime,
        period_end: pendulum.DateTime,
        tz: pendulum.Timezone | pendulum.FixedTimezone,
    ) -> bool:
        if not self.storage.is_configured:
            return False
        return self.get_period_archive_path(period_start, period_end, tz).exists()

    def save_period_timesheet(
        self,
        timesheet: Timesheet,
        tz: pendulum.Timezone | pendulum.FixedTimezone,
    ) -> bool:
        """
        Write the backup for the timesheet's period unless one already
        exists. Returns whether a file was written.
        """
        path = self.get_period_archive_path(
            timesheet["period_start"], timesheet["period_end"], tz
        )
        if path.exists():
            logger.debug("period archive %s already exists", path.name)
            return False
        write_json_document(path, convert_timesheet_for_serialization(timesheet))
        logger.info("archived period timesheet %s", path.name)
        return True
