# SPDX-License-Identifier: MIT

import logging
from typing import Any

from punchcard import time
from punchcard.errors import DecodeFailure
from punchcard.model.time_entry import TimeEntry
from punchcard.repository.storage import (
    StorageFolder,
    read_json_document,
    write_json_document,
)

logger = logging.getLogger(__name__)


def convert_time_entry_for_serialization(entry: TimeEntry) -> dict[str, Any]:
    return {
        "id": entry["id"],
        "startTime": time.datetime_to_iso_str(entry["start_time"]),
        "endTime": time.datetime_to_iso_str_optional(entry["end_time"]),
        "description": entry["description"],
        "projectName": entry["project_name"],
        "tags": list(entry["tags"]),
    }


def convert_time_entry_for_deserialization(raw_entry: Any) -> TimeEntry:
    if not isinstance(raw_entry, dict):
        raise DecodeFailure(f"Expected a time entry object, got {raw_entry!r}")
    try:
        tags = raw_entry.get("tags") or []
        if not isinstance(tags, list):
            raise TypeError("tags must be a list")
        return {
            "id": str(raw_entry["id"]),
            "start_time": time.datetime_from_str(raw_entry["startTime"]),
            "end_time": time.datetime_from_str_optional(raw_entry.get("endTime")),
            "description": raw_entry.get("description") or "",
            "project_name": raw_entry.get("projectName"),
            "tags": [str(tag) for tag in tags],
        }
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeFailure(f"Malformed time entry {raw_entry!r}: {e}", e) from e


class EntryRepository:
    """
    The entry snapshot: one JSON array holding every completed entry and the
    running one, overwritten in full on every change.
    """

    def __init__(self, storage: StorageFolder) -> None:
        self.storage = storage

    def read(self) -> list[TimeEntry]:
        if not self.storage.is_configured:
            return []

        path = self.storage.entries_path
        document = read_json_document(path)
        if document is None:
            return []
        if not isinstance(document, list):
            raise DecodeFailure(f"Stored entries in {path} are not a JSON array")

        entries = [convert_time_entry_for_deserialization(raw) for raw in document]
        logger.debug("read %d entries from %s", len(entries), path)
        return entries

    def write(self, entries: list[TimeEntry]) -> None:
        path = self.storage.entries_path
        document = [convert_time_entry_for_serialization(entry) for entry in entries]
        write_json_document(path, document)
        logger.debug("wrote %d entries to %s", len(entries), path)

    def exists(self) -> bool:
        return self.storage.is_configured and self.storage.entries_path.is_file()
