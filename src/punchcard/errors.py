# SPDX-License-Identifier: MIT

from typing import Optional


class PunchcardError(Exception):
    """Base class for errors that carry a message fit to show the user."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message


class ConfigurationMissing(PunchcardError):
    def __init__(self) -> None:
        super().__init__(
            "No storage folder configured. Run `punchcard config storage <folder>` first."
        )


class IOFailure(PunchcardError):
    pass


class DecodeFailure(PunchcardError):
    pass


class PollingFailure(PunchcardError):
    pass


class EntryNotFound(PunchcardError):
    def __init__(self, entry_id: str) -> None:
        super().__init__(f"No time entry with id {entry_id}")
        self.entry_id = entry_id
