# SPDX-License-Identifier: MIT

import logging
from copy import deepcopy
from typing import Any, Optional, cast, get_args

from punchcard.errors import DecodeFailure
from punchcard.model.app_configuration import AppConfiguration
from punchcard.model.timesheet import TimesheetPeriod
from punchcard.repository.storage import (
    StorageFolder,
    read_json_document,
    write_json_document,
)
from punchcard.service.period import WEEKDAY_NAMES
from punchcard.template.app_configuration import get_app_configuration_template

logger = logging.getLogger(__name__)

# Python key -> key in config.json
SERIALIZED_KEYS: dict[str, str] = {
    "timezone": "timezoneIdentifier",
    "notification_time": "notificationTime",
    "notification_days": "notificationDays",
    "timesheet_period": "timesheetPeriod",
    "user_name": "userName",
    "approver_email": "approverEmail",
    "email_subject": "emailSubject",
    "email_template": "emailTemplate",
    "include_entries_in_email": "includeEntriesInEmail",
    "auto_start_on_launch": "autoStartOnLaunch",
    "confirm_before_sending": "confirmBeforeSending",
}

# Older files store weekdays as numbers, 1 = Sunday ... 7 = Saturday
NUMBERED_WEEKDAYS = {
    1: "sunday",
    2: "monday",
    3: "tuesday",
    4: "wednesday",
    5: "thursday",
    6: "friday",
    7: "saturday",
}


def normalize_weekday(value: Any) -> str:
    if isinstance(value, int) and value in NUMBERED_WEEKDAYS:
        return NUMBERED_WEEKDAYS[value]
    if isinstance(value, str) and value.lower() in WEEKDAY_NAMES:
        return value.lower()
    raise ValueError(f"not a weekday: {value!r}")


class ConfigurationRepository:
    """
    User settings shared by every device, kept in `config.json` at the root
    of the storage folder. Written straight through since other devices
    read the same file.
    """

    def __init__(self, storage: StorageFolder) -> None:
        self.storage = storage

    def __load_data(self) -> AppConfiguration:
        config = get_app_configuration_template()
        if not self.storage.is_configured:
            return config

        document = read_json_document(self.storage.config_path)
        if document is None:
            return config
        if not isinstance(document, dict):
            raise DecodeFailure(
                f"Stored configuration in {self.storage.config_path} is not a JSON object"
            )

        # Keys missing from older files keep their defaults
        try:
            for key, serialized_key in SERIALIZED_KEYS.items():
                if serialized_key in document and document[serialized_key] is not None:
                    config[key] = document[serialized_key]  # type: ignore[literal-required]
            config["notification_days"] = [
                normalize_weekday(day) for day in config["notification_days"]
            ]
        except (TypeError, ValueError) as e:
            raise DecodeFailure(f"Malformed configuration: {e}", e) from e

        if config["timesheet_period"] not in get_args(TimesheetPeriod):
            logger.warning(
                "unknown timesheet period %r, using Weekly", config["timesheet_period"]
            )
            config["timesheet_period"] = "Weekly"
        return config

    def __save_data(self, config: AppConfiguration) -> None:
        document = {
            serialized_key: cast(dict[str, Any], config)[key]
            for key, serialized_key in SERIALIZED_KEYS.items()
        }
        write_json_document(self.storage.config_path, document)

    def get_config(self) -> AppConfiguration:
        return deepcopy(self.__load_data())

    def save_config(self, config: AppConfiguration) -> None:
        self.__save_data(config)

    def ensure_config(self) -> bool:
        """
        Write the defaults, this device's timezone included, to a folder that
        has no configuration yet so every device computes periods alike.
        Returns whether a file was written.
        """
        if self.storage.config_path.exists():
            return False
        self.__save_data(self.__load_data())
        logger.info("wrote default configuration to %s", self.storage.config_path)
        return True

    def update_config(
        self,
        timezone: Optional[str] = None,
        notification_time: Optional[str] = None,
        notification_days: Optional[list[str]] = None,
        timesheet_period: Optional[TimesheetPeriod] = None,
        user_name: Optional[str] = None,
        approver_email: Optional[str] = None,
        email_subject: Optional[str] = None,
        email_template: Optional[str] = None,
        include_entries_in_email: Optional[bool] = None,
        auto_start_on_launch: Optional[bool] = None,
        confirm_before_sending: Optional[bool] = None,
    ) -> AppConfiguration:
        config = self.__load_data()

        if timezone is not None:
            config["timezone"] = timezone
        if notification_time is not None:
            config["notification_time"] = notification_time
        if notification_days is not None:
            config["notification_days"] = [
                normalize_weekday(day) for day in notification_days
            ]
        if timesheet_period is not None:
            config["timesheet_period"] = timesheet_period
        if user_name is not None:
            config["user_name"] = user_name
        if approver_email is not None:
            config["approver_email"] = approver_email
        if email_subject is not None:
            config["email_subject"] = email_subject
        if email_template is not None:
            config["email_template"] = email_template
        if include_entries_in_email is not None:
            config["include_entries_in_email"] = include_entries_in_email
        if auto_start_on_launch is not None:
            config["auto_start_on_launch"] = auto_start_on_launch
        if confirm_before_sending is not None:
            config["confirm_before_sending"] = confirm_before_sending

        self.__save_data(config)
        return deepcopy(config)
