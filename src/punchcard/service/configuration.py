# SPDX-License-Identifier: MIT

import re

from punchcard.model.app_configuration import AppConfiguration
from punchcard.service.period import parse_notification_time

EMAIL_PATTERN = re.compile(r"^[A-Z0-9a-z._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,64}$")


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.match(email) is not None


def validate_configuration(
    config: AppConfiguration, storage_configured: bool
) -> list[str]:
    """
    Collect every problem that would stop a timesheet from being produced
    or sent. An empty list means the configuration is complete.
    """
    errors: list[str] = []

    if not storage_configured:
        errors.append("Storage folder is not configured")

    if not config["approver_email"]:
        errors.append("Approver email is not configured")
    elif not is_valid_email(config["approver_email"]):
        errors.append("Approver email is not valid")

    if not config["user_name"]:
        errors.append("User name is not configured")

    if parse_notification_time(config["notification_time"]) is None:
        errors.append("Notification time format is invalid (use HH:mm)")

    return errors
