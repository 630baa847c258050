# SPDX-License-Identifier: MIT

from typing import TypedDict

from punchcard.model.timesheet import TimesheetPeriod


class AppConfiguration(TypedDict):
    timezone: str
    notification_time: str  # HH:mm
    notification_days: list[str]  # lowercase weekday names
    timesheet_period: TimesheetPeriod
    user_name: str
    approver_email: str
    email_subject: str
    email_template: str
    include_entries_in_email: bool
    auto_start_on_launch: bool
    confirm_before_sending: bool
