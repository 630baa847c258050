# SPDX-License-Identifier: MIT

from textwrap import dedent

import pendulum

from punchcard.model.app_configuration import AppConfiguration

DEFAULT_EMAIL_SUBJECT = "{{userName}} - Timesheet for {{periodStart}} - {{periodEnd}}"

DEFAULT_EMAIL_TEMPLATE = dedent("""\
    Hi,

    Please find my timesheet for the period {{periodStart}} to {{periodEnd}}.

    Total Hours: {{totalHours}}

    {{entriesSummary}}

    Please let me know if you have any questions.

    Best regards,
    {{userName}}
""")


def get_app_configuration_template() -> AppConfiguration:
    return {
        "timezone": pendulum.local_timezone().name,
        "notification_time": "17:00",
        "notification_days": ["friday"],
        "timesheet_period": "Weekly",
        "user_name": "",
        "approver_email": "",
        "email_subject": DEFAULT_EMAIL_SUBJECT,
        "email_template": DEFAULT_EMAIL_TEMPLATE,
        "include_entries_in_email": True,
        "auto_start_on_launch": False,
        "confirm_before_sending": True,
    }
