# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

import platformdirs

APP_NAME = "punchcard"

CONFIG_PATH = platformdirs.user_config_path(APP_NAME)
DEVICE_SETTINGS_PATH = CONFIG_PATH / "settings.yaml"

# Layout of the shared storage folder
CONFIG_FILE_NAME = "config.json"
ENTRIES_DIR_NAME = "time-entries"
ENTRIES_FILE_NAME = "entries.json"
TIMESHEETS_DIR_NAME = "timesheets"

DEFAULT_POLL_INTERVAL_SECONDS = 5.0
DEFAULT_LOG_LEVEL = "WARNING"


class DeviceSettings(TypedDict):
    storage_folder: Optional[str]
    poll_interval_seconds: float
    log_level: str


def get_device_settings_template() -> DeviceSettings:
    return {
        "storage_folder": None,
        "poll_interval_seconds": DEFAULT_POLL_INTERVAL_SECONDS,
        "log_level": DEFAULT_LOG_LEVEL,
    }
