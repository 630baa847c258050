# SPDX-License-Identifier: MIT

from copy import deepcopy
from pathlib import Path
from typing import Optional

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from punchcard import configuration


class DeviceSettingsRepository:
    """
    Settings that belong to this device only: which shared folder it syncs
    through, how often it polls and how loudly it logs.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path if path is not None else configuration.DEVICE_SETTINGS_PATH
        self._settings: Optional[configuration.DeviceSettings] = None
        self.is_dirty = False

    @property
    def settings(self) -> configuration.DeviceSettings:
        if self._settings is None:
            self.__load_data()
        if self._settings is None:
            raise ValueError()
        return self._settings

    def __load_data(self) -> None:
        settings = configuration.get_device_settings_template()
        if self.path.is_file():
            raw_settings = load(self.path.read_text(), Loader=Loader)
            if isinstance(raw_settings, dict):
                # Unknown keys are dropped, missing keys keep their defaults
                for key in settings.keys():
                    if key in raw_settings:
                        settings[key] = raw_settings[key]  # type: ignore[literal-required]
        self._settings = settings

    def __save_data(self, settings: configuration.DeviceSettings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(dump(dict(settings), Dumper=Dumper))

    def flush(self) -> bool:
        if self._settings is not None and self.is_dirty:
            self.__save_data(self._settings)
            self.is_dirty = False
            return True
        return False

    def get_settings(self) -> configuration.DeviceSettings:
        return deepcopy(self.settings)

    def update_settings(
        self,
        storage_folder: Optional[str] = None,
        remove_storage_folder: bool = False,
        poll_interval_seconds: Optional[float] = None,
        log_level: Optional[str] = None,
    ) -> None:
        self.is_dirty = True

        if storage_folder is not None:
            self.settings["storage_folder"] = storage_folder
        if remove_storage_folder:
            self.settings["storage_folder"] = None
        if poll_interval_seconds is not None:
            self.settings["poll_interval_seconds"] = poll_interval_seconds
        if log_level is not None:
            self.settings["log_level"] = log_level.upper()


SETTINGS_REPO = DeviceSettingsRepository()
