# SPDX-License-Identifier: MIT

import json

import pytest

from punchcard.errors import DecodeFailure
from punchcard.repository.configuration import ConfigurationRepository
from punchcard.repository.settings import DeviceSettingsRepository
from punchcard.repository.storage import StorageFolder
from punchcard.service.configuration import is_valid_email, validate_configuration


class TestConfigurationRepository:
    def test_defaults_without_file(self, storage):
        config = ConfigurationRepository(storage).get_config()

        assert config["notification_time"] == "17:00"
        assert config["notification_days"] == ["friday"]
        assert config["timesheet_period"] == "Weekly"
        assert config["include_entries_in_email"] is True

    def test_defaults_without_storage_folder(self):
        config = ConfigurationRepository(StorageFolder()).get_config()

        assert config["timesheet_period"] == "Weekly"

    def test_update_is_shared_through_the_folder(self, storage):
        ConfigurationRepository(storage).update_config(
            timezone="Europe/Berlin",
            notification_days=["monday", "friday"],
            timesheet_period="Bi-Weekly",
            user_name="Sam",
        )

        config = ConfigurationRepository(StorageFolder(storage.root)).get_config()
        assert config["timezone"] == "Europe/Berlin"
        assert config["notification_days"] == ["monday", "friday"]
        assert config["timesheet_period"] == "Bi-Weekly"
        assert config["user_name"] == "Sam"

    def test_serialized_keys(self, storage):
        ConfigurationRepository(storage).update_config(approver_email="boss@example.com")

        document = json.loads(storage.config_path.read_text())
        assert document["approverEmail"] == "boss@example.com"
        assert document["timesheetPeriod"] == "Weekly"
        assert "timezoneIdentifier" in document

    def test_ensure_config_writes_defaults_once(self, storage):
        repo = ConfigurationRepository(storage)

        assert repo.ensure_config()
        document = json.loads(storage.config_path.read_text())
        assert document["timezoneIdentifier"] == repo.get_config()["timezone"]

        repo.update_config(timezone="Asia/Tokyo")
        assert not repo.ensure_config()
        assert repo.get_config()["timezone"] == "Asia/Tokyo"

    def test_numbered_weekdays_from_older_files(self, storage):
        storage.config_path.write_text('{"notificationDays": [6, 2]}')

        config = ConfigurationRepository(storage).get_config()
        assert config["notification_days"] == ["friday", "monday"]

    def test_missing_keys_keep_defaults(self, storage):
        storage.config_path.write_text('{"userName": "Sam"}')

        config = ConfigurationRepository(storage).get_config()
        assert config["user_name"] == "Sam"
        assert config["notification_time"] == "17:00"

    def test_unknown_period_falls_back_to_weekly(self, storage):
        storage.config_path.write_text('{"timesheetPeriod": "Fortnightly"}')

        assert ConfigurationRepository(storage).get_config()["timesheet_period"] == (
            "Weekly"
        )

    @pytest.mark.parametrize(
        "content", ["[]", "not json", '{"notificationDays": ["someday"]}']
    )
    def test_malformed_file(self, storage, content):
        storage.config_path.write_text(content)

        with pytest.raises(DecodeFailure):
            ConfigurationRepository(storage).get_config()


class TestValidateConfiguration:
    def test_complete_configuration(self, berlin_config):
        berlin_config["user_name"] = "Sam"
        berlin_config["approver_email"] = "boss@example.com"

        assert validate_configuration(berlin_config, storage_configured=True) == []

    def test_collects_every_problem(self, berlin_config):
        berlin_config["notification_time"] = "5pm"

        assert validate_configuration(berlin_config, storage_configured=False) == [
            "Storage folder is not configured",
            "Approver email is not configured",
            "User name is not configured",
            "Notification time format is invalid (use HH:mm)",
        ]

    @pytest.mark.parametrize(
        "email, expected",
        [
            ("boss@example.com", True),
            ("first.last+tag@sub.example.org", True),
            ("boss@example", False),
            ("boss.example.com", False),
            ("", False),
        ],
    )
    def test_is_valid_email(self, email, expected):
        assert is_valid_email(email) is expected


class TestDeviceSettingsRepository:
    def test_defaults(self, tmp_path):
        settings = DeviceSettingsRepository(tmp_path / "settings.yaml").get_settings()

        assert settings["storage_folder"] is None
        assert settings["poll_interval_seconds"] == 5.0
        assert settings["log_level"] == "WARNING"

    def test_flush_persists_changes(self, tmp_path):
        path = tmp_path / "settings.yaml"
        repo = DeviceSettingsRepository(path)
        repo.update_settings(storage_folder="/sync/punchcard", log_level="debug")

        assert repo.flush()
        assert not repo.flush()

        settings = DeviceSettingsRepository(path).get_settings()
        assert settings["storage_folder"] == "/sync/punchcard"
        assert settings["log_level"] == "DEBUG"

    def test_remove_storage_folder(self, tmp_path):
        path = tmp_path / "settings.yaml"
        repo = DeviceSettingsRepository(path)
        repo.update_settings(storage_folder="/sync/punchcard")
        repo.update_settings(remove_storage_folder=True)
        repo.flush()

        assert DeviceSettingsRepository(path).get_settings()["storage_folder"] is None
