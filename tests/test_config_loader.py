import dataclasses
import json

import pytest

from apigee_backup.config.loader import Config, ConfigLoader, parse_bool, parse_tag_ids

REQUIRED = {"project_file": "projects.txt", "bucket": "my-bucket", "token": "t0ken"}


class TestConfigLoader:

    def test_defaults(self):
        config = ConfigLoader.load(REQUIRED)

        assert config.retention_days == 7
        assert config.webhook_url == ""
        assert config.tag_ids == ()
        assert config.backup_dir == "/tmp/apigee_backup"
        assert config.log_file == "/var/log/apigee.log"
        assert config.max_log_size == 10 * 1024 * 1024
        assert config.max_log_archives == 10
        assert config.notify_all_failures is False

    def test_none_overrides_are_ignored(self):
        config = ConfigLoader.load({**REQUIRED, "retention_days": None, "webhook_url": None})

        assert config.retention_days == 7
        assert config.webhook_url == ""

    def test_options_file_is_merged_and_overrides_win(self, tmp_path):
        options = tmp_path / "options.json"
        options.write_text(json.dumps({
            "retention_days": 30,
            "backup_dir": str(tmp_path / "staging"),
            "notify_all_failures": True,
        }))

        config = ConfigLoader.load({**REQUIRED, "retention_days": 14}, options_path=str(options))

        assert config.retention_days == 14
        assert config.backup_dir == str(tmp_path / "staging")
        assert config.notify_all_failures is True

    def test_string_booleans_from_options_file(self, tmp_path):
        options = tmp_path / "options.json"
        options.write_text(json.dumps({"notify_all_failures": "false"}))

        config = ConfigLoader.load(REQUIRED, options_path=str(options))

        assert config.notify_all_failures is False

    def test_missing_options_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigLoader.load(REQUIRED, options_path=str(tmp_path / "nope.json"))

    def test_required_values(self):
        with pytest.raises(ValueError) as excinfo:
            ConfigLoader.load({})

        message = str(excinfo.value)
        assert "project_file is required" in message
        assert "bucket is required" in message
        assert "token is required" in message

    @pytest.mark.parametrize("overrides", [
        {"retention_days": -1},
        {"retention_days": 0},
        {"notify_all_failures": "sometimes"},
        {"retention_days": "seven"},
        {"bucket": "gs://my-bucket"},
        {"log_level": "LOUD"},
        {"webhook_url": "discord.test/webhook"},
        {"max_log_archives": 0},
        {"unknown_key": 1},
    ])
    def test_invalid_values(self, overrides):
        with pytest.raises(ValueError):
            ConfigLoader.load({**REQUIRED, **overrides})

    def test_config_is_immutable(self):
        config = ConfigLoader.load(REQUIRED)
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.webhook_url = "https://example.test"

    def test_paths(self):
        config = Config(project_file="p", bucket="b", token="t", backup_dir="/tmp/stage")

        assert str(config.export_path) == "/tmp/stage/export"
        assert str(config.date_path("2024-03-01")) == "/tmp/stage/2024-03-01"

    def test_describe_masks_token(self):
        description = ConfigLoader.describe(ConfigLoader.load(REQUIRED))
        assert description["token"] == "****"
        assert "t0ken" not in json.dumps(description)


class TestParseTagIds:

    def test_comma_separated(self):
        assert parse_tag_ids("111, 222,,333 ") == ("111", "222", "333")

    def test_list(self):
        assert parse_tag_ids([111, "222"]) == ("111", "222")

    def test_empty(self):
        assert parse_tag_ids("") == ()
        assert parse_tag_ids(None) == ()


class TestParseBool:

    @pytest.mark.parametrize("value", [True, 1, "true", "TRUE", " yes ", "on", "1"])
    def test_true(self, value):
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", [False, 0, "false", "False", "no", "off", "0", ""])
    def test_false(self, value):
        assert parse_bool(value) is False

    def test_unknown_string(self):
        with pytest.raises(ValueError):
            parse_bool("sometimes")
