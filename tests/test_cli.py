"""Tests for the notify-mcp command line."""

import json

import pytest
from click.testing import CliRunner

from notify_mcp.cli import main
from notify_mcp.config import Settings, load_settings, new_os_method, save_settings


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


class TestConfigShow:
    def test_not_configured(self, runner, config_file):
        result = runner.invoke(main, ["config"])
        assert result.exit_code == 1
        assert "no notification methods configured" in result.output

    def test_prints_current_config(self, runner, config_file):
        save_settings(Settings(methods=[new_os_method()], notification_message="hi"))

        result = runner.invoke(main, ["config"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "methods": [{"type": "os", "config": {}}],
            "notificationMessage": "hi",
        }

    def test_legacy_config_shown_in_current_shape(self, runner, config_file):
        config_file.parent.mkdir(parents=True)
        config_file.write_text('{"apiBaseUrl":"https://a","chatId":"1","token":"t"}', encoding="utf-8")

        result = runner.invoke(main, ["config"])

        assert result.exit_code == 0
        assert json.loads(result.output)["methods"][0]["type"] == "telegram"


class TestConfigUpdate:
    def test_add_telegram_with_default_url(self, runner, config_file):
        result = runner.invoke(main, ["config", "--method", "telegram", "--chat-id", "42", "--token", "abc"])

        assert result.exit_code == 0, result.output
        method = load_settings().methods[0]
        assert method.config.api_base_url == "https://api.telegram.org"
        assert method.config.chat_id == "42"

    def test_add_os_then_telegram_keeps_order(self, runner, config_file):
        runner.invoke(main, ["config", "--method", "os"])
        runner.invoke(main, ["config", "--method", "telegram", "--chat-id", "1", "--token", "t"])
        runner.invoke(main, ["config", "--method", "os"])

        assert load_settings().method_types == ["os", "telegram"]

    def test_telegram_requires_chat_id_and_token(self, runner, config_file):
        result = runner.invoke(main, ["config", "--method", "telegram", "--chat-id", "42"])
        assert result.exit_code == 1
        assert "--chat-id and --token" in result.output
        assert not config_file.exists()

    def test_os_rejects_telegram_flags(self, runner, config_file):
        result = runner.invoke(main, ["config", "--method", "os", "--token", "abc"])
        assert result.exit_code == 1

    def test_flags_without_method(self, runner, config_file):
        result = runner.invoke(main, ["config", "--chat-id", "42"])
        assert result.exit_code == 1
        assert "--method is required" in result.output

    def test_unknown_method(self, runner, config_file):
        result = runner.invoke(main, ["config", "--method", "pager"])
        assert result.exit_code == 1
        assert "unsupported notification method" in result.output

    def test_remove_method(self, runner, config_file):
        runner.invoke(main, ["config", "--method", "os"])
        runner.invoke(main, ["config", "--method", "telegram", "--chat-id", "1", "--token", "t"])

        result = runner.invoke(main, ["config", "--method", "os", "--remove"])

        assert result.exit_code == 0, result.output
        assert load_settings().method_types == ["telegram"]

    def test_remove_absent_method(self, runner, config_file):
        runner.invoke(main, ["config", "--method", "os"])
        result = runner.invoke(main, ["config", "--method", "telegram", "--remove"])
        assert result.exit_code == 1
        assert "not configured" in result.output

    def test_remove_last_method_rejected(self, runner, config_file):
        runner.invoke(main, ["config", "--method", "os"])
        result = runner.invoke(main, ["config", "--method", "os", "--remove"])
        assert result.exit_code == 1
        assert load_settings().method_types == ["os"]

    def test_remove_when_unconfigured(self, runner, config_file):
        result = runner.invoke(main, ["config", "--method", "os", "--remove"])
        assert result.exit_code == 1

    def test_remove_rejects_telegram_flags(self, runner, config_file):
        runner.invoke(main, ["config", "--method", "os"])
        result = runner.invoke(main, ["config", "--method", "os", "--remove", "--token", "x"])
        assert result.exit_code == 1

    def test_message_only_update(self, runner, config_file):
        runner.invoke(main, ["config", "--method", "os"])

        result = runner.invoke(main, ["config", "--message", "Heads up"])

        assert result.exit_code == 0, result.output
        settings = load_settings()
        assert settings.notification_message == "Heads up"
        assert settings.method_types == ["os"]

    def test_message_only_without_methods_rejected(self, runner, config_file):
        result = runner.invoke(main, ["config", "--message", "Heads up"])
        assert result.exit_code == 1
        assert not config_file.exists()

    def test_invalid_stored_config_reported(self, runner, config_file):
        config_file.parent.mkdir(parents=True)
        config_file.write_text("{broken", encoding="utf-8")

        result = runner.invoke(main, ["config", "--method", "os"])

        assert result.exit_code == 1
        assert "decode config" in result.output


class TestServe:
    def test_refuses_to_start_unconfigured(self, runner, config_file):
        result = runner.invoke(main, ["serve"])
        assert result.exit_code == 1
        assert "notify-mcp config" in result.output

    def test_bare_command_serves(self, runner, config_file):
        result = runner.invoke(main, [])
        assert result.exit_code == 1
        assert "no notification methods configured" in result.output
