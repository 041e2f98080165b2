"""Tests for the config command group."""

import tomllib

import pytest
from typer.testing import CliRunner

from dodgem.cli.exit_codes import ExitCode
from dodgem.credentials import Credentials, CredentialStore
from dodgem.main import app

runner = CliRunner()


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    config_dir = tmp_path / "config"
    monkeypatch.setenv("DODGEM_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("DODGEM_DATA_DIR", str(tmp_path / "data"))
    return config_dir


class TestConfigShow:
    """Test config show."""

    def test_show_all_sections(self, config_dir) -> None:
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "Dodgem Configuration" in result.output
        for title in ("Browser", "Garage", "Scheduler", "Logging", "Paths"):
            assert title in result.output
        assert "default_interval" in result.output

    def test_show_one_section(self, config_dir) -> None:
        result = runner.invoke(app, ["config", "show", "scheduler"])

        assert result.exit_code == 0
        assert "cooldown_seconds" in result.output
        assert "engine" not in result.output

    def test_show_unknown_section(self, config_dir) -> None:
        result = runner.invoke(app, ["config", "show", "plugins"])

        assert result.exit_code == ExitCode.INVALID_ARGUMENT
        assert "Unknown section: plugins" in result.output

    def test_show_json(self, config_dir) -> None:
        result = runner.invoke(app, ["config", "show", "--format", "json"])

        assert result.exit_code == 0
        assert '"default_interval": 15' in result.output
        assert '"base_url": "https://rocket-league.com"' in result.output

    def test_show_yaml(self, config_dir) -> None:
        result = runner.invoke(app, ["config", "show", "-f", "yaml"])

        assert result.exit_code == 0
        assert "scheduler:" in result.output
        assert "default_interval: 15" in result.output

    def test_show_unknown_format(self, config_dir) -> None:
        result = runner.invoke(app, ["config", "show", "--format", "xml"])

        assert result.exit_code == ExitCode.INVALID_ARGUMENT
        assert "Unknown format 'xml'" in result.output


class TestConfigSet:
    """Test config set."""

    def test_set_value_persists(self, config_dir) -> None:
        result = runner.invoke(app, ["config", "set", "scheduler.default_interval", "30"])

        assert result.exit_code == 0
        assert "Set scheduler.default_interval = 30" in result.output
        with open(config_dir / "config.toml", "rb") as f:
            assert tomllib.load(f)["scheduler"]["default_interval"] == 30

    def test_set_is_visible_to_show(self, config_dir) -> None:
        runner.invoke(app, ["config", "set", "browser.engine", "firefox"])

        result = runner.invoke(app, ["config", "show", "browser", "-f", "json"])
        assert '"engine": "firefox"' in result.output

    def test_set_boolean(self, config_dir) -> None:
        result = runner.invoke(app, ["config", "set", "browser.headless", "false"])

        assert result.exit_code == 0
        with open(config_dir / "config.toml", "rb") as f:
            assert tomllib.load(f)["browser"]["headless"] is False

    def test_key_without_section(self, config_dir) -> None:
        result = runner.invoke(app, ["config", "set", "interval", "30"])

        assert result.exit_code == ExitCode.INVALID_ARGUMENT
        assert "section.key" in result.output

    def test_unknown_key(self, config_dir) -> None:
        result = runner.invoke(app, ["config", "set", "scheduler.cron", "* * * * *"])

        assert result.exit_code == ExitCode.CONFIGURATION_ERROR
        assert "Unknown configuration key: scheduler.cron" in result.output

    def test_unconvertible_value(self, config_dir) -> None:
        result = runner.invoke(app, ["config", "set", "scheduler.default_interval", "soon"])

        assert result.exit_code == ExitCode.CONFIGURATION_ERROR
        assert not (config_dir / "config.toml").exists()


class TestConfigPath:
    """Test config path."""

    def test_path(self, config_dir) -> None:
        result = runner.invoke(app, ["config", "path"])

        assert result.exit_code == 0
        assert "config.toml" in result.output
        assert "Exists: False" in result.output


class TestConfigValidate:
    """Test config validate."""

    def test_valid_with_warnings(self, config_dir) -> None:
        result = runner.invoke(app, ["config", "validate"])

        assert result.exit_code == 0
        assert "No credentials stored" in result.output
        assert "Configuration is valid" in result.output

    def test_valid_without_warnings(self, config_dir, tmp_path) -> None:
        CredentialStore(config_dir / "credentials.json").save(Credentials("driver@example.com", "octane-123"))
        (tmp_path / "data").mkdir()

        result = runner.invoke(app, ["config", "validate"])

        assert result.exit_code == 0
        assert "Validation Results" not in result.output
        assert "Configuration is valid" in result.output

    def test_invalid(self, config_dir) -> None:
        config_dir.mkdir(parents=True)
        (config_dir / "config.toml").write_text("[scheduler]\ndefault_interval = 0\n")

        result = runner.invoke(app, ["config", "validate"])

        assert result.exit_code == ExitCode.CONFIGURATION_ERROR
        assert "[ERROR] scheduler.default_interval" in result.output
        assert "Configuration has errors" in result.output
