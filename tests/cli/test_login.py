"""Tests for the login command."""

import stat

import pytest
from typer.testing import CliRunner

from dodgem.credentials import Credentials, CredentialStore
from dodgem.main import app

runner = CliRunner()


@pytest.fixture
def store(tmp_path, monkeypatch) -> CredentialStore:
    config_dir = tmp_path / "config"
    monkeypatch.setenv("DODGEM_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("DODGEM_DATA_DIR", str(tmp_path / "data"))
    return CredentialStore(config_dir / "credentials.json")


class TestLogin:
    """Storing credentials interactively."""

    def test_saves_credentials(self, store: CredentialStore) -> None:
        result = runner.invoke(app, ["login"], input="driver@example.com\noctane-123\n")

        assert result.exit_code == 0
        assert "Please enter login credentials for Rocket League Garage" in result.output
        assert "Credentials saved for: driver@example.com" in result.output
        assert store.get_credentials() == Credentials("driver@example.com", "octane-123")

    def test_file_is_private(self, store: CredentialStore) -> None:
        runner.invoke(app, ["login"], input="driver@example.com\noctane-123\n")
        assert stat.S_IMODE(store.path.stat().st_mode) == 0o600

    def test_email_is_trimmed(self, store: CredentialStore) -> None:
        runner.invoke(app, ["login"], input="  driver@example.com  \noctane-123\n")
        assert store.get_credentials().email == "driver@example.com"

    def test_password_is_not_echoed(self, store: CredentialStore) -> None:
        result = runner.invoke(app, ["login"], input="driver@example.com\noctane-123\n")
        assert "octane-123" not in result.output

    def test_reprompts_invalid_email(self, store: CredentialStore) -> None:
        result = runner.invoke(
            app, ["login"], input="not-an-email\ndriver@example.com\noctane-123\n"
        )

        assert result.exit_code == 0
        assert "Please enter a valid email address" in result.output
        assert store.get_credentials().email == "driver@example.com"

    def test_reprompts_empty_password(self, store: CredentialStore) -> None:
        result = runner.invoke(app, ["login"], input="driver@example.com\n\noctane-123\n")

        assert result.exit_code == 0
        assert "Please enter a valid password" in result.output
        assert store.get_credentials().password == "octane-123"


class TestLoginReplace:
    """Replacing credentials that are already stored."""

    @pytest.fixture
    def existing(self, store: CredentialStore) -> CredentialStore:
        store.save(Credentials("old@example.com", "dominus-1"))
        return store

    def test_declining_keeps_existing(self, existing: CredentialStore) -> None:
        result = runner.invoke(app, ["login"], input="n\n")

        assert result.exit_code == 0
        assert "Replace stored credentials for old@example.com?" in result.output
        assert "Kept existing credentials" in result.output
        assert existing.get_credentials().email == "old@example.com"

    def test_confirming_replaces(self, existing: CredentialStore) -> None:
        result = runner.invoke(app, ["login"], input="y\nnew@example.com\nfennec-2\n")

        assert result.exit_code == 0
        assert existing.get_credentials() == Credentials("new@example.com", "fennec-2")

    def test_force_skips_confirmation(self, existing: CredentialStore) -> None:
        result = runner.invoke(app, ["login", "--force"], input="new@example.com\nfennec-2\n")

        assert result.exit_code == 0
        assert "Replace stored credentials" not in result.output
        assert existing.get_credentials().email == "new@example.com"

    def test_unreadable_file_is_overwritten(self, store: CredentialStore) -> None:
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json")

        result = runner.invoke(app, ["login"], input="driver@example.com\noctane-123\n")

        assert result.exit_code == 0
        assert store.get_credentials().email == "driver@example.com"


class TestLoginClear:
    """Removing stored credentials."""

    def test_clear_removes_file(self, store: CredentialStore) -> None:
        store.save(Credentials("driver@example.com", "octane-123"))

        result = runner.invoke(app, ["login", "--clear"])

        assert result.exit_code == 0
        assert "Removed stored credentials" in result.output
        assert not store.exists()

    def test_clear_without_credentials(self, store: CredentialStore) -> None:
        result = runner.invoke(app, ["login", "--clear"])

        assert result.exit_code == 0
        assert "No credentials stored" in result.output


class TestLoginConfigFile:
    """Credentials follow the config_dir of an explicit config file."""

    @pytest.fixture
    def config_file(self, tmp_path, monkeypatch, store: CredentialStore):
        # The environment would override config_dir from the file
        monkeypatch.delenv("DODGEM_CONFIG_DIR")
        path = tmp_path / "dodgem.toml"
        path.write_text(f'config_dir = "{(tmp_path / "elsewhere").as_posix()}"\n')
        return path

    def test_saves_next_to_config_dir(self, tmp_path, store: CredentialStore, config_file) -> None:
        result = runner.invoke(
            app, ["login", "--config", str(config_file)], input="driver@example.com\noctane-123\n"
        )

        assert result.exit_code == 0
        relocated = CredentialStore(tmp_path / "elsewhere" / "credentials.json")
        assert relocated.get_credentials().email == "driver@example.com"
        assert not store.exists()

    def test_clear_uses_config_dir(self, tmp_path, store: CredentialStore, config_file) -> None:
        relocated = CredentialStore(tmp_path / "elsewhere" / "credentials.json")
        relocated.save(Credentials("driver@example.com", "octane-123"))

        result = runner.invoke(app, ["login", "--clear", "-c", str(config_file)])

        assert result.exit_code == 0
        assert not relocated.exists()

    def test_missing_config_file_is_usage_error(self, tmp_path, store: CredentialStore) -> None:
        result = runner.invoke(app, ["login", "--config", str(tmp_path / "nope.toml")])
        assert result.exit_code == 2
