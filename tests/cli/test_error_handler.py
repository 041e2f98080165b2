"""Tests for error handler module."""

import pytest
import typer

from dodgem.cli.error_handler import (
    BrowserUnavailableError,
    CLIError,
    ConfigurationError,
    CredentialsError,
    ValidationError,
    handle_errors,
)
from dodgem.cli.exit_codes import ExitCode


class TestCLIError:
    """Test base CLIError class."""

    def test_basic_error(self) -> None:
        error = CLIError("Test error")
        assert error.message == "Test error"
        assert error.exit_code == ExitCode.GENERAL_ERROR
        assert error.details == {}

    def test_error_with_exit_code(self) -> None:
        error = CLIError("Test error", exit_code=ExitCode.CONFIGURATION_ERROR)
        assert error.exit_code == ExitCode.CONFIGURATION_ERROR

    def test_str_without_details(self) -> None:
        assert str(CLIError("Test error")) == "Test error"

    def test_str_with_details(self) -> None:
        error = CLIError("Test error", details={"key": "value"})
        assert str(error) == "Test error (key=value)"


class TestSubclassExitCodes:
    """Each subclass carries its own exit code."""

    @pytest.mark.parametrize("error_class,code", [
        (ConfigurationError, ExitCode.CONFIGURATION_ERROR),
        (ValidationError, ExitCode.INVALID_ARGUMENT),
        (CredentialsError, ExitCode.CREDENTIALS_ERROR),
        (BrowserUnavailableError, ExitCode.BROWSER_ERROR),
    ])
    def test_default_exit_code(self, error_class, code) -> None:
        error = error_class("boom")
        assert isinstance(error, CLIError)
        assert error.exit_code == code

    def test_override_exit_code(self) -> None:
        assert ConfigurationError("boom", exit_code=ExitCode.GENERAL_ERROR).exit_code == ExitCode.GENERAL_ERROR


class TestHandleErrors:
    """Test the handle_errors decorator."""

    def test_passes_return_value(self) -> None:
        @handle_errors
        def command() -> str:
            return "ok"

        assert command() == "ok"

    def test_preserves_metadata(self) -> None:
        @handle_errors
        def command() -> None:
            """Docstring."""

        assert command.__name__ == "command"
        assert command.__doc__ == "Docstring."

    def test_cli_error_exit_code(self, capsys) -> None:
        @handle_errors
        def command() -> None:
            raise BrowserUnavailableError("Could not start chromium", details={"hint": "install it"})

        with pytest.raises(typer.Exit) as exc_info:
            command()

        assert exc_info.value.exit_code == ExitCode.BROWSER_ERROR
        err = capsys.readouterr().err
        assert "Error: Could not start chromium" in err
        assert "hint: install it" in err

    def test_keyboard_interrupt(self, capsys) -> None:
        @handle_errors
        def command() -> None:
            raise KeyboardInterrupt

        with pytest.raises(typer.Exit) as exc_info:
            command()

        assert exc_info.value.exit_code == ExitCode.CANCELLED
        assert "Operation cancelled by user" in capsys.readouterr().err

    def test_typer_exit_passes_through(self) -> None:
        @handle_errors
        def command() -> None:
            raise typer.Exit(code=ExitCode.CONFIGURATION_ERROR)

        with pytest.raises(typer.Exit) as exc_info:
            command()

        assert exc_info.value.exit_code == ExitCode.CONFIGURATION_ERROR

    def test_unexpected_error(self, capsys) -> None:
        @handle_errors
        def command() -> None:
            raise RuntimeError("kaboom")

        with pytest.raises(typer.Exit) as exc_info:
            command()

        assert exc_info.value.exit_code == ExitCode.GENERAL_ERROR
        assert "Unexpected error: kaboom" in capsys.readouterr().err
