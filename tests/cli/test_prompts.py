"""Tests for prompts module."""

from unittest.mock import patch

from dodgem.cli.prompts import confirm_dangerous, prompt_for_input
from dodgem.validators import validate_email


class TestConfirmDangerous:
    """Test confirm_dangerous function."""

    def test_yes(self) -> None:
        with patch("dodgem.cli.prompts.typer.confirm", return_value=True):
            assert confirm_dangerous("Replace stored credentials?") is True

    def test_no(self) -> None:
        with patch("dodgem.cli.prompts.typer.confirm", return_value=False):
            assert confirm_dangerous("Replace stored credentials?") is False

    def test_defaults_to_no(self) -> None:
        with patch("dodgem.cli.prompts.typer.confirm", return_value=False) as mock_confirm:
            confirm_dangerous("Replace stored credentials?")
        assert mock_confirm.call_args[1]["default"] is False

    def test_warning_prefix(self) -> None:
        with patch("dodgem.cli.prompts.typer.confirm", return_value=True) as mock_confirm:
            confirm_dangerous("Replace?")
        assert mock_confirm.call_args[0][0] == "⚠ Replace?"

    def test_without_warning(self) -> None:
        with patch("dodgem.cli.prompts.typer.confirm", return_value=True) as mock_confirm:
            confirm_dangerous("Replace?", show_warning=False)
        assert mock_confirm.call_args[0][0] == "Replace?"


class TestPromptForInput:
    """Test prompt_for_input function."""

    def test_basic(self) -> None:
        with patch("dodgem.cli.prompts.typer.prompt", return_value="driver@example.com"):
            assert prompt_for_input("Email Address") == "driver@example.com"

    def test_reprompts_until_valid(self) -> None:
        answers = ["nope", "still nope", "driver@example.com"]
        with patch("dodgem.cli.prompts.typer.prompt", side_effect=answers) as mock_prompt, \
                patch("dodgem.cli.prompts.console") as mock_console:
            result = prompt_for_input("Email Address", validate=validate_email)

        assert result == "driver@example.com"
        assert mock_prompt.call_count == 3
        assert mock_console.print.call_count == 2

    def test_hide_input(self) -> None:
        with patch("dodgem.cli.prompts.typer.prompt", return_value="octane-123") as mock_prompt:
            prompt_for_input("Password", hide_input=True)

        kwargs = mock_prompt.call_args[1]
        assert kwargs["hide_input"] is True
        assert kwargs["show_default"] is False

