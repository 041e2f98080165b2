"""Tests for progress indicator module."""

from io import StringIO
from unittest.mock import MagicMock, Mock, patch

import pytest
from rich.console import Console

from dodgem.cli.progress import spinner, status_message


@pytest.fixture
def output() -> StringIO:
    return StringIO()


@pytest.fixture
def console(output: StringIO) -> Console:
    return Console(file=output, width=120)


class TestSpinner:
    """Test spinner context manager."""

    def test_spinner_adds_task(self) -> None:
        mock_progress = MagicMock()
        mock_progress.__enter__ = Mock(return_value=mock_progress)
        mock_progress.__exit__ = Mock(return_value=None)

        with patch("dodgem.cli.progress.Progress", return_value=mock_progress):
            with spinner("Checking chromium installation..."):
                pass

        mock_progress.__enter__.assert_called_once()
        mock_progress.__exit__.assert_called_once()
        mock_progress.add_task.assert_called_once_with(
            description="Checking chromium installation...", total=None
        )

    def test_spinner_stops_on_error(self, console: Console) -> None:
        with pytest.raises(ValueError):
            with spinner("Working...", console_instance=console):
                raise ValueError("boom")

        with spinner("Again...", console_instance=console):
            pass


class TestStatusMessage:
    """Test status_message icons."""

    @pytest.mark.parametrize("status,icon", [
        ("info", "ℹ"),
        ("success", "✓"),
        ("warning", "⚠"),
        ("error", "✗"),
    ])
    def test_icons(self, console: Console, output: StringIO, status: str, icon: str) -> None:
        status_message("Dodgem stopped", status, console_instance=console)
        assert output.getvalue() == f"{icon} Dodgem stopped\n"

    def test_unknown_status_uses_info(self, console: Console, output: StringIO) -> None:
        status_message("Hello", "sparkly", console_instance=console)
        assert output.getvalue().startswith("ℹ Hello")

