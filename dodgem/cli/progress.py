"""Spinners and status lines for the Dodgem CLI."""

from collections.abc import Generator
from contextlib import contextmanager

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

# Default console for progress output
console = Console()

_ICONS = {
    "info": "[blue]ℹ[/blue]",
    "success": "[green]✓[/green]",
    "warning": "[yellow]⚠[/yellow]",
    "error": "[red]✗[/red]",
    "pending": "[cyan]○[/cyan]",
    "running": "[blue]◉[/blue]",
}


@contextmanager
def spinner(
    message: str,
    transient: bool = True,
    console_instance: Console | None = None,
) -> Generator[None, None, None]:
    """Show a spinner for indeterminate operations.

    Args:
        message: The message to display next to the spinner
        transient: If True, remove the spinner after completion
        console_instance: Optional custom console instance

    Example:
        with spinner("Checking browser installation..."):
            check_browser()
    """
    prog_console = console_instance or console

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=transient,
        console=prog_console,
    ) as progress:
        progress.add_task(description=message, total=None)
        yield


def status_message(message: str, status: str = "info", console_instance: Console | None = None) -> None:
    """Print a status message with an appropriate icon.

    Args:
        message: The message to display
        status: One of info, success, warning, error, pending, running
        console_instance: Optional custom console instance
    """
    icon = _ICONS.get(status, _ICONS["info"])
    (console_instance or console).print(f"{icon} {message}")

