"""Interactive prompts for the Dodgem CLI."""

from collections.abc import Callable

import typer
from rich.console import Console

# Console for prompt output
console = Console()


def confirm_dangerous(
    message: str,
    default: bool = False,
    show_warning: bool = True,
) -> bool:
    """Confirm an operation that replaces or removes stored data.

    Args:
        message: The confirmation message describing the operation
        default: Default value if user just presses enter
        show_warning: Whether to show a warning prefix

    Returns:
        True if user confirmed, False otherwise

    Example:
        if confirm_dangerous("Remove stored credentials?"):
            store.clear()
    """
    # typer.confirm does not render rich markup
    prefix = "⚠ " if show_warning else ""
    return typer.confirm(f"{prefix}{message}", default=default)


def prompt_for_input(
    message: str,
    default: str | None = None,
    hide_input: bool = False,
    confirmation_prompt: bool = False,
    validate: Callable[[str], str | None] | None = None,
) -> str:
    """Prompt for user input, asking again until ``validate`` accepts it.

    Args:
        message: The prompt message
        default: Default value if user just presses enter
        hide_input: Whether to hide the input (for passwords)
        confirmation_prompt: Whether to ask for confirmation
        validate: Optional validation function that returns error message or None

    Returns:
        The user's input

    Example:
        email = prompt_for_input("Email", validate=validate_email)
    """
    while True:
        value = typer.prompt(
            message,
            default=default or "",
            hide_input=hide_input,
            confirmation_prompt=confirmation_prompt,
            show_default=not hide_input and bool(default),
        )

        if validate:
            error = validate(value)
            if error:
                console.print(f"[red]{error}[/red]")
                continue

        return value

