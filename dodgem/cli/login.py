"""Dodgem login command - store Rocket League Garage credentials."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from dodgem.cli.error_handler import CredentialsError, handle_errors
from dodgem.cli.progress import status_message
from dodgem.cli.prompts import confirm_dangerous, prompt_for_input
from dodgem.config import ensure_directories, load_config
from dodgem.credentials import Credentials, CredentialStore
from dodgem.exceptions import CredentialsMissingError
from dodgem.validators import validate_email, validate_password

console = Console()


@handle_errors
def login(
    clear: bool = typer.Option(
        False,
        "--clear",
        help="Remove the stored credentials instead of setting them.",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Replace stored credentials without asking.",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
) -> None:
    """Set login credentials for Rocket League Garage.

    Credentials are stored in the config directory, readable only by you.

    Example:
        dodgem login
        dodgem login --clear
        dodgem login --config ./dodgem.toml
    """
    config = load_config(config_file)
    store = CredentialStore(config.credentials_file)

    if clear:
        if store.clear():
            status_message("Removed stored credentials", "success", console_instance=console)
        else:
            status_message("No credentials stored", "info", console_instance=console)
        return

    try:
        existing = store.load()
    except CredentialsMissingError:
        # Unreadable file; overwritten below
        existing = None

    if existing is not None and not force:
        if not confirm_dangerous(f"Replace stored credentials for {existing.email}?"):
            status_message("Kept existing credentials", "info", console_instance=console)
            raise typer.Exit()

    console.print()
    status_message("Please enter login credentials for Rocket League Garage", "info", console_instance=console)

    email = prompt_for_input("Email Address", validate=validate_email).strip()
    password = prompt_for_input("Password", hide_input=True, validate=validate_password)

    ensure_directories(config)
    try:
        store.save(Credentials(email=email, password=password))
    except OSError as e:
        raise CredentialsError(
            f"Could not save credentials: {e}",
            details={"path": store.path},
        ) from e

    status_message(f"Credentials saved for: [blue]{email}[/blue]", "success", console_instance=console)
