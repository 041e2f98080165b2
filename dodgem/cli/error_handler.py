"""Global exception handling for the Dodgem CLI.

Commands raise ``CLIError`` subclasses; the ``handle_errors`` decorator turns
them into a short message on stderr and the matching exit code.
"""

from functools import wraps
from typing import Callable, TypeVar, Any
import logging

import typer
from rich.console import Console

from dodgem.cli.exit_codes import ExitCode

# Console for error output (stderr)
console = Console(stderr=True)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class CLIError(Exception):
    """Base exception for CLI commands.

    Attributes:
        message: Error message
        exit_code: Exit code to use when exiting
        details: Optional dictionary of additional error details
    """

    exit_code: int = ExitCode.GENERAL_ERROR

    def __init__(
        self,
        message: str,
        exit_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigurationError(CLIError):
    """Configuration file or environment could not be used.

    Examples:
        - Unknown section or key in ``config set``
        - Configuration validation failure
    """

    exit_code = ExitCode.CONFIGURATION_ERROR


class ValidationError(CLIError):
    """User input failed validation."""

    exit_code = ExitCode.INVALID_ARGUMENT


class CredentialsError(CLIError):
    """Stored credentials are missing or unreadable."""

    exit_code = ExitCode.CREDENTIALS_ERROR


class BrowserUnavailableError(CLIError):
    """The automated browser could not be started.

    Usually Playwright's browser binaries are not installed; the hint in
    ``details`` tells the user how to install them.
    """

    exit_code = ExitCode.BROWSER_ERROR


def handle_errors(func: F) -> F:
    """Decorator for consistent error handling across CLI commands.

    - CLIError subclasses: error message with the class's exit code
    - KeyboardInterrupt: cancellation message with exit code 130
    - Other exceptions: generic message, full traceback in the log

    Example:
        @app.command()
        @handle_errors
        def my_command():
            raise ConfigurationError("Invalid config")
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except CLIError as e:
            logger.error(
                f"CLIError: {e.message}",
                extra={"exit_code": e.exit_code, "details": e.details},
            )

            console.print(f"[red]Error:[/red] {e.message}")
            if e.details:
                for key, value in e.details.items():
                    console.print(f"  [dim]{key}:[/dim] {value}")

            raise typer.Exit(code=e.exit_code)

        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user.[/yellow]")
            logger.info("Operation cancelled by user (KeyboardInterrupt)")
            raise typer.Exit(code=ExitCode.CANCELLED)

        except typer.Exit:
            raise

        except Exception as e:
            logger.exception("Unexpected error occurred")
            console.print(f"[red]Unexpected error:[/red] {e}")
            console.print("[dim]Run with --verbose for more details[/dim]")
            raise typer.Exit(code=ExitCode.GENERAL_ERROR)

    return wrapper  # type: ignore[return-value]
