"""CLI command modules for Dodgem.

This package contains the command implementations and the supporting
utilities for error handling, progress display and user interaction.
Command modules are imported by ``dodgem.main``.
"""

from dodgem.cli.exit_codes import ExitCode
from dodgem.cli.error_handler import (
    CLIError,
    BrowserUnavailableError,
    ConfigurationError,
    CredentialsError,
    ValidationError,
    handle_errors,
)
from dodgem.cli.progress import (
    spinner,
    status_message,
)
from dodgem.cli.prompts import (
    confirm_dangerous,
    prompt_for_input,
)
from dodgem.cli.output import (
    format_duration,
    print_syntax,
)

__all__ = [
    # Exit codes
    "ExitCode",
    # Error handling
    "CLIError",
    "BrowserUnavailableError",
    "ConfigurationError",
    "CredentialsError",
    "ValidationError",
    "handle_errors",
    # Progress
    "spinner",
    "status_message",
    # Prompts
    "confirm_dangerous",
    "prompt_for_input",
    # Output
    "format_duration",
    "print_syntax",
]
