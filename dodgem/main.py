"""Main CLI entry point for Dodgem."""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from dodgem import __app_name__, __version__
from dodgem.cli import config, login, start
from dodgem.cli.exit_codes import ExitCode

app = typer.Typer(
    name=__app_name__,
    help="Dodgem - keep your Rocket League Garage trades at the top of the listing.",
    add_completion=True,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Console for CLI output
console = Console()

# Register commands
app.command("start")(start.start)
app.command("login")(login.login)
app.add_typer(config.app, name="config")

# Global state for CLI options
_global_state: dict[str, bool] = {
    "verbose": False,
    "debug": False,
    "quiet": False,
}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"{__app_name__} v{__version__}")
        raise typer.Exit(code=ExitCode.SUCCESS)


def _setup_logging(
    verbose: bool = False,
    debug: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None,
    default_level: str = "WARNING",
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
) -> None:
    """Set up logging configuration based on CLI options.

    Args:
        verbose: Enable INFO level logging
        debug: Enable DEBUG level logging
        quiet: Only log errors
        log_file: Optional log file path
        default_level: Level used when no flag is given (from config)
        log_format: Record format outside debug mode (from config)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.getLevelName(default_level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    if debug:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
    else:
        format_str = log_format

    handlers: list[logging.Handler] = []

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)  # Always log debug to file
        handlers.append(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        handlers.append(console_handler)
    elif not log_file:
        handlers.append(logging.NullHandler())

    # The file handler sees everything; console filtering happens per handler
    root_level = logging.DEBUG if log_file else level

    logging.basicConfig(
        level=root_level,
        format=format_str,
        handlers=handlers,
        force=True,
    )

    logger = logging.getLogger(__name__)
    logger.debug(f"Logging configured: level={logging.getLevelName(level)}, debug={debug}")


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose output (INFO level logging).",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode (DEBUG level logging with full tracebacks).",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress non-error log output.",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Log to file (logs DEBUG level regardless of console settings).",
    ),
) -> None:
    """Dodgem - keep your Rocket League Garage trades at the top of the listing.

    Dodgem logs in to Rocket League Garage and re-saves your active trades
    on an interval, which moves them back to the top of the trading listing.

    [bold]Commands:[/bold]

    • [cyan]login[/cyan] - Store your Rocket League Garage credentials
    • [cyan]start[/cyan] - Bump all trades, or only the oldest, every interval
    • [cyan]config[/cyan] - Manage configuration

    [bold]Examples:[/bold]

        dodgem login
        dodgem start all 15
        dodgem start oldest 30 --headed

    For more help on a specific command, use: [cyan]dodgem <command> --help[/cyan]
    """
    _global_state["verbose"] = verbose
    _global_state["debug"] = debug
    _global_state["quiet"] = quiet

    if quiet and (verbose or debug):
        console.print("[red]Error:[/red] --quiet cannot be combined with --verbose or --debug")
        raise typer.Exit(code=ExitCode.INVALID_ARGUMENT)

    from dodgem.config import load_config

    logging_config = load_config().logging
    _setup_logging(
        verbose=verbose,
        debug=debug,
        quiet=quiet,
        log_file=log_file or logging_config.file,
        default_level=logging_config.level,
        log_format=logging_config.format,
    )

    logger = logging.getLogger(__name__)
    logger.debug(f"Dodgem v{__version__} starting")
    logger.debug(f"Options: verbose={verbose}, debug={debug}, quiet={quiet}")


def is_verbose() -> bool:
    """Check if verbose or debug mode is enabled."""
    return _global_state.get("verbose", False) or _global_state.get("debug", False)


def is_debug() -> bool:
    return _global_state.get("debug", False)


__all__ = [
    "app",
    "console",
    "is_verbose",
    "is_debug",
]


if __name__ == "__main__":
    app()
