"""Dodgem start command - bump trades on an interval until stopped."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from dodgem.cli.error_handler import BrowserUnavailableError, ConfigurationError, handle_errors
from dodgem.cli.progress import spinner, status_message
from dodgem.pipeline.models import SelectionMode

console = Console()
logger = logging.getLogger(__name__)


@handle_errors
def start(
    target: SelectionMode = typer.Argument(
        SelectionMode.ALL,
        help="Which trades to bump: all or oldest.",
        case_sensitive=False,
        show_default=True,
    ),
    interval: Optional[int] = typer.Argument(
        None,
        help="Minutes to wait before bumping again [default: 15].",
        min=1,
        show_default=False,
    ),
    headed: bool = typer.Option(
        False,
        "--headed",
        help="Show the browser window instead of running headless.",
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
    fixed_cadence: Optional[bool] = typer.Option(
        None,
        "--fixed-cadence/--no-fixed-cadence",
        help="Start cycles exactly one interval apart instead of waiting a full interval after each.",
        show_default=False,
    ),
) -> None:
    """Start bumping the specified target every interval.

    The first bump runs immediately. Press Ctrl+C once to stop after the
    current cycle, twice to stop right away.

    Example:
        dodgem start
        dodgem start oldest 30
        dodgem start all 15 --headed
    """
    from dodgem.browser.session import BrowserSessionOptions, check_browser
    from dodgem.config import ensure_directories, load_config, validate_config
    from dodgem.credentials import CredentialStore
    from dodgem.daemon.service import run_daemon
    from dodgem.exceptions import AutomationError
    from dodgem.pipeline.models import RunConfiguration

    config = load_config(config_file)
    ensure_directories(config)

    errors = [issue for issue in validate_config(config) if issue.severity == "error"]
    if errors:
        raise ConfigurationError(
            "Invalid configuration; run 'dodgem config validate' for details",
            details={issue.field: issue.message for issue in errors},
        )

    options = BrowserSessionOptions.from_config(config.browser)
    with spinner(f"Checking {options.engine} installation...", console_instance=console):
        try:
            asyncio.run(check_browser(options))
        except AutomationError as e:
            raise BrowserUnavailableError(
                f"Could not start {options.engine}",
                details={"cause": e, "hint": f"run 'playwright install {options.engine}'"},
            ) from e

    store = CredentialStore(config.credentials_file)
    if not store.exists():
        status_message(
            "No credentials stored; bumps will fail until you run [cyan]dodgem login[/cyan]",
            "warning",
            console_instance=console,
        )

    run_config = RunConfiguration(
        selection_mode=target,
        interval_minutes=interval if interval is not None else config.scheduler.default_interval,
        credentials=store,
        cooldown_seconds=config.scheduler.cooldown_seconds,
        fixed_cadence=config.scheduler.fixed_cadence if fixed_cadence is None else fixed_cadence,
    )

    status_message(
        f"Bumping [blue]{target.description}[/blue] every "
        f"[blue]{run_config.interval_minutes}[/blue] minutes",
        "info",
        console_instance=console,
    )
    logger.debug(f"Run configuration: {run_config}")

    asyncio.run(run_daemon(
        config,
        run_config,
        {"headless": False if headed else None, "console": console},
    ))

    status_message("Dodgem stopped", "info", console_instance=console)
