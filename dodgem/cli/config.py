"""Dodgem config command - Configuration management."""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from dodgem.cli.error_handler import ConfigurationError, ValidationError, handle_errors
from dodgem.cli.output import print_syntax

app = typer.Typer(help="Manage Dodgem configuration.")
console = Console()

_FORMATS = ("table", "yaml", "json")


@app.command("show")
@handle_errors
def show_config(
    section: Optional[str] = typer.Argument(
        None,
        help="Configuration section to show (browser, garage, scheduler, logging).",
    ),
    format: str = typer.Option(
        "table",
        "--format",
        "-f",
        help="Output format (table, yaml, json).",
    ),
) -> None:
    """Show current configuration.

    Example:
        dodgem config show
        dodgem config show scheduler
        dodgem config show --format yaml
    """
    from dodgem.config import config_to_dict, export_config_json, export_config_yaml, get_config

    if format not in _FORMATS:
        raise ValidationError(f"Unknown format '{format}' (use one of: {', '.join(_FORMATS)})")

    config = get_config()

    if format == "yaml":
        print_syntax(export_config_yaml(config), "yaml", console_instance=console)
        return
    if format == "json":
        print_syntax(export_config_json(config), "json", console_instance=console)
        return

    data = config_to_dict(config)
    sections = {name: value for name, value in data.items() if isinstance(value, dict)}
    sections["paths"] = {"config_dir": data["config_dir"], "data_dir": data["data_dir"]}

    if section is not None and section not in sections:
        raise ValidationError(
            f"Unknown section: {section}",
            details={"sections": ", ".join(sections)},
        )

    console.print(f"[bold]Configuration: {section}[/bold]" if section else "[bold]Dodgem Configuration[/bold]")
    console.print()

    for name in [section] if section else sections:
        table = Table(title=name.capitalize())
        table.add_column("Key", style="cyan")
        table.add_column("Value", style="green")

        for key, value in sections[name].items():
            table.add_row(key, "" if value is None else str(value))

        console.print(table)
        console.print()


@app.command("set")
@handle_errors
def set_config(
    key: str = typer.Argument(
        ...,
        help="Configuration key (format: section.key, e.g., scheduler.default_interval).",
    ),
    value: str = typer.Argument(
        ...,
        help="Value to set.",
    ),
) -> None:
    """Set a configuration value.

    Example:
        dodgem config set scheduler.default_interval 30
        dodgem config set browser.headless false
        dodgem config set browser.engine firefox
    """
    from dodgem.config import clear_config_cache, get_config_path, set_config_value

    if "." not in key:
        raise ValidationError("Key must be in format: section.key")

    section, config_key = key.split(".", 1)

    try:
        set_config_value(section, config_key, value, get_config_path())
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    clear_config_cache()
    console.print(f"[green]✓[/green] Set {section}.{config_key} = {value}")


@app.command("path")
def config_path() -> None:
    """Show configuration file path.

    Example:
        dodgem config path
    """
    from dodgem.config import get_config_path

    config_file_path = get_config_path()
    console.print(f"[bold]Config directory:[/bold] {config_file_path.parent}")
    console.print(f"[bold]Config file:[/bold] {config_file_path}")
    console.print(f"[bold]Exists:[/bold] {config_file_path.exists()}")


@app.command("validate")
def validate_config() -> None:
    """Validate current configuration.

    Example:
        dodgem config validate
    """
    from dodgem.config import get_config, get_config_path, validate_config as do_validate

    config = get_config()
    config_file_path = get_config_path()

    console.print("[bold]Validating configuration...[/bold]")
    console.print()

    exists = config_file_path.exists()
    console.print(
        f"  {'[green]✓[/green]' if exists else '[yellow]![/yellow]'} Config file exists"
        + ("" if exists else " [dim](using defaults)[/dim]")
    )

    all_passed = True
    issues = do_validate(config)

    if issues:
        console.print()
        console.print("[bold yellow]Validation Results:[/bold yellow]")
        for issue in issues:
            if issue.severity == "error":
                status = "[red]✗[/red]"
                all_passed = False
            else:
                status = "[yellow]![/yellow]"
            console.print(f"  {status} \\[{issue.severity.upper()}] {issue.field}: {issue.message}")

    console.print()
    if all_passed:
        console.print("[green]Configuration is valid[/green]")
    else:
        console.print("[red]Configuration has errors[/red]")
        raise typer.Exit(code=ConfigurationError.exit_code)
