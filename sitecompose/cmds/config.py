"""Settings commands for the sitecompose CLI."""

import os

import typer
from rich.console import Console
from rich.table import Table

from ..app import handle_exceptions
from ..config import ConfigManager

app = typer.Typer()
console = Console()


@app.command("show")
def show_config(
    ctx: typer.Context,
) -> None:
    """Show effective settings and where they come from.

    Examples:
        # Show settings
        sitecompose config show

        # Show in JSON format
        sitecompose config show --output json
    """
    config_manager: ConfigManager = ctx.obj["config_manager"]
    formatter = ctx.obj["output_formatter"]
    settings = ctx.obj["settings"]

    config_file = config_manager.config_file
    env_vars = {
        name: os.getenv(name)
        for name in ("SITECOMPOSE_HOME", "SITECOMPOSE_LEGACY_THEMES", "SITECOMPOSE_THEME_PATH", "SITECOMPOSE_OUTPUT_FORMAT")
    }

    if ctx.obj["output_format"] in ["json", "yaml"]:
        formatter.render({
            "config_file": str(config_file),
            "config_exists": config_file.exists(),
            "settings": settings.model_dump(mode="json"),
            "environment_variables": env_vars,
        }, format=ctx.obj["output_format"])
        return

    table = Table(title="Settings")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="bold")

    table.add_row("Config File", str(config_file))
    table.add_row("Exists", "✓ Yes" if config_file.exists() else "✗ No")
    table.add_row("", "")
    for key, value in settings.model_dump(mode="json").items():
        table.add_row(key, str(value))

    table.add_row("", "")
    table.add_row("[bold]Environment Variables[/bold]", "")
    for var, value in env_vars.items():
        table.add_row(var, value if value else "[dim]not set[/dim]")

    console.print(table)


@app.command("set")
@handle_exceptions
def set_value(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Setting name"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Change a stored setting.

    Examples:
        # Read themes from __experimentalThemes by default
        sitecompose config set use_legacy_themes true

        # Search local directories for themes
        sitecompose config set theme_paths "./themes:../shared-themes"
    """
    config_manager: ConfigManager = ctx.obj["config_manager"]
    config_manager.set_value(key, value)
    console.print(f"[green]Set {key} in {config_manager.config_file}[/green]")


@app.command("reset")
def reset(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Skip confirmation"),
) -> None:
    """Remove all stored settings."""
    config_manager: ConfigManager = ctx.obj["config_manager"]

    if not force and not typer.confirm(f"Delete {config_manager.config_file}?"):
        console.print("[yellow]Aborted[/yellow]")
        raise typer.Exit()

    config_manager.reset()
    console.print("[green]Settings reset[/green]")
