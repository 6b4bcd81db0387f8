"""Main Typer application for the sitecompose CLI.

This module contains the main Typer app instance and registers all command groups.
It provides the entry point for the CLI and handles global options like the
settings directory, debug mode, output formatting and the theme list mode.
"""

import functools
import logging
import sys
from pathlib import Path
from typing import Optional

import click
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.traceback import install

from . import __version__
from .config import ConfigManager
from .render import OutputFormatter
from .exceptions import SiteComposeError, ConfigError
from .utils.exceptions import format_error_for_user

# Install rich traceback handler for better error display
install(show_locals=False)

app = typer.Typer(
    name="sitecompose",
    help="Compose a site configuration from its themes",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)

_commands_registered = False


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"sitecompose {__version__}")
        raise typer.Exit()


def configure_logging(debug: bool) -> None:
    """Send sitecompose log records to stderr through rich when debugging."""
    logger = logging.getLogger("sitecompose")
    if not debug:
        logger.setLevel(logging.WARNING)
        return

    handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG)
    logger.propagate = False


@app.callback()
def main(
    ctx: typer.Context,
    config_dir: Optional[Path] = typer.Option(
        None,
        "--config-dir",
        help="Settings directory (default: $SITECOMPOSE_HOME or ~/.sitecompose)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output",
    ),
    output_format: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format (table, json, yaml)",
    ),
    legacy_themes: Optional[bool] = typer.Option(
        None,
        "--legacy-themes/--no-legacy-themes",
        help="Read themes from __experimentalThemes instead of plugins",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """sitecompose - compose a site configuration from its themes.

    Themes are packages that ship their own site config and may declare
    parent themes. sitecompose resolves the whole ancestry, merges every
    theme config in order and lets the site's own config win.

    Examples:
        # Show the merged config of the site in the current directory
        sitecompose themes compose

        # List resolved themes in merge order
        sitecompose themes list ./my-site

        # Use legacy __experimentalThemes declarations
        sitecompose --legacy-themes themes compose ./my-site -o yaml
    """
    configure_logging(debug)

    try:
        config_manager = ConfigManager(config_dir)
        settings = config_manager.get_settings()
    except ConfigError as e:
        console.print(f"[red]{escape(format_error_for_user(e, debug))}[/red]")
        raise typer.Exit(1)

    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["output_format"] = output_format or settings.output_format
    ctx.obj["use_legacy_themes"] = settings.use_legacy_themes if legacy_themes is None else legacy_themes
    ctx.obj["console"] = console
    ctx.obj["config_manager"] = config_manager
    ctx.obj["settings"] = settings
    ctx.obj["output_formatter"] = OutputFormatter(console, default_format=settings.output_format)

    if debug:
        err_console.print("[dim]Debug mode enabled[/dim]")
        err_console.print(f"[dim]Settings file: {config_manager.config_file}[/dim]")
        overrides = config_manager.get_environment_overrides()
        if overrides:
            err_console.print(f"[dim]Environment overrides active: {', '.join(overrides)}[/dim]")


def handle_exceptions(func):
    """Decorator to handle common exceptions in commands."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SiteComposeError as e:
            ctx = click.get_current_context(silent=True)
            debug = ctx.obj.get("debug", False) if ctx and ctx.obj else False
            console.print(f"[red]{escape(format_error_for_user(e, debug))}[/red]")
            if debug:
                console.print_exception()
            elif not isinstance(e, ConfigError):
                console.print("[dim]Use --debug for more details[/dim]")
            raise typer.Exit(1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            raise typer.Exit(130)
    return wrapper


def register_commands() -> None:
    """Register all command groups with the main app."""
    global _commands_registered
    if _commands_registered:
        return

    from .cmds import themes_app, config_app

    app.add_typer(themes_app, name="themes", help="Resolve and compose themes")
    app.add_typer(config_app, name="config", help="Manage settings")
    _commands_registered = True


def cli() -> None:
    """Entry point for the CLI."""
    register_commands()

    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    cli()
