"""Theme commands for the sitecompose CLI.

This module provides commands for composing a site configuration from its
themes, listing the resolved themes in merge order and resolving a single
theme declaration.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console

from ..app import handle_exceptions
from ..composer import compose_themes
from ..exceptions import SiteComposeError
from ..loader import ConfigFileLoader, PackageResolver, load_site_config
from ..models import CompositionMode, ResolvedTheme, ThemeDeclaration, validate_site_config
from ..render import OutputFormatter
from ..resolver import ThemeResolver

app = typer.Typer()
console = Console()


def get_resolver(ctx: typer.Context) -> ThemeResolver:
    """Build a theme resolver from the active settings."""
    settings = ctx.obj["settings"]
    return ThemeResolver(
        package_resolve=PackageResolver(settings.theme_paths),
        load_config_file=ConfigFileLoader(),
        config_file_stem=settings.config_file_stem,
    )


def get_mode(ctx: typer.Context) -> CompositionMode:
    return CompositionMode(use_legacy_themes=ctx.obj["use_legacy_themes"])


def theme_summary(position: int, theme: ResolvedTheme) -> Dict[str, Any]:
    """Row describing a resolved theme."""
    return {
        "position": position,
        "name": theme.theme_name,
        "directory": str(theme.theme_directory) if theme.theme_directory else None,
        "has_config": theme.theme_config is not None,
        "options": theme.options,
    }


def compose_site(ctx: typer.Context, site_dir: Path):
    """Load the site config in ``site_dir`` and compose it with its themes."""
    settings = ctx.obj["settings"]
    site_config = load_site_config(site_dir, settings.config_file_stem)
    return asyncio.run(compose_themes(site_config, get_mode(ctx), get_resolver(ctx)))


@app.command()
@handle_exceptions
def compose(
    ctx: typer.Context,
    site_dir: Path = typer.Argument(Path("."), help="Site root directory"),
    output_file: Optional[Path] = typer.Option(None, "--output-file", "-f", help="Write the merged config to a file"),
    validate: bool = typer.Option(True, "--validate/--no-validate", help="Validate the merged config"),
) -> None:
    """Compose the site config with every theme it declares.

    Examples:
        # Print the merged config as YAML
        sitecompose themes compose ./my-site -o yaml

        # Write it to a file
        sitecompose themes compose ./my-site --output-file merged.json
    """
    formatter: OutputFormatter = ctx.obj["output_formatter"]

    result = compose_site(ctx, site_dir)
    config = validate_site_config(result.config) if validate else result.config

    if output_file:
        formatter.render_to_file(config, output_file)
        console.print(
            f"[green]Merged config of {len(result.themes)} theme(s) written to {output_file}[/green]"
        )
        return

    formatter.render(config, format=ctx.obj["output_format"], title="Merged Config")


@app.command("list")
@handle_exceptions
def list_themes(
    ctx: typer.Context,
    site_dir: Path = typer.Argument(Path("."), help="Site root directory"),
) -> None:
    """List resolved themes in merge order.

    Parents are listed before the themes that declare them.

    Examples:
        # Show the theme order of a site
        sitecompose themes list ./my-site

        # As JSON
        sitecompose themes list ./my-site -o json
    """
    formatter: OutputFormatter = ctx.obj["output_formatter"]

    result = compose_site(ctx, site_dir)
    rows: List[Dict[str, Any]] = [
        theme_summary(position, theme) for position, theme in enumerate(result.themes, start=1)
    ]

    if not rows:
        console.print("[dim]The site declares no themes[/dim]")
        return

    formatter.render(
        rows,
        format=ctx.obj["output_format"],
        columns=["position", "name", "directory", "has_config", "options"],
        title="Resolved Themes",
    )


@app.command()
@handle_exceptions
def resolve(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Theme package name"),
    options: Optional[str] = typer.Option(None, "--options", help="Theme options as a JSON object"),
) -> None:
    """Resolve a single theme declaration.

    Examples:
        # Resolve a theme by name
        sitecompose themes resolve my-theme

        # Pass options to a config factory
        sitecompose themes resolve my-theme --options '{"basePath": "/docs"}'
    """
    formatter: OutputFormatter = ctx.obj["output_formatter"]

    declaration: Any = name
    if options:
        try:
            parsed = json.loads(options)
        except json.JSONDecodeError as e:
            raise SiteComposeError(f"--options is not valid JSON: {e}")
        if not isinstance(parsed, dict):
            raise SiteComposeError("--options must be a JSON object")
        declaration = ThemeDeclaration(resolve=name, options=parsed)

    theme = asyncio.run(get_resolver(ctx).resolve_theme(declaration))

    data = theme_summary(1, theme)
    data.pop("position")
    data["config"] = theme.theme_config
    formatter.render(data, format=ctx.obj["output_format"], title=f"Theme '{name}'")
