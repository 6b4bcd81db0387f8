"""Output rendering and formatting utilities.

This module provides output formatters for displaying data
in different formats including tables, JSON, and YAML.
"""

import sys
import json
import os
from io import StringIO
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from rich.console import Console
from rich.table import Table
from rich import box

from .exceptions import SiteComposeError


class OutputFormatter:
    """Main output formatter that handles multiple output formats."""

    def __init__(self, console: Optional[Console] = None, default_format: Optional[str] = None) -> None:
        """Initialize output formatter.

        Args:
            console: Rich console instance. If None, creates a new one.
            default_format: Format used when no override is given
        """
        self.console = console or Console()
        self.default_format = default_format

    def determine_format(self, format_override: Optional[str] = None) -> str:
        """Determine the output format to use.

        Args:
            format_override: Explicit format override

        Returns:
            Format name (table, json, yaml)
        """
        if format_override:
            return format_override.lower()

        env_format = os.environ.get("SITECOMPOSE_OUTPUT_FORMAT")
        if env_format:
            return env_format.lower()

        if self.default_format:
            return self.default_format.lower()

        # Auto-detect based on terminal
        if sys.stdout.isatty():
            return "table"
        return "json"

    def render(
        self,
        data: Any,
        format: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """Render data in the specified format.

        Args:
            data: Data to render
            format: Output format (table, json, yaml)
            **kwargs: Additional formatting options
        """
        format_name = self.determine_format(format)

        if format_name == "table":
            self.render_table(data, **kwargs)
        elif format_name == "json":
            self.render_json(data, **kwargs)
        elif format_name == "yaml":
            self.render_yaml(data, **kwargs)
        else:
            raise SiteComposeError(f"Unknown output format: {format_name}")

    def render_table(
        self,
        data: Union[List[Dict[str, Any]], Dict[str, Any]],
        columns: Optional[List[str]] = None,
        title: Optional[str] = None,
        show_header: bool = True,
        **kwargs: Any,
    ) -> None:
        """Render data as a table using Rich.

        A single mapping is shown as key/value rows.

        Args:
            data: Data to render
            columns: Column names to display
            title: Table title
            show_header: Whether to show column headers
            **kwargs: Additional arguments
        """
        if not data:
            self.console.print("[dim]No data to display[/dim]")
            return

        if isinstance(data, dict):
            table = Table(title=title, show_header=show_header, box=box.ROUNDED)
            table.add_column("Key", style="cyan")
            table.add_column("Value", overflow="fold")
            for key, value in data.items():
                table.add_row(str(key), self._format_cell(value))
            self.console.print(table)
            return

        if not columns:
            columns = []
            for item in data:
                for key in item.keys():
                    if key not in columns:
                        columns.append(key)

        table = Table(title=title, show_header=show_header, box=box.ROUNDED)
        for col in columns:
            table.add_column(col.replace("_", " ").title(), overflow="fold")

        for item in data:
            table.add_row(*[self._format_cell(item.get(col)) for col in columns])

        self.console.print(table)

    def render_json(
        self,
        data: Any,
        pretty: bool = True,
        indent: int = 2,
        **kwargs: Any,
    ) -> None:
        """Render data as JSON.

        Args:
            data: Data to render
            pretty: Whether to format JSON nicely
            indent: Indentation level for pretty printing
            **kwargs: Additional arguments
        """
        try:
            output = json.dumps(
                data,
                indent=indent if pretty else None,
                ensure_ascii=False,
                default=str,
            )
        except (TypeError, ValueError) as e:
            if "circular reference" in str(e).lower():
                raise SiteComposeError("Circular reference detected in data structure")
            raise SiteComposeError(f"Failed to serialize data to JSON: {e}")
        print(output)

    def render_yaml(self, data: Any, **kwargs: Any) -> None:
        """Render data as YAML.

        Args:
            data: Data to render
            **kwargs: Additional arguments
        """
        try:
            # Round-trip through JSON so paths and other objects become plain strings
            plain = json.loads(json.dumps(data, default=str))
            print(yaml.safe_dump(plain, default_flow_style=False, allow_unicode=True, sort_keys=False), end="")
        except (TypeError, ValueError, yaml.YAMLError) as e:
            raise SiteComposeError(f"Failed to serialize data to YAML: {e}")

    def render_to_file(
        self,
        data: Any,
        file_path: Union[str, Path],
        format: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """Render data to a file.

        Args:
            data: Data to render
            file_path: Path to output file
            format: Output format (auto-detected from file extension if not provided)
            **kwargs: Additional formatting options
        """
        file_path = Path(file_path)

        if not format:
            format = "yaml" if file_path.suffix.lower() in (".yaml", ".yml") else "json"

        original_stdout = sys.stdout
        try:
            output_buffer = StringIO()
            sys.stdout = output_buffer
            self.render(data, format=format, **kwargs)
        finally:
            sys.stdout = original_stdout

        try:
            with open(file_path, "w", encoding="utf-8") as f:
                f.write(output_buffer.getvalue())
        except OSError as e:
            raise SiteComposeError(f"Failed to write {file_path}: {e}")

    def _format_cell(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return "✓" if value else "✗"
        if isinstance(value, (list, dict)):
            return json.dumps(value, default=str)
        return str(value)
