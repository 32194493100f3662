"""Terminal output: json/yaml/pretty status rendering and message prefixes."""

import json
from datetime import datetime
from typing import Any

import yaml
from rich.markup import escape
from rich.table import Table

from supabase_stateful.utils.ui.console import get_console

console = get_console()


def format_output(data: Any, output_format: str = "pretty") -> None:
    """Format and display output based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
    elif output_format == "yaml":
        print(yaml.safe_dump(_plain(data), default_flow_style=False, sort_keys=False))
    else:
        # Default to pretty
        format_pretty(data)


def _plain(data: Any) -> Any:
    """Convert values yaml.safe_dump cannot represent into strings."""
    if isinstance(data, dict):
        return {key: _plain(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_plain(value) for value in data]
    if isinstance(data, datetime):
        return data.isoformat()
    return data


def format_pretty(data: Any) -> None:
    """Format nested dictionaries as titled key/value tables."""
    if not isinstance(data, dict):
        console.print(data)
        return

    flat = {k: v for k, v in data.items() if not isinstance(v, dict)}
    if flat:
        format_single_item(flat)

    for key, value in data.items():
        if isinstance(value, dict):
            console.print()
            console.print(f"[bold]{key.replace('_', ' ').title()}:[/bold]")
            format_single_item(value)


def format_single_item(item: dict) -> None:
    """Format a single item as key-value pairs."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    for key, value in item.items():
        formatted_key = key.replace("_", " ").title()
        if isinstance(value, bool):
            formatted_value = "✓" if value else "✗"
        elif isinstance(value, list):
            formatted_value = ", ".join(str(v) for v in value) or "-"
        elif isinstance(value, datetime):
            formatted_value = value.strftime("%Y-%m-%d %H:%M:%S")
        elif value is None:
            formatted_value = "-"
        else:
            formatted_value = str(value)
        table.add_row(formatted_key, escape(formatted_value))

    console.print(table)


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[error]Error:[/error] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[success]Success:[/success] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[warning]Warning:[/warning] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[info]Info:[/info] {message}")


def format_dim(message: str) -> None:
    """Display secondary detail in a muted style."""
    console.print(f"[muted]{message}[/muted]")
