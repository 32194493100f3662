"""Main entry point for supabase-stateful."""

from pathlib import Path

import typer

from supabase_stateful import __version__
from supabase_stateful.commands import (
    init_command,
    start_command,
    status_command,
    stop_command,
)
from supabase_stateful.utils.typer_helpers import SuggestingGroup
from supabase_stateful.utils.ui.console import get_console

app = typer.Typer(
    name="supabase-stateful",
    cls=SuggestingGroup,
    help="Persistent local state for Supabase development",
    no_args_is_help=True,
)

console = get_console()

PROJECT_DIR_OPTION = typer.Option(
    Path("."),
    "--project-dir",
    "-C",
    help="Project directory containing supabase/ and .supabase-stateful.json",
    file_okay=False,
)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]supabase-stateful[/bold] version [cyan]{__version__}[/cyan]")


@app.command()
def init(project_dir: Path = PROJECT_DIR_OPTION) -> None:
    """Initialize supabase-stateful in a Supabase project."""
    init_command.init(project_dir)


@app.command()
def start(project_dir: Path = PROJECT_DIR_OPTION) -> None:
    """Start Supabase and restore saved state."""
    start_command.start(project_dir)


@app.command()
def stop(project_dir: Path = PROJECT_DIR_OPTION) -> None:
    """Save state, clear auth tokens, and stop Supabase."""
    stop_command.stop(project_dir)


@app.command()
def status(
    project_dir: Path = PROJECT_DIR_OPTION,
    output: str = typer.Option(
        "pretty", "--output", "-o", help="Output format (pretty, json, yaml)"
    ),
) -> None:
    """Show current status."""
    status_command.status(project_dir, output=output)


# Main entry point
def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
