"""Typer helper utilities."""

from difflib import get_close_matches

import click
import typer
from rich.markup import escape
from typer.core import TyperGroup

from supabase_stateful.utils.exit_codes import ERROR_GENERAL
from supabase_stateful.utils.ui.console import get_console
from supabase_stateful.utils.ui.formatters import format_error

# difflib similarity needed before a command is offered as a suggestion
SUGGESTION_CUTOFF = 0.6
MAX_SUGGESTIONS = 3


def suggest_commands(attempted: str, available: list[str]) -> list[str]:
    """Return the registered command names closest to a mistyped one."""
    return get_close_matches(
        attempted, available, n=MAX_SUGGESTIONS, cutoff=SUGGESTION_CUTOFF
    )


class SuggestingGroup(TyperGroup):
    """Typer group that answers typos with the closest commands.

    ``supabase-stateful strat`` lists ``start`` and ``status`` instead of a
    bare "No such command" usage error. Names with no close match fall
    through to click's own error.
    """

    def resolve_command(self, ctx, args):
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            if not args:
                raise
            suggestions = suggest_commands(args[0], list(self.commands))
            if not suggestions:
                raise

            console = get_console()
            format_error(f'unknown command "{escape(args[0])}" for "{ctx.info_name}"')
            console.print()
            if len(suggestions) == 1:
                console.print("[warning]Did you mean this?[/warning]")
            else:
                console.print("[warning]Did you mean one of these?[/warning]")
            for suggestion in suggestions:
                console.print(f"        {suggestion}")
            raise typer.Exit(ERROR_GENERAL) from e
