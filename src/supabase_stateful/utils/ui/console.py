"""Console utilities for supabase-stateful."""

from functools import lru_cache

from rich.console import Console
from rich.theme import Theme

# Styles for the message prefixes printed by utils.ui.formatters
THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold blue",
        "muted": "dim",
    }
)


@lru_cache(maxsize=2)
def get_console(highlight: bool = True) -> Console:
    """Return the shared console with the message theme applied."""
    return Console(highlight=highlight, theme=THEME)
