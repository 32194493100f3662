"""Supabase CLI operations used by the lifecycle engine."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from supabase_stateful.adapters.shell import CommandResult, run_capture, run_streaming


class SupabaseCLI:
    """Invokes the ``supabase`` executable from the project directory."""

    def __init__(self, project_dir: str | Path = ".", executable: str = "supabase"):
        self.project_dir = Path(project_dir)
        self.executable = executable

    def start(self, extra_args: Sequence[str] = ()) -> int:
        """Start the local stack, streaming output to the terminal."""
        return run_streaming(
            [self.executable, "start", *extra_args], cwd=self.project_dir
        )

    def stop(self) -> int:
        return run_streaming([self.executable, "stop"], cwd=self.project_dir)

    def migration_list(self) -> CommandResult:
        """Return the machine-readable migration list.

        Raises:
            FileNotFoundError: If the Supabase CLI is not installed
        """
        return run_capture(
            [self.executable, "migration", "list", "--output", "json"],
            cwd=self.project_dir,
        )

    def migration_up(self) -> int:
        """Apply outstanding migrations without resetting the database."""
        return run_streaming(
            [self.executable, "migration", "up"], cwd=self.project_dir
        )
