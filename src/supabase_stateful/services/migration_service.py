"""Apply pending migrations on top of existing data.

Uses ``supabase migration up`` rather than ``supabase db reset`` so rows
already in the database (restored or live) are preserved and only the
outstanding migration steps run.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from json import JSONDecodeError
from typing import Any

from supabase_stateful.adapters.supabase_cli import SupabaseCLI
from supabase_stateful.models.exceptions import MigrationApplyError, MigrationCheckError
from supabase_stateful.models.lifecycle import (
    MigrationOutcome,
    MigrationPath,
    MigrationStatus,
    Phase,
)
from supabase_stateful.utils.logger import get_logger
from supabase_stateful.utils.ui.formatters import format_dim, format_info, format_success

_ID_KEYS = ("Version", "version", "Name", "name", "id")


def parse_migration_list(payload: Any) -> list[MigrationStatus]:
    """Collect every object carrying an ``Applied`` flag, at any depth."""
    found: list[MigrationStatus] = []

    def walk(node: Any) -> None:
        if isinstance(node, list):
            for item in node:
                walk(item)
        elif isinstance(node, dict):
            flag = node.get("Applied", node.get("applied"))
            if isinstance(flag, bool):
                ident = next((str(node[k]) for k in _ID_KEYS if k in node), "")
                found.append(MigrationStatus(id=ident, applied=flag))
                return
            for value in node.values():
                walk(value)

    walk(payload)
    return found


class MigrationSequencer:
    """Counts and applies pending migrations through the Supabase CLI."""

    def __init__(self, cli: SupabaseCLI):
        self.cli = cli

    def list_migrations(self) -> list[MigrationStatus]:
        """Return the migration list reported by the CLI.

        Raises:
            MigrationCheckError: If the CLI fails or prints unparsable output
        """
        try:
            result = self.cli.migration_list()
        except OSError as e:
            raise MigrationCheckError(f"Could not run migration list: {e}") from e

        if not result.ok:
            raise MigrationCheckError(
                f"migration list exited with {result.returncode}: {result.stderr.strip()}"
            )
        try:
            payload = json.loads(result.stdout)
        except JSONDecodeError as e:
            raise MigrationCheckError(f"Unexpected migration list output: {e}") from e
        return parse_migration_list(payload)

    def pending_count(self) -> int:
        return sum(1 for m in self.list_migrations() if not m.applied)

    def apply(self) -> int:
        """Run the non-destructive apply and return its exit code."""
        return self.cli.migration_up()

    def run(self, on_phase: Callable[[Phase], None] | None = None) -> MigrationOutcome:
        """Check for pending migrations and apply them.

        When the check succeeds, a failed apply is fatal. When the check
        itself fails, the apply is attempted anyway and a failed apply is
        only recorded in the outcome and the log.

        Raises:
            MigrationApplyError: If counted pending migrations fail to apply
        """
        logger = get_logger()
        notify = on_phase or (lambda phase: None)

        notify(Phase.MIGRATIONS_CHECKING)
        format_info("Checking for pending migrations...")
        try:
            pending = self.pending_count()
        except MigrationCheckError as e:
            logger.warning("migration check failed, applying blindly: %s", e)
            return self._apply_blind(notify)

        if pending == 0:
            format_success("No pending migrations")
            return MigrationOutcome(path=MigrationPath.COUNTED, pending=0)

        format_info(f"Found {pending} pending migration(s)")
        format_info("Applying migrations on top of existing data...")
        notify(Phase.MIGRATIONS_APPLYING)
        returncode = self.apply()
        if returncode != 0:
            logger.error("migration up exited with %d", returncode)
            raise MigrationApplyError("Migration failed", returncode=returncode)

        logger.info("applied %d pending migration(s)", pending)
        format_success(f"Migrations applied ({pending})")
        return MigrationOutcome(
            path=MigrationPath.COUNTED,
            pending=pending,
            applied=True,
            returncode=returncode,
        )

    def _apply_blind(self, notify: Callable[[Phase], None]) -> MigrationOutcome:
        format_dim("Could not check migration status, attempting to apply...")
        notify(Phase.MIGRATIONS_APPLYING)
        returncode = self.apply()
        if returncode == 0:
            format_success("Migrations applied")
        else:
            get_logger().warning(
                "blind migration apply exited with %d; continuing", returncode
            )
        return MigrationOutcome(
            path=MigrationPath.BLIND,
            applied=returncode == 0,
            returncode=returncode,
        )
