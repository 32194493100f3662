"""Snapshot export and composition.

Builds the snapshot payload written on ``stop``:

1. Export schema + data for all discovered tables with one pg_dump call
2. Make every INSERT conflict-tolerant (see ``sql_rewriter``)
3. Wrap the result with replication-role toggling and a timestamped banner
"""

from __future__ import annotations

from datetime import UTC, datetime

from supabase_stateful.adapters.docker import DockerRuntime
from supabase_stateful.models.exceptions import SnapshotExportError
from supabase_stateful.models.snapshot import TableRef
from supabase_stateful.services.sql_rewriter import make_idempotent
from supabase_stateful.utils.logger import get_logger

MAX_EXPORT_BYTES = 50 * 1024 * 1024  # 50 MB

BANNER_RULE = "-- " + "=" * 77

SNAPSHOT_TEMPLATE = """{rule}
-- Local Development State Snapshot
{rule}
-- Generated: {timestamp}
-- Tool: supabase-stateful
--
-- This file contains your local development state including:
-- - auth.users (test users you created)
-- - All public schema data
-- - Foreign key relationships intact
--
-- This preserves your local development progress between sessions
{rule}

-- Disable foreign key checks temporarily
SET session_replication_role = replica;

{body}

-- Re-enable foreign key checks
SET session_replication_role = DEFAULT;

{rule}
-- Local State Restored
{rule}
DO $$
BEGIN
  RAISE NOTICE '';
  RAISE NOTICE 'Local development state restored!';
  RAISE NOTICE '';
  RAISE NOTICE 'Your test users and data are preserved';
  RAISE NOTICE 'Migrations have been applied over existing data';
  RAISE NOTICE '';
END $$;
"""


class SnapshotExporter:
    """Extracts structure and rows for a set of tables."""

    def __init__(self, runtime: DockerRuntime, max_bytes: int = MAX_EXPORT_BYTES):
        self.runtime = runtime
        self.max_bytes = max_bytes

    def export(self, tables: list[TableRef]) -> str:
        """Dump all tables in a single pg_dump invocation.

        Structure is always included so the rows can be replayed into an
        empty database.

        Raises:
            SnapshotExportError: On a failed dump or output above the ceiling
        """
        if not tables:
            raise SnapshotExportError("No tables to export")

        try:
            result = self.runtime.pg_dump([t.dump_pattern() for t in tables])
        except OSError as e:
            raise SnapshotExportError(f"pg_dump could not be run: {e}") from e

        if not result.ok:
            raise SnapshotExportError(
                f"pg_dump exited with {result.returncode}: {result.stderr.strip()}"
            )

        size = len(result.stdout.encode("utf-8"))
        if size > self.max_bytes:
            raise SnapshotExportError(
                f"Export is {size} bytes, above the {self.max_bytes} byte limit"
            )

        get_logger().info("exported %d table(s), %d bytes", len(tables), size)
        return result.stdout


def compose_snapshot(sql: str, generated_at: datetime | None = None) -> str:
    """Wrap rewritten SQL into the complete snapshot payload."""
    timestamp = (generated_at or datetime.now(UTC)).isoformat()
    return SNAPSHOT_TEMPLATE.format(
        rule=BANNER_RULE,
        timestamp=timestamp,
        body=sql.strip("\n"),
    )


def build_snapshot(
    exporter: SnapshotExporter,
    tables: list[TableRef],
    generated_at: datetime | None = None,
) -> str:
    """Export, rewrite and compose a snapshot for ``tables``."""
    raw = exporter.export(tables)
    safe_sql, rewritten = make_idempotent(raw)
    get_logger().info("made %d insert statement(s) conflict-tolerant", rewritten)
    return compose_snapshot(safe_sql, generated_at=generated_at)
