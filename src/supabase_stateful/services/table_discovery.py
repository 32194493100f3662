"""Discover user tables eligible for snapshot capture."""

from __future__ import annotations

from collections.abc import Iterable

from supabase_stateful.adapters.docker import DockerRuntime
from supabase_stateful.models.exceptions import SnapshotExportError
from supabase_stateful.models.snapshot import TableRef
from supabase_stateful.utils.logger import get_logger

# Application data and Supabase Auth identities
CAPTURED_SCHEMAS = ("public", "auth")

RESERVED_PREFIX = "supabase_"
MIGRATIONS_SUFFIX = "_migrations"
SYSTEM_PREFIX = "pg_"
EXCLUDED_TABLES = frozenset({"schema_migrations", "spatial_ref_sys"})

TABLES_QUERY = (
    "SELECT schemaname, tablename FROM pg_tables "
    "WHERE schemaname IN ('public', 'auth') "
    "ORDER BY schemaname, tablename;"
)


def is_excluded(table: str) -> bool:
    """Return True for platform, bookkeeping and system tables."""
    if table.startswith(RESERVED_PREFIX):
        return True
    if table.endswith(MIGRATIONS_SUFFIX):
        return True
    if table.startswith(SYSTEM_PREFIX):
        return True
    return table in EXCLUDED_TABLES


def filter_tables(rows: Iterable[tuple[str, str]]) -> list[TableRef]:
    """Apply schema and exclusion rules and sort by (schema, table)."""
    refs = {
        TableRef(schema=schema, table=table)
        for schema, table in rows
        if schema in CAPTURED_SCHEMAS and not is_excluded(table)
    }
    return sorted(refs)


def parse_rows(output: str, separator: str = "|") -> list[tuple[str, str]]:
    """Parse ``psql -A -t`` output into (schema, table) pairs."""
    rows = []
    for line in output.splitlines():
        line = line.strip()
        if not line or separator not in line:
            continue
        schema, table = (part.strip() for part in line.split(separator, 1))
        rows.append((schema, table))
    return rows


class TableDiscovery:
    """Enumerates capturable tables from the live catalog."""

    def __init__(self, runtime: DockerRuntime):
        self.runtime = runtime

    def discover(self) -> list[TableRef]:
        """Return the ordered list of tables to capture.

        An empty list means there is nothing to capture.

        Raises:
            SnapshotExportError: If the catalog query fails
        """
        logger = get_logger()
        try:
            result = self.runtime.psql_rows(TABLES_QUERY)
        except OSError as e:
            raise SnapshotExportError(f"Could not query table catalog: {e}") from e
        if not result.ok:
            raise SnapshotExportError(
                f"Could not query table catalog: {result.stderr.strip()}"
            )

        tables = filter_tables(parse_rows(result.stdout))
        for ref in tables:
            logger.debug("will export: %s", ref.qualified_name)
        logger.info("discovered %d table(s) to capture", len(tables))
        return tables
