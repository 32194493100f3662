"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from docker, the Supabase CLI and
the real log directory. ``FakeDatabase`` plays the postgres container: it
answers catalog queries, produces pg_dump-style INSERT scripts and replays
snapshot files statement by statement.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from supabase_stateful.adapters.shell import CommandResult
from supabase_stateful.services.sql_rewriter import statement_spans

# ---------------------------------------------------------------------------
# Logger isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path_factory):
    """Send the application log to a temporary directory."""
    import supabase_stateful.utils.logger as logger_mod

    log_dir = tmp_path_factory.mktemp("logs")
    logger_mod._logger = None
    logging.getLogger("supabase_stateful").handlers.clear()
    with patch("supabase_stateful.utils.logger.user_log_dir", return_value=str(log_dir)):
        yield log_dir
    logger_mod._logger = None
    logging.getLogger("supabase_stateful").handlers.clear()


# ---------------------------------------------------------------------------
# Project directory
# ---------------------------------------------------------------------------


@pytest.fixture()
def project_dir(tmp_path) -> Path:
    """A Supabase project directory with supabase/config.toml."""
    supabase_dir = tmp_path / "supabase"
    supabase_dir.mkdir()
    (supabase_dir / "config.toml").write_text('project_id = "demo"\n')
    return tmp_path


# ---------------------------------------------------------------------------
# Fake container
# ---------------------------------------------------------------------------

_INSERT = re.compile(
    r"^INSERT INTO ([\w.]+) VALUES \((\d+), '((?:[^']|'')*)'\)(\s+ON CONFLICT DO NOTHING)?$",
    re.DOTALL,
)


def _ok(stdout: str = "", stderr: str = "") -> CommandResult:
    return CommandResult(args=(), returncode=0, stdout=stdout, stderr=stderr)


class FakeDatabase:
    """Tables of ``{id: value}`` rows keyed by qualified name."""

    def __init__(self, tables: dict[str, dict[int, str]] | None = None):
        self.tables: dict[str, dict[int, str]] = {
            name: dict(rows) for name, rows in (tables or {}).items()
        }

    def counts(self) -> dict[str, int]:
        return {name: len(rows) for name, rows in self.tables.items()}

    def catalog(self) -> str:
        return "\n".join(name.replace(".", "|") for name in sorted(self.tables))

    def dump(self, names: list[str]) -> str:
        lines = ["--", "-- PostgreSQL database dump", "--", ""]
        for name in names:
            lines.append(f"CREATE TABLE {name} (id integer PRIMARY KEY, value text);")
            for row_id, value in sorted(self.tables.get(name, {}).items()):
                escaped = value.replace("'", "''")
                lines.append(f"INSERT INTO {name} VALUES ({row_id}, '{escaped}');")
            lines.append("")
        return "\n".join(lines)

    def execute_script(self, sql: str) -> list[str]:
        """Run a script the way psql -f does: errors are reported, not raised."""
        errors: list[str] = []
        for start, end in statement_spans(sql):
            statement = sql[start:end].strip()
            if statement.startswith("CREATE TABLE"):
                name = statement.split()[2]
                if name in self.tables:
                    errors.append(f'ERROR:  relation "{name}" already exists')
                else:
                    self.tables[name] = {}
                continue
            if statement.startswith("DELETE FROM"):
                name = statement.split()[2]
                if name in self.tables:
                    self.tables[name] = {}
                continue
            match = _INSERT.match(statement)
            if not match:
                continue
            name, row_id, value, on_conflict = match.groups()
            rows = self.tables.setdefault(name, {})
            row_id = int(row_id)
            if row_id in rows:
                if not on_conflict:
                    errors.append(
                        "ERROR:  duplicate key value violates unique constraint"
                    )
                continue
            rows[row_id] = value.replace("''", "'")
        return errors


class FakeRuntime:
    """Stands in for DockerRuntime, backed by a FakeDatabase."""

    def __init__(self, db: FakeDatabase, running: bool = False, events: list | None = None):
        self.db = db
        self.running = running
        self.events = events if events is not None else []
        self.container_name = "supabase_db_demo"
        self.files: dict[str, str] = {}
        self.dump_patterns: list[str] = []
        self.dump_result: CommandResult | None = None

    def is_running(self) -> bool:
        return self.running

    def psql_rows(self, sql, separator="|"):
        self.events.append("catalog")
        return _ok(self.db.catalog())

    def pg_dump(self, table_patterns, inserts=True):
        self.events.append("pg_dump")
        self.dump_patterns = list(table_patterns)
        if self.dump_result is not None:
            return self.dump_result
        names = [p.replace('"', "") for p in table_patterns]
        return _ok(self.db.dump(names))

    def copy_into(self, local_path, remote_path):
        self.events.append("copy")
        self.files[remote_path] = Path(local_path).read_text()
        return _ok()

    def psql_file(self, remote_path):
        self.events.append("restore")
        errors = self.db.execute_script(self.files[remote_path])
        return _ok(stderr="\n".join(f"psql:/tmp/state.sql:1: {e}" for e in errors))

    def psql(self, sql):
        self.events.append("sanitize")
        self.db.execute_script(sql)
        return _ok("DELETE 0")


class FakeCLI:
    """Stands in for SupabaseCLI; records calls into a shared event list."""

    def __init__(
        self,
        runtime: FakeRuntime,
        start_codes: list[int] | None = None,
        migration_list: CommandResult | None = None,
        up_code: int = 0,
        stop_code: int = 0,
    ):
        self.runtime = runtime
        self.events = runtime.events
        self.start_codes = list(start_codes or [0])
        self.start_args: list[tuple] = []
        self.migration_list_result = migration_list or _ok("[]")
        self.up_code = up_code
        self.stop_code = stop_code
        self.counts_at_migrate: dict[str, int] | None = None

    def start(self, extra_args=()):
        self.events.append("start")
        self.start_args.append(tuple(extra_args))
        code = self.start_codes.pop(0) if self.start_codes else 1
        if code == 0:
            self.runtime.running = True
        return code

    def stop(self):
        self.events.append("stop")
        self.runtime.running = False
        return self.stop_code

    def migration_list(self):
        self.events.append("migration_list")
        return self.migration_list_result

    def migration_up(self):
        self.events.append("migration_up")
        self.counts_at_migrate = self.runtime.db.counts()
        return self.up_code


@pytest.fixture()
def fake_db() -> FakeDatabase:
    return FakeDatabase(
        {
            "auth.users": {1: "alice", 2: "bob"},
            "public.orders": {1: "first; order", 2: "it's second"},
        }
    )


@pytest.fixture()
def make_result():
    """Factory for CommandResult objects."""

    def _make(returncode: int = 0, stdout: str = "", stderr: str = "") -> CommandResult:
        return CommandResult(args=(), returncode=returncode, stdout=stdout, stderr=stderr)

    return _make


@pytest.fixture()
def fakes():
    """Namespace of the fake container classes for building scenarios."""
    return SimpleNamespace(
        Database=FakeDatabase,
        Runtime=FakeRuntime,
        CLI=FakeCLI,
        ok=_ok,
    )
