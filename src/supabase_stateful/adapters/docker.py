"""Docker helpers for the Supabase postgres container.

Provides:
- Liveness probing (``docker ps``)
- Running psql and pg_dump inside the container
- Copying files into the container
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from supabase_stateful.adapters.shell import CommandResult, run_capture
from supabase_stateful.utils.logger import get_logger

DB_USER = "postgres"
DB_NAME = "postgres"


class DockerRuntime:
    """Runs commands against a single named container."""

    def __init__(
        self,
        container_name: str,
        db_user: str = DB_USER,
        db_name: str = DB_NAME,
        docker: str = "docker",
    ):
        self.container_name = container_name
        self.db_user = db_user
        self.db_name = db_name
        self.docker = docker

    def list_running(self) -> list[str]:
        """Return the names of all running containers.

        Raises:
            RuntimeError: If docker exits non-zero
            FileNotFoundError: If docker is not installed
        """
        result = run_capture([self.docker, "ps", "--format", "{{.Names}}"])
        if not result.ok:
            raise RuntimeError(result.stderr.strip() or "docker ps failed")
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def is_running(self) -> bool:
        """Best-effort liveness check; any failure means "not running"."""
        try:
            return self.container_name in self.list_running()
        except Exception as e:
            get_logger().debug("container probe failed: %s", e)
            return False

    def exec(self, command: Sequence[str]) -> CommandResult:
        """Run a command inside the container."""
        return run_capture([self.docker, "exec", self.container_name, *command])

    def copy_into(self, local_path: str | Path, remote_path: str) -> CommandResult:
        """Copy a local file into the container."""
        return run_capture(
            [self.docker, "cp", str(local_path), f"{self.container_name}:{remote_path}"]
        )

    def _psql(self, *args: str) -> list[str]:
        return ["psql", "-X", "-U", self.db_user, "-d", self.db_name, *args]

    def psql(self, sql: str) -> CommandResult:
        """Run a single SQL command, stopping at the first error."""
        return self.exec(self._psql("-v", "ON_ERROR_STOP=1", "-c", sql))

    def psql_rows(self, sql: str, separator: str = "|") -> CommandResult:
        """Run a query with unaligned, tuples-only output."""
        return self.exec(
            self._psql("-v", "ON_ERROR_STOP=1", "-A", "-t", "-F", separator, "-c", sql)
        )

    def psql_file(self, remote_path: str) -> CommandResult:
        """Execute a SQL file that already sits inside the container.

        Errors do not stop execution; they are reported on stderr.
        """
        return self.exec(self._psql("-f", remote_path))

    def pg_dump(self, table_patterns: Sequence[str], inserts: bool = True) -> CommandResult:
        """Dump schema and data for the given ``--table`` patterns in one call."""
        args = ["pg_dump", "-U", self.db_user, "-d", self.db_name]
        if inserts:
            args.append("--inserts")
        args.extend(f"--table={pattern}" for pattern in table_patterns)
        return self.exec(args)
