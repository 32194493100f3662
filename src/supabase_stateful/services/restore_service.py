"""Replay a saved snapshot into the running database."""

from __future__ import annotations

import re

from supabase_stateful.adapters.docker import DockerRuntime
from supabase_stateful.models.lifecycle import RestoreResult, RestoreStatus
from supabase_stateful.services.snapshot_store import SnapshotStore
from supabase_stateful.utils.logger import get_logger

REMOTE_SNAPSHOT_PATH = "/tmp/state.sql"

# Errors every replay over existing data produces
BENIGN_ERRORS = (
    re.compile(r"duplicate key value violates unique constraint"),
    re.compile(r"already exists"),
    re.compile(r"multiple primary keys for table"),
    # ALTER COLUMN ... ADD GENERATED ... AS IDENTITY on a migrated table
    re.compile(r"is already an identity column"),
)

_ERROR_LINE = re.compile(r"\bERROR:\s*(.*)")


def extract_errors(stderr: str) -> list[str]:
    """Return the SQL error messages psql printed while running a file."""
    return [m.group(1).strip() for m in _ERROR_LINE.finditer(stderr)]


def is_benign(message: str) -> bool:
    return any(pattern.search(message) for pattern in BENIGN_ERRORS)


class SnapshotRestorer:
    """Copies the snapshot into the container and executes it with psql."""

    def __init__(self, runtime: DockerRuntime, store: SnapshotStore):
        self.runtime = runtime
        self.store = store

    def restore(self) -> RestoreResult:
        """Execute the snapshot; never raises."""
        logger = get_logger()

        if self.store.load() is None:
            logger.info("no saved state at %s", self.store.path)
            return RestoreResult(status=RestoreStatus.SKIPPED, detail="no saved state")

        try:
            copied = self.runtime.copy_into(self.store.path, REMOTE_SNAPSHOT_PATH)
            if not copied.ok:
                detail = copied.stderr.strip() or "docker cp failed"
                logger.warning("could not copy snapshot into container: %s", detail)
                return RestoreResult(status=RestoreStatus.FAILED, detail=detail)

            result = self.runtime.psql_file(REMOTE_SNAPSHOT_PATH)
        except OSError as e:
            logger.warning("restore could not run: %s", e)
            return RestoreResult(status=RestoreStatus.FAILED, detail=str(e))

        errors = extract_errors(result.stderr)
        unexpected = [e for e in errors if not is_benign(e)]

        if not result.ok:
            detail = result.stderr.strip() or f"psql exited with {result.returncode}"
            logger.warning("restore failed: %s", detail)
            return RestoreResult(status=RestoreStatus.FAILED, detail=detail, errors=errors)

        if unexpected:
            logger.warning("restore finished with %d unexpected error(s)", len(unexpected))
            for message in unexpected:
                logger.warning("restore error: %s", message)
            return RestoreResult(
                status=RestoreStatus.FAILED,
                detail=f"{len(unexpected)} unexpected error(s)",
                errors=errors,
            )

        if errors:
            logger.info("restore skipped %d conflicting statement(s)", len(errors))
            return RestoreResult(
                status=RestoreStatus.CONFLICTS,
                detail=f"{len(errors)} conflict(s)",
                errors=errors,
            )

        logger.info("snapshot restored from %s", self.store.path)
        return RestoreResult(status=RestoreStatus.RESTORED)
