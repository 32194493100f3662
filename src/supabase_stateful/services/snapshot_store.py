"""Snapshot file persistence with single-slot backup rotation."""

from __future__ import annotations

import shutil
from datetime import datetime
from pathlib import Path

from supabase_stateful.models.snapshot import SnapshotInfo, format_bytes
from supabase_stateful.utils.logger import get_logger


class SnapshotStore:
    """Owns the current snapshot file and its ``.backup`` predecessor.

    The backup is only ever written here; nothing restores from it
    automatically.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.backup_path = self.path.with_name(f"{self.path.name}.backup")

    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, payload: str) -> None:
        """Demote the current snapshot to backup, then write ``payload``."""
        logger = get_logger()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if self.exists():
            shutil.copyfile(self.path, self.backup_path)
            logger.info("previous snapshot moved to %s", self.backup_path)
        partial = self.path.with_name(f"{self.path.name}.partial")
        try:
            partial.write_text(payload, encoding="utf-8")
            partial.replace(self.path)
        except OSError:
            partial.unlink(missing_ok=True)
            raise
        logger.info("snapshot written to %s", self.path)

    def load(self) -> str | None:
        """Return the snapshot text, or None when no snapshot has been saved."""
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def metadata(self) -> SnapshotInfo:
        """Report size and modification time for status output."""
        try:
            stats = self.path.stat()
        except FileNotFoundError:
            return SnapshotInfo(exists=False, path=str(self.path))

        return SnapshotInfo(
            exists=True,
            path=str(self.path),
            size_bytes=stats.st_size,
            size=format_bytes(stats.st_size),
            modified=datetime.fromtimestamp(stats.st_mtime),
            backup_exists=self.backup_path.is_file(),
        )
