"""Snapshot-related models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, Field


@dataclass(frozen=True, order=True)
class TableRef:
    """A user table eligible for capture, ordered by (schema, table)."""

    schema: str
    table: str

    @property
    def qualified_name(self) -> str:
        return f"{self.schema}.{self.table}"

    def dump_pattern(self) -> str:
        """Return a pg_dump ``--table`` pattern that preserves case."""
        schema = self.schema.replace('"', '""')
        table = self.table.replace('"', '""')
        return f'"{schema}"."{table}"'


class SnapshotInfo(BaseModel):
    """Metadata about the saved snapshot, used for status reporting."""

    exists: bool = Field(..., description="Whether a current snapshot exists")
    path: str = Field(..., description="Snapshot file path")
    size_bytes: int | None = Field(default=None, description="Size in bytes")
    size: str | None = Field(default=None, description="Human readable size")
    modified: datetime | None = Field(default=None, description="Last modified")
    backup_exists: bool = Field(default=False, description="Whether a backup exists")


def format_bytes(size: int) -> str:
    """Format a byte count as B, KB or MB."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"
