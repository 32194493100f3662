"""Services module for supabase-stateful - the snapshot/restore/migration engine."""

from .config_service import ConfigService
from .lifecycle_service import STARTUP_LADDER, LifecycleService
from .migration_service import MigrationSequencer
from .restore_service import SnapshotRestorer
from .snapshot_service import SnapshotExporter, build_snapshot, compose_snapshot
from .snapshot_store import SnapshotStore
from .table_discovery import TableDiscovery
from .token_sanitizer import AuthTokenSanitizer

__all__ = [
    "STARTUP_LADDER",
    "AuthTokenSanitizer",
    "ConfigService",
    "LifecycleService",
    "MigrationSequencer",
    "SnapshotExporter",
    "SnapshotRestorer",
    "SnapshotStore",
    "TableDiscovery",
    "build_snapshot",
    "compose_snapshot",
]
