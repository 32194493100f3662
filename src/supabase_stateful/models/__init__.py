"""supabase-stateful domain models.

Pydantic models for configuration and status output, plus the dataclasses
and enums that describe the outcome of each lifecycle step.
"""

from .config_models import DevService, StatefulConfig
from .exceptions import (
    ConfigError,
    MigrationApplyError,
    MigrationCheckError,
    SnapshotExportError,
    StartupExhaustedError,
    StatefulError,
)
from .lifecycle import (
    MigrationOutcome,
    MigrationPath,
    MigrationStatus,
    Phase,
    RestoreResult,
    RestoreStatus,
    RunState,
    SanitizeResult,
    StartAttempt,
    StartReport,
    StartupReport,
    StartupStrategy,
    StopReport,
)
from .snapshot import SnapshotInfo, TableRef

__all__ = [
    # Config
    "DevService",
    "StatefulConfig",
    # Errors
    "ConfigError",
    "MigrationApplyError",
    "MigrationCheckError",
    "SnapshotExportError",
    "StartupExhaustedError",
    "StatefulError",
    # Lifecycle
    "MigrationOutcome",
    "MigrationPath",
    "MigrationStatus",
    "Phase",
    "RestoreResult",
    "RestoreStatus",
    "RunState",
    "SanitizeResult",
    "StartAttempt",
    "StartReport",
    "StartupReport",
    "StartupStrategy",
    "StopReport",
    # Snapshot
    "SnapshotInfo",
    "TableRef",
]
