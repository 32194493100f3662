"""Result and state types for the start/stop lifecycle."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class RunState(str, Enum):
    """Observed liveness of the local database environment."""

    RUNNING = "running"
    NOT_RUNNING = "not_running"


class Phase(str, Enum):
    """States visited by the lifecycle state machine."""

    NOT_RUNNING = "not_running"
    RUNNING = "running"
    STARTING = "starting"
    RESTORING = "restoring"
    MIGRATIONS_CHECKING = "migrations_checking"
    MIGRATIONS_APPLYING = "migrations_applying"
    READY = "ready"
    FAILED = "failed"
    SAVING = "saving"
    SANITIZING = "sanitizing"
    STOPPING = "stopping"
    STOPPED = "stopped"


@dataclass(frozen=True)
class MigrationStatus:
    """One entry of the platform migration list."""

    id: str
    applied: bool


@dataclass(frozen=True)
class StartupStrategy:
    """One rung of the startup fallback ladder."""

    name: str
    args: tuple[str, ...]
    description: str


@dataclass(frozen=True)
class StartAttempt:
    strategy: str
    returncode: int

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


@dataclass
class StartupReport:
    """Outcome of walking the startup ladder."""

    attempts: list[StartAttempt] = field(default_factory=list)

    @property
    def succeeded_with(self) -> str | None:
        """Name of the strategy that started the environment, if any."""
        for attempt in self.attempts:
            if attempt.succeeded:
                return attempt.strategy
        return None

    @property
    def used_fallback(self) -> bool:
        return self.succeeded_with is not None and len(self.attempts) > 1


class RestoreStatus(str, Enum):
    RESTORED = "restored"
    CONFLICTS = "conflicts"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class RestoreResult:
    """Outcome of replaying a snapshot.

    ``CONFLICTS`` covers the expected duplicate/already-exists errors of a
    replay; ``FAILED`` covers anything else (I/O errors, unexpected SQL
    errors). Neither is fatal to ``start``.
    """

    status: RestoreStatus
    detail: str = ""
    errors: list[str] = field(default_factory=list)

    @property
    def restored(self) -> bool:
        return self.status in (RestoreStatus.RESTORED, RestoreStatus.CONFLICTS)


class MigrationPath(str, Enum):
    COUNTED = "counted"
    BLIND = "blind"


@dataclass
class MigrationOutcome:
    """Outcome of the migration check/apply step."""

    path: MigrationPath
    pending: int | None = None
    applied: bool = False
    returncode: int | None = None

    @property
    def attempted(self) -> bool:
        return self.returncode is not None


@dataclass
class SanitizeResult:
    cleared: bool
    detail: str = ""


@dataclass
class StartReport:
    origin: RunState
    phases: list[Phase] = field(default_factory=list)
    startup: StartupReport | None = None
    restore: RestoreResult | None = None
    migrations: MigrationOutcome | None = None

    @property
    def cold_start(self) -> bool:
        return self.origin == RunState.NOT_RUNNING


@dataclass
class StopReport:
    origin: RunState
    phases: list[Phase] = field(default_factory=list)
    tables: list = field(default_factory=list)
    snapshot_saved: bool = False
    sanitize: SanitizeResult | None = None
    stop_returncode: int | None = None
